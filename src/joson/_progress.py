"""Throttled progress indicator driven by a (current, total) counter pair."""

from logging import getLogger
from types import TracebackType

from rich.console import Console
from rich.progress import BarColumn
from rich.progress import Progress
from rich.progress import Task
from rich.progress import TaskID
from rich.progress import TaskProgressColumn
from rich.progress import TextColumn
from rich.progress_bar import ProgressBar

from ._config import MAX_PERCENT
from ._config import ProgressConfig

logger = getLogger(__name__)

# Completed fraction thresholds and the bar style below each one
_RATE_STYLES = ((0.25, "bold red"), (0.5, "bold yellow"), (0.75, "bold green"))
_FINAL_STYLE = "bold cyan"


def style_for_rate(rate: float) -> str:
    """Bar style for a completed fraction in [0, 1]."""
    for threshold, style in _RATE_STYLES:
        if rate < threshold:
            return style
    return _FINAL_STYLE


class RateBarColumn(BarColumn):
    """Bar column whose colour follows the completed fraction."""

    def render(self, task: Task) -> ProgressBar:
        rate = (task.percentage or 0.0) / MAX_PERCENT
        self.complete_style = style_for_rate(rate)
        self.finished_style = _FINAL_STYLE
        return super().render(task)


class ProgressReporter:
    """
    Renders progress for a single traversal.

    The owning traversal is the only writer: it calls ``update`` with a
    monotonically increasing ``current``. A re-render happens only when the
    whole percentage advanced by at least ``config.step``, or on completion.
    """

    def __init__(
        self,
        total: int,
        description: str = "Parsing",
        config: ProgressConfig | None = None,
        console: Console | None = None,
    ) -> None:
        if total < 0:
            raise ValueError("total must be non-negative")
        self.total = total
        self.description = description
        self.config = config or ProgressConfig()
        self.current = 0
        self.percentage = 0
        self.render_count = 0
        self._progress: Progress | None = None
        self._task: TaskID | None = None

        if self.config.enabled:
            self._progress = Progress(
                TextColumn("[bold blue]{task.description}"),
                RateBarColumn(bar_width=50),
                TaskProgressColumn(),
                console=console or Console(stderr=True),
                expand=False,
            )

    def rate(self) -> float:
        if not self.total:
            return 1.0
        return min(self.current / self.total, 1.0)

    def start(self) -> None:
        logger.info(f"{self.description}...")
        if self._progress is not None:
            self._progress.start()
            self._task = self._progress.add_task(
                self.description, total=self.total or 1
            )

    def stop(self) -> None:
        if self._progress is not None:
            self._progress.stop()
        logger.info(f"{self.description} finished ({self.percentage}%)")

    def update(self, current: int) -> bool:
        """
        Records the counter and re-renders when the throttle allows.

        Returns:
            True when the indicator was re-rendered
        """
        if current < self.current:
            return False
        self.current = current
        new_percentage = int(self.rate() * MAX_PERCENT)

        if (
            new_percentage < MAX_PERCENT
            and new_percentage - self.percentage < self.config.step
        ):
            return False
        if new_percentage == self.percentage and self.render_count:
            return False

        self.percentage = new_percentage
        self.render_count += 1
        if self._progress is not None and self._task is not None:
            self._progress.update(
                self._task,
                completed=min(current, self.total) if self.total else 1,
            )
        return True

    def finish(self) -> None:
        """Marks the traversal complete."""
        self.update(max(self.current, self.total))

    def __enter__(self) -> "ProgressReporter":
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.stop()
