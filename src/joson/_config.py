"""
Immutable configuration values for parsing, printing and terminal output.

Styling and throttling travel with each call instead of living in
module-level state, so concurrent or repeated invocations never interfere.
"""

from dataclasses import dataclass
from dataclasses import field

MAX_PERCENT = 100


@dataclass(frozen=True)
class ProgressConfig:
    """
    Controls the textual progress indicator.

    ``step`` is the minimum percentage advance between two re-renders.
    """

    step: int = 1
    enabled: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.step, int) or isinstance(self.step, bool):
            raise TypeError("step must be an integer")
        if not 1 <= self.step <= MAX_PERCENT:
            raise ValueError("step must be between 1 and 100")
        if not isinstance(self.enabled, bool):
            raise TypeError("enabled must be a boolean")


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures parsing behavior.

    The parser is lenient by default: malformed tokens become Null and an
    unterminated document yields its innermost open container. ``strict``
    raises the first recorded JSONDecodeError instead.
    """

    strict: bool = False
    show_progress: bool = False
    progress: ProgressConfig = field(default_factory=ProgressConfig)

    def __post_init__(self) -> None:
        if not isinstance(self.strict, bool):
            raise TypeError("strict must be a boolean")
        if not isinstance(self.show_progress, bool):
            raise TypeError("show_progress must be a boolean")
        if not isinstance(self.progress, ProgressConfig):
            raise TypeError("progress must be a ProgressConfig")


@dataclass(frozen=True)
class PrintConfig:
    """
    Configures serialization.

    ``indent`` is the number of spaces per nesting level, or None for bare
    newlines. ``visualize`` selects the debugging dialect, which is not
    valid JSON.
    """

    visualize: bool = False
    indent: int | None = 2

    def __post_init__(self) -> None:
        if not isinstance(self.visualize, bool):
            raise TypeError("visualize must be a boolean")
        if self.indent is not None and (
            not isinstance(self.indent, int)
            or isinstance(self.indent, bool)
            or self.indent < 0
        ):
            raise TypeError("indent must be a non-negative integer or None")


@dataclass(frozen=True)
class ColorScheme:
    """Rich style names used by the colorized re-printer."""

    colorful: bool = True
    string: str = "bold green"
    digit: str = "bold cyan"
    keyword: str = "bold red"

    def __post_init__(self) -> None:
        if not isinstance(self.colorful, bool):
            raise TypeError("colorful must be a boolean")


VISUALIZE = PrintConfig(visualize=True, indent=None)
