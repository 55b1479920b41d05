"""
Opt-in timing of the parser and printer hot paths.

Set ``JOSON_PROFILE`` in the environment (and run without ``-O``) to collect
per-path call counts, elapsed time and characters processed. When disabled
the context manager does nothing.
"""

import os
import time
from dataclasses import dataclass
from typing import Any

PROFILE_HOT_PATHS = __debug__ and "JOSON_PROFILE" in os.environ


@dataclass
class HotPathStats:
    """Accumulated timings for one named hot path."""

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0
    chars_processed: int = 0

    def record_call(self, duration_ns: int, chars: int = 0) -> None:
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.chars_processed += chars

    @property
    def mean_time_ns(self) -> float:
        return self.total_time_ns / self.call_count if self.call_count else 0.0


if PROFILE_HOT_PATHS:
    _hot_path_stats: dict[str, HotPathStats] = {}

    class ProfileContext:
        """Times the enclosed block under ``func_name``."""

        def __init__(self, func_name: str, chars: int = 0) -> None:
            self.func_name = func_name
            self.chars = chars
            self.start_time = 0

        def __enter__(self) -> "ProfileContext":
            self.start_time = time.perf_counter_ns()
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            duration = time.perf_counter_ns() - self.start_time
            stats = _hot_path_stats.setdefault(
                self.func_name, HotPathStats(self.func_name)
            )
            stats.record_call(duration, self.chars)

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return _hot_path_stats.copy()

    def clear_hot_path_stats() -> None:
        _hot_path_stats.clear()

else:

    class ProfileContext:  # type: ignore[no-redef]
        def __init__(self, func_name: str, chars: int = 0) -> None:
            pass

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return {}

    def clear_hot_path_stats() -> None:
        pass
