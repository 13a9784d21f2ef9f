"""A simple monotonic stopwatch."""

from __future__ import annotations

import time


class Timer:
    """Measures seconds elapsed since :meth:`start`.

    A timer that has never been started measures from the clock's zero point.
    """

    def __init__(self, start_timer: bool = False) -> None:
        self._start = 0.0
        if start_timer:
            self.start()

    def start(self) -> None:
        """Reset the starting point to now."""
        self._start = time.perf_counter()

    def time(self) -> float:
        """Seconds elapsed since the starting point."""
        return time.perf_counter() - self._start