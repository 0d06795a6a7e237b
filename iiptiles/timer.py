"""Simple timer for measuring how long requests take."""

from __future__ import annotations

import time


class Timer:
    """Measures elapsed wall time in microseconds."""

    def __init__(self) -> None:
        self._start = time.monotonic_ns()

    def start(self) -> None:
        """Restart the measurement from now."""
        self._start = time.monotonic_ns()

    def elapsed(self) -> int:
        """Microseconds since the last call to :meth:`start`."""
        return (time.monotonic_ns() - self._start) // 1000