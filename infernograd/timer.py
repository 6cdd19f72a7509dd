"""Simple wall-clock stopwatch."""

from __future__ import annotations

import time


class Timer:
    """Stopwatch measuring elapsed time between ``start`` and ``stop``.

    While running, elapsed time is measured up to now; after ``stop`` it is
    frozen. It can also be used as a context manager.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._start = 0.0
        self._end = 0.0
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start or restart timing."""
        self._running = True
        self._start = time.perf_counter()

    def stop(self) -> None:
        """Stop timing and freeze the elapsed time."""
        self._end = time.perf_counter()
        self._running = False

    def _elapsed(self) -> float:
        end = time.perf_counter() if self._running else self._end
        return end - self._start

    def elapsed_ms(self) -> float:
        """Elapsed time in milliseconds."""
        return self._elapsed() * 1000.0

    def elapsed_sec(self) -> float:
        """Elapsed time in seconds."""
        return self._elapsed()

    def __enter__(self) -> "Timer":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()