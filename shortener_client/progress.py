"""Process-wide progress counter behind the global activity indicator.

The counter only ever grows: a tracked operation adds ``start_step`` when it
begins and ``finish_step`` when it ends, whether it succeeded or failed. It
is an aggregate signal across every tracked operation and never gates one.
"""

import logging
from contextlib import asynccontextmanager
from typing import Callable, List, Optional

ProgressListener = Callable[[int], None]


class ProgressTracker:
    """Monotonic progress counter with observers."""

    def __init__(
        self,
        start_step: int = 30,
        finish_step: int = 70,
        logger: Optional[logging.Logger] = None,
    ):
        if start_step < 0 or finish_step < 0:
            raise ValueError("Progress steps must not be negative")
        self.start_step = start_step
        self.finish_step = finish_step
        self.logger = logger or logging.getLogger(__name__)
        self._value = 0
        self._active = 0
        self._listeners: List[ProgressListener] = []

    @property
    def value(self) -> int:
        return self._value

    @property
    def display_value(self) -> int:
        """Value clamped to [0, 100] for a progress bar."""
        return max(0, min(100, self._value))

    @property
    def active(self) -> int:
        """Number of tracked operations currently running."""
        return self._active

    def start(self) -> None:
        self._active += 1
        self._advance(self.start_step)

    def finish(self) -> None:
        self._active = max(0, self._active - 1)
        self._advance(self.finish_step)

    @asynccontextmanager
    async def track(self):
        """Track one operation; completion is recorded even on failure."""
        self.start()
        try:
            yield self
        finally:
            self.finish()

    def subscribe(self, listener: ProgressListener) -> Callable[[], None]:
        """Register a listener called with the new value on every change.

        Returns:
            A function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _advance(self, step: int) -> None:
        self._value += step
        self.logger.debug(f"Progress {self._value} ({self._active} active)")
        for listener in list(self._listeners):
            try:
                listener(self._value)
            except Exception:
                self.logger.exception("Progress listener failed")


_progress: Optional[ProgressTracker] = None


def init_progress(start_step: int = 30, finish_step: int = 70) -> ProgressTracker:
    """Create the process-wide tracker at session start."""
    global _progress
    _progress = ProgressTracker(start_step=start_step, finish_step=finish_step)
    return _progress


def get_progress() -> ProgressTracker:
    """Return the process-wide tracker, creating it with defaults if needed."""
    if _progress is None:
        return init_progress()
    return _progress
