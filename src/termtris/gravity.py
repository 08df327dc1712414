"""Deadline-based gravity timer for the game loop."""

from __future__ import annotations

import time
from typing import Callable, Optional

from .utils import gravity_interval_ms


class GravityClock:
    """Tell the game loop how long it may wait and when a tick is due.

    The clock works on absolute deadlines rather than accumulated frame
    deltas, so key presses never delay gravity.  ``clock`` returns seconds and
    defaults to :func:`time.monotonic`.
    """

    def __init__(
        self,
        level: int = 0,
        *,
        clock: Optional[Callable[[], float]] = None,
        interval_for_level: Callable[[int], float] = gravity_interval_ms,
    ) -> None:
        self._clock = clock or time.monotonic
        self._interval_for_level = interval_for_level
        self._deadline: Optional[float] = None
        self.restart(level)

    @property
    def running(self) -> bool:
        return self._deadline is not None

    def interval(self, level: int) -> float:
        """Tick period in seconds for ``level``."""

        return self._interval_for_level(level) / 1000.0

    def restart(self, level: int) -> None:
        """Schedule the first tick one full period from now."""

        self._deadline = self._clock() + self.interval(level)

    def stop(self) -> None:
        """Stop firing until :meth:`restart` is called."""

        self._deadline = None

    def timeout_ms(self) -> Optional[int]:
        """Milliseconds until the next tick, or ``None`` when stopped."""

        if self._deadline is None:
            return None
        remaining = self._deadline - self._clock()
        return max(0, int(remaining * 1000.0 + 0.5))

    def due(self) -> bool:
        return self._deadline is not None and self._clock() >= self._deadline

    def fired(self, level: int) -> None:
        """Schedule the tick after the one that just ran.

        The next deadline is one period after the later of the previous
        deadline and the current time, so the schedule only moves forward and
        a slow frame does not cause a burst of catch-up ticks.
        """

        if self._deadline is None:
            return
        self._deadline = max(self._deadline, self._clock()) + self.interval(level)
