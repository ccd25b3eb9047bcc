"""Display-refresh pacing for the estimation loop"""

import asyncio
import time
from typing import Callable


class FrameClock:
    """Awaitable "next display frame" primitive.

    Ticks are laid on a fixed grid at ``1 / fps`` spacing. ``next_frame()``
    sleeps until the next grid point not yet passed, so a slow
    iteration drops the frames it overran instead of bursting to catch up.

    Attributes:
        fps: Target refresh rate in Hz
        interval: Seconds between ticks
    """

    def __init__(self, fps: float = 30.0, clock: Callable[[], float] = time.monotonic):
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self.fps = fps
        self.interval = 1.0 / fps
        self._clock = clock
        self._origin = clock()
        self._next_tick = self._origin
        self._last_ms = -1

    async def next_frame(self) -> int:
        """Wait for the next tick.

        Returns:
            Milliseconds since the clock was created. Strictly increasing
            across calls, as VIDEO-mode inference requires.
        """
        now = self._clock()
        if self._next_tick < now:
            missed = int((now - self._next_tick) / self.interval) + 1
            self._next_tick += missed * self.interval
        delay = self._next_tick - now
        self._next_tick += self.interval

        await asyncio.sleep(max(0.0, delay))

        timestamp_ms = int(round((self._clock() - self._origin) * 1000))
        if timestamp_ms <= self._last_ms:
            timestamp_ms = self._last_ms + 1
        self._last_ms = timestamp_ms
        return timestamp_ms
