"""
Pacing
======

Randomized delay windows for retry backoff and between iterations.
"""

import asyncio
import random
from collections.abc import Awaitable, Callable


SleepFunc = Callable[[float], Awaitable[None]]


class Pacer:
    """
    Sleeps for a uniformly random whole number of seconds in [low, high].

    Both bounds are inclusive, like ``RANDOM % 61 + 60`` for the 60..120
    window. ``sleep`` and ``rng`` are injectable so tests never wait.
    """

    def __init__(
        self,
        low: int,
        high: int,
        sleep: SleepFunc | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if low < 0 or low > high:
            raise ValueError(f"Invalid delay window [{low}, {high}]")
        self.low = low
        self.high = high
        self.sleep: SleepFunc = sleep or asyncio.sleep
        self._rng = rng or random.Random()

    def draw(self) -> int:
        """Pick a delay without sleeping."""
        return self._rng.randint(self.low, self.high)

    async def wait(self) -> int:
        """Sleep for a freshly drawn delay and return it."""
        delay = self.draw()
        await self.sleep(delay)
        return delay
