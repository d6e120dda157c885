"""
Circuit Input Generation
========================

Randomized inputs for the InRange circuit. The default range 1..20 straddles
the accepted band 5..15 so both outcomes of the comparison get exercised.
"""

import random

from zksubmit.zk.models import CircuitInput


DEFAULT_INPUT_MIN = 1
DEFAULT_INPUT_MAX = 20


class InputGenerator:
    """Draws uniformly distributed integers from an inclusive range."""

    def __init__(
        self,
        low: int = DEFAULT_INPUT_MIN,
        high: int = DEFAULT_INPUT_MAX,
        rng: random.Random | None = None,
    ) -> None:
        if low > high:
            raise ValueError(f"Invalid input range [{low}, {high}]")
        self.low = low
        self.high = high
        self._rng = rng or random.Random()

    def generate(self) -> CircuitInput:
        """Produce a fresh input."""
        return CircuitInput(x=self._rng.randint(self.low, self.high))
