"""Byte generators for the Cxkk instruction.

The CPU takes one of these in its constructor, so tests can script the
"random" values and a run can be replayed from a seed.
"""
import random
from itertools import cycle
from typing import Iterable, Optional, Protocol


class RandomSource(Protocol):
    def next_byte(self) -> int: ...


class SystemRandomSource:
    """Uniform bytes from ``random.Random``; unseeded it seeds from the clock."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def next_byte(self) -> int:
        return self._rng.randrange(256)


class ScriptedRandomSource:
    """Replays a fixed sequence of bytes, starting over when it runs out."""

    def __init__(self, values: Iterable[int]):
        values = [v & 0xFF for v in values]
        if not values:
            raise ValueError("ScriptedRandomSource needs at least one value")
        self._values = cycle(values)

    def next_byte(self) -> int:
        return next(self._values)
