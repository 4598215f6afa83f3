"""Deterministic pseudo-random stream used by the process flow generator.

The stream is a 32-bit linear congruential generator. Every value depends only
on the folded seed and the number of draws already taken, so a given seed
reproduces the same sequence on any platform.
"""

from __future__ import annotations

import math
from collections.abc import Iterator

UINT32_MASK = 0xFFFFFFFF
UINT32_RANGE = 0x100000000
LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223


def _utf16_code_units(text: str) -> Iterator[int]:
    for char in text:
        code_point = ord(char)
        if code_point > 0xFFFF:
            code_point -= 0x10000
            yield 0xD800 + (code_point >> 10)
            yield 0xDC00 + (code_point & 0x3FF)
        else:
            yield code_point


def seed_from_string(text: str) -> int:
    seed = 0
    for unit in _utf16_code_units(text):
        seed = (seed + unit) & UINT32_MASK
    # A zero state would make the first draws degenerate.
    return seed or 1


def round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))


class SeededRandom:
    def __init__(self, seed: int) -> None:
        self._state = seed & UINT32_MASK

    @classmethod
    def from_string(cls, text: str) -> SeededRandom:
        return cls(seed_from_string(text))

    @property
    def state(self) -> int:
        return self._state

    def next_float(self) -> float:
        """Advance the generator and return a float in ``[0, 1)``."""
        self._state = (self._state * LCG_MULTIPLIER + LCG_INCREMENT) & UINT32_MASK
        return self._state / UINT32_RANGE

    def randint(self, low: int, high: int) -> int:
        """Return an integer in ``[low, high]``, both ends inclusive."""
        return math.floor(self.next_float() * (high - low + 1)) + low

    def uniform(self, low: float, high: float, precision: int = 1) -> float:
        factor = 10**precision
        return round_half_up((self.next_float() * (high - low) + low) * factor) / factor
