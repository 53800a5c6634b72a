"""Seedable random source shared by the game, the run tracker and the queue"""
import time
from typing import List, Optional, Sequence, TypeVar

import pygame

T = TypeVar("T")


class WaitrisRandom:
    """
    32-bit LCG (multiplier 0x41C64E6D, increment 0x3039) yielding 15-bit
    outputs from the high bits of the state.

    Shapes use a single repeat reroll: if the rolled shape equals the
    previous one, a coin flip decides whether to roll once more. Garbage
    holes and infection targets draw from the same stream, so a fixed seed
    reproduces a whole session.
    """

    SHAPES = ["I", "J", "L", "O", "S", "T", "Z"]

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = pygame.time.get_ticks() ^ time.time_ns()
        self.state = seed & 0xFFFFFFFF
        self.prev_index: Optional[int] = None

    def _lcg_next(self) -> int:
        self.state = (self.state * 0x41C64E6D + 0x3039) & 0xFFFFFFFF
        return self.state

    def _rand(self) -> int:
        return (self._lcg_next() >> 16) & 0x7FFF

    def randrange(self, n: int) -> int:
        """Return an integer in [0, n)."""
        if n <= 0:
            raise ValueError("randrange() needs a positive bound")
        # two draws give 30 bits, plenty for board-sized ranges
        return ((self._rand() << 15) | self._rand()) % n

    def sample(self, items: Sequence[T], k: int) -> List[T]:
        """Pick k distinct items uniformly (partial Fisher-Yates)."""
        pool = list(items)
        k = min(k, len(pool))
        for i in range(k):
            j = i + self.randrange(len(pool) - i)
            pool[i], pool[j] = pool[j], pool[i]
        return pool[:k]

    def next_shape(self) -> str:
        cand = self.randrange(len(self.SHAPES))
        if self.prev_index is not None and cand == self.prev_index:
            if (self._rand() & 1) == 1:
                cand = self.randrange(len(self.SHAPES))
        self.prev_index = cand
        return self.SHAPES[cand]
