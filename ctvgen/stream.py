"""Deterministic source of random integers and bytes.

Every generator function takes a RandomStream explicitly and advances it
as it draws, so the same seed and the same sequence of calls always
produce the same transactions.
"""

import os
import random
from typing import Optional


class RandomStream:
    """Seedable stream of unsigned integers and byte strings."""

    def __init__(self, seed: Optional[int] = None) -> None:
        if seed is None:
            seed = int.from_bytes(os.urandom(8), 'little')
        if seed < 0:
            raise ValueError(f'seed must be non-negative, got {seed}')
        self.seed = seed
        self._rng = random.Random(seed)

    def next_u32(self) -> int:
        return self._rng.getrandbits(32)

    def next_u64(self) -> int:
        return self._rng.getrandbits(64)

    def fill_bytes(self, n: int) -> bytes:
        if n < 0:
            raise ValueError(f'cannot draw a negative number of bytes: {n}')
        if n == 0:
            return b''
        return self._rng.randbytes(n)

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(seed={self.seed})'
