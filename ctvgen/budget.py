"""Byte budget allocation for variable-length transaction fields.

A transaction draws a single budget of random payload bytes up front.
Every script and witness item is then cut down so the total never exceeds
it, regardless of how many inputs, outputs or witness items were drawn.
"""

from typing import NamedTuple

from ctvgen.stream import RandomStream


class LengthRange(NamedTuple):
    """Inclusive range of lengths or counts."""
    start: int
    end: int


def random_range(stream: RandomStream, length_range: LengthRange) -> int:
    """Draw an integer from an inclusive range.

    Uses start + (x % size) on a 64-bit draw.  The result is slightly
    biased for sizes that do not divide 2**64; existing fixtures depend on
    this exact reduction.
    """
    x = stream.next_u64()
    size = max(length_range.end - length_range.start, 0) + 1
    return length_range.start + (x % size)


class ByteBudget:
    """Remaining random payload bytes for one transaction.

    Never increases and never drops below zero.
    """

    def __init__(self, remaining: int) -> None:
        if remaining < 0:
            raise ValueError(f'budget must be non-negative, got {remaining}')
        self.remaining = remaining

    def charge(self, n: int) -> None:
        """Subtract n bytes, saturating at zero."""
        self.remaining = max(self.remaining - n, 0)

    def is_exhausted(self) -> bool:
        return self.remaining < 1

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.remaining})'


def random_bytes_lt(stream: RandomStream, length_range: LengthRange,
                    budget: ByteBudget) -> bytes:
    """Draw a random byte string no longer than the remaining budget.

    An exhausted budget yields b'' without touching the stream.
    """
    if budget.is_exhausted():
        return b''

    length = random_range(stream, length_range) % (budget.remaining + 1)
    budget.charge(length)
    return stream.fill_bytes(length)
