"""Hint label allocation.

Labels are short alphabetic codes handed out to candidates in one hinting
session. The pair scheme enumerates ordered pairs ``(a, b)`` with ``a != b``,
first symbol outermost, which yields ``n * (n - 1)`` labels for an alphabet of
``n`` symbols (650 for a-z). When a session has no more candidates than there
are symbols, single-symbol labels are used instead. A session never mixes the
two, so the labels it hands out are always prefix-free.
"""

from __future__ import annotations

import string
from collections.abc import Iterator

DEFAULT_ALPHABET = string.ascii_lowercase


def total_count(alphabet_size: int) -> int:
    """Number of pair labels available for an alphabet of the given size."""
    if alphabet_size < 2:
        return 0
    return alphabet_size * (alphabet_size - 1)


def label_for_index(index: int, alphabet: str = DEFAULT_ALPHABET) -> str:
    """Return the pair label at position ``index`` of the enumeration.

    Raises:
        IndexError: If ``index`` is outside ``[0, total_count(len(alphabet)))``.
    """
    size = len(alphabet)
    if index < 0 or index >= total_count(size):
        raise IndexError(f"label index {index} out of range for alphabet of {size}")
    per_first = size - 1
    first = alphabet[index // per_first]
    rest = alphabet.replace(first, "")
    return first + rest[index % per_first]


def labels_for(
    count: int,
    alphabet: str = DEFAULT_ALPHABET,
    single_char: bool = True,
) -> list[str]:
    """Labels for a session of ``count`` candidates.

    The result holds ``min(count, capacity)`` labels; candidates past the end
    of the list receive no label.
    """
    if count <= 0:
        return []
    if single_char and count <= len(alphabet):
        return list(alphabet[:count])
    available = min(count, total_count(len(alphabet)))
    return [label_for_index(i, alphabet) for i in range(available)]


class HintLabelAllocator:
    """Deterministic, restartable label source for hinting sessions."""

    def __init__(self, alphabet: str = DEFAULT_ALPHABET, single_char: bool = True) -> None:
        if len(set(alphabet)) != len(alphabet):
            raise ValueError(f"Hint alphabet has repeated symbols: {alphabet!r}")
        if len(alphabet) < 2:
            raise ValueError("Hint alphabet needs at least two symbols")
        self.alphabet = alphabet
        self.single_char = single_char

    @property
    def capacity(self) -> int:
        """Largest number of candidates one session can label."""
        return max(total_count(len(self.alphabet)), len(self.alphabet) if self.single_char else 0)

    def allocate(self, count: int) -> list[str]:
        return labels_for(count, self.alphabet, self.single_char)

    def __iter__(self) -> Iterator[str]:
        # Full pair sequence; each call starts over.
        for i in range(total_count(len(self.alphabet))):
            yield label_for_index(i, self.alphabet)
