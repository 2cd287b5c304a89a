"""Multi-pass Fisher-Yates shuffle driven by an injectable RandomSource."""

from __future__ import annotations

from typing import Sequence, TypeVar

from .entropy import EntropyMixer, RandomSource

T = TypeVar("T")

DEFAULT_PASSES = 3


def multi_pass_shuffle(
    items: Sequence[T],
    source: RandomSource | None = None,
    passes: int = DEFAULT_PASSES,
) -> list[T]:
    """
    Return a shuffled copy of items.

    Runs the backward-scan Fisher-Yates swap `passes` times, drawing every
    swap index from the source. The input sequence is left untouched.
    """
    source = source or EntropyMixer()
    shuffled = list(items)

    for _ in range(max(1, passes)):
        for i in range(len(shuffled) - 1, 0, -1):
            j = min(int(source.random() * (i + 1)), i)
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]

    return shuffled
