"""
Entropy sources for question shuffling.

The EntropyMixer averages several weak sources (a system random draw, a
local PRNG, and wall-clock / high-resolution clock fractions) so rapid
repeated shuffles do not come out alike. It is NOT suitable for security
or fairness-audit randomness.

Tests substitute a SeededSource to make sampling reproducible.
"""

from __future__ import annotations

import random
import secrets
import sys
import time
from typing import Protocol

from loguru import logger

# Largest float strictly below 1.0
_BELOW_ONE = 1.0 - sys.float_info.epsilon


class RandomSource(Protocol):
    """Anything that yields floats in [0, 1)."""

    def random(self) -> float:
        ...


class SeededSource:
    """Deterministic source backed by random.Random."""

    def __init__(self, seed: int | str | None = None):
        self._rng = random.Random(seed)

    def random(self) -> float:
        return self._rng.random()


class EntropyMixer:
    """
    Mixes time and jitter derived sources into one float in [0, 1).

    Sources:
    - secrets.SystemRandom (dropped if the OS source is unavailable)
    - a local random.Random
    - wall-clock timestamp fraction
    - perf_counter fraction
    """

    def __init__(self, local: RandomSource | None = None):
        self._local = local or random.Random()
        self._system: random.Random | None = secrets.SystemRandom()

    def _system_draw(self) -> float | None:
        if self._system is None:
            return None
        try:
            return self._system.random()
        except (NotImplementedError, OSError):
            logger.debug("System random source unavailable, using clock entropy only")
            self._system = None
            return None

    def random(self) -> float:
        samples = [
            self._local.random(),
            (time.time() * self._local.random()) % 1,
            (time.perf_counter() * self._local.random()) % 1,
        ]
        system = self._system_draw()
        if system is not None:
            samples.append(system)

        mixed = sum(samples) / len(samples)
        return min(max(mixed, 0.0), _BELOW_ONE)


def generate_unique_seed() -> int:
    """Label for a generated quiz, used in logs to tell runs apart."""
    stamp = time.time_ns()
    jitter = time.perf_counter_ns()
    return (stamp ^ (jitter << 7) ^ secrets.randbits(32)) % sys.maxsize
