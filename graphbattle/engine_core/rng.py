"""
Seeded RNG - Deterministic random source for the whole engine.

Every random choice in the engine (board carving, strength distribution,
combat rounds, reinforcement tie-breaks) draws from an object exposing
next() -> float in [0, 1). Mulberry32 is the default implementation; it
uses only 32-bit integer arithmetic so a seed reproduces the same sequence
on every platform and in every process.
"""

from __future__ import annotations
from typing import Protocol, Sequence, TypeVar, runtime_checkable

_MASK32 = 0xFFFFFFFF
_TWO_POW_32 = 4294967296

T = TypeVar("T")


@runtime_checkable
class RandomSource(Protocol):
    """Anything that yields floats in [0, 1)."""

    def next(self) -> float:
        ...


def _imul(a: int, b: int) -> int:
    """Low 32 bits of a 32-bit integer multiplication."""
    return (a * b) & _MASK32


def _fnv1a(key: str) -> int:
    """32-bit FNV-1a hash; stable across processes unlike hash()."""
    h = 0x811C9DC5
    for byte in key.encode("utf-8"):
        h ^= byte
        h = (h * 0x01000193) & _MASK32
    return h


class Mulberry32:
    """
    Mulberry32 pseudo-random generator.

    Usage:
        rng = Mulberry32(42)
        roll = rng.next()
    """

    def __init__(self, seed: int):
        if not isinstance(seed, int) or isinstance(seed, bool):
            raise ValueError("seed must be an integer")
        self.seed = seed
        self._state = seed & _MASK32

    def next(self) -> float:
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / _TWO_POW_32

    def split(self, key: str) -> Mulberry32:
        """
        Derive an independent generator for a named sub-stream.

        Does not consume a draw: the parent sequence is unchanged.
        """
        return Mulberry32(self._state ^ _fnv1a(key))

    def __repr__(self) -> str:
        return f"Mulberry32(seed={self.seed})"


class RecordedRandom:
    """
    Replays a list of recorded draws, extending it from a source when exhausted.

    Several RecordedRandom cursors over the same list see the same values,
    which is what makes repeated evaluations idempotent.
    """

    def __init__(self, draws: list[float], source: RandomSource):
        self._draws = draws
        self._source = source
        self._cursor = 0

    def next(self) -> float:
        if self._cursor >= len(self._draws):
            self._draws.append(self._source.next())
        value = self._draws[self._cursor]
        self._cursor += 1
        return value


def random_index(rng: RandomSource, size: int) -> int:
    """Uniform index in [0, size)."""
    if size <= 0:
        raise ValueError("size must be positive")
    return int(rng.next() * size)


def shuffle(items: Sequence[T], rng: RandomSource) -> list[T]:
    """Fisher-Yates shuffle into a new list, one draw per swap position."""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = int(rng.next() * (i + 1))
        result[i], result[j] = result[j], result[i]
    return result


def derive_seed(rng: RandomSource) -> int:
    """A 32-bit seed taken from one draw of rng."""
    return int(rng.next() * _TWO_POW_32) & _MASK32
