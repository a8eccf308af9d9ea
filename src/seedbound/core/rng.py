"""Deterministic RNG built on a 32-bit linear congruential generator."""
from __future__ import annotations

import secrets
import time
from dataclasses import dataclass
from typing import Sequence, Tuple, TypeVar

T_co = TypeVar("T_co")

_MULTIPLIER = 1664525
_INCREMENT = 1013904223
_MODULUS = 2**32
_HEX_DIGITS = "0123456789abcdef"
MAX_SEED_LENGTH = 1000


class EmptyCollectionError(ValueError):
    """Raised when a random selection is requested from an empty collection."""


@dataclass(frozen=True, slots=True)
class TwoDiceRoll:
    """Result of rolling two six-sided dice."""

    total: int
    die1: int
    die2: int


def hash_seed(seed: str) -> int:
    """Reduce a string seed to a non-negative integer with a 32-bit rolling hash."""
    value = 0
    encoded = seed.encode("utf-16-le")
    for index in range(0, len(encoded), 2):
        code_unit = encoded[index] | (encoded[index + 1] << 8)
        value = (value * 31 + code_unit) & 0xFFFFFFFF
    if value >= 2**31:
        value -= 2**32
    return abs(value)


def _seed_to_state(seed: str | int) -> int:
    if isinstance(seed, str):
        return hash_seed(seed)
    return abs(int(seed)) % _MODULUS


class RNG:
    """Seeded number source; the only randomness any engine component may consume.

    The full generator state is one unsigned 32-bit integer, so a session can be saved
    and restored exactly with :meth:`get_state` / :meth:`set_state`.
    """

    def __init__(self, seed: str | int) -> None:
        self._state = _seed_to_state(seed)

    def next(self) -> float:
        """Advance the generator and return a float in the range [0.0, 1.0)."""
        self._state = (_MULTIPLIER * self._state + _INCREMENT) % _MODULUS
        return self._state / _MODULUS

    def next_int(self, minimum: int, maximum: int) -> int:
        """Return a random integer N such that minimum <= N <= maximum."""
        return int(self.next() * (maximum - minimum + 1)) + minimum

    def next_float(self, minimum: float, maximum: float) -> float:
        """Return a random float in the range [minimum, maximum)."""
        return self.next() * (maximum - minimum) + minimum

    def chance(self, probability: float) -> bool:
        """Return True with the given probability."""
        return self.next() < probability

    def pick(self, seq: Sequence[T_co]) -> T_co:
        """Return a random element from the non-empty sequence."""
        if not seq:
            raise EmptyCollectionError("Cannot pick from an empty sequence.")
        return seq[self.next_int(0, len(seq) - 1)]

    def choice(self, seq: Sequence[T_co]) -> T_co:
        """Alias of :meth:`pick`."""
        return self.pick(seq)

    def shuffle(self, seq: Sequence[T_co]) -> list[T_co]:
        """Return a Fisher-Yates shuffled copy of the sequence."""
        result = list(seq)
        for i in range(len(result) - 1, 0, -1):
            j = self.next_int(0, i)
            result[i], result[j] = result[j], result[i]
        return result

    def roll_dice(self, sides: int, count: int = 1) -> int:
        """Return the sum of ``count`` dice with ``sides`` faces."""
        return sum(self.next_int(1, sides) for _ in range(count))

    def roll_2d6(self) -> TwoDiceRoll:
        die1 = self.next_int(1, 6)
        die2 = self.next_int(1, 6)
        return TwoDiceRoll(total=die1 + die2, die1=die1, die2=die2)

    def weighted_pick(self, items: Sequence[Tuple[T_co, float]]) -> T_co:
        """Pick an item from ``(item, weight)`` pairs proportionally to its weight."""
        if not items:
            raise EmptyCollectionError("Cannot pick from an empty weighted sequence.")
        total_weight = sum(weight for _, weight in items)
        remaining = self.next_float(0, total_weight)
        for item, weight in items:
            remaining -= weight
            if remaining <= 0:
                return item
        return items[-1][0]

    def uuid(self) -> str:
        """Return a UUID-v4 shaped string drawn from this generator."""
        chars: list[str] = []
        for index in range(36):
            if index in (8, 13, 18, 23):
                chars.append("-")
            elif index == 14:
                chars.append("4")
            elif index == 19:
                chars.append(_HEX_DIGITS[self.next_int(8, 11)])
            else:
                chars.append(_HEX_DIGITS[self.next_int(0, 15)])
        return "".join(chars)

    def reset(self, seed: str | int) -> None:
        """Re-seed the generator (new session or explicit restore only)."""
        self._state = _seed_to_state(seed)

    def get_state(self) -> int:
        return self._state

    def set_state(self, state: int) -> None:
        """Restore a state previously returned by :meth:`get_state`."""
        if isinstance(state, bool) or not isinstance(state, int):
            raise ValueError("RNG state must be an integer.")
        if not 0 <= state < _MODULUS:
            raise ValueError(f"RNG state must be within [0, 2**32); got {state}.")
        self._state = state


def generate_random_seed() -> str:
    """Build a fresh seed string for a new session."""
    return f"{int(time.time() * 1000)}-{secrets.randbelow(1_000_000)}"


def is_valid_seed(seed: str) -> bool:
    return 0 < len(seed) < MAX_SEED_LENGTH
