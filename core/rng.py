"""
core.rng
Deterministic RNG helpers that do NOT rely on Python's built-in hash() or random module.

Goal:
- Same (seed + call sequence) => same draws across platforms & runs.
- Each call site gets its own generator scoped to (seed, turn, purpose).
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from typing import Any, List, Sequence, TypeVar

T = TypeVar("T")

_MASK = 0xFFFFFFFF

# Purpose multipliers for derived sub-streams (large odd constants).
COMMAND_MIX = 1664525
TICK_MIX = 1013904223
AI_LINE_MIX = 2654435761


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK


@dataclass
class Rng:
    """Mulberry32 generator over a 32-bit state."""

    state: int

    def __post_init__(self) -> None:
        self.state = int(self.state) & _MASK

    def next(self) -> float:
        """Return a float in [0, 1) and advance one step."""
        self.state = (self.state + 0x6D2B79F5) & _MASK
        a = self.state
        t = _imul(a ^ (a >> 15), a | 1)
        t = ((t + _imul(t ^ (t >> 7), t | 61)) & _MASK) ^ t
        return ((t ^ (t >> 14)) & _MASK) / 4294967296

    def int_range(self, lo: int, hi: int) -> int:
        # inclusive lo..hi
        return int(self.next() * (hi - lo + 1)) + lo

    def pick(self, seq: Sequence[T]) -> T:
        return seq[self.int_range(0, len(seq) - 1)]

    def shuffle(self, items: List[T]) -> List[T]:
        """Fisher-Yates, last index down to 1. Mutates and returns `items`."""
        for i in range(len(items) - 1, 0, -1):
            j = self.int_range(0, i)
            items[i], items[j] = items[j], items[i]
        return items


def mix_seed(seed: int, turn: int, multiplier: int) -> int:
    return (int(seed) ^ (int(turn) * int(multiplier))) & _MASK


def rng_for(seed: int, turn: int, multiplier: int) -> Rng:
    """Create a fresh generator for one (seed, turn, purpose) call site."""
    return Rng(mix_seed(seed, turn, multiplier))


def stable_int_seed(*parts: Any, salt: str = "relay-k7") -> int:
    """Return a stable 32-bit integer seed derived from arbitrary inputs.

    Uses SHA-256 over a canonical JSON representation of `parts`.
    Used to turn free-text seed phrases into game seeds.
    """
    payload = json.dumps(parts, sort_keys=True, ensure_ascii=False, separators=(",", ":"), default=str)
    h = hashlib.sha256((salt + "|" + payload).encode("utf-8")).digest()
    return int.from_bytes(h[:4], "big", signed=False)
