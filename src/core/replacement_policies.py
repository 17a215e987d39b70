"""Replacement policy implementations for the 2-way set associative engine.

Both policies share a small API so the engine can call them interchangeably:

- LRUReplacement()
- FIFOReplacement()

API (methods):
- evict(candidates): given the candidate lines of one set (in slot order),
  return the position of the victim within `candidates`

The policies keep no state of their own. Everything they need (last_used,
inserted_at) is stored on the cache lines, which the caller passes in.
On equal timestamps the first candidate (lower slot) is chosen.
"""

from typing import Sequence


class LRUReplacement:
    """Least-Recently-Used: evict the line with the smallest last_used.

    A never-filled line has last_used == 0, so it is always taken before a
    filled one.
    """

    name = "LRU"

    @staticmethod
    def _key(line) -> int:
        return line.last_used

    def evict(self, candidates: Sequence) -> int:
        if not candidates:
            raise ValueError("no candidate lines to evict from")
        # min() keeps the first of equal keys -> lower slot on ties
        return min(range(len(candidates)), key=lambda i: self._key(candidates[i]))


class FIFOReplacement(LRUReplacement):
    """First-In-First-Out: evict the line with the smallest inserted_at.

    Hits refresh last_used only, so they never protect a line from FIFO.
    """

    name = "FIFO"

    @staticmethod
    def _key(line) -> int:
        return line.inserted_at


_POLICIES = {
    "LRU": LRUReplacement,
    "FIFO": FIFOReplacement,
}


def make_replacement(policy):
    """Build the policy object for an EvictionPolicy member (or its name)."""
    name = str(getattr(policy, "value", policy)).upper()
    try:
        return _POLICIES[name]()
    except KeyError:
        raise ValueError(f"unknown replacement policy: {policy!r}") from None


__all__ = ["LRUReplacement", "FIFOReplacement", "make_replacement"]
