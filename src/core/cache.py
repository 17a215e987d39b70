"""Core cache simulation engine

This file provides the address-mapping-and-eviction engine used by the
simulator and the command line runner.
Behavior:
- The cache is a fixed tuple of `slot_count` lines (the CacheState).
- Direct mapping:
  index = address % slot_count
  tag = address // slot_count
- 2-way set associative mapping: slots are paired into sets
  num_sets = slot_count // 2
  set_index = address % num_sets, candidates = (2*set_index, 2*set_index + 1)
  tag = address // slot_count
- access() never mutates the state it receives; it returns a new tuple in
  an AccessOutcome(hit, affected_slot, state, ...).
"""

import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional, Sequence, Tuple

from src.core.replacement_policies import make_replacement


class InvalidConfig(ValueError):
    """Raised when an engine is built with an unusable configuration."""


class StateSizeMismatch(ValueError):
    """Raised when the state handed to access() does not match slot_count.

    This means the caller kept a state that belongs to another configuration.
    """


class MappingScheme(Enum):
    DIRECT = "Direct Mapped"
    TWO_WAY = "2-way Set Associative"


class EvictionPolicy(Enum):
    LRU = "LRU"
    FIFO = "FIFO"


_MAPPING_ALIASES = {
    "direct": MappingScheme.DIRECT,
    "2way": MappingScheme.TWO_WAY,
    "2-way": MappingScheme.TWO_WAY,
    "two-way": MappingScheme.TWO_WAY,
}


def parse_mapping(value) -> MappingScheme:
    if isinstance(value, MappingScheme):
        return value
    try:
        return MappingScheme(value)
    except ValueError:
        pass
    key = str(value).strip().lower()
    if key in _MAPPING_ALIASES:
        return _MAPPING_ALIASES[key]
    raise InvalidConfig(f"unknown mapping scheme: {value!r}")


def parse_policy(value) -> EvictionPolicy:
    if isinstance(value, EvictionPolicy):
        return value
    try:
        return EvictionPolicy(str(value).strip().upper())
    except ValueError:
        raise InvalidConfig(f"unknown eviction policy: {value!r}") from None


@dataclass(frozen=True)
class EngineConfig:
    """Shape of the cache: number of slots, mapping and eviction policy.

    The policy only matters for the 2-way scheme; a direct-mapped cache
    never has a choice of victim.
    """

    slot_count: int = 8
    mapping_scheme: MappingScheme = MappingScheme.DIRECT
    eviction_policy: EvictionPolicy = EvictionPolicy.LRU

    def __post_init__(self):
        # normalize string inputs coming from the command line
        object.__setattr__(self, "mapping_scheme", parse_mapping(self.mapping_scheme))
        object.__setattr__(self, "eviction_policy", parse_policy(self.eviction_policy))
        if isinstance(self.slot_count, bool) or not isinstance(self.slot_count, int):
            raise InvalidConfig(f"slot_count must be an int, got {type(self.slot_count).__name__}")
        if self.slot_count <= 0:
            raise InvalidConfig(f"slot_count must be positive, got {self.slot_count}")
        if self.mapping_scheme is MappingScheme.TWO_WAY and self.slot_count % 2 != 0:
            raise InvalidConfig(f"2-way set associative mapping needs an even slot_count, got {self.slot_count}")

    @property
    def num_sets(self) -> int:
        if self.mapping_scheme is MappingScheme.TWO_WAY:
            return self.slot_count // 2
        return self.slot_count


@dataclass(frozen=True)
class CacheLine:
    """One cache slot.

    Fields:
    - slot_index: position of the line in the state, fixed at creation
    - tag: the tag stored in the line, None while the slot was never filled
    - payload: whatever was stored along with the tag
    - last_used / inserted_at: logical times used by LRU/FIFO (0 = never)
    - dirty: reserved, always False (no write modelling)
    """

    slot_index: int
    tag: Optional[int] = None
    payload: Any = None
    last_used: int = 0
    inserted_at: int = 0
    dirty: bool = False

    @property
    def filled(self) -> bool:
        return self.tag is not None


CacheState = Tuple[CacheLine, ...]


@dataclass(frozen=True)
class AccessRequest:
    address: int
    payload: Any = None


@dataclass(frozen=True)
class AccessOutcome:
    """Result of one access.

    `affected_slot` is set on hits and misses alike. `evicted` is the line
    that was overwritten on a miss, or None when the slot was empty (and
    always None on a hit).
    """

    hit: bool
    affected_slot: int
    state: CacheState
    tag: int
    evicted: Optional[CacheLine] = None


def create_empty_state(slot_count: int) -> CacheState:
    """Return `slot_count` unfilled lines with both timestamps at 0."""
    if isinstance(slot_count, bool) or not isinstance(slot_count, int) or slot_count <= 0:
        raise InvalidConfig(f"slot_count must be a positive int, got {slot_count!r}")
    return tuple(CacheLine(slot_index=i) for i in range(slot_count))


class CacheSimulationEngine:
    """Decides hit/miss and victim for each access.

    The engine owns only its configuration and a logical-time counter; the
    cache state always travels through access() as an argument and comes
    back as a new value.
    """

    def __init__(self, slot_count: int = 8, mapping_scheme=MappingScheme.DIRECT,
                 eviction_policy=EvictionPolicy.LRU):
        self.config = EngineConfig(slot_count, mapping_scheme, eviction_policy)
        self._replacement = make_replacement(self.config.eviction_policy)
        self._counter = 0
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: EngineConfig) -> "CacheSimulationEngine":
        return cls(config.slot_count, config.mapping_scheme, config.eviction_policy)

    @property
    def slot_count(self) -> int:
        return self.config.slot_count

    @property
    def mapping_scheme(self) -> MappingScheme:
        return self.config.mapping_scheme

    @property
    def eviction_policy(self) -> EvictionPolicy:
        return self.config.eviction_policy

    @property
    def counter(self) -> int:
        """Number of accesses served so far (the last logical time handed out)."""
        return self._counter

    def create_empty_state(self) -> CacheState:
        return create_empty_state(self.config.slot_count)

    def candidates(self, address: int) -> Tuple[int, ...]:
        """Slot indices an address may live in."""
        n = self.config.slot_count
        if self.config.mapping_scheme is MappingScheme.DIRECT:
            return (address % n,)
        set_index = address % self.config.num_sets
        return (2 * set_index, 2 * set_index + 1)

    def decode(self, address: int) -> Tuple[int, Tuple[int, ...]]:
        """Decode address into (tag, candidate slots)."""
        return address // self.config.slot_count, self.candidates(address)

    def access(self, address: int, payload: Any, state: Sequence[CacheLine]) -> AccessOutcome:
        """Perform one access against `state` and return the outcome.

        Raises ValueError for a negative address and StateSizeMismatch when
        `state` does not hold exactly slot_count lines. Both checks run before
        the logical clock moves, so a rejected call changes nothing.
        """
        if isinstance(address, bool) or not isinstance(address, int):
            raise ValueError(f"address must be int, got {type(address).__name__}")
        if address < 0:
            raise ValueError(f"address must be non-negative, got {address}")
        if len(state) != self.config.slot_count:
            raise StateSizeMismatch(
                f"state has {len(state)} lines but the engine is configured for {self.config.slot_count}"
            )

        tag, slots = self.decode(address)
        with self._lock:
            self._counter += 1
            now = self._counter

        new_state = list(state)

        # search for hit; the lower slot index wins if both ways match
        for si in slots:
            line = state[si]
            if line.tag is not None and line.tag == tag:
                new_state[si] = replace(line, last_used=now)
                return AccessOutcome(hit=True, affected_slot=si, state=tuple(new_state), tag=tag)

        # miss handling: direct mapping has one candidate, 2-way asks the policy
        if len(slots) == 1:
            victim_index = slots[0]
        else:
            # the policy answers with a position among the candidates
            victim_index = slots[self._replacement.evict([state[si] for si in slots])]

        victim = state[victim_index]
        evicted = victim if victim.filled else None
        new_state[victim_index] = CacheLine(
            slot_index=victim_index,
            tag=tag,
            payload=payload,
            last_used=now,
            inserted_at=now,
        )
        return AccessOutcome(hit=False, affected_slot=victim_index, state=tuple(new_state),
                             tag=tag, evicted=evicted)


__all__ = [
    "AccessOutcome",
    "AccessRequest",
    "CacheLine",
    "CacheSimulationEngine",
    "CacheState",
    "EngineConfig",
    "EvictionPolicy",
    "InvalidConfig",
    "MappingScheme",
    "StateSizeMismatch",
    "create_empty_state",
    "parse_mapping",
    "parse_policy",
]
