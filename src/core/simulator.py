"""CacheSimulator coordinates engine accesses and statistics.
Holds the authoritative cache state, feeds requests into the engine and
keeps the returned state as the new one.
"""
from typing import Any, Callable, Iterable, List, Optional

from .cache import AccessRequest, CacheSimulationEngine, CacheState, EngineConfig
from ..data.stats_export import Statistics


class CacheSimulator:
    def __init__(self, config: Optional[EngineConfig] = None, stats: Optional[Statistics] = None):
        self.config = config or EngineConfig()
        self.engine = CacheSimulationEngine.from_config(self.config)
        self.state: CacheState = self.engine.create_empty_state()
        self.stats = stats or Statistics()
        self.sequence: List[AccessRequest] = []
        self.index = 0

    def reset(self):
        # fresh empty state and stats; the engine clock keeps running
        self.stats.reset()
        self.index = 0
        self.state = self.engine.create_empty_state()

    def reconfigure(self, config: EngineConfig):
        """Switch to a new cache shape. The old state cannot be reused."""
        self.config = config
        self.engine = CacheSimulationEngine.from_config(config)
        self.reset()

    def load_sequence(self, requests: Iterable):
        # accept AccessRequests or bare addresses
        self.sequence = [r if isinstance(r, AccessRequest) else AccessRequest(int(r)) for r in requests]
        self.index = 0

    def has_next(self) -> bool:
        return self.index < len(self.sequence)

    def access(self, address: int, payload: Any = None, label: Optional[str] = None) -> dict:
        outcome = self.engine.access(address, payload, self.state)
        self.state = outcome.state
        self.stats.record_access(outcome.hit, address=address, label=label)
        return {
            'address': address,
            'hit': outcome.hit,
            'slot': outcome.affected_slot,
            'tag': outcome.tag,
            'evicted_tag': outcome.evicted.tag if outcome.evicted is not None else None,
            'payload': payload,
            'stats': self.stats.as_dict(),
        }

    def step(self) -> Optional[dict]:
        if not self.has_next():
            return None
        request = self.sequence[self.index]
        self.index += 1
        label = getattr(request.payload, 'timestamp', None)
        return self.access(request.address, request.payload, label=label)

    def run_all(self, callback: Optional[Callable[[dict], None]] = None) -> List[dict]:
        results = []
        while self.has_next():
            info = self.step()
            results.append(info)
            if callback:
                callback(info)
        return results
