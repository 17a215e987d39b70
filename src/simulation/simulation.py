"""Simulation wrapper used by the command line runner

Converts textual inputs or a named scenario into a stream of access
requests and forwards them to the cache simulator.
"""
import random
import time
from typing import Callable, List, Optional

from src.core.cache import AccessRequest, EngineConfig
from src.core.constants import ADDRESS_SPACE, MONITOR_INTERVAL
from src.core.simulator import CacheSimulator
from src.data.sensor_readings import demo_readings, generate_reading

SCENARIOS = ('demo', 'random', 'sweep')


def parse_address(s: str) -> int:
    """'0x1f' and '1f' style hex, otherwise decimal."""
    s = s.strip()
    if s.lower().startswith('0x'):
        return int(s[2:], 16)
    if any(c in 'abcdefABCDEF' for c in s):
        return int(s, 16)
    return int(s, 10)


class Simulation:
    def __init__(self, config: Optional[EngineConfig] = None, seed: Optional[int] = None):
        self.config = config or EngineConfig()
        self.rng = random.Random(seed)
        self.simulator = None

    def _create_simulator(self):
        # Only create a simulator if one does not already exist, so the
        # cache state and stats carry over between runs.
        if self.simulator is None:
            self.simulator = CacheSimulator(self.config)

    def reconfigure(self, config: EngineConfig):
        self.config = config
        if self.simulator is not None:
            self.simulator.reconfigure(config)

    def generate_requests(self, name: str, count: int = 16) -> List[AccessRequest]:
        """Produce the request stream of a predefined scenario."""
        if name == 'demo':
            return [AccessRequest(r.address, r) for r in demo_readings(count, rng=self.rng)]
        elif name == 'random':
            readings = [generate_reading(self.rng) for _ in range(count)]
            return [AccessRequest(r.address, r) for r in readings]
        elif name == 'sweep':
            # walk twice the cache size so every slot gets reused
            span = self.config.slot_count * 2
            return [AccessRequest(i % span % ADDRESS_SPACE) for i in range(count)]
        raise ValueError(f"unknown scenario: {name!r}")

    def run_simulation(self, sequence: str = '', scenario: str = 'demo', count: int = 16, num_passes: int = 1):
        """Run an explicit comma separated address list, or a scenario when
        `sequence` is empty. Returns one info dict per item and pass; items
        that cannot be parsed produce {'error': ..., 'input': ...} entries.
        """
        self._create_simulator()
        items = [s.strip() for s in sequence.split(',') if s.strip()] if sequence else None
        requests = None if items is not None else self.generate_requests(scenario, count)

        results = []
        for p in range(num_passes):
            if items is None:
                todo = list(enumerate(requests))
            else:
                todo = list(enumerate(items))
            for idx, it in todo:
                if isinstance(it, AccessRequest):
                    req = it
                else:
                    try:
                        addr = parse_address(it)
                        if addr < 0:
                            raise ValueError(f"negative address: {it}")
                    except ValueError as e:
                        results.append({'error': str(e), 'input': it, '_pass': p, '_idx': idx})
                        continue
                    req = AccessRequest(addr)
                label = getattr(req.payload, 'timestamp', None)
                info = self.simulator.access(req.address, req.payload, label=label)
                info['_pass'] = p
                info['_idx'] = idx
                results.append(info)
        return results

    def monitor(self, interval: float = MONITOR_INTERVAL, count: Optional[int] = None,
                callback: Optional[Callable[[dict], None]] = None, sleep=time.sleep):
        """Live monitoring: one random reading per tick, `interval` seconds
        apart. Runs `count` ticks, or until interrupted when count is None.
        Returns the info dicts of the accesses made.
        """
        self._create_simulator()
        results = []
        tick = 0
        while count is None or tick < count:
            if tick:
                sleep(interval)
            reading = generate_reading(self.rng)
            info = self.simulator.access(reading.address, reading, label=reading.timestamp)
            info['_idx'] = tick
            results.append(info)
            if callback:
                callback(info)
            tick += 1
        return results
