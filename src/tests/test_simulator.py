import pytest
from src.core.cache import AccessRequest, EngineConfig, MappingScheme
from src.core.constants import HISTORY_LIMIT
from src.core.simulator import CacheSimulator
from src.data.sensor_readings import demo_readings


def test_run_all_collects_stats():
    sim = CacheSimulator(EngineConfig(4, 'direct', 'LRU'))
    sim.load_sequence([0, 4, 8, 0])
    results = sim.run_all()
    assert [r['hit'] for r in results] == [False, False, False, False]
    assert [r['evicted_tag'] for r in results] == [None, 0, 1, 2]
    s = sim.stats
    assert (s.accesses, s.hits, s.misses) == (4, 0, 4)
    assert s.hit_ratio == 0.0
    assert s.amat == 101.0
    assert sim.has_next() is False
    assert sim.step() is None


def test_hit_ratio_and_amat():
    sim = CacheSimulator(EngineConfig(8, '2way', 'FIFO'))
    sim.load_sequence([1, 1, 1, 1])
    seen = []
    sim.run_all(callback=seen.append)
    assert len(seen) == 4
    assert seen[-1]['stats'] == {'accesses': 4, 'hits': 3, 'misses': 1, 'hit_ratio': 75.0, 'amat': 26.0}
    points = list(sim.stats.metrics_history)
    assert points[0].hit_ratio == 0.0 and points[0].amat == 101.0
    assert points[-1].hit_ratio == 75.0 and points[-1].amat == 26.0


def test_state_is_carried_between_steps():
    sim = CacheSimulator(EngineConfig(4, 'direct', 'LRU'))
    first = sim.access(6, 'a')
    assert first['slot'] == 2 and first['tag'] == 1
    assert sim.state[2].payload == 'a'
    assert sim.access(6, 'b')['hit'] is True
    assert sim.state[2].payload == 'a'


def test_step_uses_payload_timestamp_as_label():
    readings = demo_readings(3)
    sim = CacheSimulator()
    sim.load_sequence([AccessRequest(r.address, r) for r in readings])
    info = sim.step()
    assert info['payload'] is readings[0]
    assert sim.stats.metrics_history[-1].label == readings[0].timestamp


def test_reset_clears_state_and_stats():
    sim = CacheSimulator(EngineConfig(4, 'direct', 'LRU'))
    sim.load_sequence([0, 1, 2, 3])
    sim.run_all()
    sim.reset()
    assert all(not line.filled for line in sim.state)
    assert sim.stats.accesses == 0
    assert len(sim.stats.access_history) == 0
    assert sim.index == 0
    # the same sequence can be replayed after a reset
    assert sim.has_next() is True
    assert sim.step()['hit'] is False


def test_reconfigure_builds_a_fresh_state():
    sim = CacheSimulator(EngineConfig(4, 'direct', 'LRU'))
    sim.access(0)
    sim.reconfigure(EngineConfig(16, '2way', 'LRU'))
    assert len(sim.state) == 16
    assert sim.engine.mapping_scheme is MappingScheme.TWO_WAY
    assert sim.stats.accesses == 0
    assert sim.access(0)['hit'] is False


def test_history_is_capped():
    sim = CacheSimulator(EngineConfig(4, 'direct', 'LRU'))
    sim.load_sequence(range(150))
    sim.run_all()
    assert sim.stats.accesses == 150
    assert len(sim.stats.access_history) == HISTORY_LIMIT
    assert len(sim.stats.metrics_history) == HISTORY_LIMIT
    assert sim.stats.access_history[-1]['address'] == 149


def test_negative_address_propagates():
    sim = CacheSimulator()
    with pytest.raises(ValueError):
        sim.access(-3)
    assert sim.stats.accesses == 0
