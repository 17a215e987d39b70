import random
from datetime import datetime

from src.core.constants import ADDRESS_SPACE
from src.data.sensor_readings import SENSOR_TYPES, demo_readings, generate_reading


def test_demo_readings_are_deterministic():
    now = datetime(2024, 5, 1, 12, 0, 0)
    readings = demo_readings(5, now=now)
    assert [r.address for r in readings] == [0, 13, 26, 39, 52]
    assert [r.type for r in readings] == ['Moisture', 'Temperature', 'Humidity', 'Moisture', 'Temperature']
    assert readings[0].id == 100
    assert readings[0].timestamp == '11:59:50'
    assert demo_readings(5, now=now) == readings


def test_demo_addresses_wrap():
    readings = demo_readings(80)
    assert all(0 <= r.address < ADDRESS_SPACE for r in readings)
    assert readings[20].address == (20 * 13) % 256


def test_generate_reading_ranges():
    rng = random.Random(7)
    for _ in range(200):
        r = generate_reading(rng)
        assert r.type in SENSOR_TYPES
        assert 0 <= r.address < ADDRESS_SPACE
        if r.type == 'Temperature':
            assert r.unit == '°C'
            assert 18 <= r.value <= 33
        else:
            assert r.unit == '%'


def test_generate_reading_is_seedable():
    now = datetime(2024, 5, 1)
    a = [generate_reading(random.Random(3), now=now) for _ in range(3)]
    b = [generate_reading(random.Random(3), now=now) for _ in range(3)]
    assert a == b
