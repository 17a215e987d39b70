"""Synthetic farm sensor readings used as cache payloads.

Each reading carries a simulated memory address in [0, ADDRESS_SPACE); the
address is what the cache maps, the rest is opaque payload.
"""
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from src.core.constants import ADDRESS_SPACE

SENSOR_TYPES = ('Moisture', 'Temperature', 'Humidity')

# (low, span, unit) for the random value of each sensor type
_RANGES = {
    'Moisture': (30.0, 40.0, '%'),
    'Temperature': (18.0, 15.0, '°C'),
    'Humidity': (40.0, 30.0, '%'),
}


@dataclass(frozen=True)
class SensorReading:
    id: int
    type: str
    value: float
    unit: str
    timestamp: str
    address: int


def generate_reading(rng: Optional[random.Random] = None, now: Optional[datetime] = None) -> SensorReading:
    """One random reading at a random address."""
    rng = rng or random.Random()
    now = now or datetime.now()
    kind = rng.choice(SENSOR_TYPES)
    low, span, unit = _RANGES[kind]
    return SensorReading(
        id=rng.randrange(50),
        type=kind,
        value=round(low + rng.random() * span, 1),
        unit=unit,
        timestamp=now.strftime('%H:%M:%S'),
        address=rng.randrange(ADDRESS_SPACE),
    )


def demo_readings(count: int = 80, rng: Optional[random.Random] = None, now: Optional[datetime] = None) -> List[SensorReading]:
    """Deterministic address stream (i * 13) % ADDRESS_SPACE, two seconds apart."""
    rng = rng or random.Random(0)
    now = now or datetime.now()
    readings = []
    for i in range(count):
        kind = SENSOR_TYPES[i % len(SENSOR_TYPES)]
        if kind == 'Temperature':
            value, unit = 22 + rng.random() * 5, '°C'
        else:
            value, unit = 45 + rng.random() * 10, '%'
        stamp = now - timedelta(seconds=(count - i) * 2)
        readings.append(SensorReading(
            id=i + 100,
            type=kind,
            value=round(value, 1),
            unit=unit,
            timestamp=stamp.strftime('%H:%M:%S'),
            address=(i * 13) % ADDRESS_SPACE,
        ))
    return readings
