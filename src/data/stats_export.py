"""Statistics and exporter.
"""
import csv
import json
import os
from collections import deque
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional

from src.core.constants import HIT_TIME, MISS_PENALTY, HISTORY_LIMIT


def average_access_time(hit_ratio: float, hit_time: float = HIT_TIME, miss_penalty: float = MISS_PENALTY) -> float:
    """AMAT for a hit ratio given as a percentage (0..100)."""
    return hit_time + (1 - (hit_ratio / 100)) * miss_penalty


@dataclass
class MetricPoint:
    label: str
    hit_ratio: float
    amat: float


class Statistics:
    def __init__(self, history_limit: int = HISTORY_LIMIT, hit_time: float = HIT_TIME, miss_penalty: float = MISS_PENALTY):
        self.history_limit = history_limit
        self.hit_time = hit_time
        self.miss_penalty = miss_penalty
        self.reset()

    def reset(self):
        # counters start from zero
        self.accesses = 0
        self.hits = 0
        self.misses = 0
        # newest entries at the right; old ones fall off the left
        self.access_history = deque(maxlen=self.history_limit)
        self.metrics_history = deque(maxlen=self.history_limit)

    def record_access(self, hit: bool, address: Optional[int] = None, label: Optional[str] = None):
        # call this for every cache access
        self.accesses += 1
        if hit:
            self.hits += 1
        else:
            self.misses += 1
        self.access_history.append({'address': address, 'hit': bool(hit)})
        ratio = self.hit_ratio
        self.metrics_history.append(MetricPoint(
            label=label if label is not None else str(self.accesses),
            hit_ratio=round(ratio, 1),
            amat=round(average_access_time(ratio, self.hit_time, self.miss_penalty), 1),
        ))

    @property
    def hit_rate(self):
        return (self.hits / self.accesses) if self.accesses else 0.0

    @property
    def miss_rate(self):
        return (self.misses / self.accesses) if self.accesses else 0.0

    @property
    def hit_ratio(self) -> float:
        """Hit rate as a percentage."""
        return self.hit_rate * 100

    @property
    def amat(self) -> float:
        return average_access_time(self.hit_ratio, self.hit_time, self.miss_penalty)

    def recent_hit_ratio(self) -> float:
        """Hit ratio over the rolling access history only."""
        if not self.access_history:
            return 0.0
        hits = sum(1 for a in self.access_history if a['hit'])
        return hits / len(self.access_history) * 100

    def as_dict(self) -> Dict[str, float]:
        return {
            'accesses': self.accesses,
            'hits': self.hits,
            'misses': self.misses,
            'hit_ratio': round(self.hit_ratio, 1),
            'amat': round(self.amat, 1),
        }


def export_json(path: str, stats: Statistics) -> str:
    """Write the summary and both rolling histories to `path` as JSON."""
    data = {
        'stats': stats.as_dict(),
        'access_history': list(stats.access_history),
        'metrics_history': [asdict(p) for p in stats.metrics_history],
    }
    with open(path, 'w', encoding='utf-8') as fh:
        json.dump(data, fh, indent=2)
    return path


def export_chart(path: str, points: List[MetricPoint]) -> str:
    """Render hit ratio and AMAT over time with matplotlib and save it.

    The format follows the file extension (.pdf, .png, ...).
    """
    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt

    points = list(points)
    xs = list(range(len(points)))
    ratios = [p.hit_ratio for p in points] or [0]
    amats = [p.amat for p in points] or [0]
    if not xs:
        xs = [0]

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(6, 4), sharex=True)
    ax1.plot(xs, ratios, color='#34C759', linewidth=2)
    ax1.fill_between(xs, ratios, color='#34C759', alpha=0.1)
    ax1.set_ylim(0, 100)
    ax1.set_ylabel('Hit ratio (%)')
    ax2.plot(xs, amats, color='#007AFF', linewidth=2)
    ax2.set_ylabel('AMAT')
    ax2.set_xlabel('Access')
    fig.tight_layout()
    ext = os.path.splitext(path)[1].lstrip('.') or 'pdf'
    try:
        fig.savefig(path, format=ext, dpi=150)
    finally:
        plt.close(fig)
    return path


class Exporter:
    @staticmethod
    def export_stats_csv(path: str, stats: Statistics):
        with open(path, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(['accesses', 'hits', 'misses', 'hit_ratio', 'amat'])
            writer.writerow([stats.accesses, stats.hits, stats.misses,
                             round(stats.hit_ratio, 1), round(stats.amat, 1)])
            writer.writerow([])
            writer.writerow(['label', 'hit_ratio', 'amat'])
            for p in stats.metrics_history:
                writer.writerow([p.label, p.hit_ratio, p.amat])
        return path
