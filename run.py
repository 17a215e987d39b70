"""Entry point for the sensor cache simulator.

Usage:
    python run.py                                  # demo readings, 8 slots, direct mapped
    python run.py --mapping 2way --policy FIFO --sequence 0,2,4,0
    python run.py --scenario random --count 50 --seed 1 --chart hits.pdf
"""
import argparse
import sys

from src.core.cache import EngineConfig, InvalidConfig
from src.core.constants import CACHE_SIZES, DEFAULT_SLOT_COUNT
from src.data.stats_export import Exporter, export_chart, export_json
from src.simulation.simulation import SCENARIOS, Simulation


def build_parser():
    parser = argparse.ArgumentParser(description='Simulate a small sensor-data cache')
    parser.add_argument('--slots', type=int, default=DEFAULT_SLOT_COUNT, choices=CACHE_SIZES,
                        help='number of cache slots')
    parser.add_argument('--mapping', default='direct', choices=['direct', '2way'],
                        help='direct mapped or 2-way set associative')
    parser.add_argument('--policy', default='LRU', type=str.upper, choices=['LRU', 'FIFO'],
                        help='eviction policy (2-way only)')
    parser.add_argument('--sequence', default='',
                        help='comma separated addresses, decimal or 0x hex; overrides --scenario')
    parser.add_argument('--scenario', default='demo', choices=SCENARIOS)
    parser.add_argument('--count', type=int, default=16, help='requests generated by the scenario')
    parser.add_argument('--passes', type=int, default=1)
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--json', metavar='PATH', help='export stats and history as JSON')
    parser.add_argument('--csv', metavar='PATH', help='export stats and history as CSV')
    parser.add_argument('--chart', metavar='PATH', help='save hit ratio / AMAT chart (pdf, png)')
    parser.add_argument('--interval', type=float, metavar='SECONDS',
                        help='live monitoring: one random reading every SECONDS (--count ticks, 0 = until Ctrl-C)')
    parser.add_argument('--quiet', action='store_true', help='only print the summary')
    return parser


def print_access(info):
    if 'error' in info:
        print(f"  skipped {info['input']!r}: {info['error']}")
        return
    outcome = 'HIT ' if info['hit'] else 'MISS'
    line = f"  addr {info['address']:>3}  {outcome}  slot {info['slot']:>2}  tag {info['tag']}"
    if info['evicted_tag'] is not None:
        line += f"  (evicted tag {info['evicted_tag']})"
    print(line)


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        config = EngineConfig(args.slots, args.mapping, args.policy)
    except InvalidConfig as e:
        print(f"invalid configuration: {e}", file=sys.stderr)
        return 2

    sim = Simulation(config, seed=args.seed)
    if not args.quiet:
        print(f"{config.slot_count} slots, {config.mapping_scheme.value}, {config.eviction_policy.value}")
    if args.interval is not None:
        # stream each reading as it arrives
        try:
            sim.monitor(args.interval, count=args.count or None,
                        callback=None if args.quiet else print_access)
        except KeyboardInterrupt:
            print('Monitoring stopped')
    else:
        results = sim.run_simulation(args.sequence, scenario=args.scenario, count=args.count,
                                     num_passes=args.passes)
        if not args.quiet:
            for info in results:
                print_access(info)

    s = sim.simulator.stats
    print('Accesses:', s.accesses)
    print('Hits:', s.hits)
    print('Misses:', s.misses)
    print(f'Hit ratio: {s.hit_ratio:.1f}%')
    print(f'Miss ratio: {s.miss_rate * 100:.1f}%')
    print(f'Avg access time: {s.amat:.1f}')
    print(f'Hit ratio (last {s.history_limit}): {s.recent_hit_ratio():.1f}%')

    if args.json:
        print('Saved', export_json(args.json, s))
    if args.csv:
        print('Saved', Exporter.export_stats_csv(args.csv, s))
    if args.chart:
        print('Saved', export_chart(args.chart, s.metrics_history))
    return 0


if __name__ == '__main__':
    sys.exit(main())
