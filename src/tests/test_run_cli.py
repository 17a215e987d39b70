import json

import pytest
import run


def test_summary_for_explicit_sequence(capsys):
    assert run.main(['--slots', '4', '--sequence', '0,4,8,0']) == 0
    out = capsys.readouterr().out
    assert '4 slots, Direct Mapped, LRU' in out
    assert 'Misses: 4' in out
    assert 'Hit ratio: 0.0%' in out
    assert 'evicted tag 2' in out


def test_two_way_fifo_quiet(capsys):
    assert run.main(['--slots', '4', '--mapping', '2way', '--policy', 'fifo',
                     '--sequence', '0,6,0,8', '--quiet']) == 0
    out = capsys.readouterr().out
    assert 'addr' not in out
    assert 'Hits: 1' in out
    assert 'Avg access time: 76.0' in out


def test_json_export(tmp_path, capsys):
    path = tmp_path / 'out.json'
    assert run.main(['--scenario', 'random', '--count', '10', '--seed', '2', '--quiet', '--json', str(path)]) == 0
    data = json.loads(path.read_text(encoding='utf-8'))
    assert data['stats']['accesses'] == 10


def test_bad_slot_count_is_rejected():
    with pytest.raises(SystemExit):
        run.main(['--slots', '5'])


def test_interval_streams_readings(capsys):
    assert run.main(['--interval', '0', '--count', '3', '--seed', '4']) == 0
    out = capsys.readouterr().out
    assert out.count('  addr ') == 3
    assert 'Accesses: 3' in out


def test_summary_includes_miss_ratio(capsys):
    assert run.main(['--slots', '4', '--sequence', '1,1,1,1', '--quiet']) == 0
    out = capsys.readouterr().out
    assert 'Hit ratio: 75.0%' in out
    assert 'Miss ratio: 25.0%' in out
