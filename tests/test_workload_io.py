from pathlib import Path

import pytest

from cpu_scheduling.errors import WorkloadError
from cpu_scheduling.models import DEFAULT_PRIORITY, Process, SchedulingPolicy
from cpu_scheduling.workload_io import load_workload, prepare_processes, sample_workload


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":"A","arrival_time":0,"burst_time":3,"priority":4},'
                 '{"pid":"B","arrival_time":1,"burst_time":2}]')
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert procs[0].priority == 4
    assert procs[1].priority == DEFAULT_PRIORITY
    assert procs[1].arrival_time == 1


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time,priority\nA,0,3,1\nB,1,2,\n")
    procs = load_workload(p)
    assert procs[0].pid == "A"
    assert procs[1].priority == DEFAULT_PRIORITY


def test_bundled_examples_load():
    examples = Path(__file__).resolve().parents[1] / "examples"
    assert [p.pid for p in load_workload(examples / "workload_small.json")] == ["P1", "P2", "P3"]
    assert len(load_workload(examples / "workload_srt.csv")) == 4


@pytest.mark.parametrize(
    "name, content",
    [
        ("w.txt", "pid,arrival_time,burst_time\nA,0,3\n"),
        ("w.json", '{"pid": "A"}'),
        ("w.json", "[not json"),
        ("w.json", '[{"pid": "A", "arrival_time": 0}]'),
        ("w.csv", "pid,arrival_time,burst_time\nA,zero,3\n"),
        ("w.csv", "pid,arrival_time,burst_time\nA,0,0\n"),
        ("w.csv", "pid,arrival_time,burst_time,priority\nA,0,3,high\n"),
        ("w.csv", "pid,arrival_time,burst_time\nA,0,2.9\n"),
        ("w.csv", b"pid,arrival_time,burst_time\n\xff\xfe,0,3\n"),
        ("w.json", b'[{"pid": "\xff", "arrival_time": 0, "burst_time": 3}]'),
        ("w.json", '[{"pid": "A", "arrival_time": Infinity, "burst_time": 3}]'),
        ("w.json", '[{"pid": "A", "arrival_time": 0, "burst_time": 1e400}]'),
        ("w.json", '[{"pid": "A", "arrival_time": 0, "burst_time": 2.9}]'),
        ("w.json", '[{"pid": "A", "arrival_time": 0, "burst_time": 3, "priority": NaN}]'),
    ],
)
def test_bad_workloads_rejected(tmp_path: Path, name, content):
    p = tmp_path / name
    if isinstance(content, bytes):
        p.write_bytes(content)
    else:
        p.write_text(content)
    with pytest.raises(WorkloadError):
        load_workload(p)


def test_whole_number_floats_accepted(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid": "A", "arrival_time": 1.0, "burst_time": 3.0, "priority": 2.0}]')
    procs = load_workload(p)
    assert (procs[0].arrival_time, procs[0].burst_time, procs[0].priority) == (1, 3, 2)


def test_sample_workload():
    procs = sample_workload()
    assert [(p.pid, p.arrival_time, p.burst_time) for p in procs] == [("P1", 0, 5), ("P2", 1, 3), ("P3", 2, 8)]


def test_prepare_processes_normalizes_priority():
    procs = [Process("", 0, 3, priority=5), Process("X", 1, 2, priority=2)]

    prepared = prepare_processes(procs, SchedulingPolicy.FCFS)
    assert [p.pid for p in prepared] == ["P1", "X"]
    assert [p.priority for p in prepared] == [DEFAULT_PRIORITY, DEFAULT_PRIORITY]

    prepared = prepare_processes(procs, SchedulingPolicy.PRIORITY)
    assert [p.priority for p in prepared] == [5, 2]

    # Caller's descriptors are untouched.
    assert procs[0].pid == ""
    assert procs[0].priority == 5
