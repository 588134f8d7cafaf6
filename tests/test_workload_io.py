from pathlib import Path

import pytest

from batch_scheduler.models import Process
from batch_scheduler.workload_io import WorkloadError, load_workload


def test_load_rows(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("1,5,0,2\n2,3,2\n")
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert procs[0] == Process(1, arrival_time=0, burst_time=5, priority=2)
    assert procs[1].priority == 0
    assert procs[1].arrival_time == 2
    assert procs[1].burst_time == 3


def test_load_rows_any_suffix_and_blank_lines(tmp_path: Path):
    p = tmp_path / "processes.txt"
    p.write_text("1, 4, 0\n\n2, 2, 1\n")
    procs = load_workload(p)
    assert [pr.pid for pr in procs] == [1, 2]
    assert procs[1].burst_time == 2


def test_non_integer_field_is_fatal(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("1,5,0\n2,three,1\n")
    with pytest.raises(WorkloadError, match="line 2"):
        load_workload(p)


def test_header_row_is_rejected(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,burst,arrival\n1,5,0\n")
    with pytest.raises(ValueError):
        load_workload(p)


def test_wrong_field_count(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("1,5\n")
    with pytest.raises(WorkloadError, match="expected 3 or 4 fields"):
        load_workload(p)


def test_non_positive_burst(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("1,0,0\n")
    with pytest.raises(WorkloadError):
        load_workload(p)


def test_non_utf8_rows(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_bytes(b"1,5,0\n\xff\xfe,3,1\n")
    with pytest.raises(WorkloadError, match="UTF-8"):
        load_workload(p)


def test_non_utf8_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_bytes(b'[{"pid": "\xff"}]')
    with pytest.raises(WorkloadError, match="UTF-8"):
        load_workload(p)


def test_missing_file_raises_os_error(tmp_path: Path):
    with pytest.raises(OSError):
        load_workload(tmp_path / "nope.csv")


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":1,"arrival_time":0,"burst_time":3,"priority":1},'
                 '{"pid":2,"arrival_time":1,"burst_time":2}]')
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert procs[0].priority == 1
    assert procs[1].priority == 0
    assert procs[1].arrival_time == 1


def test_load_json_bad_entry(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":1,"burst_time":3}]')
    with pytest.raises(WorkloadError):
        load_workload(p)
