from pathlib import Path

import pytest

from batch_scheduler.cli import main


def _workload(tmp_path: Path) -> Path:
    p = tmp_path / "processes.csv"
    p.write_text("1,5,0,2\n2,3,1,1\n3,8,2,3\n")
    return p


def test_reports_every_algorithm_in_order(tmp_path: Path, capsys):
    assert main([str(_workload(tmp_path))]) == 0
    out = capsys.readouterr().out

    fcfs = out.index("First-come, first-serve")
    sjf = out.index("Shortest-job-first")
    rr = out.index("Round-robin")
    assert fcfs < sjf < rr
    assert out.count("Gantt schedule") == 4
    assert out.count("Schedule table") == 4
    for column in ("ID", "Priority", "Burst", "Arrival", "Wait", "Turnaround", "Exit"):
        assert column in out
    assert "Throughput" in out
    # Every policy finishes the sample at t=16.
    assert out.count("0.19/t") == 4


def test_summary_table(tmp_path: Path, capsys):
    assert main([str(_workload(tmp_path)), "--summary"]) == 0
    out = capsys.readouterr().out
    assert "Algorithm comparison" in out
    assert "Round Robin" in out


def test_no_arguments_is_an_error():
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2


def test_too_many_arguments_is_an_error(tmp_path: Path):
    path = str(_workload(tmp_path))
    with pytest.raises(SystemExit) as exc:
        main([path, path])
    assert exc.value.code == 2


def test_bad_quantum_is_an_error(tmp_path: Path):
    with pytest.raises(SystemExit) as exc:
        main([str(_workload(tmp_path)), "--quantum", "0"])
    assert exc.value.code == 2


@pytest.mark.parametrize("passes", ["0", "-2"])
def test_bad_max_passes_is_an_error(tmp_path: Path, passes):
    with pytest.raises(SystemExit) as exc:
        main([str(_workload(tmp_path)), "--max-passes", passes])
    assert exc.value.code == 2


def test_max_passes_limits_round_robin(tmp_path: Path, capsys):
    assert main([str(_workload(tmp_path)), "--max-passes", "1"]) == 0
    out = capsys.readouterr().out
    assert out.count("Schedule table") == 4


def test_non_utf8_workload(tmp_path: Path, capsys):
    p = tmp_path / "binary.csv"
    p.write_bytes(b"\xff\xfe,3,1\n")
    assert main([str(p)]) == 1
    captured = capsys.readouterr()
    assert "Invalid workload" in captured.err
    assert "UTF-8" in captured.err
    assert captured.out == ""


def test_missing_file(tmp_path: Path, capsys):
    assert main([str(tmp_path / "missing.csv")]) == 1
    captured = capsys.readouterr()
    assert "Error opening" in captured.err
    assert captured.out == ""


def test_malformed_workload(tmp_path: Path, capsys):
    p = tmp_path / "bad.csv"
    p.write_text("1,5,0\n2,x,1\n")
    assert main([str(p)]) == 1
    captured = capsys.readouterr()
    assert "Invalid workload" in captured.err
    assert captured.out == ""
