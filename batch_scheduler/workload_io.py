from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Iterable, List, Sequence

from .models import Process

logger = logging.getLogger(__name__)


class WorkloadError(ValueError):
    """Raised when a workload file holds a malformed process entry."""


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload into a list of Process objects.

    JSON files hold a list of objects; anything else is read as header-less
    comma separated rows of `pid, burst, arrival[, priority]`.
    """
    path = Path(path)

    if path.suffix.lower() == ".json":
        processes = _load_json(path)
    else:
        processes = _load_rows(path)

    logger.info("Loaded %d process(es) from %s", len(processes), path)
    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise WorkloadError(f"{path}: invalid JSON ({exc})") from exc
        except UnicodeDecodeError as exc:
            raise WorkloadError(f"{path}: not valid UTF-8 text ({exc.reason})") from exc

    if not isinstance(raw, Iterable) or isinstance(raw, (str, dict)):
        raise WorkloadError("JSON workload must be a list of process objects")

    processes: List[Process] = []
    for entry in raw:
        processes.append(_process_from_mapping(entry))

    return processes


def _load_rows(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.reader(f)
        try:
            for line_no, row in enumerate(reader, start=1):
                if not any(field.strip() for field in row):
                    continue
                processes.append(_process_from_row(row, line_no))
        except UnicodeDecodeError as exc:
            raise WorkloadError(f"{path}: not valid UTF-8 text ({exc.reason})") from exc
        except csv.Error as exc:
            raise WorkloadError(f"{path}: line {reader.line_num}: {exc}") from exc
    return processes


def _parse_int(value, what: str, where: str) -> int:
    try:
        return int(str(value).strip(), 10)
    except ValueError as exc:
        raise WorkloadError(f"{where}: {what} {value!r} is not an integer") from exc


def _process_from_row(row: Sequence[str], line_no: int) -> Process:
    where = f"line {line_no}"
    if len(row) not in (3, 4):
        raise WorkloadError(f"{where}: expected 3 or 4 fields, got {len(row)}")

    pid = _parse_int(row[0], "process id", where)
    burst_time = _parse_int(row[1], "burst", where)
    arrival_time = _parse_int(row[2], "arrival", where)
    priority = _parse_int(row[3], "priority", where) if len(row) == 4 else 0

    return _validated(Process(pid=pid, arrival_time=arrival_time, burst_time=burst_time, priority=priority), where)


def _process_from_mapping(mapping) -> Process:
    where = f"entry {mapping!r}"
    try:
        pid = _parse_int(mapping["pid"], "process id", where)
        arrival_time = _parse_int(mapping["arrival_time"], "arrival", where)
        burst_time = _parse_int(mapping["burst_time"], "burst", where)
    except (KeyError, TypeError) as exc:
        raise WorkloadError(f"Invalid process entry: {mapping!r}") from exc

    priority_val = mapping.get("priority")
    priority = _parse_int(priority_val, "priority", where) if priority_val not in (None, "") else 0

    return _validated(Process(pid=pid, arrival_time=arrival_time, burst_time=burst_time, priority=priority), where)


def _validated(process: Process, where: str) -> Process:
    if process.arrival_time < 0:
        raise WorkloadError(f"{where}: arrival time must not be negative")
    if process.burst_time <= 0:
        raise WorkloadError(f"{where}: burst must be positive")
    return process
