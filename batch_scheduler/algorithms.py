from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence

from .metrics import compute_system_metrics
from .models import Process, ScheduledSlice, ScheduleResult, ScheduleRow

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 3

# Picks the index of the process to run at a tick, or None when the CPU idles.
Selector = Callable[[Sequence[Process], List[int], int], Optional[int]]


def _make_row(p: Process, waiting_time: int, turnaround_time: int, completion_time: int) -> ScheduleRow:
    return ScheduleRow(
        pid=p.pid,
        priority=p.priority,
        burst_time=p.burst_time,
        arrival_time=p.arrival_time,
        waiting_time=waiting_time,
        turnaround_time=turnaround_time,
        completion_time=completion_time,
    )


def schedule_fcfs(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    Processes run back to back in table order; the table order is trusted as
    the arrival order. A process arriving at time 0 inherits the waiting time
    of the process before it.
    """
    service_time = 0
    waiting_time = 0
    last_completion = 0
    timeline: List[ScheduledSlice] = []
    metrics: List[ScheduleRow] = []

    for p in processes:
        if p.arrival_time > 0:
            waiting_time = service_time - p.arrival_time

        start_time = waiting_time + p.arrival_time
        turnaround_time = p.burst_time + waiting_time
        completion_time = start_time + p.burst_time
        last_completion = completion_time

        metrics.append(_make_row(p, waiting_time, turnaround_time, completion_time))

        service_time += p.burst_time
        timeline.append(ScheduledSlice(pid=p.pid, start_time=start_time, end_time=service_time))

    result = ScheduleResult(
        algorithm="FCFS",
        title="First-come, first-serve",
        quantum=quantum,
        processes=metrics,
        timeline=timeline,
        horizon=service_time,
    )
    compute_system_metrics(result, len(processes), last_completion)
    logger.debug("FCFS scheduled %d processes, last completion at %d", len(processes), last_completion)
    return result


def _shortest_remaining(processes: Sequence[Process], remaining: List[int], tick: int) -> Optional[int]:
    best: Optional[int] = None
    for i, p in enumerate(processes):
        if remaining[i] <= 0 or p.arrival_time > tick:
            continue
        # Ties go to the later process in table order.
        if best is None or remaining[i] <= remaining[best]:
            best = i
    return best


def _priority_then_shortest(processes: Sequence[Process], remaining: List[int], tick: int) -> Optional[int]:
    best: Optional[int] = None
    best_burst = 0
    for i, p in enumerate(processes):
        if remaining[i] <= 0 or p.arrival_time > tick:
            continue
        if best is None or p.priority < processes[best].priority:
            # Winning on priority records the full burst, not what is left of it.
            best = i
            best_burst = p.burst_time
        elif remaining[i] < best_burst:
            # A shorter job takes over even from a better priority.
            best = i
            best_burst = remaining[i]
    return best


def _run_ticks(processes: Sequence[Process], select: Selector) -> tuple[List[ScheduledSlice], Dict[int, ScheduleRow], int, int]:
    """
    Advance the clock one tick at a time, running whichever process `select`
    picks. Idle ticks push the horizon out by one so the loop still executes
    every unit of work.

    Returns the coalesced timeline, the rows keyed by table index, the last
    observed completion and the final horizon.
    """
    remaining = [p.burst_time for p in processes]
    horizon = sum(remaining)

    timeline: List[ScheduledSlice] = []
    rows: Dict[int, ScheduleRow] = {}
    running: Optional[int] = None
    last_completion = 0
    tick = 0

    while tick < horizon:
        chosen = select(processes, remaining, tick)

        if chosen is None:
            logger.debug("tick %d: idle", tick)
            horizon += 1
            running = None
            tick += 1
            continue

        p = processes[chosen]
        if chosen == running:
            timeline[-1].end_time = tick + 1
        else:
            timeline.append(ScheduledSlice(pid=p.pid, start_time=tick, end_time=tick + 1))
            running = chosen

        tick += 1
        remaining[chosen] -= 1

        if remaining[chosen] == 0:
            turnaround_time = tick - p.arrival_time
            waiting_time = turnaround_time - p.burst_time
            rows[chosen] = _make_row(p, waiting_time, turnaround_time, tick)
            last_completion = tick
            logger.debug("tick %d: process %s finished (wait %d)", tick, p.pid, waiting_time)

    return timeline, rows, last_completion, horizon


def schedule_sjf(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First, re-evaluated every tick.

    At each tick, among processes that have arrived and are not yet
    completed, run the one with the smallest remaining burst. Since a newly
    arrived shorter job wins the next tick this behaves as SRTF.
    """
    timeline, rows, last_completion, horizon = _run_ticks(processes, _shortest_remaining)

    result = ScheduleResult(
        algorithm="SJF",
        title="Shortest-job-first",
        quantum=quantum,
        processes=[rows[i] for i in sorted(rows)],
        timeline=timeline,
        horizon=horizon,
    )
    compute_system_metrics(result, len(processes), last_completion)
    logger.debug("SJF simulated %d ticks (%d idle)", horizon, horizon - sum(p.burst_time for p in processes))
    return result


def schedule_sjf_priority(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Priority scheduling with a shortest-job fallback, re-evaluated every tick.

    Lower numeric priority value means higher priority. A candidate replaces
    the current best when its priority is strictly lower; failing that, it
    replaces the best when its remaining burst is strictly smaller than the
    best burst seen so far, whatever the two priorities are. A best chosen on
    priority is measured by its full burst, so a partly run process can lose
    the CPU to a job longer than what it has left.
    """
    timeline, rows, last_completion, horizon = _run_ticks(processes, _priority_then_shortest)

    result = ScheduleResult(
        algorithm="SJF-Priority",
        title="Priority",
        quantum=quantum,
        processes=[rows[i] for i in sorted(rows)],
        timeline=timeline,
        horizon=horizon,
    )
    compute_system_metrics(result, len(processes), last_completion)
    logger.debug("SJF-Priority simulated %d ticks", horizon)
    return result


def schedule_rr(
    processes: Sequence[Process],
    quantum: Optional[int] = DEFAULT_QUANTUM,
    max_passes: Optional[int] = None,
) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    Each pass visits the whole table in order and gives every unfinished
    process one quantum, or whatever is left of its burst if that is less.
    Passes repeat until all work is done, or until `max_passes` if given.
    """
    if quantum is None:
        quantum = DEFAULT_QUANTUM
    if quantum <= 0:
        raise ValueError("Round Robin requires a positive quantum (use --quantum)")

    remaining = [p.burst_time for p in processes]
    service_time = 0
    last_completion = 0
    timeline: List[ScheduledSlice] = []
    rows: Dict[int, ScheduleRow] = {}
    passes = 0

    while any(r > 0 for r in remaining):
        if max_passes is not None and passes >= max_passes:
            logger.warning(
                "Round Robin stopped after %d passes with %d process(es) unfinished",
                passes,
                sum(1 for r in remaining if r > 0),
            )
            break

        for i, p in enumerate(processes):
            if remaining[i] <= 0:
                continue

            run_time = min(quantum, remaining[i])
            start_time = service_time
            turnaround_time = run_time + service_time - p.arrival_time
            completion_time = start_time + run_time
            last_completion = completion_time

            rows[i] = _make_row(p, turnaround_time - p.burst_time, turnaround_time, completion_time)

            service_time += run_time
            timeline.append(ScheduledSlice(pid=p.pid, start_time=start_time, end_time=service_time))
            remaining[i] -= run_time

        passes += 1

    finished = [rows[i] for i in sorted(rows) if remaining[i] == 0]
    result = ScheduleResult(
        algorithm="Round Robin",
        title="Round-robin",
        quantum=quantum,
        processes=finished,
        timeline=timeline,
        horizon=service_time,
    )
    compute_system_metrics(result, len(processes), last_completion)
    logger.debug("Round Robin finished in %d passes", passes)
    return result


# Report order matters: the CLI prints the algorithms in this order.
ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "priority": schedule_sjf_priority,
    "rr": schedule_rr,
}


def run_algorithm(
    name: str,
    processes: Sequence[Process],
    quantum: Optional[int] = None,
    max_passes: Optional[int] = None,
) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum and max_passes only affect
    round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown or unimplemented algorithm '{name}'")

    if name == "rr":
        return schedule_rr(processes, quantum=quantum, max_passes=max_passes)

    func = ALGORITHMS[name]
    return func(processes, quantum=None)


def run_all(
    processes: Sequence[Process],
    quantum: Optional[int] = None,
    max_passes: Optional[int] = None,
) -> List[ScheduleResult]:
    return [run_algorithm(name, processes, quantum=quantum, max_passes=max_passes) for name in ALGORITHMS]
