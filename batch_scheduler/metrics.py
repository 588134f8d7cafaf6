from __future__ import annotations

from .models import ScheduleResult, SystemMetrics


def compute_system_metrics(result: ScheduleResult, process_count: int, last_completion: int) -> SystemMetrics:
    """
    Compute averages and throughput for a populated result.

    Averages divide by the size of the process table, throughput is measured
    against the most recently observed completion, which is what the
    algorithm saw finish last rather than the maximum over all rows.
    """
    cpu_busy_time = sum(slice_.end_time - slice_.start_time for slice_ in result.timeline)

    if process_count == 0:
        system = SystemMetrics(
            avg_waiting=0.0,
            avg_turnaround=0.0,
            throughput=0.0,
            last_completion=0,
            cpu_busy_time=cpu_busy_time,
        )
        result.system = system
        return system

    system = SystemMetrics(
        avg_waiting=sum(p.waiting_time for p in result.processes) / process_count,
        avg_turnaround=sum(p.turnaround_time for p in result.processes) / process_count,
        throughput=process_count / last_completion if last_completion > 0 else 0.0,
        last_completion=last_completion,
        cpu_busy_time=cpu_busy_time,
    )
    result.system = system
    return system
