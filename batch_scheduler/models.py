from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Process:
    pid: int
    arrival_time: int
    burst_time: int
    priority: int = 0


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: int
    start_time: int
    end_time: int


@dataclass
class ScheduleRow:
    pid: int
    priority: int
    burst_time: int
    arrival_time: int
    waiting_time: int
    turnaround_time: int
    completion_time: int


@dataclass
class SystemMetrics:
    avg_waiting: float
    avg_turnaround: float
    throughput: float
    last_completion: int
    cpu_busy_time: int = 0


@dataclass
class ScheduleResult:
    algorithm: str
    title: str
    quantum: Optional[int] = None
    processes: List[ScheduleRow] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    system: Optional[SystemMetrics] = None
    # Ticks simulated by the tick-driven policies, idle ticks included.
    horizon: int = 0
