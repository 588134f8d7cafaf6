"""
Batch scheduler package.

Simulates FCFS, SJF, SJF-Priority and Round-robin CPU scheduling over a
fixed process table and reports Gantt charts with per-process metrics.
"""

__all__ = ["cli"]
