from __future__ import annotations

from typing import Dict, List

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .models import ScheduledSlice

CELL_WIDTH = 8
PALETTE = ("red", "green", "yellow", "blue", "magenta", "cyan")


def _label_cell(pid) -> str:
    label = str(pid)
    padding = " " * ((CELL_WIDTH - len(label)) // 2)
    return f"{padding}{label}{padding}"


def _tick_line(slices: List[ScheduledSlice]) -> str:
    # Each start tick sits under the bar that opens its cell.
    marks = "".join(f"{sl.start_time:<{CELL_WIDTH}}" for sl in slices)
    return marks + str(slices[-1].end_time)


def assign_colors(slices: List[ScheduledSlice]) -> Dict[int, str]:
    """Map each PID to a palette colour in order of first appearance."""
    colors: Dict[int, str] = {}
    for sl in slices:
        if sl.pid not in colors:
            colors[sl.pid] = PALETTE[len(colors) % len(PALETTE)]
    return colors


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart: one centred cell per slice, boundary ticks below.
    Slices are shown in the order the scheduler emitted them.
    """
    if not slices:
        return "(no execution)"

    line = "|" + "".join(_label_cell(sl.pid) + "|" for sl in slices)
    return "\n".join([line, _tick_line(slices)])


def build_rich_gantt(slices: List[ScheduledSlice]) -> Panel:
    """
    Build a Rich Panel holding the Gantt chart with one colour per process.
    """
    if not slices:
        return Panel("No execution", title="Gantt schedule", title_align="left")

    colors = assign_colors(slices)
    labels = Text("|")
    for sl in slices:
        labels.append(_label_cell(sl.pid), style=f"bold {colors[sl.pid]}")
        labels.append("|")

    ticks = Text(_tick_line(slices), style="dim")

    return Panel.fit(Group(labels, ticks), title="Gantt schedule", title_align="left")
