"""
Summary figures derived from a finished schedule, for display to the admin.

unscheduled_students only lists students with no lessons at all; shortfalls
carries the per-student needed/scheduled counts for anyone below target.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Sequence

from lesson_timetable.models import ALL_CELLS, Coach, ScheduleEntry, Student, cell_label
from lesson_timetable.solver.result import Shortfall


@dataclass
class ScheduleStats:
    total_lessons:        int
    unscheduled_students: List[str]       = field(default_factory=list)
    coach_utilization:    Dict[str, int]  = field(default_factory=dict)
    slot_utilization:     Dict[str, int]  = field(default_factory=dict)
    shortfalls:           List[Shortfall] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def report(entries: Sequence[ScheduleEntry],
           students: Sequence[Student],
           coaches: Sequence[Coach]) -> ScheduleStats:
    per_student = Counter(e.student_id for e in entries)
    per_coach   = Counter(e.coach_id for e in entries)
    per_cell    = Counter((e.day, e.slot) for e in entries)

    return ScheduleStats(
        total_lessons        = len(entries),
        unscheduled_students = [s.name for s in students if per_student[s.id] == 0],
        coach_utilization    = {c.name: per_coach[c.id] for c in coaches},
        slot_utilization     = {cell_label(d, s): per_cell[(d, s)] for d, s in ALL_CELLS},
        shortfalls           = [
            Shortfall(s.id, s.name, s.lessons_per_week, per_student[s.id])
            for s in students
            if per_student[s.id] < s.lessons_per_week
        ],
    )
