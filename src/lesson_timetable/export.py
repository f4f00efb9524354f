"""
Tabular text export of a schedule: one row per lesson.

Columns: Coach, Day, Slot, Time, Student. Rows are grouped by coach in roster
order, then by day and slot in week order.

Reference: Python csv docs — https://docs.python.org/3/library/csv.html
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import List, Sequence

from lesson_timetable.models import (DAY_INDEX, DAY_LABELS, SLOT_LABELS,
    SLOT_TIMES, SLOTS, Coach, ScheduleEntry)

HEADER = ["Coach", "Day", "Slot", "Time", "Student"]


def rows(entries: Sequence[ScheduleEntry], coaches: Sequence[Coach]) -> List[List[str]]:
    coach_order = {c.id: i for i, c in enumerate(coaches)}
    coach_name  = {c.id: c.name for c in coaches}
    slot_order  = {s: i for i, s in enumerate(SLOTS)}

    ordered = sorted(
        entries,
        key=lambda e: (coach_order.get(e.coach_id, len(coach_order)),
                       DAY_INDEX.get(e.day, 99),
                       slot_order.get(e.slot, 99)),
    )
    return [
        [
            coach_name.get(e.coach_id, e.coach_id),
            DAY_LABELS.get(e.day, e.day),
            SLOT_LABELS.get(e.slot, e.slot),
            SLOT_TIMES.get(e.slot, ""),
            e.student_name,
        ]
        for e in ordered
    ]


def write_csv(entries: Sequence[ScheduleEntry], coaches: Sequence[Coach],
              path: str | Path) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(HEADER)
        w.writerows(rows(entries, coaches))
