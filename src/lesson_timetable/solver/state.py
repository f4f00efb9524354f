"""
Mutable accumulator for one scheduling run.

Every counter the scorer reads (per-cell usage, per-coach-per-day load,
per-student lesson counts and used days) lives here and is updated only
through place(), so the entries list and the counters cannot drift apart.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from typing import Dict, Iterable, List, Set, Tuple

from ..models import ALL_CELLS, Constraint, ScheduleEntry
from .capacity import slot_capacity


class SchedulingState:
    def __init__(self, constraints: Iterable[Constraint]) -> None:
        constraints = list(constraints)
        self.capacities: Dict[Tuple[str, str], int] = {
            (d, s): slot_capacity(d, s, constraints) for d, s in ALL_CELLS
        }
        self.entries: List[ScheduleEntry] = []
        self.slot_usage:      Counter = Counter()   # (day, slot) -> n
        self.coach_day_count: Counter = Counter()   # (coach_id, day) -> n
        self.student_lessons: Counter = Counter()   # student_id -> n
        self.student_days: Dict[str, List[str]] = defaultdict(list)
        self._coach_cells:   Set[Tuple[str, str, str]] = set()
        self._student_cells: Set[Tuple[str, str, str]] = set()

    def capacity(self, day: str, slot: str) -> int:
        return self.capacities.get((day, slot), 0)

    def usage(self, day: str, slot: str) -> int:
        return self.slot_usage[(day, slot)]

    def coach_busy(self, coach_id: str, day: str, slot: str) -> bool:
        return (coach_id, day, slot) in self._coach_cells

    def student_busy(self, student_id: str, day: str, slot: str) -> bool:
        return (student_id, day, slot) in self._student_cells

    def coach_load(self, coach_id: str, day: str) -> int:
        return self.coach_day_count[(coach_id, day)]

    def lessons_of(self, student_id: str) -> int:
        return self.student_lessons[student_id]

    def days_of(self, student_id: str) -> List[str]:
        return self.student_days[student_id]

    def place(self, entry: ScheduleEntry) -> None:
        self.entries.append(entry)
        self.slot_usage[(entry.day, entry.slot)] += 1
        self.coach_day_count[(entry.coach_id, entry.day)] += 1
        self.student_lessons[entry.student_id] += 1
        self.student_days[entry.student_id].append(entry.day)
        self._coach_cells.add((entry.coach_id, entry.day, entry.slot))
        self._student_cells.add((entry.student_id, entry.day, entry.slot))
