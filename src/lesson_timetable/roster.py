"""
Roster suppliers: turn the ways an admin hands over students into Student
objects the scheduler can take.

  parse_student_lines  one name per line, optionally "Name, 2" for lessons
  load_student_file    the same, read from a UTF-8 text file
  students_from_bookings
                       private-coaching bookings for one venue, shared out
                       across the coaches in order
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Sequence

from lesson_timetable.models import Coach, Student


def _next_index(coach_id: str, existing: Iterable[Student]) -> int:
    prefix = f"{coach_id}-"
    used = [
        int(s.id[len(prefix):]) for s in existing
        if s.id.startswith(prefix) and s.id[len(prefix):].isdigit()
    ]
    return max(used, default=0) + 1


def parse_student_lines(text: str, coach_id: str,
                        lessons_per_week: int = 1,
                        existing: Sequence[Student] = ()) -> List[Student]:
    """Blank lines are skipped. ids are '<coach_id>-<n>', continuing after `existing`."""
    start = _next_index(coach_id, existing)
    students: List[Student] = []
    for line in text.splitlines():
        name, sep, count = line.strip().rpartition(",")
        if not sep:
            name, count = count, ""
        name = name.strip()
        if not name:
            continue
        lessons = lessons_per_week
        if count.strip():
            try:
                lessons = int(count)
            except ValueError:
                # "Smith, John" style: the comma is part of the name
                name, lessons = line.strip(), lessons_per_week
        if lessons < 0:
            raise ValueError(f"Negative lesson count for {name!r}")
        students.append(Student(
            id               = f"{coach_id}-{start + len(students)}",
            name             = name,
            coach_id         = coach_id,
            lessons_per_week = lessons,
        ))
    return students


def load_student_file(path: str | Path, coach_id: str,
                      lessons_per_week: int = 1,
                      existing: Sequence[Student] = ()) -> List[Student]:
    text = Path(path).read_text(encoding="utf-8")
    return parse_student_lines(text, coach_id, lessons_per_week, existing)


def students_from_bookings(bookings: Iterable[Mapping[str, Any]],
                           coaches: Sequence[Coach],
                           venue: str = "Ludgrove",
                           stream: str = "Private Coaching",
                           lessons_per_week: int = 1) -> List[Student]:
    """
    Each coach takes ceil(n / len(coaches)) consecutive bookings in turn, so
    the last coaches may get fewer or none. Bookings need 'child_name',
    'venue' and 'stream'; an 'id' is used for the student id when present.
    """
    matching = [
        b for b in bookings
        if b.get("venue") == venue and b.get("stream") == stream
    ]
    if not matching or not coaches:
        return []

    per_coach = math.ceil(len(matching) / len(coaches))
    students: List[Student] = []
    for i, booking in enumerate(matching):
        coach = coaches[i // per_coach]
        students.append(Student(
            id               = str(booking.get("id") or f"{coach.id}-b{i + 1}"),
            name             = str(booking.get("child_name", "")).strip() or "N/A",
            coach_id         = coach.id,
            lessons_per_week = lessons_per_week,
        ))
    return students
