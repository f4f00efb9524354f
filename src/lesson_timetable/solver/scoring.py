"""
Feasibility and desirability of placing one lesson in one cell.

score_slot() returns -inf when a hard rule is broken:
  1. the cell is already at capacity
  2. the coach is already teaching in the cell
  3. the coach has reached max_sessions_per_day on that day
  4. the student is unavailable in the cell
  5. the student already has a lesson in the cell (only via locked entries)

Otherwise it returns ScoreWeights.base plus independent adjustments, so the
order in which they are applied does not matter. A broken spread rule is a
penalty, not a rejection.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..models import (DAY_INDEX, Coach, Constraint, ScoreWeights, Student,
    StudentSpread)
from .state import SchedulingState

INFEASIBLE = float("-inf")

_MIDWEEK = frozenset({"tue", "wed", "thu"})


def active_spread(constraints: Iterable[Constraint]) -> Optional[StudentSpread]:
    return next(
        (c for c in constraints if isinstance(c, StudentSpread) and c.enabled),
        None,
    )


def can_place_on_day(day: str, used_days: Sequence[str],
                     spread: Optional[StudentSpread]) -> bool:
    """False when `day` is within min_days_between of a day already used."""
    if spread is None or not spread.enabled or not used_days:
        return True
    idx = DAY_INDEX[day]
    for used in used_days:
        if abs(idx - DAY_INDEX[used]) <= spread.min_days_between:
            return False
    return True


def slot_bonus(slot: str, weights: ScoreWeights) -> int:
    return {"breakfast": weights.breakfast,
            "fruit":     weights.fruit,
            "rest":      weights.rest}.get(slot, 0)


def score_slot(student: Student, coach: Coach, day: str, slot: str,
               state: SchedulingState,
               spread: Optional[StudentSpread] = None,
               weights: Optional[ScoreWeights] = None) -> float:
    w = weights or ScoreWeights()
    prefs = coach.preferences

    capacity = state.capacity(day, slot)
    usage    = state.usage(day, slot)
    if usage >= capacity:
        return INFEASIBLE
    if state.coach_busy(coach.id, day, slot):
        return INFEASIBLE
    coach_load = state.coach_load(coach.id, day)
    if coach_load >= prefs.max_sessions_per_day:
        return INFEASIBLE
    if (day, slot) in student.unavailable_slots:
        return INFEASIBLE
    if state.student_busy(student.id, day, slot):
        return INFEASIBLE

    score = w.base
    if slot in prefs.preferred_slots:
        score += w.preferred_slot
    if slot in prefs.avoid_slots:
        score -= w.avoid_slot
    if day in prefs.preferred_days:
        score += w.preferred_day
    if day in prefs.avoid_days:
        score -= w.avoid_day

    score -= coach_load * w.coach_day_load
    score += (capacity - usage) * w.spare_capacity

    if day in _MIDWEEK:
        score += w.midweek
    if not can_place_on_day(day, state.days_of(student.id), spread):
        score -= w.student_spread
    score += slot_bonus(slot, w)
    return float(score)
