"""
Greedy multi-pass assignment engine.

Each pass walks the students in order and, for every student still short of
lessons_per_week, places one lesson in the best-scoring feasible cell
(days Mon->Fri outer, slots breakfast/fruit/rest inner; the first cell seen
wins a tie). Pass 1 uses a fixed ordering: most lessons still needed first,
then coach id compared case-insensitively. Later passes reshuffle that
ordering with the supplied random source to fill gaps the first pass left.
Passes only ever add entries.

The whole run works on one SchedulingState and does no I/O.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..models import (ALL_CELLS, Coach, Constraint, ScheduleEntry, ScoreWeights,
    Student)
from .result import COMPLETE, EMPTY, PARTIAL, ScheduleResult, Shortfall
from .scoring import INFEASIBLE, active_spread, score_slot
from .state import SchedulingState

log = logging.getLogger(__name__)

DEFAULT_PASSES = 3
EMPTY_ROSTER_MESSAGE = "Please add students to coaches first."


def initial_order(students: Sequence[Student],
                  state: SchedulingState) -> List[Student]:
    """Most lessons still needed first, then coach id ignoring case. Stable on ties."""
    return sorted(
        students,
        key=lambda s: (-(s.lessons_per_week - state.lessons_of(s.id)),
                       s.coach_id.casefold(), s.coach_id),
    )


def best_cell(student: Student, coach: Coach, state: SchedulingState,
              constraints: Sequence[Constraint],
              weights: ScoreWeights) -> Optional[Tuple[str, str, float]]:
    spread = active_spread(constraints)
    best: Optional[Tuple[str, str, float]] = None
    for day, slot in ALL_CELLS:
        score = score_slot(student, coach, day, slot, state, spread, weights)
        if score > INFEASIBLE and (best is None or score > best[2]):
            best = (day, slot, score)
    return best


def seed_locked(entries: Iterable[ScheduleEntry], state: SchedulingState,
                students: Dict[str, Student], coaches: Dict[str, Coach]) -> List[str]:
    """Place pinned entries before scoring starts. Returns diagnostics."""
    notes: List[str] = []
    for e in entries:
        coach = coaches.get(e.coach_id)
        if e.student_id not in students or coach is None:
            notes.append(
                f"Locked entry {e.day}-{e.slot} for '{e.student_id}' dropped: "
                f"unknown student or coach '{e.coach_id}'."
            )
            continue
        if state.usage(e.day, e.slot) >= state.capacity(e.day, e.slot):
            notes.append(f"Locked entry {e.day}-{e.slot} for '{e.student_id}' dropped: slot is full.")
            continue
        if state.coach_busy(e.coach_id, e.day, e.slot):
            notes.append(
                f"Locked entry {e.day}-{e.slot} for '{e.student_id}' dropped: "
                f"coach '{e.coach_id}' already pinned there."
            )
            continue
        if state.coach_load(e.coach_id, e.day) >= coach.preferences.max_sessions_per_day:
            notes.append(
                f"Locked entry {e.day}-{e.slot} for '{e.student_id}' dropped: "
                f"coach '{e.coach_id}' is at max_sessions_per_day."
            )
            continue
        name = e.student_name or students[e.student_id].name
        state.place(ScheduleEntry(e.day, e.slot, e.coach_id, e.student_id, name, locked=True))
    return notes


def schedule(students: Sequence[Student],
             coaches: Sequence[Coach],
             constraints: Sequence[Constraint],
             *,
             weights: Optional[ScoreWeights] = None,
             passes: int = DEFAULT_PASSES,
             rng: Optional[random.Random] = None,
             seed: Optional[int] = None,
             locked_entries: Iterable[ScheduleEntry] = ()) -> ScheduleResult:
    """Build a week's timetable. Never raises for an under-scheduled roster."""
    if not students:
        log.info("No students to schedule; nothing to do.")
        return ScheduleResult(status=EMPTY, diagnostics=[EMPTY_ROSTER_MESSAGE])

    if passes < 1:
        raise ValueError("passes must be >= 1")

    coach_map = {c.id: c for c in coaches}
    missing = sorted({s.coach_id for s in students if s.coach_id not in coach_map})
    if missing:
        raise ValueError(f"Students reference unknown coach id(s): {missing}")

    weights     = weights or ScoreWeights()
    rng         = rng or random.Random(seed)
    constraints = list(constraints)
    started     = time.perf_counter()

    state = SchedulingState(constraints)
    diagnostics = seed_locked(locked_entries, state,
                              {s.id: s for s in students}, coach_map)

    log.info("Scheduling %d student(s) across %d coach(es), %d pass(es)",
             len(students), len(coaches), passes)

    order = initial_order(students, state)
    placed_after_pass: List[int] = []

    for pass_no in range(passes):
        this_pass = order if pass_no == 0 else rng.sample(order, len(order))
        for student in this_pass:
            if state.lessons_of(student.id) >= student.lessons_per_week:
                continue
            coach = coach_map[student.coach_id]
            best = best_cell(student, coach, state, constraints, weights)
            if best is None:
                continue
            day, slot, score = best
            state.place(ScheduleEntry(day, slot, coach.id, student.id, student.name))
            log.debug("pass %d: %s -> %s %s with %s (score %.0f)",
                      pass_no + 1, student.name, day, slot, coach.name, score)
        placed_after_pass.append(len(state.entries))

    unscheduled = [
        Shortfall(student_id=s.id, name=s.name,
                  needed=s.lessons_per_week, scheduled=state.lessons_of(s.id))
        for s in students
        if state.lessons_of(s.id) < s.lessons_per_week
    ]
    if unscheduled:
        log.warning("Unscheduled students: %s",
                    ", ".join(f"{u.name} ({u.scheduled}/{u.needed})" for u in unscheduled))

    total_required = sum(max(s.lessons_per_week, 0) for s in students)
    result = ScheduleResult(
        status      = PARTIAL if unscheduled else COMPLETE,
        entries     = list(state.entries),
        unscheduled = unscheduled,
        diagnostics = diagnostics,
        stats       = {
            "placed_after_pass": placed_after_pass,
            "total_required":    total_required,
            "total_placed":      sum(1 for e in state.entries if not e.locked),
            "locked":            sum(1 for e in state.entries if e.locked),
            "wall_time_s":       round(time.perf_counter() - started, 3),
        },
    )
    log.info("Placed %d lesson(s); status %s", len(result.entries), result.status)
    return result
