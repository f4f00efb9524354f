"""Tests for the spread check and the slot scorer."""
import math

from lesson_timetable.models import (Coach, CoachPreferences, MaxCoaches,
    ScheduleEntry, Student, StudentSpread)
from lesson_timetable.solver.scoring import (INFEASIBLE, can_place_on_day,
    score_slot)
from lesson_timetable.solver.state import SchedulingState


def _coach(cid="peter", **prefs) -> Coach:
    return Coach(id=cid, name=cid.title(), preferences=CoachPreferences(**prefs))


def _student(sid="s1", coach_id="peter", **kw) -> Student:
    return Student(id=sid, name=sid.upper(), coach_id=coach_id, **kw)


def _entry(day, slot, coach_id="peter", student_id="other") -> ScheduleEntry:
    return ScheduleEntry(day, slot, coach_id, student_id, student_id)


# ── spread check ──────────────────────────────────────────────────────────────

def test_spread_disabled_or_no_lessons_always_ok() -> None:
    assert can_place_on_day("tue", ["mon"], None)
    assert can_place_on_day("tue", ["mon"], StudentSpread(enabled=False))
    assert can_place_on_day("mon", [], StudentSpread(min_days_between=4))


def test_spread_distance_is_inclusive() -> None:
    one = StudentSpread(min_days_between=1)
    assert not can_place_on_day("mon", ["mon"], one)
    assert not can_place_on_day("tue", ["mon"], one)
    assert can_place_on_day("wed", ["mon"], one)

    two = StudentSpread(min_days_between=2)
    assert not can_place_on_day("wed", ["mon"], two)
    assert can_place_on_day("thu", ["mon"], two)
    assert not can_place_on_day("thu", ["mon", "fri"], two)


# ── scorer ────────────────────────────────────────────────────────────────────

def test_base_score_without_constraints() -> None:
    state = SchedulingState([])          # capacity 7 everywhere
    s, c = _student(), _coach()
    # 1000 + 7*10 spare + 15 midweek + 5 breakfast
    assert score_slot(s, c, "tue", "breakfast", state) == 1090
    # 1000 + 70, no midweek, no slot bonus
    assert score_slot(s, c, "mon", "rest", state) == 1070
    assert score_slot(s, c, "fri", "fruit", state) == 1073


def test_capacity_full_is_infeasible() -> None:
    state = SchedulingState([MaxCoaches(value=1)])
    state.place(_entry("tue", "breakfast", coach_id="wojtek"))
    assert score_slot(_student(), _coach(), "tue", "breakfast", state) == INFEASIBLE


def test_coach_double_booking_is_infeasible() -> None:
    state = SchedulingState([])
    state.place(_entry("tue", "breakfast"))
    assert score_slot(_student(), _coach(), "tue", "breakfast", state) == INFEASIBLE


def test_coach_daily_cap_is_infeasible() -> None:
    state = SchedulingState([])
    state.place(_entry("mon", "breakfast"))
    coach = _coach(max_sessions_per_day=1)
    assert score_slot(_student(), coach, "mon", "fruit", state) == INFEASIBLE
    assert score_slot(_student(), coach, "tue", "fruit", state) > INFEASIBLE


def test_student_unavailable_is_infeasible() -> None:
    state = SchedulingState([])
    s = _student(unavailable_slots={("wed", "rest")})
    assert score_slot(s, _coach(), "wed", "rest", state) == INFEASIBLE
    assert score_slot(s, _coach(), "wed", "fruit", state) > INFEASIBLE


def test_student_already_in_cell_is_infeasible() -> None:
    state = SchedulingState([])
    state.place(_entry("wed", "rest", coach_id="wojtek", student_id="s1"))
    assert score_slot(_student(), _coach(), "wed", "rest", state) == INFEASIBLE


def test_preference_adjustments() -> None:
    state = SchedulingState([])
    s = _student()
    plain = score_slot(s, _coach(), "mon", "rest", state)
    assert score_slot(s, _coach(preferred_slots={"rest"}), "mon", "rest", state) == plain + 50
    assert score_slot(s, _coach(avoid_slots={"rest"}), "mon", "rest", state) == plain - 100
    assert score_slot(s, _coach(preferred_days={"mon"}), "mon", "rest", state) == plain + 30
    assert score_slot(s, _coach(avoid_days={"mon"}), "mon", "rest", state) == plain - 80
    both = _coach(preferred_slots={"rest"}, avoid_slots={"rest"})
    assert score_slot(s, both, "mon", "rest", state) == plain - 50


def test_coach_day_load_and_spare_capacity() -> None:
    state = SchedulingState([])
    s = _student()
    before = score_slot(s, _coach(), "tue", "fruit", state)
    state.place(_entry("tue", "breakfast"))
    # one lesson already that day; tue-fruit usage unchanged
    assert score_slot(s, _coach(), "tue", "fruit", state) == before - 20

    state.place(_entry("tue", "fruit", coach_id="wojtek"))
    # one fewer free place in the cell as well
    assert score_slot(s, _coach(), "tue", "fruit", state) == before - 30


def test_spread_penalty_not_rejection() -> None:
    state = SchedulingState([])
    state.place(_entry("mon", "breakfast", coach_id="wojtek", student_id="s1"))
    s = _student()
    spread = StudentSpread(min_days_between=1)
    free = score_slot(s, _coach(), "tue", "rest", state)
    penalised = score_slot(s, _coach(), "tue", "rest", state, spread)
    assert penalised == free - 200
    assert not math.isinf(penalised)


def test_hard_rules_dominate_soft_bonuses() -> None:
    state = SchedulingState([])
    coach = _coach(preferred_slots={"rest"}, preferred_days={"thu"})
    s = _student(unavailable_slots={("thu", "rest")})
    assert score_slot(s, coach, "thu", "rest", state) == INFEASIBLE
