"""Tests for precheck layer."""
import pytest

from lesson_timetable.models import (ALL_CELLS, Coach, CoachPreferences, Config,
    MaxCoaches, ReduceSlot, ScheduleEntry, Student)
from lesson_timetable.solver.precheck import PrecheckError, ensure_ok, precheck


def _cfg_ok() -> Config:
    cfg = Config()
    cfg.coaches  = [Coach(id="peter", name="Peter"), Coach(id="andy", name="Andy")]
    cfg.students = [
        Student(id="S1", name="James", coach_id="peter", lessons_per_week=2),
        Student(id="S2", name="Harry", coach_id="andy"),
    ]
    return cfg


def test_ok_config_passes() -> None:
    errors, warnings = precheck(_cfg_ok())
    assert errors == []
    assert warnings == []


def test_unknown_coach_is_error() -> None:
    cfg = _cfg_ok()
    cfg.students.append(Student(id="S3", name="Lost", coach_id="nobody"))
    errors, _ = precheck(cfg)
    assert any("nobody" in e for e in errors)


def test_zero_daily_cap_is_error() -> None:
    cfg = _cfg_ok()
    cfg.coaches[0].preferences.max_sessions_per_day = 0
    errors, _ = precheck(cfg)
    assert any("max_sessions_per_day" in e for e in errors)


def test_negative_lessons_is_error() -> None:
    cfg = _cfg_ok()
    cfg.students[0].lessons_per_week = -1
    errors, _ = precheck(cfg)
    assert any("negative" in e for e in errors)


def test_duplicate_student_ids_is_error() -> None:
    cfg = _cfg_ok()
    cfg.students.append(Student(id="S1", name="Twin", coach_id="andy"))
    errors, _ = precheck(cfg)
    assert any("Duplicate student" in e for e in errors)


def test_bad_locked_cell_is_error() -> None:
    cfg = _cfg_ok()
    cfg.locked_entries = [ScheduleEntry("sat", "rest", "peter", "S1", "James", locked=True)]
    errors, _ = precheck(cfg)
    assert any("sat-rest" in e for e in errors)


def test_fully_blocked_student_warns() -> None:
    cfg = _cfg_ok()
    cfg.students[1].unavailable_slots = set(ALL_CELLS)
    errors, warnings = precheck(cfg)
    assert errors == []
    assert any("S2" in w and "every slot" in w for w in warnings)


def test_coach_weekly_ceiling_warns() -> None:
    cfg = _cfg_ok()
    cfg.coaches[1].preferences = CoachPreferences(max_sessions_per_day=1)
    cfg.students[1].lessons_per_week = 6
    _, warnings = precheck(cfg)
    assert any("andy" in w and "at most 5" in w for w in warnings)


def test_capacity_warning() -> None:
    cfg = _cfg_ok()
    cfg.constraints = [MaxCoaches(id="c1", value=0)]
    _, warnings = precheck(cfg)
    assert any("Not enough capacity" in w for w in warnings)


def test_preference_overlap_warns() -> None:
    cfg = _cfg_ok()
    cfg.coaches[0].preferences.preferred_slots = {"rest"}
    cfg.coaches[0].preferences.avoid_slots = {"rest"}
    _, warnings = precheck(cfg)
    assert any("both prefers and avoids" in w for w in warnings)


def test_malformed_constraint_warns_but_does_not_block() -> None:
    cfg = _cfg_ok()
    cfg.constraints.append(ReduceSlot(id="oops", day="monday", slot="rest", reduction=50))
    errors, warnings = precheck(cfg)
    assert errors == []
    assert any("oops" in w for w in warnings)


def test_no_max_coaches_warns() -> None:
    cfg = _cfg_ok()
    cfg.constraints = []
    _, warnings = precheck(cfg)
    assert any("max_coaches" in w for w in warnings)


def test_ensure_ok_raises_on_errors() -> None:
    cfg = _cfg_ok()
    cfg.students[0].coach_id = "nobody"
    with pytest.raises(PrecheckError):
        ensure_ok(cfg)
