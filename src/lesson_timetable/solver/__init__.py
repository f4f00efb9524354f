"""Greedy weekly lesson scheduler: capacity, scoring, assignment."""

from lesson_timetable.solver.api import solve
from lesson_timetable.solver.engine import schedule
from lesson_timetable.solver.precheck import PrecheckError, ensure_ok, precheck
from lesson_timetable.solver.result import ScheduleResult, Shortfall

__all__ = ["PrecheckError", "ScheduleResult", "Shortfall", "ensure_ok",
           "precheck", "schedule", "solve"]
