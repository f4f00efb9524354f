"""
Data model layer for the weekly lesson timetable scheduler.

Every domain object is a plain Python dataclass. The @dataclass decorator
generates __init__, __repr__ and __eq__ automatically from field declarations.

Reference: Python Software Foundation. "dataclasses — Data Classes."
https://docs.python.org/3/library/dataclasses.html

Design note — flat entities with ID references:
  Students are top-level objects that point at their coach through coach_id.
  Coaches do not embed their students, so a roster can be re-assigned by
  editing one field.

Design note — constraints as a tagged union:
  Each constraint kind is its own dataclass carrying a typed payload
  (MaxCoaches.value, ReduceSlot.day/slot/reduction, ...). The class attribute
  `kind` is the tag written to and read from JSON.

Week shape:
  5 days x 3 named slots = 15 cells per coach per week.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Set, Tuple, Union

DAYS:  Tuple[str, ...] = ("mon", "tue", "wed", "thu", "fri")
SLOTS: Tuple[str, ...] = ("breakfast", "fruit", "rest")

DAY_INDEX: Dict[str, int] = {d: i for i, d in enumerate(DAYS)}

DAY_LABELS: Dict[str, str] = {
    "mon": "Monday",
    "tue": "Tuesday",
    "wed": "Wednesday",
    "thu": "Thursday",
    "fri": "Friday",
}
SLOT_LABELS: Dict[str, str] = {"breakfast": "Breakfast", "fruit": "Fruit", "rest": "Rest"}
SLOT_TIMES:  Dict[str, str] = {
    "breakfast": "7:30-8:15am",
    "fruit":     "10:30-11:15am",
    "rest":      "2:00-2:45pm",
}

Cell = Tuple[str, str]   # (day, slot)

ALL_CELLS: Tuple[Cell, ...] = tuple((d, s) for d in DAYS for s in SLOTS)


def cell_key(day: str, slot: str) -> str:
    """'mon', 'rest' -> 'mon-rest' (the spelling used in JSON)."""
    return f"{day}-{slot}"


def parse_cell(key: str) -> Cell:
    day, sep, slot = str(key).strip().lower().partition("-")
    if not sep or day not in DAY_INDEX or slot not in SLOTS:
        raise ValueError(f"Not a valid day-slot cell: {key!r}")
    return day, slot


def cell_label(day: str, slot: str) -> str:
    return f"{DAY_LABELS.get(day, day)} {SLOT_LABELS.get(slot, slot)}"


# ── people ────────────────────────────────────────────────────────────────────

@dataclass
class CoachPreferences:
    preferred_slots:      Set[str] = field(default_factory=set)
    avoid_slots:          Set[str] = field(default_factory=set)
    preferred_days:       Set[str] = field(default_factory=set)
    avoid_days:           Set[str] = field(default_factory=set)
    max_sessions_per_day: int      = 3


@dataclass
class Coach:
    id:   str
    name: str
    preferences: CoachPreferences = field(default_factory=CoachPreferences)
    color: str = ""   # display hint only


@dataclass
class Student:
    id:       str
    name:     str
    coach_id: str
    lessons_per_week:  int       = 1
    unavailable_slots: Set[Cell] = field(default_factory=set)


# ── constraints ───────────────────────────────────────────────────────────────

@dataclass
class _ConstraintBase:
    id:          str  = ""
    description: str  = ""
    enabled:     bool = True
    # Ranking hint for humans. The scheduler does not sort by it.
    priority:    int  = 0


@dataclass
class MaxCoaches(_ConstraintBase):
    """Global cap on concurrent lessons (one per coach) in any slot."""
    kind: ClassVar[str] = "max_coaches"
    value: int = 6


@dataclass
class ReduceSlot(_ConstraintBase):
    """Cut one cell's capacity by a percentage; 100 blocks it entirely.

    day/slot/reduction are stored as read. A misspelt day or a reduction that
    is not a number in 0..100 simply never matches anything.
    """
    kind: ClassVar[str] = "reduce_slot"
    day:       str             = ""
    slot:      str             = ""
    reduction: Optional[float] = None


@dataclass
class AvoidSlot(_ConstraintBase):
    kind: ClassVar[str] = "avoid_slot"
    day:  str = ""
    slot: str = ""


@dataclass
class CoachPreference(_ConstraintBase):
    kind: ClassVar[str] = "coach_preference"
    coach_id: str = ""


@dataclass
class StudentSpread(_ConstraintBase):
    """Discourage a student's lessons landing within N days of each other."""
    kind: ClassVar[str] = "student_spread"
    min_days_between: int = 1


@dataclass
class CoachBalance(_ConstraintBase):
    kind: ClassVar[str] = "coach_balance"
    max_variance: int = 1


Constraint = Union[MaxCoaches, ReduceSlot, AvoidSlot, CoachPreference,
                   StudentSpread, CoachBalance]

CONSTRAINT_TYPES: Dict[str, type] = {
    cls.kind: cls
    for cls in (MaxCoaches, ReduceSlot, AvoidSlot, CoachPreference,
                StudentSpread, CoachBalance)
}

DEFAULT_MAX_COACHES  = 6
# Used when no max_coaches constraint is enabled: one more than the default.
FALLBACK_MAX_COACHES = DEFAULT_MAX_COACHES + 1


def default_constraints() -> List[Constraint]:
    """The stock rule set; a fresh list on every call so callers may toggle."""
    return [
        MaxCoaches(id="c1", description="Maximum 6 coaches coaching at any one time",
                   value=DEFAULT_MAX_COACHES, priority=100),
        ReduceSlot(id="c2", description="Reduce Monday breakfast (boys return late every other week)",
                   day="mon", slot="breakfast", reduction=50, priority=90),
        ReduceSlot(id="c3", description="Reduce Wednesday rest (sport day)",
                   day="wed", slot="rest", reduction=75, priority=90),
        ReduceSlot(id="c4", description="Reduce Friday fruit (boys leave early)",
                   day="fri", slot="fruit", reduction=75, priority=90),
        ReduceSlot(id="c5", description="No Friday rest lessons (boys leave early)",
                   day="fri", slot="rest", reduction=100, priority=100),
        StudentSpread(id="c6", description="Spread student lessons across different days",
                      min_days_between=1, priority=70),
        CoachBalance(id="c7", description="Balance lessons evenly across coaches per day",
                     max_variance=1, priority=60),
    ]


# ── output ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ScheduleEntry:
    day:          str
    slot:         str
    coach_id:     str
    student_id:   str
    student_name: str
    # Manual pin; never set by the automatic scheduler.
    locked:       bool = False


# ── run configuration ─────────────────────────────────────────────────────────

@dataclass
class ScoreWeights:
    """Soft-preference constants for the slot scorer. All must be >= 0."""
    base:              int = 1000
    preferred_slot:    int = 50
    avoid_slot:        int = 100
    preferred_day:     int = 30
    avoid_day:         int = 80
    coach_day_load:    int = 20    # per lesson the coach already has that day
    spare_capacity:    int = 10    # per free place left in the cell
    midweek:           int = 15    # tue/wed/thu
    student_spread:    int = 200
    breakfast:         int = 5
    fruit:             int = 3
    rest:              int = 0


@dataclass
class RunParams:
    passes: int           = 3
    # None = fresh randomness for passes 2+.
    seed:   Optional[int] = None


@dataclass
class Config:
    meta:           Dict[str, Any]      = field(default_factory=dict)
    coaches:        List[Coach]         = field(default_factory=list)
    students:       List[Student]       = field(default_factory=list)
    constraints:    List[Constraint]    = field(default_factory=default_constraints)
    locked_entries: List[ScheduleEntry] = field(default_factory=list)
    weights:        ScoreWeights        = field(default_factory=ScoreWeights)
    run:            RunParams           = field(default_factory=RunParams)

    def validate(self) -> None:
        if self.run.passes < 1:
            raise ValueError("run.passes must be >= 1")
        if min(vars(self.weights).values()) < 0:
            raise ValueError("All score weights must be >= 0")

    def get_coach(self, cid: str) -> Optional[Coach]:
        return next((c for c in self.coaches if c.id == cid), None)

    def get_student(self, sid: str) -> Optional[Student]:
        return next((s for s in self.students if s.id == sid), None)

    def students_of(self, cid: str) -> List[Student]:
        return [s for s in self.students if s.coach_id == cid]
