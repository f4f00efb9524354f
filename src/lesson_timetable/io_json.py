"""
JSON serialisation / deserialisation for Config objects and run results.

Uses only the Python standard-library json module. Structural problems in the
roster (missing keys, wrong container types, duplicate ids) raise ConfigError.
Constraint entries are user-edited data and are read leniently: an unknown
type is skipped with a logged warning, and a malformed payload is loaded as
is so that the capacity calculator treats it as non-matching.

Cells are written as "day-slot" strings, e.g. "fri-rest".

Reference: Python docs — json
https://docs.python.org/3/library/json.html
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from lesson_timetable.models import (CONSTRAINT_TYPES, AvoidSlot, Coach,
    CoachBalance, CoachPreference, CoachPreferences, Config, Constraint,
    MaxCoaches, ReduceSlot, RunParams, ScheduleEntry, ScoreWeights, Student,
    StudentSpread, cell_key, default_constraints, parse_cell)
from lesson_timetable.solver.result import ScheduleResult

log = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when the config JSON is structurally invalid."""


def _require(obj: Dict[str, Any], key: str, ctx: str) -> Any:
    if key not in obj:
        raise ConfigError(f"Missing required key '{key}' in {ctx}")
    return obj[key]


def _as_list(obj: Any, ctx: str) -> List[Any]:
    if not isinstance(obj, list):
        raise ConfigError(f"Expected a JSON array in {ctx}, got {type(obj).__name__}")
    return obj


def _as_dict(obj: Any, ctx: str) -> Dict[str, Any]:
    if not isinstance(obj, dict):
        raise ConfigError(
            f"Expected a JSON object in {ctx}, got {type(obj).__name__}"
        )
    return obj


def _as_int(obj: Any, ctx: str) -> int:
    try:
        return int(obj)
    except (TypeError, ValueError):
        raise ConfigError(f"Expected an integer in {ctx}, got {obj!r}") from None


def _check_unique_ids(items: list, ctx: str) -> None:
    seen: set = set()
    dupes: set = set()
    for item in items:
        item_id = getattr(item, "id", None)
        if not item_id:
            raise ConfigError(f"Empty or missing 'id' in {ctx}")
        if item_id in seen:
            dupes.add(item_id)
        seen.add(item_id)
    if dupes:
        raise ConfigError(f"Duplicate ids in {ctx}: {sorted(dupes)}")


def _cells(raw: Any, ctx: str) -> set:
    cells = set()
    for i, key in enumerate(_as_list(raw, ctx)):
        try:
            cells.add(parse_cell(key))
        except ValueError as e:
            raise ConfigError(f"{ctx}[{i}]: {e}") from None
    return cells


def _strs(raw: Any, ctx: str) -> set:
    return {str(x).lower() for x in _as_list(raw, ctx)}


def _number(raw: Any) -> Optional[float]:
    if isinstance(raw, bool):
        return None
    try:
        n = float(raw)
    except (TypeError, ValueError):
        return None
    return n if math.isfinite(n) else None


# ── constraints ───────────────────────────────────────────────────────────────

def _enabled(raw: Any, ctx: str) -> bool:
    if isinstance(raw, bool):
        return raw
    log.warning("%s: 'enabled' is %r, not true/false; rule disabled", ctx, raw)
    return False


def parse_constraint(raw: Any, ctx: str = "constraint") -> Optional[Constraint]:
    """Build one constraint, or return None for an entry that cannot be read."""
    if not isinstance(raw, dict):
        log.warning("Ignoring %s: not a JSON object", ctx)
        return None
    kind = raw.get("type")
    if kind not in CONSTRAINT_TYPES:
        log.warning("Ignoring %s: unknown constraint type %r", ctx, kind)
        return None

    common = dict(
        id          = str(raw.get("id", "")),
        description = str(raw.get("description", "")),
        enabled     = _enabled(raw.get("enabled", True), ctx),
        priority    = int(_number(raw.get("priority")) or 0),
    )
    value = raw.get("value")
    payload = value if isinstance(value, dict) else {}

    if kind == MaxCoaches.kind:
        n = _number(value)
        # -1 never passes the capacity calculator's well-formed check
        return MaxCoaches(value=int(n) if n is not None and n.is_integer() else -1, **common)
    if kind == ReduceSlot.kind:
        return ReduceSlot(
            day       = str(payload.get("day", "")).lower(),
            slot      = str(payload.get("slot", "")).lower(),
            reduction = _number(payload.get("reduction")),
            **common,
        )
    if kind == AvoidSlot.kind:
        return AvoidSlot(day=str(payload.get("day", "")).lower(),
                         slot=str(payload.get("slot", "")).lower(), **common)
    if kind == CoachPreference.kind:
        return CoachPreference(coach_id=str(payload.get("coach_id", "")), **common)
    if kind == StudentSpread.kind:
        n = _number(payload.get("minDaysBetween", payload.get("min_days_between", 1)))
        return StudentSpread(min_days_between=int(n) if n is not None else 1, **common)
    n = _number(payload.get("maxVariance", payload.get("max_variance", 1)))
    return CoachBalance(max_variance=int(n) if n is not None else 1, **common)


def constraint_to_dict(c: Constraint) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "id":          c.id,
        "type":        c.kind,
        "description": c.description,
        "enabled":     c.enabled,
        "priority":    c.priority,
    }
    if isinstance(c, MaxCoaches):
        out["value"] = c.value
    elif isinstance(c, ReduceSlot):
        out["value"] = {"day": c.day, "slot": c.slot, "reduction": c.reduction}
    elif isinstance(c, AvoidSlot):
        out["value"] = {"day": c.day, "slot": c.slot}
    elif isinstance(c, CoachPreference):
        out["value"] = {"coach_id": c.coach_id}
    elif isinstance(c, StudentSpread):
        out["value"] = {"minDaysBetween": c.min_days_between}
    elif isinstance(c, CoachBalance):
        out["value"] = {"maxVariance": c.max_variance}
    return out


# ── people ────────────────────────────────────────────────────────────────────

def _coach(raw: Any, ctx: str) -> Coach:
    raw   = _as_dict(raw, ctx)
    prefs = _as_dict(raw.get("preferences") or {}, f"{ctx}.preferences")
    return Coach(
        id    = str(_require(raw, "id",   ctx)),
        name  = str(_require(raw, "name", ctx)),
        color = str(raw.get("color", "")),
        preferences = CoachPreferences(
            preferred_slots      = _strs(prefs.get("preferred_slots", []), f"{ctx}.preferred_slots"),
            avoid_slots          = _strs(prefs.get("avoid_slots",     []), f"{ctx}.avoid_slots"),
            preferred_days       = _strs(prefs.get("preferred_days",  []), f"{ctx}.preferred_days"),
            avoid_days           = _strs(prefs.get("avoid_days",      []), f"{ctx}.avoid_days"),
            max_sessions_per_day = _as_int(prefs.get("max_sessions_per_day", 3),
                                           f"{ctx}.max_sessions_per_day"),
        ),
    )


def _student(raw: Any, ctx: str) -> Student:
    raw = _as_dict(raw, ctx)
    return Student(
        id                = str(_require(raw, "id",       ctx)),
        name              = str(_require(raw, "name",     ctx)),
        coach_id          = str(_require(raw, "coach_id", ctx)),
        lessons_per_week  = _as_int(raw.get("lessons_per_week", 1), f"{ctx}.lessons_per_week"),
        unavailable_slots = _cells(raw.get("unavailable_slots", []), f"{ctx}.unavailable_slots"),
    )


def _entry(raw: Any, ctx: str) -> ScheduleEntry:
    raw = _as_dict(raw, ctx)
    return ScheduleEntry(
        day          = str(_require(raw, "day",        ctx)).lower(),
        slot         = str(_require(raw, "slot",       ctx)).lower(),
        coach_id     = str(_require(raw, "coach_id",   ctx)),
        student_id   = str(_require(raw, "student_id", ctx)),
        student_name = str(raw.get("student_name", "")),
        locked       = True,
    )


def _coach_to_dict(c: Coach) -> Dict[str, Any]:
    p = c.preferences
    return {
        "id":    c.id,
        "name":  c.name,
        "color": c.color,
        "preferences": {
            "preferred_slots":      sorted(p.preferred_slots),
            "avoid_slots":          sorted(p.avoid_slots),
            "preferred_days":       sorted(p.preferred_days),
            "avoid_days":           sorted(p.avoid_days),
            "max_sessions_per_day": p.max_sessions_per_day,
        },
    }


def _student_to_dict(s: Student) -> Dict[str, Any]:
    return {
        "id":                s.id,
        "name":              s.name,
        "coach_id":          s.coach_id,
        "lessons_per_week":  s.lessons_per_week,
        "unavailable_slots": sorted(cell_key(d, sl) for d, sl in s.unavailable_slots),
    }


# ── config ────────────────────────────────────────────────────────────────────

def config_from_dict(raw: Any) -> Config:
    raw  = _as_dict(raw, "root")
    meta = _as_dict(raw.get("meta") or {}, "meta")

    coaches_raw  = _as_list(_require(raw, "coaches",  "root"), "coaches")
    students_raw = _as_list(_require(raw, "students", "root"), "students")
    locked_raw   = _as_list(raw.get("locked_entries") or [], "locked_entries")
    weights_raw  = _as_dict(raw.get("weights") or {}, "weights")
    run_raw      = _as_dict(raw.get("run") or {}, "run")

    if raw.get("constraints") is None:
        constraints = default_constraints()
    else:
        constraints = [
            c for c in (
                parse_constraint(item, f"constraints[{i}]")
                for i, item in enumerate(_as_list(raw["constraints"], "constraints"))
            )
            if c is not None
        ]

    defaults = ScoreWeights()
    weights = ScoreWeights(**{
        name: _as_int(weights_raw.get(name, getattr(defaults, name)), f"weights.{name}")
        for name in vars(defaults)
    })

    seed = run_raw.get("seed")
    cfg = Config(
        meta           = meta,
        coaches        = [_coach(c, f"coaches[{i}]") for i, c in enumerate(coaches_raw)],
        students       = [_student(s, f"students[{i}]") for i, s in enumerate(students_raw)],
        constraints    = constraints,
        locked_entries = [_entry(e, f"locked_entries[{i}]") for i, e in enumerate(locked_raw)],
        weights        = weights,
        run            = RunParams(
            passes = _as_int(run_raw.get("passes", 3), "run.passes"),
            seed   = None if seed is None else _as_int(seed, "run.seed"),
        ),
    )
    try:
        cfg.validate()
    except ValueError as e:
        raise ConfigError(str(e)) from None
    _check_unique_ids(cfg.coaches,  "coaches")
    _check_unique_ids(cfg.students, "students")
    return cfg


def config_to_dict(cfg: Config) -> Dict[str, Any]:
    return {
        "meta":           cfg.meta,
        "coaches":        [_coach_to_dict(c) for c in cfg.coaches],
        "students":       [_student_to_dict(s) for s in cfg.students],
        "constraints":    [constraint_to_dict(c) for c in cfg.constraints],
        "locked_entries": [
            {"day": e.day, "slot": e.slot, "coach_id": e.coach_id,
             "student_id": e.student_id, "student_name": e.student_name}
            for e in cfg.locked_entries
        ],
        "weights": asdict(cfg.weights),
        "run":     asdict(cfg.run),
    }


def load_config(path: str | Path) -> Config:
    """Load and validate a Config from a JSON file."""
    with Path(path).open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from None
    return config_from_dict(raw)


def save_config(cfg: Config, path: str | Path) -> None:
    """Serialise Config to JSON, creating parent directories if needed."""
    cfg.validate()
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        # ensure_ascii=False preserves accented names.
        json.dump(config_to_dict(cfg), f, ensure_ascii=False, indent=2)


def save_result(result: ScheduleResult, path: str | Path) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, ensure_ascii=False, indent=2)
