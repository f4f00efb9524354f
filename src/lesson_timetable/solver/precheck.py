"""
Pre-run sanity checks that run before the engine is invoked.

Catching roster mistakes here means the admin sees plain-English messages
rather than a schedule that quietly leaves students out. Errors block the
run; warnings are reported and the run goes ahead.
"""

from __future__ import annotations

from collections import Counter
from typing import List, Tuple

from ..models import (ALL_CELLS, CONSTRAINT_TYPES, DAY_INDEX, SLOTS, Config,
    MaxCoaches, ReduceSlot, StudentSpread)
from .capacity import slot_capacity, valid_reduction


class PrecheckError(ValueError):
    """Raised by ensure_ok() when hard errors are present."""


def _dupes(ids: List[str]) -> List[str]:
    return sorted(i for i, n in Counter(ids).items() if n > 1)


def _bad_cells(cells) -> List[str]:
    return sorted(
        f"{d}-{s}" for d, s in cells
        if d not in DAY_INDEX or s not in SLOTS
    )


def precheck(cfg: Config) -> Tuple[List[str], List[str]]:
    """Return (errors, warnings). errors = the run should not start."""
    errors:   List[str] = []
    warnings: List[str] = []

    coach_ids = {c.id for c in cfg.coaches}

    dup_c = _dupes([c.id for c in cfg.coaches])
    if dup_c:
        errors.append(f"Duplicate coach id(s): {dup_c}")
    dup_s = _dupes([s.id for s in cfg.students])
    if dup_s:
        errors.append(f"Duplicate student id(s): {dup_s}")

    for c in cfg.coaches:
        p = c.preferences
        if p.max_sessions_per_day < 1:
            errors.append(
                f"Coach '{c.id}' has max_sessions_per_day "
                f"{p.max_sessions_per_day}; it must be at least 1."
            )
        clash = sorted(p.preferred_slots & p.avoid_slots)
        if clash:
            warnings.append(
                f"Coach '{c.id}' both prefers and avoids slot(s) {clash}; "
                f"the avoid penalty will outweigh the bonus."
            )
        clash = sorted(p.preferred_days & p.avoid_days)
        if clash:
            warnings.append(f"Coach '{c.id}' both prefers and avoids day(s) {clash}.")
        unknown = sorted((p.preferred_slots | p.avoid_slots) - set(SLOTS))
        unknown += sorted((p.preferred_days | p.avoid_days) - set(DAY_INDEX))
        if unknown:
            warnings.append(f"Coach '{c.id}' preferences name unknown day/slot(s): {unknown}")

    for s in cfg.students:
        if s.coach_id not in coach_ids:
            errors.append(f"Student '{s.id}' references unknown coach '{s.coach_id}'.")
        if s.lessons_per_week < 0:
            errors.append(f"Student '{s.id}' has negative lessons_per_week ({s.lessons_per_week}).")
        bad = _bad_cells(s.unavailable_slots)
        if bad:
            errors.append(f"Student '{s.id}' lists unknown cell(s): {bad}")
        free = [cell for cell in ALL_CELLS if cell not in s.unavailable_slots]
        if s.lessons_per_week > 0 and not free:
            warnings.append(
                f"Student '{s.id}' is unavailable in every slot of the week "
                f"and cannot be scheduled."
            )
        elif s.lessons_per_week > len(free):
            warnings.append(
                f"Student '{s.id}' needs {s.lessons_per_week} lesson(s) but is "
                f"only free in {len(free)} slot(s)."
            )

    for e in cfg.locked_entries:
        bad = _bad_cells([(e.day, e.slot)])
        if bad:
            errors.append(f"Locked entry for '{e.student_id}' uses unknown cell {bad[0]}.")

    # Demand against supply
    for c in cfg.coaches:
        demand  = sum(max(s.lessons_per_week, 0) for s in cfg.students if s.coach_id == c.id)
        ceiling = min(len(ALL_CELLS), len(DAY_INDEX) * max(c.preferences.max_sessions_per_day, 0))
        if demand > ceiling:
            warnings.append(
                f"Coach '{c.id}' has {demand} lesson(s) to teach but can take "
                f"at most {ceiling} a week."
            )

    total_demand   = sum(max(s.lessons_per_week, 0) for s in cfg.students)
    total_capacity = sum(slot_capacity(d, s, cfg.constraints) for d, s in ALL_CELLS)
    if total_demand > total_capacity:
        warnings.append(
            f"Not enough capacity: {total_demand} lesson(s) requested but the "
            f"week only holds {total_capacity}."
        )

    # Constraint hygiene
    if not any(isinstance(k, MaxCoaches) and k.enabled for k in cfg.constraints):
        warnings.append("No max_coaches rule is enabled; the default slot capacity applies.")
    for k in cfg.constraints:
        if type(k) not in CONSTRAINT_TYPES.values():
            warnings.append(f"Constraint '{getattr(k, 'id', '?')}' has an unknown type and is ignored.")
        elif isinstance(k, ReduceSlot) and valid_reduction(k) is None:
            warnings.append(
                f"reduce_slot rule '{k.id}' ({k.day}-{k.slot}, {k.reduction}%) "
                f"is malformed and will never match."
            )
        elif isinstance(k, StudentSpread) and k.min_days_between < 0:
            warnings.append(f"student_spread rule '{k.id}' has a negative min_days_between.")

    return errors, warnings


def ensure_ok(cfg: Config) -> None:
    errors, _ = precheck(cfg)
    if errors:
        raise PrecheckError("\n".join(errors))
