from __future__ import annotations

import random
from typing import Optional

from lesson_timetable.models import Config
from lesson_timetable.solver.engine import EMPTY_ROSTER_MESSAGE, schedule
from lesson_timetable.solver.precheck import ensure_ok
from lesson_timetable.solver.result import EMPTY, ScheduleResult


def solve(cfg: Config, seed: Optional[int] = None,
          passes: Optional[int] = None,
          rng: Optional[random.Random] = None) -> ScheduleResult:
    """Run the scheduler on a Config. seed/passes override cfg.run."""
    if not cfg.students:
        return ScheduleResult(status=EMPTY, diagnostics=[EMPTY_ROSTER_MESSAGE])
    cfg.validate()
    ensure_ok(cfg)
    return schedule(
        cfg.students,
        cfg.coaches,
        cfg.constraints,
        weights        = cfg.weights,
        passes         = passes if passes is not None else cfg.run.passes,
        rng            = rng,
        seed           = seed if seed is not None else cfg.run.seed,
        locked_entries = cfg.locked_entries,
    )
