from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

from ..models import ScheduleEntry

COMPLETE = "COMPLETE"   # every student got lessons_per_week
PARTIAL  = "PARTIAL"    # at least one shortfall
EMPTY    = "EMPTY"      # nothing to schedule; run was a no-op


@dataclass(frozen=True)
class Shortfall:
    student_id: str
    name:       str
    needed:     int
    scheduled:  int


@dataclass
class ScheduleResult:
    status:      str
    entries:     List[ScheduleEntry] = field(default_factory=list)
    unscheduled: List[Shortfall]     = field(default_factory=list)
    diagnostics: List[str]           = field(default_factory=list)
    stats:       Dict[str, Any]      = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == COMPLETE

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
