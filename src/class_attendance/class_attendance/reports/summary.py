from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from ..core.enums import StudentOrigin

if TYPE_CHECKING:
    from ..lists.model import StudentEntry


@dataclass(frozen=True)
class AttendanceSummary:
    total: int = 0
    present: int = 0
    absent: int = 0
    present_excel: int = 0
    present_manual: int = 0
    absent_excel: int = 0
    absent_manual: int = 0
    # (marked_by, count) of present students, most active first
    by_marker: list[tuple[str, int]] = field(default_factory=list)

    @property
    def attendance_rate(self) -> float:
        if not self.total:
            return 0.0
        return round(self.present / self.total * 100, 1)

    def as_dict(self) -> dict:
        return {
            "total": self.total,
            "present": self.present,
            "absent": self.absent,
            "present_excel": self.present_excel,
            "present_manual": self.present_manual,
            "absent_excel": self.absent_excel,
            "absent_manual": self.absent_manual,
            "attendance_rate": self.attendance_rate,
            "by_marker": [{"marked_by": who, "count": n} for who, n in self.by_marker],
        }


def build_summary(entries: Iterable["StudentEntry"]) -> AttendanceSummary:
    counts: Counter = Counter()
    markers: Counter = Counter()

    for s in entries:
        counts["total"] += 1
        state = "present" if s.present else "absent"
        origin = "excel" if s.origin == StudentOrigin.EXCEL else "manual"
        counts[state] += 1
        counts[f"{state}_{origin}"] += 1
        if s.present and s.marked_by:
            markers[s.marked_by] += 1

    return AttendanceSummary(
        total=counts["total"],
        present=counts["present"],
        absent=counts["absent"],
        present_excel=counts["present_excel"],
        present_manual=counts["present_manual"],
        absent_excel=counts["absent_excel"],
        absent_manual=counts["absent_manual"],
        by_marker=sorted(markers.items(), key=lambda x: (-x[1], x[0])),
    )
