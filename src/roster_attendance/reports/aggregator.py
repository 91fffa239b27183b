"""Roll attendance records up into on-time / lateness / worked-hours statistics.

Statistics are built from plain sums, so partial results merge exactly:
aggregate(a + b) == aggregate(a).merge(aggregate(b)) for disjoint inputs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from ..attendance.model import AttendanceRecord, AttendanceReportRow


def _ratio(numerator: float, total: int) -> Optional[float]:
    return numerator / total if total else None


@dataclass(frozen=True)
class StatsAccumulator:
    total: int = 0
    on_time_count: int = 0
    late_count: int = 0
    early_departure_count: int = 0
    late_minutes_sum: int = 0
    worked_minutes_sum: int = 0

    def add(self, record: AttendanceRecord) -> "StatsAccumulator":
        late = max(int(record.minutes_late or 0), 0)
        return StatsAccumulator(
            total=self.total + 1,
            on_time_count=self.on_time_count + (1 if late == 0 else 0),
            late_count=self.late_count + (1 if late > 0 else 0),
            early_departure_count=self.early_departure_count + (1 if (record.early_departure_minutes or 0) > 0 else 0),
            late_minutes_sum=self.late_minutes_sum + late,
            worked_minutes_sum=self.worked_minutes_sum + max(int(record.working_duration_minutes or 0), 0),
        )

    def merge(self, other: "StatsAccumulator") -> "StatsAccumulator":
        return StatsAccumulator(
            total=self.total + other.total,
            on_time_count=self.on_time_count + other.on_time_count,
            late_count=self.late_count + other.late_count,
            early_departure_count=self.early_departure_count + other.early_departure_count,
            late_minutes_sum=self.late_minutes_sum + other.late_minutes_sum,
            worked_minutes_sum=self.worked_minutes_sum + other.worked_minutes_sum,
        )

    __add__ = merge

    @property
    def compliance_rate(self) -> Optional[float]:
        return _ratio(self.on_time_count, self.total)

    @property
    def average_late_minutes(self) -> Optional[float]:
        return _ratio(self.late_minutes_sum, self.total)

    @property
    def average_worked_hours(self) -> Optional[float]:
        return _ratio(self.worked_minutes_sum / 60, self.total)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "on_time_count": self.on_time_count,
            "late_count": self.late_count,
            "early_departure_count": self.early_departure_count,
            "compliance_rate": self.compliance_rate,
            "average_late_minutes": self.average_late_minutes,
            "average_worked_hours": self.average_worked_hours,
        }


@dataclass(frozen=True)
class AttendanceStats:
    overall: StatsAccumulator = field(default_factory=StatsAccumulator)
    # Keyed by department_id; None collects employees without a department.
    per_department: Mapping[Optional[int], StatsAccumulator] = field(default_factory=dict)

    @property
    def on_time_count(self) -> int:
        return self.overall.on_time_count

    @property
    def late_count(self) -> int:
        return self.overall.late_count

    @property
    def average_late_minutes(self) -> Optional[float]:
        return self.overall.average_late_minutes

    @property
    def average_worked_hours(self) -> Optional[float]:
        return self.overall.average_worked_hours

    def merge(self, other: "AttendanceStats") -> "AttendanceStats":
        departments = dict(self.per_department)
        for department_id, acc in other.per_department.items():
            departments[department_id] = departments.get(department_id, StatsAccumulator()).merge(acc)
        return AttendanceStats(overall=self.overall.merge(other.overall), per_department=departments)

    def to_dict(self, department_names: Optional[Mapping[int, str]] = None) -> dict:
        names = department_names or {}
        per_department = []
        for department_id, acc in self.per_department.items():
            if not acc.total:
                continue
            entry = {"department_id": department_id, "department_name": names.get(department_id, "-")}
            entry.update(acc.to_dict())
            per_department.append(entry)
        per_department.sort(key=lambda d: (d["department_name"], d["department_id"] or 0))

        out = self.overall.to_dict()
        out["per_department"] = per_department
        return out


def aggregate(rows: Iterable[AttendanceReportRow]) -> AttendanceStats:
    overall = StatsAccumulator()
    departments: dict[Optional[int], StatsAccumulator] = {}
    for row in rows:
        overall = overall.add(row.record)
        departments[row.department_id] = departments.get(row.department_id, StatsAccumulator()).add(row.record)
    return AttendanceStats(overall=overall, per_department=departments)
