from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from .repository import AttendanceRepository
from .service import AttendanceService

logger = logging.getLogger(__name__)


@dataclass
class RecalculationSummary:
    processed: int = 0
    updated: int = 0
    failed_ids: list[int] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failed_ids)

    def to_dict(self) -> dict:
        return {
            "processed": self.processed,
            "updated": self.updated,
            "failed": self.failed,
            "failed_ids": list(self.failed_ids),
        }


class AttendanceRecalculator:
    """Bulk re-derivation of stored metrics (e.g. after roster edits).

    Each record is recomputed and committed on its own; a failure is logged
    and skipped so records already corrected stay corrected.
    """

    def __init__(self, attendance: AttendanceRepository, service: AttendanceService):
        self._attendance = attendance
        self._service = service

    def run(
        self,
        *,
        start: date,
        end: date,
        employee_id: Optional[int] = None,
        department_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> RecalculationSummary:
        summary = RecalculationSummary()
        rows = self._attendance.find_by_date_range(
            start_date=start, end_date=end, employee_id=employee_id, department_id=department_id
        )

        for row in rows:
            summary.processed += 1
            try:
                updated = self._service.recompute(row.record, department_id=row.department_id, now=now)
            except Exception:
                logger.exception("Recalculation failed for attendance %s", row.record.attendance_id)
                summary.failed_ids.append(int(row.record.attendance_id or 0))
                continue
            if updated != row.record:
                summary.updated += 1

        logger.info(
            "Recalculated attendance %s..%s: processed=%d updated=%d failed=%d",
            start,
            end,
            summary.processed,
            summary.updated,
            summary.failed,
        )
        return summary
