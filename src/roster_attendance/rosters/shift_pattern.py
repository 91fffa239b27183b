"""Parsing and matching of roster shift patterns.

Persisted form is a JSON array such as::

    [{"day": 0, "shift": "off"},
     {"date": "2025-01-06", "time_slot": {"start_time": "09:00", "end_time": "18:00"}}]
"""

from __future__ import annotations

import json
from datetime import date
from typing import Any, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..core.exceptions import MalformedScheduleError
from .model import ShiftPatternEntry, TimeSlot


def weekday_index(work_date: date) -> int:
    """0 = Sunday .. 6 = Saturday."""
    return (work_date.weekday() + 1) % 7


def parse_shift_pattern(raw: Any) -> tuple[ShiftPatternEntry, ...]:
    if raw is None or raw == "":
        return ()

    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            raise MalformedScheduleError(f"shift_pattern is not valid JSON: {exc}") from exc

    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise MalformedScheduleError("shift_pattern must be a JSON array")

    return tuple(_parse_entry(item, index) for index, item in enumerate(raw))


def _parse_entry(item: Any, index: int) -> ShiftPatternEntry:
    if not isinstance(item, dict):
        raise MalformedScheduleError(f"shift_pattern[{index}] must be an object")

    day = item.get("day")
    if day is not None:
        if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6:
            raise MalformedScheduleError(f"shift_pattern[{index}].day must be 0-6")

    entry_date: Optional[date] = None
    if item.get("date"):
        try:
            entry_date = parse_iso_date(str(item["date"]))
        except ValueError as exc:
            raise MalformedScheduleError(f"shift_pattern[{index}].date must be YYYY-MM-DD") from exc

    slot = item.get("time_slot")
    time_slot: Optional[TimeSlot] = None
    if slot is not None:
        if not isinstance(slot, dict):
            raise MalformedScheduleError(f"shift_pattern[{index}].time_slot must be an object")
        time_slot = TimeSlot(start_time=slot.get("start_time"), end_time=slot.get("end_time"))

    shift = item.get("shift")
    return ShiftPatternEntry(day=day, date=entry_date, time_slot=time_slot, shift=str(shift) if shift else None)


def match_entry(entries: Sequence[ShiftPatternEntry], work_date: date) -> Optional[ShiftPatternEntry]:
    """Pick the entry for a date: explicit date, then weekday, then catch-all."""

    weekday = weekday_index(work_date)
    by_day: Optional[ShiftPatternEntry] = None
    catch_all: Optional[ShiftPatternEntry] = None

    for entry in entries:
        if entry.date is not None:
            if entry.date == work_date:
                return entry
        elif entry.day is not None:
            if entry.day == weekday and by_day is None:
                by_day = entry
        elif catch_all is None:
            catch_all = entry

    return by_day or catch_all
