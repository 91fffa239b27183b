"""Recompute stored lateness/working-time metrics for a date range.

Usage: python scripts/recalculate.py START END [--employee ID] [--department ID]

Meant for a nightly job after roster edits. Records are committed one by one,
so a failure leaves already corrected records in place.
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from dotenv import load_dotenv

from roster_attendance.common.datetime_utils import parse_iso_date
from roster_attendance.config import get_settings_module
from roster_attendance.container import build_container
from roster_attendance.main import configure_logging


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("start", type=parse_iso_date, help="first work date, YYYY-MM-DD")
    parser.add_argument("end", type=parse_iso_date, help="last work date, YYYY-MM-DD")
    parser.add_argument("--employee", type=int, default=None)
    parser.add_argument("--department", type=int, default=None)
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        tie_break=getattr(settings, "ROSTER_TIE_BREAK", "latest_created"),
        default_grace_minutes=int(getattr(settings, "DEFAULT_GRACE_MINUTES", 0)),
    )
    summary = container.recalculator.run(
        start=args.start, end=args.end, employee_id=args.employee, department_id=args.department
    )
    print(f"OK: processed={summary.processed} updated={summary.updated} failed={summary.failed}")
    return 1 if summary.failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
