"""Close attendance transactions left open from previous days.

Meant to run from cron shortly after midnight, e.g.:

    15 0 * * * cd /srv/hr-attendance && python scripts/auto_checkout.py
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import load_settings

from hr_attendance.common.logging_setup import configure_logging
from hr_attendance.container import build_container


def main() -> None:
    settings = load_settings()
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        grace_minutes=getattr(settings, "GRACE_MINUTES", None),
        weekend_days=getattr(settings, "WEEKEND_DAYS"),
    )
    closed = container.attendance_service.auto_checkout()
    print(f"OK: Auto checkout closed {len(closed)} transaction(s)")


if __name__ == "__main__":
    main()
