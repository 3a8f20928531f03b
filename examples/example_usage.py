"""Example: use the service layer directly (no Flask).

Prints the live board and this week's hours from the configured database.
"""

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.timeclock.timeclock.common.datetime_utils import now_utc
from src.timeclock.timeclock.container import AppOptions, build_container


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, options=AppOptions.from_settings(settings))

    board = container.status_service.live_board()
    for item in board:
        print(f"{item.name:<20} {item.status.value:<18} {item.elapsed or '-'}")
    print(container.status_service.counts(board))

    today = now_utc().astimezone(container.tz).date()
    for row in container.payroll_report_service.hours_report(start=today, end=today):
        print(f"{row.name:<20} {row.summary.paid_display}")


if __name__ == "__main__":
    main()
