"""Export one user's timesheet window to an .xlsx file without going through Flask.

Usage: python scripts/export_timesheet.py USER_ID [YYYY-MM-DD] [day|week|month]
"""

from __future__ import annotations

import importlib
import sys
from datetime import date
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.timesheet_system.timesheet_system.common.datetime_utils import parse_iso_date
from src.timesheet_system.timesheet_system.container import build_container
from src.timesheet_system.timesheet_system.core.enums import ViewMode


def main(argv: list[str]) -> None:
    if not argv:
        raise SystemExit(__doc__)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    user = container.users_repo.get_by_id(int(argv[0]))
    if not user:
        raise SystemExit(f"User not found: {argv[0]}")
    reference = parse_iso_date(argv[1]) if len(argv) > 1 else date.today()
    mode = ViewMode(argv[2]) if len(argv) > 2 else ViewMode.WEEK

    data = container.timesheet_service.export_xlsx(user=user, reference=reference, mode=mode)
    out_dir = REPO_ROOT / "exports"
    out_dir.mkdir(parents=True, exist_ok=True)
    out_file = out_dir / f"timesheet_{user.user_id}_{reference.isoformat()}.xlsx"
    out_file.write_bytes(data)
    print(f"OK: Exported {out_file}")


if __name__ == "__main__":
    main(sys.argv[1:])
