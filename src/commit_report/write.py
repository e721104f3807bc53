from __future__ import annotations

import datetime as dt
from pathlib import Path


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def day_report_path(report_root: Path, project_name: str, day: dt.date) -> Path:
    return report_root / project_name / f"{day.isoformat()}.html"


def write_day_report(report_root: Path, project_name: str, day: dt.date, fragment: str) -> Path:
    path = day_report_path(report_root, project_name, day)
    ensure_dir(path.parent)
    with path.open("w", newline="", encoding="utf-8") as f:
        f.write(fragment)
    return path


def read_day_report(report_root: Path, project_name: str, day: dt.date) -> str | None:
    path = day_report_path(report_root, project_name, day)
    if not path.is_file():
        return None
    with path.open("r", newline="", encoding="utf-8") as f:
        return f.read()
