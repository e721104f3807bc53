from __future__ import annotations

import datetime as dt
import html
from pathlib import Path

from .days import slugify
from .models import Project
from .render import NO_COMMITS_HTML
from .write import ensure_dir, read_day_report

INDEX_CSS = """
body { font-family: sans-serif; padding: 2rem; }
h1 { text-align: center; }
.tabs { display: flex; flex-wrap: wrap; gap: 0.25rem; margin-bottom: 1rem; }
.tab-link { border: 1px solid #ccc; background: #f5f5f5; padding: 0.4rem 0.8rem; cursor: pointer; }
.tab-link.active { background: #333; color: #fff; }
.tab-content { display: none; }
.tab-content.active { display: block; }
.section-toggle { width: 100%; text-align: left; font-size: 1.1rem; font-weight: bold; padding: 0.5rem; cursor: pointer; }
.section-body { display: none; padding: 0 1rem; }
.section-body.open { display: block; }
ul { line-height: 1.6; }
""".strip("\n")

INDEX_SCRIPT = """
document.querySelectorAll('.tab-link').forEach(function (btn) {
  btn.addEventListener('click', function () {
    document.querySelectorAll('.tab-link').forEach(function (b) { b.classList.remove('active'); });
    document.querySelectorAll('.tab-content').forEach(function (c) { c.classList.remove('active'); });
    btn.classList.add('active');
    document.getElementById(btn.dataset.tab).classList.add('active');
  });
});
document.querySelectorAll('.section-toggle').forEach(function (btn) {
  btn.addEventListener('click', function () {
    btn.classList.toggle('open');
    document.getElementById(btn.dataset.target).classList.toggle('open');
  });
});
""".strip("\n")


def tab_id(day: dt.date) -> str:
    return f"tab-{day.isoformat()}"


def section_id(day: dt.date, key: str) -> str:
    return f"section-{day.isoformat()}-{slugify(key)}"


def section_keys(projects: list[Project]) -> dict[str, str]:
    """Map each project name to a slug that is unique within `projects`."""
    keys: dict[str, str] = {}
    used: set[str] = set()
    for project in projects:
        base = slugify(project.name)
        key = base
        n = 2
        while key in used:
            key = f"{base}-{n}"
            n += 1
        used.add(key)
        keys[project.name] = key
    return keys


def _classes(base: str, flag: str, on: bool) -> str:
    return f"{base} {flag}" if on else base


def render_section(day: dt.date, project: Project, fragment: str, *, key: str, open_: bool) -> str:
    sid = section_id(day, key)
    lines = [
        '    <div class="section">',
        f'      <button class="{_classes("section-toggle", "open", open_)}" data-target="{sid}">{html.escape(project.name.upper())}</button>',
        f'      <div id="{sid}" class="{_classes("section-body", "open", open_)}">',
        fragment,
        "      </div>",
        "    </div>",
    ]
    return "\n".join(lines)


def render_day(day: dt.date, sections: list[tuple[Project, str]], *, keys: dict[str, str], active: bool) -> str:
    lines = [f'  <div id="{tab_id(day)}" class="{_classes("tab-content", "active", active)}">']
    lines.append(f"    <h2>{day.isoformat()}</h2>")
    for project, fragment in sections:
        lines.append(render_section(day, project, fragment, key=keys[project.name], open_=active))
    lines.append("  </div>")
    return "\n".join(lines)


def collect_fragments(projects: list[Project], days: list[dt.date], report_root: Path) -> list[tuple[dt.date, list[tuple[Project, str]]]]:
    """Read each (day, project) DayReport, substituting the placeholder when absent."""
    out: list[tuple[dt.date, list[tuple[Project, str]]]] = []
    for day in days:
        sections: list[tuple[Project, str]] = []
        for project in projects:
            fragment = read_day_report(report_root, project.name, day)
            sections.append((project, NO_COMMITS_HTML if fragment is None else fragment))
        out.append((day, sections))
    return out


def build_index(projects: list[Project], days: list[dt.date], report_root: Path, *, title: str = "Team Commit Report") -> str:
    days = sorted(set(days), reverse=True)
    grouped = collect_fragments(projects, days, report_root)
    keys = section_keys(projects)
    latest = days[0].isoformat() if days else ""
    heading = f"{title} - {latest}" if latest else title

    lines = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '  <meta charset="UTF-8">',
        f"  <title>{html.escape(heading)}</title>",
        "  <style>",
        INDEX_CSS,
        "  </style>",
        "</head>",
        "<body>",
        f"  <h1>{html.escape(heading)}</h1>",
        '  <div class="tabs">',
    ]
    for i, day in enumerate(days):
        cls = _classes("tab-link", "active", i == 0)
        lines.append(f'    <button class="{cls}" data-tab="{tab_id(day)}">{day.isoformat()}</button>')
    lines.append("  </div>")
    for i, (day, sections) in enumerate(grouped):
        lines.append(render_day(day, sections, keys=keys, active=i == 0))
    lines.extend(
        [
            "  <script>",
            INDEX_SCRIPT,
            "  </script>",
            "</body>",
            "</html>",
            "",
        ]
    )
    return "\n".join(lines)


def write_index(path: Path, document: str) -> Path:
    ensure_dir(path.parent)
    with path.open("w", newline="", encoding="utf-8") as f:
        f.write(document)
    return path
