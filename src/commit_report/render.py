from __future__ import annotations

import html

from .models import CommitRecord

NO_COMMITS_HTML = "<p><i>No commits today.</i></p>"


def fmt_time(record: CommitRecord) -> str:
    return record.timestamp.astimezone().strftime("%H:%M:%S")


def render_commit(record: CommitRecord) -> str:
    lines = [
        "  <li>",
        f"    <strong>{html.escape(record.author_name)}</strong> - {html.escape(record.message)}<br>",
        f'    <a href="{html.escape(record.link, quote=True)}" target="_blank">{html.escape(record.short_hash)}</a> ({fmt_time(record)})',
        "  </li>",
    ]
    return "\n".join(lines)


def render_commits(commits: list[CommitRecord]) -> str:
    if not commits:
        return NO_COMMITS_HTML
    lines = ["<ul>"]
    lines.extend(render_commit(c) for c in commits)
    lines.append("</ul>")
    return "\n".join(lines)
