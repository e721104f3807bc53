from __future__ import annotations

import datetime as dt
import sys

from .identity import AuthorMatcher
from .index import build_index, write_index
from .messages import MessageProvider, PromptMessageProvider, obtain_commit_message
from .models import PublishResult, PublishStatus, ReportConfig
from .publish import publish_project, publish_report_repo
from .reader import read_commits, resolve_link_base
from .render import render_commits
from .write import write_day_report


def _print_header(*, config: ReportConfig, report_days: list[dt.date], index_days: list[dt.date], publish: bool) -> None:
    lines = [
        "commit-report",
        f"- Projects: {', '.join(p.name for p in config.projects)}",
        f"- Report days: {report_days[-1].isoformat()} .. {report_days[0].isoformat()} ({len(report_days)})",
        f"- Index window: {index_days[-1].isoformat()} .. {index_days[0].isoformat()} ({len(index_days)})",
        f"- Authors: {', '.join(config.authors) if config.authors and config.filter_authors else 'all'}",
        f"- Publish: {'on' if publish else 'off'}",
        "",
    ]
    print("\n".join(lines))


def write_reports(config: ReportConfig, report_days: list[dt.date]) -> int:
    authors = AuthorMatcher.from_names(config.authors) if config.filter_authors else None
    written = 0
    for project in config.projects:
        link_base = resolve_link_base(project.path, host=config.link_host, org=config.link_org) if project.path.exists() else ""
        for day in report_days:
            commits = read_commits(project.path, day, authors=authors, link_base=link_base)
            path = write_day_report(config.report_root, project.name, day, render_commits(commits))
            written += 1
            if commits:
                print(f"{project.name} {day.isoformat()}: {len(commits)} commit(s) -> {path}")
    return written


def _summarize(results: list[PublishResult]) -> None:
    for r in results:
        if r.ok:
            state = "no changes" if r.status == PublishStatus.NO_CHANGES else "pushed"
            print(f"- {r.name}: {state}")
        else:
            print(f"- {r.name}: FAILED ({r.failure.value if r.failure else 'unknown'})")


def run_report(
    config: ReportConfig,
    *,
    report_days: list[dt.date],
    index_days: list[dt.date],
    message_provider: MessageProvider | None = None,
    publish: bool = True,
) -> int:
    if not report_days or not index_days:
        raise ValueError("report_days and index_days must not be empty")
    report_days = sorted(set(report_days), reverse=True)
    index_days = sorted(set(index_days), reverse=True)

    _print_header(config=config, report_days=report_days, index_days=index_days, publish=publish)

    message = ""
    if publish:
        message = obtain_commit_message(message_provider or PromptMessageProvider())

    written = write_reports(config, report_days)
    print(f"Wrote {written} day report(s) under {config.report_root}")

    if publish and config.publish_projects:
        results = [publish_project(p.path, message, name=p.name) for p in config.projects]
        print("Project publish:")
        _summarize(results)
        failed = [r for r in results if not r.ok]
        if failed:
            names = ", ".join(r.name for r in failed)
            print(f"Stage failed: project publish ({names}); skipping index and report publish.", file=sys.stderr)
            return 1

    projects = list(config.projects)
    index_path = write_index(config.index_path, build_index(projects, index_days, config.report_root))
    print(f"Wrote index: {index_path}")

    if not publish:
        return 0

    result = publish_report_repo(config.report_repo, message, paths=[config.report_root, index_path], name="report")
    print("Report publish:")
    _summarize([result])
    if not result.ok:
        print("Stage failed: report publish.", file=sys.stderr)
        return 1
    return 0
