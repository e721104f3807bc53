from __future__ import annotations

import datetime as dt
from pathlib import Path

from .days import day_bounds
from .git import GitCommandError, get_remote_urls, has_commits, require_repo, run_git, select_remote, split_hosted_remote
from .identity import AuthorMatcher
from .models import CommitRecord

REMOTE_NAME_PRIORITY = ["origin", "upstream"]


def commit_link(link_base: str, sha: str) -> str:
    return f"https://{link_base.strip('/')}/commit/{sha}"


def resolve_link_base(repo: Path, *, host: str = "", org: str = "") -> str:
    """
    Return `<host>/<org>/<repoBaseName>` for building commit links.

    Configured host/org win. Otherwise host and org come from the primary
    remote when it points at a hosting service; local-path remotes and repos
    without a remote fall back to `<host or github.com>/<repoBaseName>`.
    """
    name = repo.resolve().name
    if org:
        return f"{host or 'github.com'}/{org}/{name}"
    _, url = select_remote(get_remote_urls(repo), REMOTE_NAME_PRIORITY)
    hosted = split_hosted_remote(url)
    if hosted is not None:
        remote_host, remote_org, remote_name = hosted
        return f"{host or remote_host}/{remote_org}/{remote_name}"
    return f"{host or 'github.com'}/{name}"


def _parse_iso(value: str) -> dt.datetime | None:
    s = (value or "").strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        d = dt.datetime.fromisoformat(s)
    except ValueError:
        return None
    if d.tzinfo is None:
        d = d.astimezone()
    return d


def read_commits(
    repo: Path,
    day: dt.date,
    *,
    authors: AuthorMatcher | None = None,
    link_base: str = "",
) -> list[CommitRecord]:
    top = require_repo(repo)
    if not has_commits(top):
        return []
    if not link_base:
        link_base = resolve_link_base(repo)

    since, until = day_bounds(day)
    pretty = "%H\t%an\t%ae\t%aI\t%s"
    args = [
        "log",
        f"--since={since}",
        f"--until={until}",
        f"--pretty=format:{pretty}",
    ]
    code, out, err = run_git(args, cwd=top)
    if code != 0:
        raise GitCommandError(args, code, err)

    commits: list[CommitRecord] = []
    for line in out.splitlines():
        if not line.strip():
            continue
        parts = line.split("\t", 4)
        if len(parts) < 5:
            continue
        sha, name, email, iso, subject = parts
        if authors and not authors.matches(name, email):
            continue
        ts = _parse_iso(iso)
        if ts is None:
            continue
        commits.append(
            CommitRecord(
                hash=sha,
                message=subject,
                timestamp=ts,
                author_name=name,
                author_email=email,
                link=commit_link(link_base, sha),
            )
        )
    return commits
