from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse


class RepositoryNotFoundError(RuntimeError):
    pass


class GitCommandError(RuntimeError):
    def __init__(self, args: list[str], code: int, stderr: str) -> None:
        self.git_args = list(args)
        self.code = code
        self.stderr = (stderr or "").strip()
        super().__init__(f"git {' '.join(args)} failed ({code}): {self.stderr}")


def run_git(args: list[str], cwd: Path, timeout_s: int = 300) -> tuple[int, str, str]:
    proc = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        timeout=timeout_s,
    )
    return proc.returncode, proc.stdout, proc.stderr


def check_git(args: list[str], cwd: Path, timeout_s: int = 300) -> str:
    code, out, err = run_git(args, cwd=cwd, timeout_s=timeout_s)
    if code != 0:
        raise GitCommandError(args, code, err)
    return out


def get_repo_toplevel(candidate: Path) -> Optional[Path]:
    if not candidate.is_dir():
        return None
    code, out, _ = run_git(["rev-parse", "--show-toplevel"], cwd=candidate)
    if code != 0:
        return None
    try:
        return Path(out.strip()).resolve()
    except Exception:
        return None


def require_repo(path: Path) -> Path:
    top = get_repo_toplevel(path)
    if top is None:
        if not path.exists():
            raise RepositoryNotFoundError(f"Repo path not found: {path}")
        raise RepositoryNotFoundError(f"Not a git working tree: {path}")
    return top


def has_commits(repo: Path) -> bool:
    code, _, _ = run_git(["rev-parse", "--verify", "--quiet", "HEAD"], cwd=repo)
    return code == 0


HOSTED_SCHEMES = ("https", "http", "ssh", "git", "git+ssh", "ssh+git")


def split_hosted_remote(remote: str) -> tuple[str, str, str] | None:
    """
    Split a hosted remote URL into (host, org, repo).

    Accepts scp-like `user@host:org/repo.git` and `scheme://[user@]host[:port]/org/repo`.
    Userinfo and ports are dropped. Local paths, `file://` URLs and remotes
    without an org component return None.
    """
    r = (remote or "").strip()
    if not r:
        return None

    if "://" not in r and ":" in r and "@" in r.split(":", 1)[0]:
        left, path = r.split(":", 1)
        host = left.split("@", 1)[1]
        if not host or "/" in left:
            return None
    else:
        parsed = urlparse(r)
        if parsed.scheme.lower() not in HOSTED_SCHEMES:
            return None
        try:
            host = parsed.hostname or ""
        except ValueError:
            return None
        path = parsed.path

    path = path.strip("/")
    if path.endswith(".git"):
        path = path[:-4]
    parts = [p for p in path.split("/") if p]
    if not host or len(parts) < 2:
        return None
    return host.lower(), "/".join(parts[:-1]), parts[-1]


def get_remote_urls(repo: Path) -> dict[str, str]:
    code, out, _ = run_git(["config", "--get-regexp", r"^remote\..*\.url$"], cwd=repo)
    if code != 0:
        return {}
    remotes: dict[str, str] = {}
    for line in out.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            key, url = line.split(None, 1)
        except ValueError:
            continue
        if not key.startswith("remote.") or not key.endswith(".url"):
            continue
        name = key[len("remote.") : -len(".url")]
        url = url.strip()
        if name and url:
            remotes[name] = url
    return remotes


def select_remote(remotes: dict[str, str], priority: list[str]) -> tuple[str, str]:
    if not remotes:
        return "", ""

    prio_index = {name: i for i, name in enumerate(priority)}

    def sort_key(item: tuple[str, str]) -> tuple[int, str]:
        name = item[0]
        return (prio_index.get(name, 10_000), name.lower())

    name, url = sorted(remotes.items(), key=sort_key)[0]
    return name, url


def current_branch(repo: Path) -> str:
    code, out, _ = run_git(["symbolic-ref", "--quiet", "--short", "HEAD"], cwd=repo)
    if code != 0:
        return ""
    return out.strip()


def upstream_ref(repo: Path) -> str:
    code, out, _ = run_git(["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}"], cwd=repo)
    if code != 0:
        return ""
    return out.strip()


def ahead_behind(repo: Path, upstream: str) -> tuple[int, int]:
    out = check_git(["rev-list", "--left-right", "--count", f"HEAD...{upstream}"], cwd=repo)
    parts = out.split()
    if len(parts) != 2:
        return 0, 0
    return int(parts[0]), int(parts[1])


def has_staged_changes(repo: Path) -> bool:
    code, _, err = run_git(["diff", "--cached", "--quiet"], cwd=repo)
    if code == 0:
        return False
    if code == 1:
        return True
    raise GitCommandError(["diff", "--cached", "--quiet"], code, err)
