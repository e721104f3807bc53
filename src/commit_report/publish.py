from __future__ import annotations

import subprocess
import sys
from pathlib import Path

from .git import (
    GitCommandError,
    ahead_behind,
    check_git,
    current_branch,
    get_remote_urls,
    get_repo_toplevel,
    has_staged_changes,
    run_git,
    select_remote,
    upstream_ref,
)
from .models import PublishFailure, PublishResult, PublishStatus

REMOTE_NAME_PRIORITY = ["origin", "upstream"]


class PublishError(RuntimeError):
    def __init__(self, failure: PublishFailure, detail: str) -> None:
        self.failure = failure
        self.detail = detail
        super().__init__(detail)


def _step(repo: Path, args: list[str], failure: PublishFailure, timeout_s: int) -> str:
    try:
        return check_git(args, cwd=repo, timeout_s=timeout_s)
    except GitCommandError as e:
        raise PublishError(failure, e.stderr or str(e)) from e


def _open_repo(repo: Path) -> tuple[Path, str]:
    top = get_repo_toplevel(repo)
    if top is None:
        raise PublishError(PublishFailure.NOT_A_REPOSITORY, f"not a git working tree: {repo}")
    remote, _ = select_remote(get_remote_urls(top), REMOTE_NAME_PRIORITY)
    if not remote:
        raise PublishError(PublishFailure.NO_REMOTE, "no remote configured")
    return top, remote


def _push_set_upstream(top: Path, remote: str, timeout_s: int) -> None:
    branch = current_branch(top)
    if not branch:
        raise PublishError(PublishFailure.PUSH_FAILED, "detached HEAD; cannot set upstream")
    _step(top, ["push", "--set-upstream", remote, branch], PublishFailure.PUSH_FAILED, timeout_s)


def _commit_staged(top: Path, message: str, timeout_s: int) -> bool:
    if not has_staged_changes(top):
        return False
    _step(top, ["commit", "-m", message], PublishFailure.COMMIT_FAILED, timeout_s)
    return True


def _sync_with_upstream(top: Path, remote: str, upstream: str, timeout_s: int) -> None:
    _step(top, ["fetch", remote], PublishFailure.FETCH_FAILED, timeout_s)
    _, behind = ahead_behind(top, upstream)
    if behind <= 0:
        return
    try:
        check_git(["merge", "--no-edit", upstream], cwd=top, timeout_s=timeout_s)
    except GitCommandError as e:
        run_git(["merge", "--abort"], cwd=top)
        raise PublishError(PublishFailure.MERGE_FAILED, e.stderr or str(e)) from e


def _report_failure(name: str, failure: PublishFailure, detail: str) -> PublishResult:
    print(f"Publish failed for {name} ({failure.value}): {detail}", file=sys.stderr)
    return PublishResult.failed(name, failure, detail)


def publish_project(repo: Path, message: str, *, name: str = "", timeout_s: int = 300) -> PublishResult:
    """
    Stage, commit and push everything pending in a project's working tree.

    When the branch tracks an upstream, the remote is fetched first and the
    upstream merged in if the local branch is behind. A tree with nothing to
    commit and nothing to push is reported as NO_CHANGES.
    """
    name = name or repo.name
    try:
        top, remote = _open_repo(repo)
        upstream = upstream_ref(top)
        if upstream:
            _sync_with_upstream(top, remote, upstream, timeout_s)
        _step(top, ["add", "-A"], PublishFailure.STAGE_FAILED, timeout_s)
        committed = _commit_staged(top, message, timeout_s)
        if not upstream:
            _push_set_upstream(top, remote, timeout_s)
            return PublishResult.success(name, PublishStatus.PUSHED, committed=committed)
        ahead, _ = ahead_behind(top, upstream)
        if not committed and ahead <= 0:
            return PublishResult.success(name, PublishStatus.NO_CHANGES)
        _step(top, ["push"], PublishFailure.PUSH_FAILED, timeout_s)
        return PublishResult.success(name, PublishStatus.PUSHED, committed=committed)
    except PublishError as e:
        return _report_failure(name, e.failure, e.detail)
    except GitCommandError as e:
        return _report_failure(name, PublishFailure.PUSH_FAILED, str(e))
    except subprocess.TimeoutExpired as e:
        return _report_failure(name, PublishFailure.TIMED_OUT, f"git {' '.join(map(str, e.cmd[1:]))} timed out after {e.timeout}s")
    except OSError as e:
        return _report_failure(name, PublishFailure.STAGE_FAILED, str(e))


def publish_report_repo(
    repo: Path,
    message: str,
    *,
    paths: list[Path] | None = None,
    name: str = "",
    timeout_s: int = 300,
) -> PublishResult:
    """
    Commit and push generated reports in the report repository.

    When `paths` is given only those paths are staged, and none of them
    existing stages nothing. A branch without upstream is pushed with
    --set-upstream. With an upstream and a clean stage the call succeeds
    without creating a commit.
    """
    name = name or repo.name
    try:
        top, remote = _open_repo(repo)
        if paths is None:
            _step(top, ["add", "-A"], PublishFailure.STAGE_FAILED, timeout_s)
        else:
            # Only the report paths are staged; nothing on disk means nothing to stage.
            existing = [str(p.resolve()) for p in paths if p.exists()]
            if existing:
                _step(top, ["add", "-A", "--", *existing], PublishFailure.STAGE_FAILED, timeout_s)

        upstream = upstream_ref(top)
        if not upstream:
            committed = _commit_staged(top, message, timeout_s)
            _push_set_upstream(top, remote, timeout_s)
            return PublishResult.success(name, PublishStatus.PUSHED, committed=committed)

        if not _commit_staged(top, message, timeout_s):
            return PublishResult.success(name, PublishStatus.NO_CHANGES)
        _step(top, ["push"], PublishFailure.PUSH_FAILED, timeout_s)
        return PublishResult.success(name, PublishStatus.PUSHED, committed=True)
    except PublishError as e:
        return _report_failure(name, e.failure, e.detail)
    except GitCommandError as e:
        return _report_failure(name, PublishFailure.PUSH_FAILED, str(e))
    except subprocess.TimeoutExpired as e:
        return _report_failure(name, PublishFailure.TIMED_OUT, f"git {' '.join(map(str, e.cmd[1:]))} timed out after {e.timeout}s")
    except OSError as e:
        return _report_failure(name, PublishFailure.STAGE_FAILED, str(e))
