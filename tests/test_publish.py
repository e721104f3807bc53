from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

from commit_report.git import upstream_ref
from commit_report.models import PublishFailure, PublishStatus
from commit_report.publish import publish_project, publish_report_repo


def _run(cmd: list[str], *, cwd: Path) -> str:
    proc = subprocess.run(cmd, cwd=str(cwd), check=True, capture_output=True, text=True)
    return proc.stdout


def _configure(repo: Path) -> None:
    _run(["git", "config", "user.name", "Test User"], cwd=repo)
    _run(["git", "config", "user.email", "test@example.com"], cwd=repo)
    _run(["git", "config", "commit.gpgsign", "false"], cwd=repo)


def _init_with_remote(tmp_path: Path, name: str, *, push: bool = True) -> tuple[Path, Path]:
    remote = tmp_path / f"{name}.git"
    remote.mkdir()
    _run(["git", "init", "--bare", "-b", "main"], cwd=remote)
    repo = tmp_path / name
    repo.mkdir()
    _run(["git", "init", "-b", "main"], cwd=repo)
    _configure(repo)
    _run(["git", "remote", "add", "origin", str(remote)], cwd=repo)
    (repo / "README.md").write_text("init\n", encoding="utf-8")
    _run(["git", "add", "README.md"], cwd=repo)
    _run(["git", "commit", "-m", "init"], cwd=repo)
    if push:
        _run(["git", "push", "-u", "origin", "main"], cwd=repo)
    return repo, remote


def _remote_subjects(remote: Path) -> list[str]:
    return _run(["git", "log", "--format=%s", "main"], cwd=remote).splitlines()


def _head(repo: Path) -> str:
    return _run(["git", "rev-parse", "HEAD"], cwd=repo).strip()


def test_project_publish_commits_and_pushes(tmp_path: Path) -> None:
    repo, remote = _init_with_remote(tmp_path, "backend")
    (repo / "notes.txt").write_text("hello\n", encoding="utf-8")

    r = publish_project(repo, "daily update", name="backend")

    assert r.ok
    assert r.status == PublishStatus.PUSHED
    assert r.committed
    assert r.name == "backend"
    assert _remote_subjects(remote) == ["daily update", "init"]


def test_project_publish_clean_tree_is_no_changes(tmp_path: Path) -> None:
    repo, remote = _init_with_remote(tmp_path, "backend")
    before = _head(repo)
    r = publish_project(repo, "daily update")
    assert r.ok
    assert r.status == PublishStatus.NO_CHANGES
    assert _head(repo) == before
    assert _remote_subjects(remote) == ["init"]


def test_project_publish_pushes_unpushed_commits(tmp_path: Path) -> None:
    repo, remote = _init_with_remote(tmp_path, "backend")
    (repo / "a.txt").write_text("a\n", encoding="utf-8")
    _run(["git", "add", "a.txt"], cwd=repo)
    _run(["git", "commit", "-m", "local work"], cwd=repo)

    r = publish_project(repo, "daily update")
    assert r.ok
    assert r.status == PublishStatus.PUSHED
    assert not r.committed
    assert _remote_subjects(remote) == ["local work", "init"]


def test_project_publish_merges_upstream_first(tmp_path: Path) -> None:
    repo, remote = _init_with_remote(tmp_path, "backend")
    other = tmp_path / "other"
    _run(["git", "clone", str(remote), str(other)], cwd=tmp_path)
    _configure(other)
    (other / "theirs.txt").write_text("theirs\n", encoding="utf-8")
    _run(["git", "add", "theirs.txt"], cwd=other)
    _run(["git", "commit", "-m", "their change"], cwd=other)
    _run(["git", "push"], cwd=other)

    (repo / "mine.txt").write_text("mine\n", encoding="utf-8")
    r = publish_project(repo, "my change")

    assert r.ok, r.detail
    assert (repo / "theirs.txt").exists()
    assert _remote_subjects(remote) == ["my change", "their change", "init"]


def test_project_without_upstream_sets_tracking(tmp_path: Path) -> None:
    repo, remote = _init_with_remote(tmp_path, "backend", push=False)
    assert upstream_ref(repo) == ""
    r = publish_project(repo, "first push")
    assert r.ok
    assert r.status == PublishStatus.PUSHED
    assert upstream_ref(repo) == "origin/main"
    assert _remote_subjects(remote) == ["init"]


def test_report_repo_clean_tree_returns_success_without_commit(tmp_path: Path) -> None:
    repo, remote = _init_with_remote(tmp_path, "reports")
    before = _head(repo)

    r = publish_report_repo(repo, "Update report")

    assert r.ok
    assert r.status == PublishStatus.NO_CHANGES
    assert not r.committed
    assert _head(repo) == before
    assert _remote_subjects(remote) == ["init"]


def test_report_repo_stages_only_given_paths(tmp_path: Path) -> None:
    repo, remote = _init_with_remote(tmp_path, "reports")
    (repo / "logs" / "backend").mkdir(parents=True)
    (repo / "logs" / "backend" / "2025-08-20.html").write_text("<p>x</p>", encoding="utf-8")
    (repo / "index.html").write_text("<html></html>\n", encoding="utf-8")
    (repo / "scratch.txt").write_text("not a report\n", encoding="utf-8")

    r = publish_report_repo(repo, "Update report", paths=[repo / "logs", repo / "index.html"])

    assert r.ok
    assert r.status == PublishStatus.PUSHED
    assert r.committed
    assert _remote_subjects(remote) == ["Update report", "init"]
    tracked = _run(["git", "ls-files"], cwd=repo).splitlines()
    assert "logs/backend/2025-08-20.html" in tracked
    assert "index.html" in tracked
    assert "scratch.txt" not in tracked


def test_report_repo_with_missing_report_paths_stages_nothing(tmp_path: Path) -> None:
    repo, remote = _init_with_remote(tmp_path, "reports")
    (repo / "scratch.txt").write_text("not a report\n", encoding="utf-8")
    before = _head(repo)

    r = publish_report_repo(repo, "Update report", paths=[repo / "logs", repo / "index.html"])

    assert r.ok
    assert r.status == PublishStatus.NO_CHANGES
    assert _head(repo) == before
    assert "scratch.txt" not in _run(["git", "ls-files"], cwd=repo).splitlines()
    assert _remote_subjects(remote) == ["init"]


def test_report_repo_without_upstream_commits_and_sets_tracking(tmp_path: Path) -> None:
    repo, remote = _init_with_remote(tmp_path, "reports", push=False)
    (repo / "index.html").write_text("<html></html>\n", encoding="utf-8")

    r = publish_report_repo(repo, "Update report")

    assert r.ok
    assert r.committed
    assert upstream_ref(repo) == "origin/main"
    assert _remote_subjects(remote) == ["Update report", "init"]


def test_report_repo_without_remote_fails_fast(tmp_path: Path) -> None:
    repo = tmp_path / "reports"
    repo.mkdir()
    _run(["git", "init", "-b", "main"], cwd=repo)
    r = publish_report_repo(repo, "Update report")
    assert not r.ok
    assert r.failure == PublishFailure.NO_REMOTE


def test_not_a_repository_fails_fast(tmp_path: Path) -> None:
    d = tmp_path / "plain"
    d.mkdir()
    assert publish_report_repo(d, "Update report").failure == PublishFailure.NOT_A_REPOSITORY
    assert publish_project(tmp_path / "missing", "Update report").failure == PublishFailure.NOT_A_REPOSITORY


def test_push_failure_is_converted_to_result(tmp_path: Path, capsys) -> None:
    repo, remote = _init_with_remote(tmp_path, "reports")
    shutil.rmtree(remote)
    (repo / "index.html").write_text("<html></html>\n", encoding="utf-8")

    r = publish_report_repo(repo, "Update report", name="report")

    assert not r.ok
    assert r.failure == PublishFailure.PUSH_FAILED
    assert r.detail
    assert "Publish failed for report" in capsys.readouterr().err


def test_project_fetch_failure_is_reported_as_fetch_failed(tmp_path: Path) -> None:
    repo, remote = _init_with_remote(tmp_path, "backend")
    shutil.rmtree(remote)
    (repo / "notes.txt").write_text("hello\n", encoding="utf-8")

    r = publish_project(repo, "daily update")

    assert not r.ok
    assert r.failure == PublishFailure.FETCH_FAILED
    assert "notes.txt" not in _run(["git", "ls-files"], cwd=repo).splitlines()
