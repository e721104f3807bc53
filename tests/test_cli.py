from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

from commit_report.cli import main


def test_root_help_mentions_options(tmp_path: Path) -> None:
    env = os.environ.copy()
    env["PYTHONPATH"] = str(Path(__file__).resolve().parents[1] / "src")
    cmd = [sys.executable, "-m", "commit_report", "--help"]
    proc = subprocess.run(cmd, cwd=str(tmp_path), env=env, text=True, capture_output=True)
    assert proc.returncode == 0, proc.stderr
    out = proc.stdout
    assert "--backfill" in out
    assert "--no-push" in out
    assert "dashboard" in out


def _git(args: list[str], cwd: Path) -> None:
    subprocess.run(["git", *args], cwd=str(cwd), check=True, capture_output=True, text=True)


def test_no_push_run_writes_reports(tmp_path: Path) -> None:
    project = tmp_path / "backend"
    project.mkdir()
    _git(["init", "-b", "main"], project)
    reports = tmp_path / "reports"
    reports.mkdir()
    config_path = reports / "config.json"
    config_path.write_text(
        json.dumps({"projects": [{"name": "backend", "path": "../backend"}], "report_root": "logs"}),
        encoding="utf-8",
    )

    code = main(["--config", str(config_path), "--date", "2025-08-20", "--days", "2", "--backfill", "--no-push"])

    assert code == 0
    assert (reports / "logs" / "backend" / "2025-08-20.html").exists()
    assert (reports / "logs" / "backend" / "2025-08-19.html").exists()
    assert (reports / "index.html").exists()


def test_missing_projects_is_a_config_error(tmp_path: Path, capsys) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("{}", encoding="utf-8")
    assert main(["--config", str(config_path), "--no-push"]) == 2
    assert "No projects configured" in capsys.readouterr().err


def test_short_message_aborts(tmp_path: Path, capsys) -> None:
    project = tmp_path / "backend"
    project.mkdir()
    _git(["init", "-b", "main"], project)
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"projects": [{"name": "backend", "path": "backend"}]}), encoding="utf-8")
    assert main(["--config", str(config_path), "--date", "2025-08-20", "-m", "wip"]) == 2
    assert "Aborted" in capsys.readouterr().err
    assert not (tmp_path / "logs").exists()
