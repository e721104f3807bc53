from __future__ import annotations

import json
import sys
from pathlib import Path

from .days import slugify
from .git import run_git
from .models import Project, ReportConfig


class ConfigurationError(ValueError):
    pass


def load_config(config_path: Path) -> dict:
    if not config_path.exists():
        return {}
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a JSON object in {config_path}")
    return data


def save_config(config_path: Path, config: dict) -> None:
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(config, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def infer_authors() -> list[str]:
    code, out, _ = run_git(["config", "--global", "--get", "user.name"], cwd=Path.cwd())
    if code == 0 and out.strip():
        return [out.strip()]
    return []


def _prompt_str(prompt: str) -> str:
    try:
        return input(prompt).strip()
    except EOFError:
        return ""


def ensure_config_file(*, config_path: Path, template_path: Path, interactive: bool | None = None) -> dict:
    """
    If `config_path` does not exist, create it from `template_path`, fill the
    author list from the global git identity when the template leaves it
    empty, optionally let the user review it, then re-load and return it.
    """
    if config_path.exists():
        return load_config(config_path)

    template: dict
    if template_path.exists():
        try:
            template = json.loads(template_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {template_path}: {e}") from e
        if not isinstance(template, dict):
            raise ConfigurationError(f"Expected a JSON object in {template_path}")
    else:
        template = {}

    config = json.loads(json.dumps(template)) if template else {}
    if isinstance(config.get("authors"), list) and not config.get("authors"):
        inferred = infer_authors()
        if inferred:
            config["authors"] = inferred

    save_config(config_path, config)

    if interactive is None:
        interactive = sys.stdin.isatty() and sys.stdout.isatty()

    if interactive:
        print(f"\nWrote new config: {config_path}")
        print(f"- projects: {config.get('projects', [])!r}")
        print(f"- authors: {config.get('authors', [])!r}")
        print("\nEdit the file now if needed, then press Enter to continue.")
        _ = _prompt_str("")

    return load_config(config_path)


def _resolve(base_dir: Path, value: str) -> Path:
    p = Path(value).expanduser()
    if not p.is_absolute():
        p = base_dir / p
    return p.resolve()


def _parse_projects(raw: object, base_dir: Path) -> tuple[Project, ...]:
    if not isinstance(raw, list):
        raise ConfigurationError("`projects` must be a list of {name, path} objects")
    projects: list[Project] = []
    seen: set[str] = set()
    slugs: dict[str, str] = {}
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ConfigurationError(f"projects[{i}] must be an object")
        name = str(item.get("name", "") or "").strip()
        path = str(item.get("path", "") or "").strip()
        if not name or not path:
            raise ConfigurationError(f"projects[{i}] needs both `name` and `path`")
        if "/" in name or "\\" in name or name in (".", ".."):
            raise ConfigurationError(f"projects[{i}].name is not a valid directory name: {name!r}")
        if name in seen:
            raise ConfigurationError(f"Duplicate project name: {name}")
        seen.add(name)
        slug = slugify(name)
        if slug in slugs:
            raise ConfigurationError(f"Project names {slugs[slug]!r} and {name!r} collide once turned into page ids; rename one of them.")
        slugs[slug] = name
        projects.append(Project(name=name, path=_resolve(base_dir, path)))
    return tuple(projects)


def build_report_config(raw: dict, *, base_dir: Path) -> ReportConfig:
    projects = _parse_projects(raw.get("projects", []) or [], base_dir)
    if not projects:
        raise ConfigurationError("No projects configured; add entries to `projects` in the config file.")

    authors = tuple(str(a).strip() for a in (raw.get("authors") or []) if str(a).strip())
    try:
        index_days = int(raw.get("index_days", 30))
    except (TypeError, ValueError):
        raise ConfigurationError(f"`index_days` must be an integer, got {raw.get('index_days')!r}") from None
    if index_days < 1:
        raise ConfigurationError("`index_days` must be >= 1")

    return ReportConfig(
        projects=projects,
        report_root=_resolve(base_dir, str(raw.get("report_root", "logs") or "logs")),
        report_repo=_resolve(base_dir, str(raw.get("report_repo", ".") or ".")),
        authors=authors,
        filter_authors=bool(raw.get("filter_authors", bool(authors))),
        link_host=str(raw.get("link_host", "") or "").strip(),
        link_org=str(raw.get("link_org", "") or "").strip(),
        index_days=index_days,
        publish_projects=bool(raw.get("publish_projects", True)),
    )
