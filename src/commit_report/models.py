from __future__ import annotations

import dataclasses
import datetime as dt
import enum
from pathlib import Path


@dataclasses.dataclass(frozen=True)
class Project:
    name: str
    path: Path


@dataclasses.dataclass(frozen=True)
class CommitRecord:
    hash: str
    message: str
    timestamp: dt.datetime  # author date, timezone-aware
    author_name: str
    author_email: str = ""
    link: str = ""

    @property
    def short_hash(self) -> str:
        return self.hash[:7]


@dataclasses.dataclass(frozen=True)
class ReportConfig:
    projects: tuple[Project, ...]
    report_root: Path
    report_repo: Path
    authors: tuple[str, ...] = ()
    filter_authors: bool = True
    link_host: str = ""
    link_org: str = ""
    index_days: int = 30
    publish_projects: bool = True

    @property
    def index_path(self) -> Path:
        return self.report_repo / "index.html"


class PublishStatus(enum.Enum):
    PUSHED = "pushed"
    NO_CHANGES = "no_changes"


class PublishFailure(enum.Enum):
    NOT_A_REPOSITORY = "not_a_repository"
    NO_REMOTE = "no_remote"
    FETCH_FAILED = "fetch_failed"
    MERGE_FAILED = "merge_failed"
    STAGE_FAILED = "stage_failed"
    COMMIT_FAILED = "commit_failed"
    PUSH_FAILED = "push_failed"
    TIMED_OUT = "timed_out"


@dataclasses.dataclass(frozen=True)
class PublishResult:
    name: str
    status: PublishStatus | None = None
    failure: PublishFailure | None = None
    detail: str = ""
    committed: bool = False

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, name: str, status: PublishStatus, *, committed: bool = False, detail: str = "") -> "PublishResult":
        return cls(name=name, status=status, committed=committed, detail=detail)

    @classmethod
    def failed(cls, name: str, failure: PublishFailure, detail: str = "") -> "PublishResult":
        return cls(name=name, failure=failure, detail=detail)
