from __future__ import annotations

from commit_report.identity import AuthorMatcher


def test_author_filter_is_logical_or() -> None:
    m = AuthorMatcher.from_names(["alice", "bot"])
    assert m.matches("alice", "alice@example.com")
    assert m.matches("evosist-bot", "ci@example.com")
    assert not m.matches("bob", "bob@example.com")


def test_match_is_case_insensitive_and_checks_email() -> None:
    m = AuthorMatcher.from_names(["Mohammad"])
    assert m.matches("mohammad rizky", "")
    assert m.matches("M. R.", "mohammad@example.com")


def test_globs() -> None:
    m = AuthorMatcher.from_names(["*-bot"])
    assert m.globs == ("*-bot",)
    assert m.tokens == frozenset()
    assert m.matches("evosist-bot", "")
    assert not m.matches("bot", "")


def test_empty_matcher_is_falsy() -> None:
    assert not AuthorMatcher.from_names([])
    assert not AuthorMatcher.from_names(["  "])
    assert AuthorMatcher.from_names(["alice"])
