from __future__ import annotations

import dataclasses
import fnmatch


def normalize_email(email: str) -> str:
    return email.strip().lower()


def normalize_name(name: str) -> str:
    return name.strip().casefold()


def _is_glob(pattern: str) -> bool:
    return any(ch in pattern for ch in "*?[")


@dataclasses.dataclass(frozen=True)
class AuthorMatcher:
    """
    Matches commit authors against a set of configured identities.

    A plain token matches when it occurs (case-insensitively) in the author
    name or email, so "alice" accepts "Alice Smith <alice@example.com>".
    Tokens containing glob characters are matched with fnmatch against the
    full name and the email.
    """

    tokens: frozenset[str]
    globs: tuple[str, ...] = ()

    @classmethod
    def from_names(cls, names: list[str] | tuple[str, ...]) -> "AuthorMatcher":
        tokens: set[str] = set()
        globs: list[str] = []
        for n in names:
            s = normalize_name(str(n))
            if not s:
                continue
            if _is_glob(s):
                if s not in globs:
                    globs.append(s)
            else:
                tokens.add(s)
        return cls(frozenset(tokens), tuple(globs))

    def __bool__(self) -> bool:
        return bool(self.tokens or self.globs)

    def matches(self, author_name: str, author_email: str = "") -> bool:
        name = normalize_name(author_name)
        email = normalize_email(author_email)
        for tok in self.tokens:
            if name and tok in name:
                return True
            if email and tok in email:
                return True
        for pat in self.globs:
            if name and fnmatch.fnmatch(name, pat):
                return True
            if email and fnmatch.fnmatch(email, pat):
                return True
        return False
