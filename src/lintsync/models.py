from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Union

from .diff import changed_lines

MARKER_KEY = "rubocop-comment-id"
OUTSIDE_DIFF_MARKER = "outside-diff"

_MARKER_RE = re.compile(r"<!-- rubocop-comment-id: (?P<marker>.+?) -->")


def marker_line(marker: str) -> str:
    return f"<!-- {MARKER_KEY}: {marker} -->"


def extract_marker(body: str) -> str | None:
    m = _MARKER_RE.search(body)
    return m.group("marker") if m else None


@dataclass(frozen=True)
class ChangedFile:
    path: str
    patch: str | None = None
    status: str = "modified"
    changed_lines: frozenset[int] = frozenset()

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> ChangedFile:
        patch = item.get("patch")
        return cls(
            path=item["filename"],
            patch=patch,
            status=item.get("status", "modified"),
            changed_lines=frozenset(changed_lines(patch)),
        )


@dataclass(frozen=True)
class Offense:
    path: str
    line: int
    rule: str
    message: str
    correctable: bool = False

    def render(self) -> str:
        prefix = "[Correctable] " if self.correctable else ""
        return f"{prefix}{self.rule}: {self.message}"


@dataclass(frozen=True)
class OffenseGroup:
    path: str
    line: int
    offenses: tuple[Offense, ...]
    in_diff: bool

    @property
    def marker(self) -> str:
        return f"{self.path}-{self.line}"

    @property
    def message(self) -> str:
        return "\n".join(offense.render() for offense in self.offenses)

    @property
    def body(self) -> str:
        return f"{marker_line(self.marker)}\n{self.message}\n"


@dataclass(frozen=True)
class RemoteComment:
    id: int
    body: str
    path: str | None = None
    line: int | None = None

    @property
    def marker(self) -> str | None:
        return extract_marker(self.body)


@dataclass(frozen=True)
class DesiredComment:
    marker: str
    body: str
    path: str | None = None
    line: int | None = None


@dataclass(frozen=True)
class Create:
    marker: str
    body: str
    path: str | None = None
    line: int | None = None


@dataclass(frozen=True)
class Update:
    marker: str
    comment_id: int
    body: str


@dataclass(frozen=True)
class Delete:
    marker: str
    comment_id: int


@dataclass(frozen=True)
class Noop:
    marker: str
    comment_id: int


Intent = Union[Create, Update, Delete, Noop]


@dataclass(frozen=True)
class PullRequestContext:
    repository: str
    number: int
    head_sha: str


@dataclass
class SyncReport:
    repository: str
    number: int
    offense_count: int = 0
    files_checked: list[str] = field(default_factory=list)
    line_intents: list[Intent] = field(default_factory=list)
    outside_diff_intents: list[Intent] = field(default_factory=list)
    deferred: list[str] = field(default_factory=list)
    dry_run: bool = False
