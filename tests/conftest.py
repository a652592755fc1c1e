"""Shared factories and fixtures for the test suite."""
from __future__ import annotations

import itertools

import pytest

from lintsync.config import Settings
from lintsync.errors import DiffRejectedError
from lintsync.models import ChangedFile, Offense, OffenseGroup, PullRequestContext, RemoteComment

REPO = "owner/repo"
API = "https://api.github.com"

# ---------------------------------------------------------------------------
# REST payload factories — return raw dicts that mirror API responses
# ---------------------------------------------------------------------------


def file_node(
    filename: str = "app/foo.rb",
    status: str = "modified",
    patch: str | None = "@@ -1,3 +1,4 @@\n context\n-removed\n+added\n context2",
) -> dict:
    node = {"filename": filename, "status": status}
    if patch is not None:
        node["patch"] = patch
    return node


def review_comment_node(
    id: int = 1,
    body: str = "Fix this",
    path: str = "app/foo.rb",
    line: int | None = 2,
) -> dict:
    return {"id": id, "body": body, "path": path, "line": line}


def issue_comment_node(id: int = 100, body: str = "Looks good") -> dict:
    return {"id": id, "body": body}


def offense_node(
    line: int = 2,
    cop_name: str = "Layout/TrailingWhitespace",
    message: str = "Trailing whitespace detected.",
    correctable: bool = False,
) -> dict:
    return {
        "severity": "convention",
        "message": message,
        "cop_name": cop_name,
        "corrected": False,
        "correctable": correctable,
        "location": {"start_line": line, "start_column": 1, "line": line, "column": 1, "length": 1},
    }


def linter_report(files: dict[str, list[dict]] | None = None) -> dict:
    files = files or {}
    return {
        "metadata": {"rubocop_version": "1.60.0"},
        "files": [{"path": path, "offenses": offenses} for path, offenses in files.items()],
        "summary": {
            "offense_count": sum(len(o) for o in files.values()),
            "target_file_count": len(files),
            "inspected_file_count": len(files),
        },
    }


# ---------------------------------------------------------------------------
# Model object factories — construct typed model instances
# ---------------------------------------------------------------------------


def make_offense(
    path: str = "app/foo.rb",
    line: int = 10,
    rule: str = "Layout/TrailingWhitespace",
    message: str = "trailing whitespace",
    correctable: bool = False,
) -> Offense:
    return Offense(path=path, line=line, rule=rule, message=message, correctable=correctable)


def make_group(
    path: str = "app/foo.rb",
    line: int = 10,
    offenses: list[Offense] | None = None,
    in_diff: bool = True,
) -> OffenseGroup:
    if offenses is None:
        offenses = [make_offense(path=path, line=line)]
    return OffenseGroup(path=path, line=line, offenses=tuple(offenses), in_diff=in_diff)


def make_changed_file(path: str = "app/foo.rb", lines: set[int] | None = None) -> ChangedFile:
    return ChangedFile(path=path, patch=None, changed_lines=frozenset(lines or set()))


def make_context(number: int = 7, head_sha: str = "abc123") -> PullRequestContext:
    return PullRequestContext(repository=REPO, number=number, head_sha=head_sha)


def make_settings(**overrides) -> Settings:
    values = {"token": "tok", "repository": REPO, "event_path": None}
    values.update(overrides)
    return Settings(**values)


# ---------------------------------------------------------------------------
# In-memory stand-in for GitHubClient
# ---------------------------------------------------------------------------


class FakeGitHub:
    """Keeps review and issue comments in memory and records every write."""

    def __init__(
        self,
        files: list[ChangedFile] | None = None,
        review_comments: list[RemoteComment] | None = None,
        issue_comments: list[RemoteComment] | None = None,
        reject_lines: set[tuple[str, int]] | None = None,
    ) -> None:
        self.files = list(files or [])
        self.review_comments = {c.id: c for c in review_comments or []}
        self.issue_comments = {c.id: c for c in issue_comments or []}
        self.reject_lines = reject_lines or set()
        self.calls: list[tuple] = []
        self._ids = itertools.count(1000)

    def list_changed_files(self, repo, number):
        return list(self.files)

    def list_review_comments(self, repo, number):
        return list(self.review_comments.values())

    def list_issue_comments(self, repo, number):
        return list(self.issue_comments.values())

    def create_review_comment(self, repo, number, commit_id, path, line, body):
        self.calls.append(("create_review_comment", path, line))
        if (path, line) in self.reject_lines:
            raise DiffRejectedError("rejected", status_code=422)
        comment = RemoteComment(id=next(self._ids), body=body, path=path, line=line)
        self.review_comments[comment.id] = comment
        return comment

    def update_review_comment(self, repo, comment_id, body):
        self.calls.append(("update_review_comment", comment_id))
        old = self.review_comments[comment_id]
        self.review_comments[comment_id] = RemoteComment(id=comment_id, body=body, path=old.path, line=old.line)
        return self.review_comments[comment_id]

    def delete_review_comment(self, repo, comment_id):
        self.calls.append(("delete_review_comment", comment_id))
        del self.review_comments[comment_id]

    def create_issue_comment(self, repo, number, body):
        self.calls.append(("create_issue_comment",))
        comment = RemoteComment(id=next(self._ids), body=body)
        self.issue_comments[comment.id] = comment
        return comment

    def update_issue_comment(self, repo, comment_id, body):
        self.calls.append(("update_issue_comment", comment_id))
        self.issue_comments[comment_id] = RemoteComment(id=comment_id, body=body)
        return self.issue_comments[comment_id]

    def delete_issue_comment(self, repo, comment_id):
        self.calls.append(("delete_issue_comment", comment_id))
        del self.issue_comments[comment_id]


# ---------------------------------------------------------------------------
# Autouse fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def no_dotenv(mocker):
    """Prevent tests from loading a real .env file."""
    mocker.patch("lintsync.cli.load_dotenv")
