"""Run the linter on a pull request and bring its comments in line with the offenses."""
from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from rich.console import Console
from rich.markup import escape

from .client import GitHubClient
from .config import Settings
from .errors import DiffRejectedError
from .linter import run_linter as _run_linter
from .models import (
    ChangedFile,
    Create,
    Delete,
    Intent,
    Noop,
    PullRequestContext,
    SyncReport,
    Update,
)
from .offenses import build_offense_groups, count_offenses, parse_report
from .reconcile import plan_line_comments, plan_outside_diff_comment

LinterRunner = Callable[[Sequence[str], Sequence[str]], Any]

_stderr = Console(stderr=True, soft_wrap=True)


def select_files(files: Sequence[ChangedFile], extensions: Sequence[str]) -> list[ChangedFile]:
    return [f for f in files if f.status != "removed" and f.path.endswith(tuple(extensions))]


def sync_pull_request(
    client: GitHubClient,
    context: PullRequestContext,
    settings: Settings,
    run_linter: LinterRunner = _run_linter,
    console: Console = _stderr,
) -> SyncReport:
    repo, number = context.repository, context.number
    report = SyncReport(repository=repo, number=number, dry_run=settings.dry_run)

    files = select_files(client.list_changed_files(repo, number), settings.extensions)
    changed = {f.path: f for f in files}
    report.files_checked = list(changed)

    if changed:
        console.print(f"Running linter on {len(changed)} changed file(s)")
        raw = run_linter(list(changed), settings.linter_args)
    else:
        console.print("No changed files to lint, skipping linter")
        raw = {"files": []}
    offenses = parse_report(raw)
    report.offense_count = count_offenses(offenses)
    groups = build_offense_groups(offenses, changed)

    review_comments = client.list_review_comments(repo, number)
    line_intents = plan_line_comments(groups, review_comments)
    rejected = _apply_line_intents(client, context, line_intents, settings.dry_run, console)
    report.line_intents = line_intents
    report.deferred = rejected

    outside = [g for g in groups if not g.in_diff or g.marker in rejected]
    issue_comments = client.list_issue_comments(repo, number)
    outside_intents = plan_outside_diff_comment(outside, issue_comments)
    _apply_issue_intents(client, context, outside_intents, settings.dry_run, console)
    report.outside_diff_intents = outside_intents

    return report


def _apply_line_intents(
    client: GitHubClient,
    context: PullRequestContext,
    intents: Sequence[Intent],
    dry_run: bool,
    console: Console,
) -> list[str]:
    """Apply review comment intents; return the markers GitHub refused as outside the diff."""
    repo = context.repository
    rejected: list[str] = []
    for intent in intents:
        if isinstance(intent, Noop):
            console.print(f"Skipping unchanged comment {intent.comment_id} on {escape(intent.marker)}")
        elif isinstance(intent, Delete):
            console.print(f"Deleting resolved comment {intent.comment_id} on {escape(intent.marker)}")
            if not dry_run:
                client.delete_review_comment(repo, intent.comment_id)
        elif isinstance(intent, Update):
            console.print(f"Updating comment {intent.comment_id} on {escape(intent.marker)}")
            if not dry_run:
                client.update_review_comment(repo, intent.comment_id, intent.body)
        elif isinstance(intent, Create):
            console.print(f"Commenting on {escape(intent.path)} line {intent.line}")
            if dry_run:
                continue
            try:
                client.create_review_comment(
                    repo, context.number, context.head_sha, intent.path, intent.line, intent.body
                )
            except DiffRejectedError:
                console.print(
                    f"::warning::Deferring comment on {escape(intent.path)} line {intent.line} "
                    "because it isn't part of the diff"
                )
                rejected.append(intent.marker)
    return rejected


def _apply_issue_intents(
    client: GitHubClient,
    context: PullRequestContext,
    intents: Sequence[Intent],
    dry_run: bool,
    console: Console,
) -> None:
    repo = context.repository
    for intent in intents:
        if isinstance(intent, Noop):
            console.print(f"Skipping unchanged outside-diff comment {intent.comment_id}")
        elif isinstance(intent, Delete):
            console.print(f"Deleting outside-diff comment {intent.comment_id}")
            if not dry_run:
                client.delete_issue_comment(repo, intent.comment_id)
        elif isinstance(intent, Update):
            console.print(f"Updating outside-diff comment {intent.comment_id}")
            if not dry_run:
                client.update_issue_comment(repo, intent.comment_id, intent.body)
        elif isinstance(intent, Create):
            console.print("Commenting on pull request with offenses found outside the diff")
            if not dry_run:
                client.create_issue_comment(repo, context.number, intent.body)
