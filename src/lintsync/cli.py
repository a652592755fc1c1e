from __future__ import annotations

import functools
import os
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from .client import GitHubClient
from .config import DEFAULT_FAILURE_EXIT_CODE, Settings, load_pull_request_context, validate_repository
from .errors import LintSyncError
from .formatters import get_formatter
from .linter import install_gems, resolve_gem_versions, run_linter
from .sync import sync_pull_request

_stderr = Console(stderr=True, soft_wrap=True)


load_dotenv()


@click.group()
def cli() -> None:
    """lintsync — keep pull request comments in sync with RuboCop offenses."""


@cli.command()
@click.option(
    "--repo",
    envvar="GITHUB_REPOSITORY",
    default=None,
    metavar="OWNER/REPO",
    help="Repository of the pull request. Defaults to $GITHUB_REPOSITORY.",
)
@click.option(
    "--event-path",
    envvar="GITHUB_EVENT_PATH",
    type=click.Path(path_type=Path),
    default=None,
    help="GitHub event payload. Defaults to $GITHUB_EVENT_PATH.",
)
@click.option(
    "--failure-exit-code",
    envvar="LINTSYNC_FAILURE_EXIT_CODE",
    type=click.IntRange(min=1, max=255),
    default=DEFAULT_FAILURE_EXIT_CODE,
    show_default=True,
    help="Exit status when offenses are found.",
)
@click.option(
    "--extension",
    "extensions",
    multiple=True,
    default=(".rb",),
    show_default=True,
    help="Only lint changed files ending with this suffix. Repeatable.",
)
@click.option("--linter", default="rubocop", show_default=True, help="Linter executable.")
@click.option("--linter-arg", "linter_args", multiple=True, help="Extra argument passed to the linter. Repeatable.")
@click.option(
    "--gem-versions",
    envvar="RUBOCOP_GEM_VERSIONS",
    default=None,
    help="Gems to install first: 'gemfile' or space separated name:version pairs.",
)
@click.option("--dry-run", is_flag=True, help="Plan comment changes without writing them.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "markdown"]),
    default="markdown",
    show_default=True,
    help="Run report format.",
)
@click.option(
    "--output",
    "output_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Write the run report to a file instead of stdout.",
)
def sync(
    repo: str | None,
    event_path: Path | None,
    failure_exit_code: int,
    extensions: tuple[str, ...],
    linter: str,
    linter_args: tuple[str, ...],
    gem_versions: str | None,
    dry_run: bool,
    output_format: str,
    output_path: Path | None,
) -> None:
    """Lint the files changed by a pull request and sync its review comments."""
    token = os.environ.get("GITHUB_TOKEN")
    if not token:
        _stderr.print("[red]Error:[/red] GITHUB_TOKEN environment variable is not set.")
        sys.exit(1)

    try:
        repository = validate_repository(repo)
        context = load_pull_request_context(event_path, repository)
        settings = Settings(
            token=token,
            repository=repository,
            event_path=event_path,
            failure_exit_code=failure_exit_code,
            extensions=extensions,
            linter_args=linter_args,
            gem_versions=gem_versions,
            dry_run=dry_run,
        )

        if settings.gem_versions:
            _stderr.print("::group::Installing linter gems")
            gems = resolve_gem_versions(settings.gem_versions)
            _stderr.print(f"Installing gems: {' '.join(gems) or '(none)'}")
            install_gems(gems)
            _stderr.print("::endgroup::")

        with GitHubClient(token) as client:
            report = sync_pull_request(
                client,
                context,
                settings,
                run_linter=functools.partial(run_linter, executable=linter),
                console=_stderr,
            )
    except LintSyncError as exc:
        _stderr.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)

    output = get_formatter(output_format)(report)
    if output_path is not None:
        output_path.write_text(output, encoding="utf-8")
        _stderr.print(f"[green]Wrote run report to {output_path}[/green]")
    else:
        click.echo(output)

    if report.offense_count > 0:
        _stderr.print(f"\n{report.offense_count} offenses found! Failing the build...")
        sys.exit(settings.failure_exit_code)
