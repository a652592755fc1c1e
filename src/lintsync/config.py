from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigError
from .models import PullRequestContext

DEFAULT_FAILURE_EXIT_CODE = 108


@dataclass(frozen=True)
class Settings:
    token: str
    repository: str
    event_path: Path
    failure_exit_code: int = DEFAULT_FAILURE_EXIT_CODE
    extensions: tuple[str, ...] = (".rb",)
    linter_args: tuple[str, ...] = ()
    gem_versions: str | None = None
    dry_run: bool = False


def validate_repository(value: str | None) -> str:
    if not value:
        raise ConfigError("GITHUB_REPOSITORY is not set.")
    owner, _, name = value.partition("/")
    if not owner or not name or "/" in name:
        raise ConfigError(f"{value!r} is not a valid OWNER/REPO format.")
    return value


def load_pull_request_context(event_path: Path | None, repository: str) -> PullRequestContext:
    """Read the pull request number and head SHA from a GitHub event payload."""
    if event_path is None:
        raise ConfigError("GITHUB_EVENT_PATH is not set.")
    try:
        event = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Could not read event file {event_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Event file {event_path} is not valid JSON: {exc}") from exc

    pull_request = event.get("pull_request") if isinstance(event, dict) else None
    if not isinstance(pull_request, dict):
        raise ConfigError("Event payload has no pull_request; run this on pull_request events.")
    try:
        number = int(pull_request["number"])
        head_sha = pull_request["head"]["sha"]
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigError(f"Event payload is missing pull request field {exc}") from exc

    return PullRequestContext(repository=repository, number=number, head_sha=head_sha)
