from __future__ import annotations

import json
import re
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from .errors import LinterError, LinterOutputError

# "    rubocop-rails (2.23.1)" under a specs: block, four spaces deep
_LOCKFILE_SPEC_RE = re.compile(r"^ {4}(?P<name>rubocop[\w-]*) \((?P<version>[^)]+)\)$")


def extract_json(output: str) -> dict[str, Any]:
    """Pull the JSON object out of linter output that may carry other noise."""
    start = output.find("{")
    end = output.rfind("}")
    if start == -1 or end < start:
        raise LinterOutputError("No JSON object found in linter output.")
    try:
        data = json.loads(output[start : end + 1])
    except json.JSONDecodeError as exc:
        raise LinterOutputError(f"Linter output is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise LinterOutputError("Linter output is not a JSON object.")
    return data


def run_linter(
    paths: Sequence[str],
    extra_args: Sequence[str] = (),
    executable: str = "rubocop",
) -> dict[str, Any]:
    if not paths:
        return {"files": []}

    command = [executable, *paths, "--format", "json", "--force-exclusion", *extra_args]
    try:
        result = subprocess.run(
            command, capture_output=True, text=True, encoding="utf-8", errors="replace", check=False
        )
    except OSError as exc:
        raise LinterError(f"Could not run {executable}: {exc}") from exc

    # rubocop exits 1 when it finds offenses; only the output decides.
    try:
        return extract_json(result.stdout)
    except LinterOutputError as exc:
        stderr_tail = "\n".join((result.stderr or "").strip().splitlines()[-5:])
        if not stderr_tail:
            raise
        raise LinterOutputError(f"{exc} {executable} stderr:\n{stderr_tail}") from exc


def resolve_gem_versions(value: str, lockfile: Path = Path("Gemfile.lock")) -> list[str]:
    """Return ``name:version`` gem requirements.

    ``value`` is either the word ``gemfile``, meaning every rubocop gem pinned in
    ``lockfile``, or whitespace separated requirements used as-is.
    """
    if value.strip().lower() != "gemfile":
        return value.split()

    try:
        text = lockfile.read_text(encoding="utf-8")
    except OSError as exc:
        raise LinterError(f"Could not read {lockfile}: {exc}") from exc

    gems: list[str] = []
    for line in text.splitlines():
        m = _LOCKFILE_SPEC_RE.match(line)
        if m:
            gems.append(f"{m.group('name')}:{m.group('version')}")
    return gems


def install_gems(gems: Sequence[str]) -> list[str]:
    """Install ``gems``; returns the command that was run."""
    command = ["gem", "install", *gems, "--no-document", "--conservative"]
    if not gems:
        return command
    try:
        subprocess.run(command, check=True)
    except (OSError, subprocess.CalledProcessError) as exc:
        raise LinterError(f"Gem installation failed: {exc}") from exc
    return command
