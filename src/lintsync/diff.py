"""Unified diff parsing for GitHub pull request file patches.

GitHub only accepts a line comment on a line that appears in the file's patch:
an added line or an unchanged context line. Removed lines do not exist in the
new file and cannot be commented on.
"""
from __future__ import annotations

import re

_HUNK_RE = re.compile(r"^@@ .+\+(?P<new_start>\d+)(?:,\d+)? @@")


def changed_lines(patch: str | None) -> set[int]:
    """Return the new-file line numbers a review comment can be attached to.

    Every added line and every context line inside a hunk is included. Hunk
    headers and removed lines never are. Lines before the first hunk header
    are ignored.
    """
    lines: set[int] = set()
    line_number: int | None = None

    # Split on "\n" only; content may hold form feeds or Unicode line separators.
    for raw in (patch or "").split("\n"):
        if not raw:
            continue

        m = _HUNK_RE.match(raw)
        if m:
            line_number = int(m.group("new_start"))
            continue

        if line_number is None:
            continue

        if raw.startswith("-"):
            continue

        if raw.startswith("\\"):
            # "\ No newline at end of file"
            continue

        # Added ("+") and context (" ") lines both exist in the new file.
        lines.add(line_number)
        line_number += 1

    return lines
