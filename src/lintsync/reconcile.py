"""Turn desired comment state and existing comments into create/update/delete intents.

Each comment this tool owns embeds a marker line
``<!-- rubocop-comment-id: <marker> -->``. The marker is the only identity used
to match a desired comment to a remote one, so a population of comments behaves
like a key-value store keyed by marker with the body as value.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence

from .models import (
    OUTSIDE_DIFF_MARKER,
    Create,
    Delete,
    DesiredComment,
    Intent,
    Noop,
    OffenseGroup,
    RemoteComment,
    Update,
    marker_line,
)

OUTSIDE_DIFF_PREAMBLE = "Rubocop offenses found outside of the diff:"


def index_by_marker(
    comments: Iterable[RemoteComment],
) -> tuple[dict[str, RemoteComment], list[RemoteComment]]:
    """Map marker -> first comment carrying it.

    Later comments repeating a marker are returned separately. Comments without
    a marker are not ours and are dropped.
    """
    live: dict[str, RemoteComment] = {}
    surplus: list[RemoteComment] = []
    for comment in comments:
        marker = comment.marker
        if marker is None:
            continue
        if marker in live:
            surplus.append(comment)
        else:
            live[marker] = comment
    return live, surplus


def reconcile(
    desired: Sequence[DesiredComment],
    actual: Iterable[RemoteComment],
) -> list[Intent]:
    live, surplus = index_by_marker(actual)
    wanted = {d.marker for d in desired}
    intents: list[Intent] = []

    for marker, comment in live.items():
        if marker not in wanted:
            intents.append(Delete(marker=marker, comment_id=comment.id))
    for comment in surplus:
        intents.append(Delete(marker=comment.marker or "", comment_id=comment.id))

    for d in desired:
        existing = live.get(d.marker)
        if existing is None:
            intents.append(Create(marker=d.marker, body=d.body, path=d.path, line=d.line))
        elif existing.body == d.body:
            intents.append(Noop(marker=d.marker, comment_id=existing.id))
        else:
            intents.append(Update(marker=d.marker, comment_id=existing.id, body=d.body))

    return intents


def plan_line_comments(
    groups: Iterable[OffenseGroup],
    comments: Iterable[RemoteComment],
) -> list[Intent]:
    desired = [
        DesiredComment(marker=g.marker, body=g.body, path=g.path, line=g.line)
        for g in groups
        if g.in_diff
    ]
    # The aggregate never lives in the review comment population.
    actual = [c for c in comments if c.marker != OUTSIDE_DIFF_MARKER]
    return reconcile(desired, actual)


def outside_diff_body(groups: Sequence[OffenseGroup]) -> str | None:
    if not groups:
        return None
    entries = "\n\n".join(f"**{g.path}:{g.line}**\n{g.message}" for g in groups)
    return f"{marker_line(OUTSIDE_DIFF_MARKER)}\n{OUTSIDE_DIFF_PREAMBLE}\n\n{entries}"


def plan_outside_diff_comment(
    groups: Sequence[OffenseGroup],
    comments: Iterable[RemoteComment],
) -> list[Intent]:
    """Plan the single aggregate issue comment for ``groups``.

    ``groups`` are the offense groups that cannot be line comments. An empty
    sequence means the aggregate should not exist.
    """
    body = outside_diff_body(groups)
    desired = [] if body is None else [DesiredComment(marker=OUTSIDE_DIFF_MARKER, body=body)]
    actual = [c for c in comments if c.marker == OUTSIDE_DIFF_MARKER]
    return reconcile(desired, actual)
