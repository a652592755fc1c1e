from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .errors import LinterOutputError
from .models import ChangedFile, Offense, OffenseGroup


def parse_report(report: Any) -> list[Offense]:
    """Flatten a RuboCop JSON report into offenses, keeping report order.

    See https://docs.rubocop.org/rubocop/formatters.html#json-formatter
    """
    if not isinstance(report, dict) or not isinstance(report.get("files"), list):
        raise LinterOutputError("Linter report has no 'files' list.")

    offenses: list[Offense] = []
    for file in report["files"]:
        try:
            path = file["path"]
            for node in file["offenses"]:
                offenses.append(
                    Offense(
                        path=path,
                        line=int(node["location"]["line"]),
                        rule=node["cop_name"],
                        message=node["message"],
                        correctable=bool(node.get("correctable", False)),
                    )
                )
        except (KeyError, TypeError, ValueError) as exc:
            raise LinterOutputError(f"Malformed linter report entry: {exc!r}") from exc
    return offenses


def build_offense_groups(
    offenses: Iterable[Offense],
    changed_files: Mapping[str, ChangedFile],
) -> list[OffenseGroup]:
    grouped: dict[tuple[str, int], list[Offense]] = {}
    for offense in offenses:
        grouped.setdefault((offense.path, offense.line), []).append(offense)

    groups: list[OffenseGroup] = []
    for (path, line), members in grouped.items():
        changed = changed_files.get(path)
        groups.append(
            OffenseGroup(
                path=path,
                line=line,
                offenses=tuple(members),
                in_diff=changed is not None and line in changed.changed_lines,
            )
        )
    return groups


def count_offenses(offenses: Iterable[Offense]) -> int:
    return sum(1 for _ in offenses)
