from __future__ import annotations

from collections import Counter

from ..models import Create, Delete, Intent, Noop, SyncReport, Update

_ACTIONS = (("Created", Create), ("Updated", Update), ("Deleted", Delete), ("Unchanged", Noop))


def _counts(intents: list[Intent]) -> Counter[type]:
    return Counter(type(i) for i in intents)


def format_markdown(report: SyncReport) -> str:
    lines: list[str] = []
    suffix = " (dry run)" if report.dry_run else ""
    lines.append(f"# Lint comments: {report.repository}#{report.number}{suffix}")
    lines.append("")
    lines.append(f"> {report.offense_count} offenses in {len(report.files_checked)} checked files")
    lines.append("")

    line_counts = _counts(report.line_intents)
    outside_counts = _counts(report.outside_diff_intents)
    lines.append("| Comments | Line | Outside diff |")
    lines.append("| --- | --- | --- |")
    for label, kind in _ACTIONS:
        lines.append(f"| {label} | {line_counts[kind]} | {outside_counts[kind]} |")
    lines.append("")

    if report.deferred:
        lines.append(f"### Deferred to the outside-diff comment ({len(report.deferred)})")
        lines.append("")
        for marker in report.deferred:
            lines.append(f"- `{marker}`")
        lines.append("")

    return "\n".join(lines)
