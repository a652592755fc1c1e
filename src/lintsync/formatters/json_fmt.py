from __future__ import annotations

import dataclasses
import json
from typing import Any

from ..models import Intent, SyncReport


def _intent_dict(intent: Intent) -> dict[str, Any]:
    return {"action": type(intent).__name__.lower(), **dataclasses.asdict(intent)}


def format_json(report: SyncReport) -> str:
    data = dataclasses.asdict(report)
    data["line_intents"] = [_intent_dict(i) for i in report.line_intents]
    data["outside_diff_intents"] = [_intent_dict(i) for i in report.outside_diff_intents]
    return json.dumps(data, indent=2)
