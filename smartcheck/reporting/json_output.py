# JSON output: the flat wire format shared with the HTTP endpoint and the history store.

from __future__ import annotations

import json
from typing import Sequence

from smartcheck.findings.models import Finding


def findings_to_json(findings: Sequence[Finding], indent: int | None = 2) -> str:
    """Serialize findings as {"results": [...]}, the same shape POST /api/analyze returns."""
    return json.dumps({"results": [f.to_dict() for f in findings]}, indent=indent)
