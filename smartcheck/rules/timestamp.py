# Timestamp dependence: block.timestamp can be nudged by block producers.

from __future__ import annotations

from smartcheck.findings.models import Severity
from smartcheck.rules.base import SubstringRule


class TimestampDependenceRule(SubstringRule):
    id = "timestamp-dependence"
    name = "Timestamp dependence"
    severity = Severity.MEDIUM
    message = "Timestamp dependence detected"
    description = "Contract uses block.timestamp for critical operations."
    recommendation = (
        "Avoid using block.timestamp for critical operations as it can be manipulated by miners."
    )
    needles = ("block.timestamp",)
