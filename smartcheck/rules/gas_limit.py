# Gas limit: loops with no visible bound/guard on the header line may exceed the block gas limit.

from __future__ import annotations

from smartcheck.findings.models import Severity
from smartcheck.rules.base import Rule
from smartcheck.rules.patterns import LOOP_PATTERNS, has_guard


class GasLimitRule(Rule):
    id = "gas-limit"
    name = "Unbounded loop"
    severity = Severity.MEDIUM
    message = "Potential gas limit issue detected"
    description = "Potential gas limit issue detected."
    recommendation = (
        "Consider using loops with a fixed number of iterations or implement pagination."
    )

    def matches(self, line: str) -> bool:
        if not any(p in line for p in LOOP_PATTERNS):
            return False
        return not has_guard(line)
