# Unchecked send/transfer: a value transfer on a line with no require/if/assert around it.

from __future__ import annotations

from smartcheck.findings.models import Severity
from smartcheck.rules.base import Rule
from smartcheck.rules.patterns import SEND_PATTERNS, has_guard


class UncheckedSendRule(Rule):
    id = "unchecked-send"
    name = "Unchecked send/transfer"
    severity = Severity.MEDIUM
    message = "Unchecked send/transfer detected"
    description = "Unchecked return value from send/transfer call."
    recommendation = "Always check the return value of send/transfer calls."

    def matches(self, line: str) -> bool:
        if not any(p in line for p in SEND_PATTERNS):
            return False
        return not has_guard(line)
