# Reentrancy detection (single line): an external call and a storage write on the same line.
# The order-sensitive, cross-line variant lives in analyzer.py.

from __future__ import annotations

from smartcheck.findings.models import Severity
from smartcheck.rules.base import Rule
from smartcheck.rules.patterns import has_external_call, has_state_change

REENTRANCY_MESSAGE = "Potential reentrancy vulnerability detected"
REENTRANCY_DESCRIPTION = (
    "The contract may be vulnerable to reentrancy attacks. "
    "State changes are made after external calls."
)
REENTRANCY_RECOMMENDATION = (
    "Consider using the Checks-Effects-Interactions pattern or a reentrancy guard."
)


class ReentrancyRule(Rule):
    """Flags lines that both call out (.call{, .send(, .transfer() and write state."""

    id = "reentrancy"
    name = "Reentrancy"
    severity = Severity.HIGH
    message = REENTRANCY_MESSAGE
    description = REENTRANCY_DESCRIPTION
    recommendation = REENTRANCY_RECOMMENDATION

    def matches(self, line: str) -> bool:
        return has_external_call(line) and has_state_change(line)
