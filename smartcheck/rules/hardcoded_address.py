# Hardcoded address detection: 20-byte hex literals (0x + 40 hex digits) in source lines.

from __future__ import annotations

import re

from smartcheck.findings.models import Severity
from smartcheck.rules.base import Rule

# Not anchored on word boundaries: a longer hex literal still contains an address-shaped run
_ADDRESS_RE = re.compile(r"0x[a-fA-F0-9]{40}")


class HardcodedAddressRule(Rule):
    """Detects hardcoded Ethereum addresses, e.g. 0x1234...7890."""

    id = "hardcoded-address"
    name = "Hardcoded address"
    severity = Severity.MEDIUM
    message = "Hardcoded address detected"
    description = "Contract contains hardcoded Ethereum addresses."
    recommendation = (
        "Use configuration variables or constructor parameters instead of hardcoded addresses."
    )

    def matches(self, line: str) -> bool:
        return _ADDRESS_RE.search(line) is not None
