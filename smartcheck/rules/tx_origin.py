# tx.origin usage: authenticating with tx.origin lets a phishing contract act as the user.

from __future__ import annotations

from smartcheck.findings.models import Severity
from smartcheck.rules.base import SubstringRule


class TxOriginRule(SubstringRule):
    id = "tx-origin"
    name = "tx.origin usage"
    severity = Severity.HIGH
    message = "Use of tx.origin detected"
    description = "Use of tx.origin for authentication is vulnerable to phishing attacks."
    recommendation = "Use msg.sender instead of tx.origin for authentication."
    needles = ("tx.origin",)
