# Dangerous low-level operations: delegatecall and selfdestruct.

from __future__ import annotations

from smartcheck.findings.models import Severity
from smartcheck.rules.base import SubstringRule


class DelegatecallRule(SubstringRule):
    """delegatecall runs foreign code against this contract's storage."""

    id = "delegatecall-usage"
    name = "delegatecall usage"
    severity = Severity.HIGH
    message = "Use of delegatecall detected"
    description = "Use of delegatecall detected."
    recommendation = (
        "Be extremely careful with delegatecall as it can lead to unexpected "
        "behavior and vulnerabilities."
    )
    needles = (".delegatecall(",)


class SelfdestructRule(SubstringRule):
    id = "selfdestruct-usage"
    name = "selfdestruct usage"
    severity = Severity.HIGH
    message = "Use of selfdestruct detected"
    description = "Use of selfdestruct detected."
    recommendation = "Be careful with selfdestruct as it can lead to loss of funds."
    needles = ("selfdestruct(",)
