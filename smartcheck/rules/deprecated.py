# Deprecated constructs: suicide() and throw.

from __future__ import annotations

from smartcheck.findings.models import Severity
from smartcheck.rules.base import SubstringRule


class SuicideRule(SubstringRule):
    id = "suicide-usage"
    name = "Deprecated suicide"
    severity = Severity.HIGH
    message = "Use of deprecated suicide function detected"
    description = "Use of deprecated suicide function detected."
    recommendation = "Use selfdestruct instead of suicide as it is deprecated."
    needles = ("suicide(",)


class ThrowRule(SubstringRule):
    id = "throw-usage"
    name = "Deprecated throw"
    severity = Severity.MEDIUM
    message = "Use of deprecated throw statement detected"
    description = "Use of deprecated throw statement detected."
    recommendation = "Use require, assert, or revert instead of throw."
    needles = ("throw;",)
