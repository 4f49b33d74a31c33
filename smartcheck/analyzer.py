# Function-level heuristics: mutability, payable validation, reentrancy ordering,
# and unprotected privileged operations over one extracted FunctionRecord.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, Optional

from smartcheck.config import DEFAULT_OWNER_GUARDS
from smartcheck.context import AnalysisContext
from smartcheck.extractor import FunctionRecord
from smartcheck.findings.models import Finding, Location, Severity
from smartcheck.rules.patterns import (
    VALUE_CHECK_PREFIXES,
    has_external_call,
    has_state_change,
)
from smartcheck.rules.reentrancy import (
    REENTRANCY_DESCRIPTION,
    REENTRANCY_MESSAGE,
    REENTRANCY_RECOMMENDATION,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FunctionCheck:
    """Static prose for one function-level finding."""

    id: str
    severity: Severity
    message: str
    description: str
    recommendation: str


MUTABILITY = FunctionCheck(
    id="visibility",
    severity=Severity.MEDIUM,
    message="Public function without state mutability specifier",
    description="Public functions should explicitly declare their state mutability.",
    recommendation=(
        "Add stateMutability specifier (pure, view, payable, or nonpayable) to the function."
    ),
)

PAYABLE_VALIDATION = FunctionCheck(
    id="payable-validation",
    severity=Severity.MEDIUM,
    message="Payable function without value validation",
    description="Payable functions should validate the received value.",
    recommendation="Add require(msg.value > 0) or similar validation at the start of the function.",
)

REENTRANCY = FunctionCheck(
    id="reentrancy",
    severity=Severity.HIGH,
    message=REENTRANCY_MESSAGE,
    description=REENTRANCY_DESCRIPTION,
    recommendation=REENTRANCY_RECOMMENDATION,
)

_GUARD_HINT = "Restrict the function with an owner-only modifier such as onlyOwner."

UNPROTECTED_INIT = FunctionCheck(
    id="unprotected-init",
    severity=Severity.HIGH,
    message="Unprotected initializer",
    description="Anyone can call initialize() and take over the contract's initial state.",
    recommendation=_GUARD_HINT + " Use an initializer guard so it can run only once.",
)

UNPROTECTED_UPGRADE = FunctionCheck(
    id="unprotected-upgrade",
    severity=Severity.HIGH,
    message="Unprotected upgrade function",
    description="Anyone can call upgrade() and replace the contract's logic.",
    recommendation=_GUARD_HINT,
)

UNPROTECTED_WITHDRAW = FunctionCheck(
    id="unprotected-withdraw",
    severity=Severity.HIGH,
    message="Unprotected withdraw function",
    description="withdraw() has no owner-only guard and may let anyone drain funds.",
    recommendation=_GUARD_HINT + " Or make sure callers can only withdraw their own balance.",
)

UNPROTECTED_SELFDESTRUCT = FunctionCheck(
    id="unprotected-selfdestruct",
    severity=Severity.HIGH,
    message="Unprotected selfdestruct",
    description="A function without an owner-only guard can destroy the contract.",
    recommendation=_GUARD_HINT,
)

# Function name -> check fired when that function has no owner guard
PRIVILEGED_NAMES = {
    "initialize": UNPROTECTED_INIT,
    "upgrade": UNPROTECTED_UPGRADE,
    "withdraw": UNPROTECTED_WITHDRAW,
}


def _finding(check: FunctionCheck, record: FunctionRecord, ctx: Optional[AnalysisContext]) -> Finding:
    line = ctx.original_line(record.start_line) if ctx else record.start_line + 1
    return Finding(
        rule_id=check.id,
        severity=check.severity,
        message=check.message,
        location=Location(line=line, column=1, snippet=record.body_lines[0] if record.body_lines else None),
        description=check.description,
        recommendation=check.recommendation,
    )


def _first_index(lines: list[str], predicate) -> Optional[int]:
    for i, line in enumerate(lines):
        if predicate(line):
            return i
    return None


def lacks_mutability(record: FunctionRecord) -> bool:
    body = record.body
    return record.visibility == "public" and "pure" not in body and "view" not in body


def lacks_value_check(record: FunctionRecord) -> bool:
    if not record.is_payable:
        return False
    return not any(line.startswith(VALUE_CHECK_PREFIXES) for line in record.body_lines)


def writes_after_call(record: FunctionRecord) -> bool:
    """
    True when the first state-change line is not earlier than the first
    external-call line (Checks-Effects-Interactions violated, by line order).
    """
    if not (record.has_external_call and record.has_state_change):
        return False
    write_at = _first_index(record.body_lines, has_state_change)
    call_at = _first_index(record.body_lines, has_external_call)
    if write_at is None or call_at is None:
        return False
    return write_at >= call_at


def is_owner_guarded(record: FunctionRecord, owner_guards: FrozenSet[str] = DEFAULT_OWNER_GUARDS) -> bool:
    return bool(record.modifiers & owner_guards)


def analyze_function(
    record: FunctionRecord,
    ctx: Optional[AnalysisContext] = None,
    owner_guards: FrozenSet[str] = DEFAULT_OWNER_GUARDS,
) -> list[Finding]:
    """
    Apply every function-level heuristic to one record.

    Findings come back in check order: mutability, payable validation,
    reentrancy, then the unprotected-operation checks. All are reported on the
    signature line.
    """
    findings: list[Finding] = []

    if lacks_mutability(record):
        findings.append(_finding(MUTABILITY, record, ctx))

    if lacks_value_check(record):
        findings.append(_finding(PAYABLE_VALIDATION, record, ctx))

    if writes_after_call(record):
        findings.append(_finding(REENTRANCY, record, ctx))

    if not is_owner_guarded(record, owner_guards):
        check = PRIVILEGED_NAMES.get(record.name)
        if check is not None:
            findings.append(_finding(check, record, ctx))
        if any("selfdestruct" in line for line in record.body_lines):
            findings.append(_finding(UNPROTECTED_SELFDESTRUCT, record, ctx))

    if findings:
        logger.debug(
            "Function %s (line %d): %s",
            record.name or "<unnamed>",
            record.start_line + 1,
            ", ".join(f.rule_id for f in findings),
        )
    return findings
