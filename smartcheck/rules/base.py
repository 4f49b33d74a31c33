# Rule interface (abstract base class): defines the contract all catalog rules implement.
# Concrete rules (reentrancy, tx_origin, etc.) subclass Rule and implement matches().

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from smartcheck.findings.models import Finding, Location, Severity


class Rule(ABC):
    """
    Abstract base class for all single-line pattern rules.

    Subclasses must define:
    - id: str: unique rule identifier (e.g. "tx-origin")
    - name: str: human-readable rule name (e.g. "tx.origin usage")
    - severity: Severity: fixed severity of every finding the rule emits
    - message, description, recommendation: static prose bound to the rule
    - matches(line) -> bool: the pattern test over one normalized line

    Rules are stateless: check() looks only at the line it is given, so the
    engine may run any rule over any line in any order. The catalog order in
    config.py is only used to break ties when deduplicating.
    """

    id: str
    name: str
    severity: Severity
    message: str
    description: str
    recommendation: str

    @abstractmethod
    def matches(self, line: str) -> bool:
        """Return True if the line triggers this rule."""
        ...

    def check(self, line: str, line_number: int) -> Optional[Finding]:
        """
        Run the rule over one line.

        Args:
            line: One line of normalized source text.
            line_number: 1-based line number to report.

        Returns:
            A Finding at column 1 if the line matches, else None.
        """
        if not self.matches(line):
            return None
        return self.make_finding(line_number, snippet=line.strip() or None)

    def make_finding(
        self,
        line_number: int,
        message: Optional[str] = None,
        snippet: Optional[str] = None,
    ) -> Finding:
        return Finding(
            rule_id=self.id,
            severity=self.severity,
            message=message or self.message,
            location=Location(line=line_number, column=1, snippet=snippet),
            description=self.description,
            recommendation=self.recommendation,
        )


class SubstringRule(Rule):
    """A rule that fires when any of `needles` occurs in the line."""

    needles: tuple[str, ...] = ()

    def matches(self, line: str) -> bool:
        return any(n in line for n in self.needles)
