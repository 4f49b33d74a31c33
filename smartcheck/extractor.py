"""
Function extraction: one forward pass over normalized contract lines.

The pass finds the contract declaration, collects the preamble (state variable
declarations before the first function), and splits the rest into
FunctionRecords. A line starting with `function` closes the current record and
opens the next one; every other line extends the current record's body and
updates its external-call / state-change facts.

There is no brace tracking. Multi-line signatures, nested blocks, and
constructor/receive/fallback bodies are folded into whichever record is open.

Typical usage:
    from smartcheck.context import create_context
    from smartcheck.extractor import extract_layout

    ctx = create_context(source)
    layout = extract_layout(ctx.lines)
    if layout is None:
        ...  # no contract declaration
    for record in layout.functions:
        ...
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import FrozenSet, Iterator, List, Optional, Sequence, Tuple

from smartcheck.context import AnalysisContext
from smartcheck.findings.models import Finding, Location, Severity
from smartcheck.rules.patterns import has_external_call, has_state_change

logger = logging.getLogger(__name__)

_CONTRACT_RE = re.compile(r"^(?:abstract\s+)?contract\b")
_FUNCTION_KEYWORD = "function"
_FUNCTION_NAME_RE = re.compile(r"^function\s+([A-Za-z_$][\w$]*)")
_VISIBILITIES = ("public", "private", "internal", "external")
_VISIBILITY_RES = {v: re.compile(rf"\b{v}\b") for v in _VISIBILITIES}

# Identifier, optionally followed by an argument list, e.g. onlyRole(ADMIN)
_ATTACHMENT_RE = re.compile(r"([A-Za-z_$][\w$]*)\s*(?:\([^()]*\))?")

# Words that may follow a parameter list but are not modifiers
_SIGNATURE_KEYWORDS: FrozenSet[str] = frozenset(
    {
        "public",
        "private",
        "internal",
        "external",
        "payable",
        "nonpayable",
        "view",
        "pure",
        "constant",
        "virtual",
        "override",
        "returns",
    }
)

UNSPECIFIED = "unspecified"

STATE_VISIBILITY_ID = "state-visibility"


@dataclass
class FunctionRecord:
    """Reconstructed metadata and body for one source-level function."""

    name: str
    start_line: int  # 0-based index of the signature in the normalized lines
    body_lines: List[str] = field(default_factory=list)
    visibility: str = UNSPECIFIED
    is_payable: bool = False
    modifiers: FrozenSet[str] = frozenset()
    has_external_call: bool = False
    has_state_change: bool = False

    @property
    def body(self) -> str:
        """Signature line plus every following line, newline-joined."""
        return "\n".join(self.body_lines)

    def add_line(self, line: str) -> None:
        self.body_lines.append(line)
        if has_external_call(line):
            self.has_external_call = True
        if has_state_change(line):
            self.has_state_change = True


@dataclass
class ContractLayout:
    """What the extraction pass found: declaration, preamble, functions."""

    contract_line: int
    preamble: List[Tuple[int, str]] = field(default_factory=list)
    functions: List[FunctionRecord] = field(default_factory=list)


def is_contract_declaration(line: str) -> bool:
    return _CONTRACT_RE.match(line) is not None


def is_function_signature(line: str) -> bool:
    return line.startswith(_FUNCTION_KEYWORD)


def find_contract_line(lines: Sequence[str]) -> Optional[int]:
    """Index of the first line that declares a contract, or None."""
    for i, line in enumerate(lines):
        if is_contract_declaration(line):
            return i
    return None


def parse_visibility(signature: str) -> str:
    """First of public/private/internal/external present in the signature."""
    for vis in _VISIBILITIES:
        if _VISIBILITY_RES[vis].search(signature):
            return vis
    return UNSPECIFIED


def parse_function_name(signature: str) -> str:
    m = _FUNCTION_NAME_RE.match(signature)
    return m.group(1) if m else ""


def _after_parameter_list(signature: str) -> str:
    """Return the part of the signature after the parameter list, up to the body."""
    start = signature.find("(")
    if start < 0:
        return ""
    depth = 0
    for i in range(start, len(signature)):
        ch = signature[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                tail = signature[i + 1 :]
                break
    else:
        return ""
    for stop in ("{", ";"):
        idx = tail.find(stop)
        if idx >= 0:
            tail = tail[:idx]
    # returns (uint256 a, bool b) carries types, not modifiers
    m = re.search(r"\breturns\b", tail)
    if m:
        tail = tail[: m.start()]
    return tail


def parse_modifiers(signature: str) -> FrozenSet[str]:
    """
    Identifiers attached to the function after its parameter list.

    `function withdraw(uint a) public onlyOwner nonReentrant {` gives
    {"onlyOwner", "nonReentrant"}; visibility/mutability keywords and modifier
    arguments are dropped.
    """
    tail = _after_parameter_list(signature)
    names = {m.group(1) for m in _ATTACHMENT_RE.finditer(tail)}
    return frozenset(n for n in names if n not in _SIGNATURE_KEYWORDS)


def open_function(signature: str, index: int) -> FunctionRecord:
    """Start a FunctionRecord from its signature line."""
    record = FunctionRecord(
        name=parse_function_name(signature),
        start_line=index,
        visibility=parse_visibility(signature),
        is_payable="payable" in signature,
        modifiers=parse_modifiers(signature),
    )
    record.body_lines.append(signature)
    return record


def iter_functions(lines: Sequence[str], start: int = 0) -> Iterator[FunctionRecord]:
    """
    Yield finalized FunctionRecords in source order.

    Each record is yielded when the next signature (or end of input) closes
    it. Lines before the first signature belong to no record.
    """
    current: Optional[FunctionRecord] = None
    for index in range(start, len(lines)):
        line = lines[index]
        if is_function_signature(line):
            if current is not None:
                yield current
            current = open_function(line, index)
        elif current is not None:
            current.add_line(line)
    if current is not None:
        yield current


def extract_layout(lines: Sequence[str]) -> Optional[ContractLayout]:
    """
    Partition normalized lines into preamble and function records.

    Returns None when no line declares a contract.
    """
    contract_line = find_contract_line(lines)
    if contract_line is None:
        logger.debug("No contract declaration in %d line(s)", len(lines))
        return None

    preamble: List[Tuple[int, str]] = []
    for index in range(contract_line + 1, len(lines)):
        if is_function_signature(lines[index]):
            break
        preamble.append((index, lines[index]))

    functions = list(iter_functions(lines, start=contract_line + 1))
    logger.debug(
        "Contract at line %d: %d preamble line(s), %d function(s)",
        contract_line + 1,
        len(preamble),
        len(functions),
    )
    return ContractLayout(contract_line=contract_line, preamble=preamble, functions=functions)


def is_exposed_state_variable(line: str) -> bool:
    """Declared public, and neither constant nor immutable."""
    return "public" in line and "constant" not in line and "immutable" not in line


def preamble_findings(layout: ContractLayout, ctx: AnalysisContext) -> list[Finding]:
    """state-visibility findings for public, mutable state variables."""
    findings: list[Finding] = []
    for index, line in layout.preamble:
        if not is_exposed_state_variable(line):
            continue
        findings.append(
            Finding(
                rule_id=STATE_VISIBILITY_ID,
                severity=Severity.LOW,
                message="Public state variable without getter",
                location=Location(line=ctx.original_line(index), column=1, snippet=line),
                description=(
                    "Public state variables automatically create getters, "
                    "which may expose sensitive data."
                ),
                recommendation=(
                    "Consider using private visibility with explicit getter "
                    "functions for better control."
                ),
            )
        )
    return findings
