from __future__ import annotations

"""
Analysis pipeline: the single entry point `analyze(source)`.

Stages run in order and stop at the first one that produces a terminal result:

    validating -> preprocessing -> extracting -> analyzing -> deduplicating -> finalizing

- validating: non-str or blank input gives one input-validation error.
- extracting: no contract declaration gives one syntax error.
- analyzing: preamble findings, function-level findings per function in source
  order, then every enabled catalog rule over every line.
- deduplicating: a line-rule finding is dropped when a finding with the same
  rule id already sits within config.dedup_window lines of it.
- finalizing: an empty or info-only result becomes the analysis-complete sentinel.

analyze() never raises; unexpected failures come back as one internal-error finding.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence

from smartcheck.analyzer import analyze_function
from smartcheck.config import Config, get_default_config, get_enabled_rules
from smartcheck.context import AnalysisContext, create_context
from smartcheck.extractor import extract_layout, preamble_findings
from smartcheck.findings.models import Finding, Location, Severity
from smartcheck.rules.base import Rule

logger = logging.getLogger(__name__)

INPUT_VALIDATION_ID = "input-validation"
SYNTAX_ID = "syntax"
INTERNAL_ERROR_ID = "internal-error"
ANALYSIS_COMPLETE_ID = "analysis-complete"


class Stage(str, Enum):
    VALIDATING = "validating"
    PREPROCESSING = "preprocessing"
    EXTRACTING = "extracting"
    ANALYZING = "analyzing"
    DEDUPLICATING = "deduplicating"
    FINALIZING = "finalizing"


def _engine_finding(
    rule_id: str,
    severity: Severity,
    message: str,
    description: str,
    recommendation: str,
    path: Optional[Path] = None,
) -> Finding:
    return Finding(
        rule_id=rule_id,
        severity=severity,
        message=message,
        location=Location(line=1, column=1, path=path),
        description=description,
        recommendation=recommendation,
    )


def invalid_input_finding() -> Finding:
    return _engine_finding(
        INPUT_VALIDATION_ID,
        Severity.ERROR,
        "Invalid source code provided",
        "The provided source code is empty or invalid.",
        "Please provide valid Solidity source code.",
    )


def no_contract_finding() -> Finding:
    return _engine_finding(
        SYNTAX_ID,
        Severity.ERROR,
        "No contract declaration found",
        "The code must contain a contract declaration.",
        "Add a contract declaration using 'contract ContractName {'",
    )


def internal_error_finding() -> Finding:
    return _engine_finding(
        INTERNAL_ERROR_ID,
        Severity.ERROR,
        "Analysis error",
        "An internal error occurred while analyzing the contract.",
        "Please try again with valid Solidity code. If the error persists, "
        "check the contract syntax.",
    )


def no_issues_finding() -> Finding:
    return _engine_finding(
        ANALYSIS_COMPLETE_ID,
        Severity.INFO,
        "No issues found",
        "The contract analysis completed successfully with no issues detected.",
        "Continue monitoring for potential vulnerabilities as the contract evolves.",
    )


def is_valid_source(source: Any) -> bool:
    return isinstance(source, str) and bool(source.strip())


def run_rules(rules: Sequence[Rule], ctx: AnalysisContext) -> List[Finding]:
    """Run every rule over every line; results ordered by line, then catalog order."""
    findings: List[Finding] = []
    for index, line in enumerate(ctx.lines):
        if not line:
            continue
        line_number = ctx.original_line(index)
        for rule in rules:
            finding = rule.check(line, line_number)
            if finding is not None:
                findings.append(finding)
    return findings


def merge_findings(
    existing: List[Finding],
    line_findings: Iterable[Finding],
    window: int,
) -> List[Finding]:
    """
    Append line-rule findings to existing, skipping near-duplicates.

    A candidate is dropped when `existing` (preamble and function-level
    findings) already has a finding with the same rule id within `window`
    lines. Line-rule findings are not compared with each other, so the same
    rule on two nearby lines reports both.
    """
    merged = list(existing)
    for candidate in line_findings:
        duplicate = any(
            f.rule_id == candidate.rule_id and abs(f.line - candidate.line) <= window
            for f in existing
        )
        if duplicate:
            logger.debug("Suppressed duplicate %s at line %d", candidate.rule_id, candidate.line)
            continue
        merged.append(candidate)
    return merged


def finalize(findings: List[Finding]) -> List[Finding]:
    """Replace an empty or info-only result with the analysis-complete sentinel."""
    if all(f.severity == Severity.INFO for f in findings):
        return [no_issues_finding()]
    return findings


def _run_pipeline(source: str, config: Config, path: Optional[Path]) -> List[Finding]:
    logger.debug("Stage: %s", Stage.PREPROCESSING.value)
    ctx = create_context(source, path=path)

    logger.debug("Stage: %s", Stage.EXTRACTING.value)
    layout = extract_layout(ctx.lines)
    if layout is None:
        logger.debug("Stage: %s (no contract declaration)", Stage.FINALIZING.value)
        return [no_contract_finding()]

    logger.debug("Stage: %s", Stage.ANALYZING.value)
    findings = preamble_findings(layout, ctx)
    for record in layout.functions:
        findings.extend(analyze_function(record, ctx, owner_guards=config.owner_guards))
    line_findings = run_rules(get_enabled_rules(config), ctx)

    logger.debug("Stage: %s", Stage.DEDUPLICATING.value)
    findings = merge_findings(findings, line_findings, config.dedup_window)

    logger.debug("Stage: %s", Stage.FINALIZING.value)
    return finalize(findings)


def _attach_path(findings: List[Finding], path: Optional[Path]) -> List[Finding]:
    if path is None:
        return findings
    for f in findings:
        f.location.path = path
    return findings


def analyze(
    source: Any,
    config: Optional[Config] = None,
    path: Optional[Path] = None,
) -> List[Finding]:
    """
    Analyze contract source text and return findings in detection order.

    Args:
        source: Contract source. Anything that is not a non-blank str is
            rejected with a single input-validation finding.
        config: Rule selection and analyzer settings; defaults to
            get_default_config().
        path: Optional file the source came from; copied onto every finding's
            location for reporting.

    Returns:
        A non-empty list of Findings. Never raises.
    """
    logger.debug("Stage: %s", Stage.VALIDATING.value)
    if not is_valid_source(source):
        logger.info("Rejected invalid source input (%s)", type(source).__name__)
        return _attach_path([invalid_input_finding()], path)

    if config is None:
        config = get_default_config()

    try:
        findings = _run_pipeline(source, config, path)
    except Exception:
        logger.exception("Error analyzing contract%s", f" {path}" if path else "")
        return _attach_path([internal_error_finding()], path)

    logger.info(
        "Analysis complete%s: %d finding(s)",
        f" for {path}" if path else "",
        len(findings),
    )
    return _attach_path(findings, path)
