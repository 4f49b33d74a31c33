# Rich console output: format findings for terminal display.

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from smartcheck.findings.models import Finding, Severity
from smartcheck.rules.base import Rule

# Severity → Rich style
SEVERITY_STYLE = {
    "error": "bold red",
    "high": "bold red",
    "medium": "bold yellow",
    "low": "bold dim",
    "info": "bold blue",
}

DEFAULT_SEVERITY_STYLE = "bold white"

SEVERITY_ORDER = ("error", "high", "medium", "low", "info")

NO_PATH = "<input>"


def _severity_style(severity: Severity | str) -> str:
    value = severity.value if isinstance(severity, Severity) else severity
    return SEVERITY_STYLE.get(value.lower(), DEFAULT_SEVERITY_STYLE)


def _path_key(finding: Finding) -> str:
    return str(finding.location.path) if finding.location.path else NO_PATH


def _is_clean(findings: Sequence[Finding]) -> bool:
    return all(f.severity == Severity.INFO for f in findings)


def print_findings(
    findings: Sequence[Finding],
    analyzed_files: Sequence[Path] | None = None,
    verbose: bool = False,
    console: Optional[Console] = None,
) -> None:
    """
    Print findings grouped by file, colored by severity, with snippets.
    If verbose, shows the recommendation for each rule once per file. If
    analyzed_files is provided, shows a file-by-file summary table.
    """
    console = console or Console()

    if _is_clean(findings) and not analyzed_files:
        console.print(
            Panel(
                "[green]No issues found.[/green]",
                title="SmartCheck Analysis",
                border_style="green",
                box=box.ROUNDED,
            )
        )
        return

    by_file: dict[str, list[Finding]] = {}
    for f in findings:
        if f.severity == Severity.INFO:
            continue
        by_file.setdefault(_path_key(f), []).append(f)

    for path in sorted(by_file.keys()):
        file_findings = sorted(by_file[path], key=lambda x: (x.location.line, x.location.column))

        console.print()
        console.print(Panel(
            f"[bold cyan]{path}[/bold cyan]",
            box=box.SIMPLE_HEAD,
            border_style="blue",
            padding=(0, 1),
        ))

        table = Table(
            show_header=True,
            header_style="bold magenta",
            box=box.SIMPLE,
            padding=(0, 1),
            expand=False,
        )
        table.add_column("Line", justify="right", style="dim", width=5)
        table.add_column("Severity", width=8)
        table.add_column("Rule", width=26, no_wrap=True)
        table.add_column("Message", style="white")

        for f in file_findings:
            table.add_row(
                str(f.location.line),
                Text(f.severity.value.upper(), style=_severity_style(f.severity)),
                Text(f"[{f.rule_id}]", style="dim"),
                Text(f.message),
            )

        console.print(table)

        snippets = [f for f in file_findings if f.location.snippet]
        if snippets:
            for f in snippets:
                console.print(Text.assemble((f"  {f.location.line:>4} | ", "dim"), f.location.snippet))
            console.print()

        if verbose:
            seen_rules: set[str] = set()
            for f in file_findings:
                if f.rule_id in seen_rules or not f.recommendation:
                    continue
                seen_rules.add(f.rule_id)
                console.print(Text.assemble(("  [Fix] ", "dim"), f"[{f.rule_id}] ", f.recommendation))
            if seen_rules:
                console.print()

    if analyzed_files:
        _print_file_summary_table(findings, analyzed_files, console)

    _print_summary(findings, console)


def _print_file_summary_table(
    findings: Sequence[Finding],
    analyzed_files: Sequence[Path],
    console: Console,
) -> None:
    """Print a table of clean vs flagged files."""
    by_path: dict[str, int] = {}
    for f in findings:
        if f.severity == Severity.INFO:
            continue
        key = _path_key(f)
        by_path[key] = by_path.get(key, 0) + 1

    table = Table(
        title="Files Summary",
        show_header=True,
        header_style="bold cyan",
        box=box.ROUNDED,
        padding=(0, 1),
    )
    table.add_column("File", style="white")
    table.add_column("Status", width=10)
    table.add_column("Findings", justify="right", width=8)

    for p in sorted(analyzed_files, key=str):
        count = by_path.get(str(p), 0)
        status = Text("FLAGGED", style="bold red") if count else Text("OK", style="bold green")
        table.add_row(str(p), status, str(count))

    console.print()
    console.print(Panel(table, border_style="cyan", box=box.ROUNDED))


def _print_summary(findings: Sequence[Finding], console: Console) -> None:
    """Print a compact summary of findings by severity."""
    by_severity: dict[str, int] = {}
    for f in findings:
        if f.severity == Severity.INFO:
            continue
        s = f.severity.value
        by_severity[s] = by_severity.get(s, 0) + 1

    total = sum(by_severity.values())
    summary_parts = [f"[bold]{total} finding{'s' if total != 1 else ''}[/bold]"]
    for sev in SEVERITY_ORDER:
        if sev in by_severity:
            summary_parts.append(f"[{_severity_style(sev)}]{by_severity[sev]} {sev}[/]")

    console.print()
    console.print(
        Panel(
            " | ".join(summary_parts),
            title="Summary",
            border_style="yellow" if total > 0 else "green",
            box=box.ROUNDED,
        )
    )


def print_rules(rules: Sequence[Rule], console: Optional[Console] = None) -> None:
    """List the rule catalog."""
    console = console or Console()
    table = Table(title="Rule Catalog", box=box.ROUNDED, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Rule", style="white", no_wrap=True)
    table.add_column("Severity", width=8)
    table.add_column("Message")
    for i, rule in enumerate(rules, start=1):
        table.add_row(
            str(i),
            rule.id,
            Text(rule.severity.value.upper(), style=_severity_style(rule.severity)),
            rule.message,
        )
    console.print(table)
