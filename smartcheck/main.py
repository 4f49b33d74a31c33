from __future__ import annotations

"""
Typer CLI entry point.

Commands:
- analyze: analyze a .sol file or every .sol file under a directory
- rules:   list the rule catalog
- history: list stored analyses of a user
- serve:   run the HTTP API
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

import typer
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from smartcheck.config import Config, get_db_path, get_default_config, get_enabled_rules, get_port
from smartcheck.context import read_source
from smartcheck.engine import analyze as analyze_source
from smartcheck.errors import SourceReadError, StorageError
from smartcheck.findings.models import Finding, Severity
from smartcheck.reporting.console import print_findings, print_rules
from smartcheck.reporting.json_output import findings_to_json
from smartcheck.storage import HistoryStore
from smartcheck.traversal import find_solidity_files, is_solidity_file

logger = logging.getLogger(__name__)

app = typer.Typer(help="SmartCheck - heuristic security linter for Solidity smart contracts.")

FAILING_SEVERITIES = (Severity.HIGH, Severity.ERROR)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _collect_sol_files(target: Path) -> List[Path]:
    """
    Resolve a target path into a list of .sol files to analyze.

    - If target is a .sol file, return [target]
    - If target is a directory, use traversal.find_solidity_files()
    - Otherwise, exit with an error.
    """
    if target.is_file():
        if not is_solidity_file(target):
            raise typer.BadParameter(f"Target file must have .sol extension, got: {target}")
        return [target]

    if target.is_dir():
        files = find_solidity_files(target)
        if not files:
            logger.warning("No .sol files found under %s", target)
        return files

    raise typer.BadParameter(f"Target path is neither a file nor a directory: {target}")


def _has_failures(findings: Sequence[Finding]) -> bool:
    return any(f.severity in FAILING_SEVERITIES for f in findings)


@app.command()
def analyze(
    target: Path = typer.Argument(
        ...,
        exists=True,
        readable=True,
        resolve_path=True,
        help="Solidity file or directory to analyze.",
    ),
    output_format: str = typer.Option("table", "--format", "-f", help="Output format: table or json."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show remediation hints and debug logs."),
    disable: Optional[List[str]] = typer.Option(None, "--disable", help="Rule id to skip (repeatable)."),
    owner_guard: Optional[List[str]] = typer.Option(
        None, "--owner-guard", help="Extra modifier name treated as owner-only (repeatable)."
    ),
    save: bool = typer.Option(False, "--save", help="Record the analysis in the history database."),
    user: Optional[str] = typer.Option(None, "--user", help="User id to record the analysis under."),
    db: Optional[Path] = typer.Option(None, "--db", help="History database path."),
) -> None:
    """
    Analyze a single Solidity file or all .sol files under a directory.

    Exits with code 1 when any high-severity or error finding is reported.
    """
    _configure_logging(verbose)
    if output_format not in ("table", "json"):
        raise typer.BadParameter(f"Unknown format: {output_format}")
    if save and not user:
        raise typer.BadParameter("--save requires --user")

    config: Config = get_default_config(disabled_rules=disable, owner_guards=owner_guard)
    files = _collect_sol_files(target)

    sources: dict[Path, str] = {}
    all_findings: List[Finding] = []
    for path in files:
        try:
            source = read_source(path)
        except SourceReadError:
            # Error already logged in read_source
            continue
        sources[path] = source
        all_findings.extend(analyze_source(source, config=config, path=path))

    if output_format == "json":
        typer.echo(findings_to_json(all_findings))
    else:
        print_findings(all_findings, analyzed_files=list(sources) if len(files) > 1 else None, verbose=verbose)

    if save:
        _save_results(sources, all_findings, user, db or get_db_path())

    if _has_failures(all_findings):
        raise typer.Exit(code=1)


def _save_results(sources: dict[Path, str], findings: Sequence[Finding], user: str, db: Path) -> None:
    try:
        with HistoryStore(db) as store:
            store.init_schema()
            for path, source in sources.items():
                file_findings = [f for f in findings if f.location.path == path]
                store.save_analysis(source, file_findings, user)
    except StorageError as e:
        logger.error("Could not save analysis history: %s", e)


@app.command()
def rules() -> None:
    """List the rule catalog in evaluation order."""
    print_rules(get_enabled_rules())


@app.command()
def history(
    user: str = typer.Option(..., "--user", help="User id whose analyses to list."),
    db: Optional[Path] = typer.Option(None, "--db", help="History database path."),
) -> None:
    """List stored analyses of a user, newest first."""
    _configure_logging(False)
    try:
        with HistoryStore(db or get_db_path()) as store:
            store.init_schema()
            records = store.list_history(user)
    except StorageError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    if not records:
        typer.echo("No analyses recorded.")
        return

    table = Table(title=f"History for {user}", box=box.ROUNDED, header_style="bold cyan")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Created", style="white")
    table.add_column("Findings", justify="right")
    table.add_column("Rules", no_wrap=True)
    for r in records:
        table.add_row(
            str(r.id),
            r.created_at,
            str(len(r.results)),
            ", ".join(sorted({f.rule_id for f in r.results})),
        )
    Console().print(table)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind."),
    port: Optional[int] = typer.Option(None, "--port", help="Port (default: $PORT or 3000)."),
    db: Optional[Path] = typer.Option(None, "--db", help="History database path."),
) -> None:
    """Run the HTTP API (POST /api/analyze, GET /api/history, GET /health)."""
    from smartcheck.server import create_app

    _configure_logging(False)
    db_path = db or get_db_path()
    try:
        store = HistoryStore(db_path)
        store.init_schema()
    except StorageError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)
    create_app(store=store).run(host=host, port=port or get_port())


def main() -> None:
    """Entry point for `python -m smartcheck.main` and the `smartcheck` script."""
    app()


if __name__ == "__main__":
    main()
