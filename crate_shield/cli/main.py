"""Main CLI interface for crate-shield."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from .. import __version__
from ..config import DATABASE_ENV_VAR, DEFAULT_LOCKFILE, AuditConfig
from ..core.advisory import AdvisoryDatabase
from ..core.errors import AdvisoryBuildError, LockfileParseError
from ..core.lockfile import Lockfile
from ..core.matcher import VulnerabilityMatcher
from ..output.formatters import JSONFormatter, TextFormatter
from ..sources.advisories import DirectoryAdvisorySource
from ..sources.cargo import CargoLockParser
from ..utils.logging import get_logger, setup_logging
from ..utils.performance import measure

EXIT_VULNERABLE = 1
EXIT_ERROR = 2

app = typer.Typer(
    name="crate-shield",
    help="Audit Cargo.lock files for crates with security vulnerabilities",
    add_completion=False
)

console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False)
logger = get_logger("CLI")


def _fail(message: str, hint: Optional[str] = None) -> None:
    err_console.print(f"[red]error:[/red] {escape(message)}")
    if hint:
        err_console.print(f"\n{hint}", markup=False)
    raise typer.Exit(EXIT_ERROR)


def _load_lockfile(config: AuditConfig) -> Lockfile:
    try:
        return CargoLockParser().parse(config.lockfile_path)
    except FileNotFoundError:
        _fail(
            f"Couldn't find '{config.lockfile_path}'!",
            'Run "cargo generate-lockfile" to generate lockfile before running audit',
        )
    except (LockfileParseError, PermissionError) as e:
        logger.error(f"Failed to load lockfile: {e}")
        _fail(f"Couldn't load {config.lockfile_path}: {e}")


def _load_database(config: AuditConfig) -> AdvisoryDatabase:
    try:
        return AdvisoryDatabase.from_source(DirectoryAdvisorySource(config.database_path))
    except (AdvisoryBuildError, FileNotFoundError) as e:
        logger.error(f"Failed to load advisory database: {e}")
        _fail(f"Couldn't load advisory database {config.database_path}: {e}")


@app.command()
def audit(
    file: Path = typer.Option(
        DEFAULT_LOCKFILE,
        "--file",
        "-f",
        help="Cargo lockfile to inspect"
    ),
    database: Path = typer.Option(
        ...,
        "--database",
        "-d",
        envvar=DATABASE_ENV_VAR,
        help="Advisories.toml file or advisory database directory"
    ),
    output_format: str = typer.Option(
        "text",
        "--format",
        help="Output format: 'text' or 'json'"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Also write the rendered report to this file"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    )
) -> None:
    """Audit a Cargo.lock for crates with security vulnerabilities."""
    setup_logging(verbose=verbose)

    try:
        config = AuditConfig(
            database_path=database,
            lockfile_path=file,
            output_format=output_format,
            output_file=output,
            verbose=verbose,
        )
    except ValueError as e:
        _fail(str(e))

    lockfile = _load_lockfile(config)
    advisory_db = _load_database(config)

    text_formatter = TextFormatter(console)
    if config.output_format == "text":
        console.print(text_formatter.format_scan_status(len(lockfile), len(advisory_db)))

    timings = {}
    with measure(timings, "scan"):
        report = VulnerabilityMatcher().scan(lockfile, advisory_db)
    logger.debug(f"Scanned {len(lockfile)} packages in {timings['scan']:.4f}s, {report.count} match(es)")

    if config.output_format == "json":
        json_formatter = JSONFormatter(lockfile_name=config.lockfile_path.name)
        typer.echo(json_formatter.dumps(report))
        if config.output_file:
            json_formatter.save_results(report, config.output_file)
    else:
        text_formatter.print_report(report)
        if config.output_file:
            text_formatter.save_results(report, config.output_file)

    if not report.is_empty:
        raise typer.Exit(EXIT_VULNERABLE)


@app.command()
def info() -> None:
    """Show crate-shield information."""
    console.print(Panel.fit(
        f"[bold]crate-shield[/bold] {__version__}\n"
        "Audits Cargo.lock files against RustSec-style security advisories",
        title="Information"
    ))


def main() -> None:
    """Main entry point for crate-shield CLI."""
    app()


if __name__ == "__main__":
    main()
