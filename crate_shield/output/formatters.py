"""Output formatters for crate-shield results.

``render_text`` and ``render_json`` are pure functions over a
``VulnerabilityReport``; the formatter classes add printing and saving.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console

from ..core.matcher import VulnerabilityMatch, VulnerabilityReport
from ..utils.logging import get_logger

TOOL_NAME = "crate-shield"
NO_PATCH_TEXT = "no patched versions available"


def _attribute(name: str, value: str) -> str:
    return f"{name + ':':<22}{value}"


def _solution(match: VulnerabilityMatch) -> str:
    patched = match.advisory.patched_versions
    if not len(patched):
        return NO_PATCH_TEXT
    return ", ".join(str(requirement) for requirement in patched)


def render_match_text(match: VulnerabilityMatch) -> List[str]:
    """Render one match as ``Name: value`` lines.

    Args:
        match: Vulnerability match

    Returns:
        Lines for this match
    """
    advisory = match.advisory
    lines = [
        _attribute("ID", advisory.id),
        _attribute("Crate", match.package.name),
        _attribute("Version", str(match.package.version)),
    ]
    if advisory.aliases:
        lines.append(_attribute("Aliases", ", ".join(advisory.aliases)))
    if advisory.date:
        lines.append(_attribute("Date", advisory.date))
    if advisory.url:
        lines.append(_attribute("URL", advisory.url))
    lines.append(_attribute("Title", advisory.title))
    lines.append(_attribute("Solution: upgrade to", _solution(match)))
    return lines


def summary_line(report: VulnerabilityReport) -> str:
    if report.is_empty:
        return "No vulnerable packages found"
    if report.count == 1:
        return "error: 1 vulnerability found!"
    return f"error: {report.count} vulnerabilities found!"


def render_text(report: VulnerabilityReport) -> str:
    """Render a report as plain human-readable text.

    Args:
        report: Audit report

    Returns:
        Text with one block per match followed by a summary line
    """
    blocks = ["\n".join(render_match_text(match)) for match in report]
    blocks.append(summary_line(report))
    return "\n\n".join(blocks) + "\n"


def match_to_dict(match: VulnerabilityMatch, lockfile_name: str = "Cargo.lock") -> Dict[str, Any]:
    """Map one match onto the fixed machine-readable schema."""
    advisory = match.advisory
    return {
        "tool": TOOL_NAME,
        "message": advisory.title,
        "url": advisory.url,
        "cve": advisory.id,
        "file": lockfile_name,
        "priority": "Unknown",
        "package": match.package.name,
        "version": str(match.package.version),
        "aliases": list(advisory.aliases),
        "keywords": list(advisory.keywords),
    }


def render_json(report: VulnerabilityReport, lockfile_name: str = "Cargo.lock") -> List[Dict[str, Any]]:
    """Render a report as a list of JSON-serializable dictionaries.

    Args:
        report: Audit report
        lockfile_name: Value for the ``file`` field

    Returns:
        One dictionary per match, in report order
    """
    return [match_to_dict(match, lockfile_name) for match in report]


class TextFormatter:
    """Plain text formatter for crate-shield output."""

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize the text formatter.

        Args:
            console: Rich console instance
        """
        self.console = console or Console(highlight=False, soft_wrap=True)
        self.logger = get_logger("TextFormatter")

    def format_scan_status(self, packages: int, advisories: int) -> str:
        return f"Scanning {packages} crates for vulnerabilities ({advisories} advisories in database)"

    def print_report(self, report: VulnerabilityReport) -> None:
        """Print the rendered report to the console."""
        self.console.print(render_text(report), markup=False, end="")

    def save_results(self, report: VulnerabilityReport, output_file: Path) -> None:
        """Save the rendered report to a text file.

        Args:
            report: Audit report
            output_file: Output file path
        """
        try:
            with open(output_file, 'w', encoding='utf-8') as f:
                f.write(render_text(report))
            self.logger.info(f"Results saved to {output_file}")
        except IOError as e:
            self.logger.error(f"Failed to save results to {output_file}: {e}")
            raise


class JSONFormatter:
    """JSON formatter for crate-shield output."""

    def __init__(self, output_file: Optional[Path] = None, lockfile_name: str = "Cargo.lock") -> None:
        """Initialize the JSON formatter.

        Args:
            output_file: Optional output file path
            lockfile_name: Lockfile name reported in each entry
        """
        self.output_file = output_file
        self.lockfile_name = lockfile_name
        self.logger = get_logger("JSONFormatter")

    def format_scan_results(self, report: VulnerabilityReport) -> List[Dict[str, Any]]:
        return render_json(report, self.lockfile_name)

    def dumps(self, report: VulnerabilityReport) -> str:
        return json.dumps(self.format_scan_results(report), indent=2, ensure_ascii=False)

    def save_results(
        self,
        report: VulnerabilityReport,
        output_file: Optional[Path] = None
    ) -> None:
        """Save results to JSON file.

        Args:
            report: Audit report
            output_file: Output file path (uses instance default if None)
        """
        file_path = output_file or self.output_file
        if not file_path:
            raise ValueError("No output file specified")

        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                f.write(self.dumps(report))
                f.write("\n")

            self.logger.info(f"Results saved to {file_path}")
        except IOError as e:
            self.logger.error(f"Failed to save results to {file_path}: {e}")
            raise
