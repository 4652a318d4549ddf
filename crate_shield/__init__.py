"""crate-shield - audit Cargo.lock files against known security advisories."""

__version__ = "0.1.0"

from .core.advisory import Advisory, AdvisoryDatabase, advisory_from_record
from .core.errors import AdvisoryBuildError, DuplicateIdError, LockfileParseError, VersionParseError
from .core.lockfile import Lockfile, Package
from .core.matcher import VulnerabilityMatch, VulnerabilityMatcher, VulnerabilityReport, scan, scan_many
from .core.ranges import VersionRange, VersionReq
from .core.version import Version
from .output.formatters import JSONFormatter, TextFormatter, render_json, render_text
from .sources.advisories import AdvisorySource, DirectoryAdvisorySource, InMemoryAdvisorySource
from .sources.cargo import CargoLockParser

__all__ = [
    "Advisory",
    "AdvisoryBuildError",
    "AdvisoryDatabase",
    "AdvisorySource",
    "CargoLockParser",
    "DirectoryAdvisorySource",
    "DuplicateIdError",
    "InMemoryAdvisorySource",
    "JSONFormatter",
    "Lockfile",
    "LockfileParseError",
    "Package",
    "TextFormatter",
    "Version",
    "VersionParseError",
    "VersionRange",
    "VersionReq",
    "VulnerabilityMatch",
    "VulnerabilityMatcher",
    "VulnerabilityReport",
    "advisory_from_record",
    "render_json",
    "render_text",
    "scan",
    "scan_many",
]
