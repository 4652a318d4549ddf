"""Version matching and advisory model for crate-shield."""

from .advisory import Advisory, AdvisoryDatabase
from .lockfile import Lockfile, Package
from .matcher import VulnerabilityMatcher, VulnerabilityReport, scan

__all__ = [
    "Advisory",
    "AdvisoryDatabase",
    "Lockfile",
    "Package",
    "VulnerabilityMatcher",
    "VulnerabilityReport",
    "scan",
]
