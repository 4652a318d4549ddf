"""Advisory and lockfile sources for crate-shield."""

from .advisories import AdvisorySource, DirectoryAdvisorySource, InMemoryAdvisorySource
from .cargo import CargoLockParser

__all__ = [
    "AdvisorySource",
    "DirectoryAdvisorySource",
    "InMemoryAdvisorySource",
    "CargoLockParser",
]
