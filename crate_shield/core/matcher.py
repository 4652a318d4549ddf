"""Core vulnerability matching logic for crate-shield."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Tuple

from ..utils.logging import get_logger
from ..utils.performance import benchmark
from .advisory import Advisory, AdvisoryDatabase
from .lockfile import Lockfile, Package


@dataclass(frozen=True)
class VulnerabilityMatch:
    """A locked package whose version is vulnerable to one advisory."""

    package: Package
    advisory: Advisory


@dataclass(frozen=True)
class VulnerabilityReport:
    """Ordered, read-only result of one audit.

    Matches are in lockfile order, then advisory insertion order within a
    package.
    """

    matches: Tuple[VulnerabilityMatch, ...] = field(default_factory=tuple)
    packages_scanned: int = 0
    advisories_in_database: int = 0

    def __post_init__(self) -> None:
        """Freeze the match sequence."""
        object.__setattr__(self, "matches", tuple(self.matches))

    @property
    def count(self) -> int:
        return len(self.matches)

    @property
    def is_empty(self) -> bool:
        return not self.matches

    def vulnerable_packages(self) -> List[Package]:
        """Get the distinct vulnerable packages in first-seen order.

        Returns:
            List of packages with at least one match
        """
        seen = {}
        for match in self.matches:
            seen.setdefault(match.package, None)
        return list(seen)

    def __iter__(self) -> Iterator[VulnerabilityMatch]:
        return iter(self.matches)

    def __len__(self) -> int:
        return len(self.matches)


class VulnerabilityMatcher:
    """Matches locked packages against an advisory database."""

    def __init__(self) -> None:
        self.logger = get_logger("VulnerabilityMatcher")

    @benchmark
    def scan(self, lockfile: Lockfile, database: AdvisoryDatabase) -> VulnerabilityReport:
        """Audit every package in a lockfile.

        Neither input is modified, and identical inputs always produce an
        identical report.

        Args:
            lockfile: Packages to check
            database: Advisories to check them against

        Returns:
            Report of every (package, advisory) pair that is vulnerable
        """
        matches: List[VulnerabilityMatch] = []

        for package in lockfile:
            matches.extend(self._match_package(package, database))

        return VulnerabilityReport(
            matches=tuple(matches),
            packages_scanned=len(lockfile),
            advisories_in_database=len(database),
        )

    def _match_package(self, package: Package, database: AdvisoryDatabase) -> List[VulnerabilityMatch]:
        """Match a single package against the advisories for its crate name.

        Args:
            package: Package to match

        Returns:
            List of vulnerability matches for this package
        """
        matches = []

        for advisory in database.find_by_crate(package.name):
            if advisory.is_version_vulnerable(package.version):
                self.logger.debug(f"MATCH: {package} is vulnerable to {advisory.id}")
                matches.append(VulnerabilityMatch(package=package, advisory=advisory))
            else:
                self.logger.debug(f"NO MATCH: {package} is not affected by {advisory.id}")

        return matches

    def scan_many(
        self,
        lockfiles: Sequence[Lockfile],
        database: AdvisoryDatabase,
        max_workers: int = 4
    ) -> List[VulnerabilityReport]:
        """Audit several lockfiles concurrently against one shared database.

        Args:
            lockfiles: Lockfiles to audit
            database: Shared, read-only advisory database
            max_workers: Thread pool size

        Returns:
            One report per lockfile, in input order
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(lambda lockfile: self.scan(lockfile, database), lockfiles))


def scan(lockfile: Lockfile, database: AdvisoryDatabase) -> VulnerabilityReport:
    """Audit a lockfile against an advisory database."""
    return VulnerabilityMatcher().scan(lockfile, database)


def scan_many(
    lockfiles: Sequence[Lockfile],
    database: AdvisoryDatabase,
    max_workers: int = 4
) -> List[VulnerabilityReport]:
    """Audit several lockfiles in parallel against one advisory database."""
    return VulnerabilityMatcher().scan_many(lockfiles, database, max_workers=max_workers)
