"""Resolved packages under audit."""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, Tuple

from .errors import LockfileParseError, VersionParseError
from .version import Version


@dataclass(frozen=True)
class Package:
    """A single resolved dependency pinned to an exact version."""

    name: str
    version: Version
    source: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate package data."""
        if not self.name:
            raise LockfileParseError("Package name cannot be empty")
        if not isinstance(self.version, Version):
            raise LockfileParseError(f"Package {self.name} has no parsed version")

    def __str__(self) -> str:
        return f"{self.name} {self.version}"


@dataclass(frozen=True)
class Lockfile:
    """Ordered, immutable sequence of locked packages.

    The same crate name may appear more than once at different versions.
    """

    packages: Tuple[Package, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Freeze the package sequence."""
        object.__setattr__(self, "packages", tuple(self.packages))

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]]) -> "Lockfile":
        """Build a lockfile from raw ``(name, version_text)`` pairs.

        Args:
            pairs: Name and version string for each resolved package

        Returns:
            Lockfile with parsed versions

        Raises:
            LockfileParseError: If a name is empty or a version does not parse
        """
        packages = []
        for name, version_text in pairs:
            try:
                version = Version.parse(version_text)
            except VersionParseError as e:
                raise LockfileParseError(f"Invalid version for package {name!r}: {e}") from e
            packages.append(Package(name=name, version=version))
        return cls(tuple(packages))

    def __iter__(self) -> Iterator[Package]:
        return iter(self.packages)

    def __len__(self) -> int:
        return len(self.packages)
