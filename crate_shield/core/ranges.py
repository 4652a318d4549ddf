"""Version requirements: comparator terms, term-groups and range sets.

A ``VersionReq`` is one comma-separated requirement such as
``">= 0.10.25, < 0.11.0"``; all of its comparators must hold. A
``VersionRange`` is an ordered set of requirements and matches a version
when any one of them does. Operator semantics follow Cargo's.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, Tuple

from .errors import VersionParseError
from .version import Identifier, Version, compare_prerelease, parse_numeric, parse_prerelease, split_version_text

_COMPARATOR_RE = re.compile(r'^(<=|>=|=|<|>|\^|~)?\s*(\S+)$')


@dataclass(frozen=True)
class Comparator:
    """A single ``<op> <version>`` term.

    ``minor`` and ``patch`` may be None for partial versions like ``^1.2``.
    """

    op: str
    major: int
    minor: Optional[int] = None
    patch: Optional[int] = None
    pre: Tuple[Identifier, ...] = field(default_factory=tuple)

    @classmethod
    def parse(cls, text: str) -> "Comparator":
        """Parse one comparator term.

        A term without an operator is a caret requirement.

        Raises:
            VersionParseError: If the operator or version is malformed
        """
        source = text
        text = text.strip()
        if not text:
            raise VersionParseError("Empty version requirement term")

        match = _COMPARATOR_RE.match(text)
        if not match:
            raise VersionParseError(f"Invalid version requirement term {source!r}")

        op = match.group(1) or "^"
        core, pre, build = split_version_text(match.group(2))
        if build:
            raise VersionParseError(f"Build metadata is not allowed in requirement {source!r}")

        parts = core.split('.')
        if len(parts) > 3:
            raise VersionParseError(f"Too many version components in requirement {source!r}")

        numbers = [parse_numeric(part, name, source) for part, name in zip(parts, ("major", "minor", "patch"))]
        numbers += [None] * (3 - len(numbers))

        if pre and numbers[2] is None:
            raise VersionParseError(f"Pre-release requires a full version in requirement {source!r}")
        if '-' in match.group(2) and not pre:
            raise VersionParseError(f"Invalid version in requirement {source!r}")

        return cls(
            op=op,
            major=numbers[0],
            minor=numbers[1],
            patch=numbers[2],
            pre=parse_prerelease(pre, source) if pre else (),
        )

    def matches(self, version: Version) -> bool:
        """Check a version against this comparator, ignoring the pre-release gate."""
        if self.op == "=":
            return self._matches_exact(version)
        if self.op == ">":
            return self._matches_greater(version)
        if self.op == ">=":
            return self._matches_exact(version) or self._matches_greater(version)
        if self.op == "<":
            return self._matches_less(version)
        if self.op == "<=":
            return self._matches_exact(version) or self._matches_less(version)
        if self.op == "~":
            return self._matches_tilde(version)
        return self._matches_caret(version)

    def _matches_exact(self, version: Version) -> bool:
        if version.major != self.major:
            return False
        if self.minor is not None and version.minor != self.minor:
            return False
        if self.patch is not None and version.patch != self.patch:
            return False
        return version.pre == self.pre

    def _matches_greater(self, version: Version) -> bool:
        if version.major != self.major:
            return version.major > self.major
        if self.minor is None:
            return False
        if version.minor != self.minor:
            return version.minor > self.minor
        if self.patch is None:
            return False
        if version.patch != self.patch:
            return version.patch > self.patch
        return compare_prerelease(version.pre, self.pre) > 0

    def _matches_less(self, version: Version) -> bool:
        if version.major != self.major:
            return version.major < self.major
        if self.minor is None:
            return False
        if version.minor != self.minor:
            return version.minor < self.minor
        if self.patch is None:
            return False
        if version.patch != self.patch:
            return version.patch < self.patch
        return compare_prerelease(version.pre, self.pre) < 0

    def _matches_tilde(self, version: Version) -> bool:
        if version.major != self.major:
            return False
        if self.minor is not None and version.minor != self.minor:
            return False
        if self.patch is not None and version.patch != self.patch:
            return version.patch > self.patch
        return compare_prerelease(version.pre, self.pre) >= 0

    def _matches_caret(self, version: Version) -> bool:
        if version.major != self.major:
            return False
        if self.minor is None:
            return True
        if self.patch is None:
            if self.major > 0:
                return version.minor >= self.minor
            return version.minor == self.minor

        if self.major > 0:
            if version.minor != self.minor:
                return version.minor > self.minor
            if version.patch != self.patch:
                return version.patch > self.patch
        elif self.minor > 0:
            if version.minor != self.minor:
                return False
            if version.patch != self.patch:
                return version.patch > self.patch
        elif version.minor != self.minor or version.patch != self.patch:
            return False

        return compare_prerelease(version.pre, self.pre) >= 0

    def allows_prerelease_of(self, version: Version) -> bool:
        """True if this comparator opts ``version``'s release line into pre-releases."""
        return (
            bool(self.pre)
            and self.major == version.major
            and self.minor == version.minor
            and self.patch == version.patch
        )

    def __str__(self) -> str:
        text = str(self.major)
        if self.minor is not None:
            text += f".{self.minor}"
        if self.patch is not None:
            text += f".{self.patch}"
        if self.pre:
            text += "-" + ".".join(str(part) for part in self.pre)
        return f"{self.op}{text}" if self.op in ("^", "~", "=") else f"{self.op} {text}"


@dataclass(frozen=True)
class VersionReq:
    """A conjunction of comparators; an empty group matches nothing."""

    comparators: Tuple[Comparator, ...] = field(default_factory=tuple)

    @classmethod
    def parse(cls, text: str) -> "VersionReq":
        """Parse a comma-separated requirement string.

        Raises:
            VersionParseError: If the string is not a string or any term is malformed
        """
        if not isinstance(text, str):
            raise VersionParseError(f"Version requirement must be a string, got {type(text).__name__}")
        if not text.strip():
            raise VersionParseError("Empty version requirement")
        return cls(tuple(Comparator.parse(term) for term in text.split(',')))

    def matches(self, version: Version) -> bool:
        """Check whether ``version`` satisfies every comparator in the group.

        A pre-release version additionally needs a comparator on the same
        ``major.minor.patch`` that carries a pre-release.
        """
        if not self.comparators:
            return False
        if not all(comparator.matches(version) for comparator in self.comparators):
            return False
        if version.is_prerelease:
            return any(comparator.allows_prerelease_of(version) for comparator in self.comparators)
        return True

    def __str__(self) -> str:
        return ", ".join(str(comparator) for comparator in self.comparators)


@dataclass(frozen=True)
class VersionRange:
    """A disjunction of requirement groups; an empty range matches nothing."""

    requirements: Tuple[VersionReq, ...] = field(default_factory=tuple)

    @classmethod
    def parse(cls, texts: Iterable[str]) -> "VersionRange":
        """Parse a list of requirement strings into a range set.

        Args:
            texts: Requirement strings such as ``[">= 1.2.0", "^0.9.8"]``

        Returns:
            Parsed VersionRange

        Raises:
            VersionParseError: If ``texts`` is a bare string or any requirement is malformed
        """
        if isinstance(texts, str):
            raise VersionParseError("Version range must be a list of requirement strings, not a string")
        return cls(tuple(VersionReq.parse(text) for text in texts))

    @classmethod
    def empty(cls) -> "VersionRange":
        return cls()

    def matches(self, version: Version) -> bool:
        return any(requirement.matches(version) for requirement in self.requirements)

    def __iter__(self) -> Iterator[VersionReq]:
        return iter(self.requirements)

    def __len__(self) -> int:
        return len(self.requirements)

    def __str__(self) -> str:
        return ", ".join(str(requirement) for requirement in self.requirements)
