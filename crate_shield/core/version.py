"""Semantic version value type used for locked packages and advisories."""

import functools
import re
from dataclasses import dataclass, field
from typing import Tuple, Union

from .errors import VersionParseError

Identifier = Union[int, str]

_IDENTIFIER_RE = re.compile(r'^[0-9A-Za-z-]+$')


def parse_numeric(text: str, what: str, source: str) -> int:
    """Parse a major/minor/patch component.

    Args:
        text: Component text
        what: Component name used in error messages
        source: Full input, for error messages

    Returns:
        The component as an integer

    Raises:
        VersionParseError: If the component is empty, non-numeric or has a leading zero
    """
    if not text:
        raise VersionParseError(f"Missing {what} version number in {source!r}")
    if not text.isdigit() or not text.isascii():
        raise VersionParseError(f"Invalid {what} version number {text!r} in {source!r}")
    if len(text) > 1 and text.startswith('0'):
        raise VersionParseError(f"Leading zero in {what} version number in {source!r}")
    return int(text)


def parse_prerelease(text: str, source: str) -> Tuple[Identifier, ...]:
    """Parse dot-separated pre-release identifiers.

    Numeric identifiers are stored as ints so they compare numerically.
    """
    identifiers = []
    for part in text.split('.'):
        if not part or not _IDENTIFIER_RE.match(part):
            raise VersionParseError(f"Invalid pre-release identifier {part!r} in {source!r}")
        if part.isdigit():
            if len(part) > 1 and part.startswith('0'):
                raise VersionParseError(f"Leading zero in pre-release identifier in {source!r}")
            identifiers.append(int(part))
        else:
            identifiers.append(part)
    return tuple(identifiers)


def parse_build(text: str, source: str) -> Tuple[str, ...]:
    """Parse dot-separated build metadata identifiers."""
    parts = text.split('.')
    for part in parts:
        if not part or not _IDENTIFIER_RE.match(part):
            raise VersionParseError(f"Invalid build identifier {part!r} in {source!r}")
    return tuple(parts)


def compare_prerelease(left: Tuple[Identifier, ...], right: Tuple[Identifier, ...]) -> int:
    """Compare two pre-release identifier tuples by SemVer precedence.

    An empty tuple (a release) orders after any pre-release.

    Returns:
        Negative, zero or positive like a classic ``cmp``
    """
    if left == right:
        return 0
    if not left:
        return 1
    if not right:
        return -1

    for a, b in zip(left, right):
        if a == b:
            continue
        a_numeric = isinstance(a, int)
        b_numeric = isinstance(b, int)
        if a_numeric and b_numeric:
            return -1 if a < b else 1
        if a_numeric != b_numeric:
            # numeric identifiers have lower precedence than alphanumeric ones
            return -1 if a_numeric else 1
        return -1 if a < b else 1

    return -1 if len(left) < len(right) else 1


def split_version_text(text: str) -> Tuple[str, str, str]:
    """Split ``core-pre+build`` into its three parts (pre and build may be empty)."""
    core, _, build = text.partition('+')
    core, _, pre = core.partition('-')
    return core, pre, build


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """An immutable semantic version.

    Ordering and equality follow SemVer precedence: build metadata is kept
    for display but ignored when comparing.
    """

    major: int
    minor: int
    patch: int
    pre: Tuple[Identifier, ...] = field(default_factory=tuple)
    build: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse a full ``MAJOR.MINOR.PATCH[-PRE][+BUILD]`` version.

        Args:
            text: Version string

        Returns:
            Parsed Version

        Raises:
            VersionParseError: If the text is not a valid semantic version
        """
        if not isinstance(text, str):
            raise VersionParseError(f"Version must be a string, got {type(text).__name__}")

        source = text
        text = text.strip()
        if not text:
            raise VersionParseError("Empty version string")

        core, pre, build = split_version_text(text)
        if '-' in text.partition('+')[0] and not pre:
            raise VersionParseError(f"Empty pre-release in {source!r}")
        if '+' in text and not build:
            raise VersionParseError(f"Empty build metadata in {source!r}")

        parts = core.split('.')
        if len(parts) != 3:
            raise VersionParseError(
                f"Expected MAJOR.MINOR.PATCH, got {len(parts)} component(s) in {source!r}"
            )

        major = parse_numeric(parts[0], "major", source)
        minor = parse_numeric(parts[1], "minor", source)
        patch = parse_numeric(parts[2], "patch", source)

        return cls(
            major=major,
            minor=minor,
            patch=patch,
            pre=parse_prerelease(pre, source) if pre else (),
            build=parse_build(build, source) if build else (),
        )

    @property
    def is_prerelease(self) -> bool:
        return bool(self.pre)

    @property
    def triple(self) -> Tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def _compare(self, other: "Version") -> int:
        if self.triple != other.triple:
            return -1 if self.triple < other.triple else 1
        return compare_prerelease(self.pre, other.pre)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.triple == other.triple and self.pre == other.pre

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._compare(other) < 0

    def __hash__(self) -> int:
        return hash((self.triple, self.pre))

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre:
            text += "-" + ".".join(str(part) for part in self.pre)
        if self.build:
            text += "+" + ".".join(self.build)
        return text
