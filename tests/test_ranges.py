"""Tests for version requirements and range sets."""

import pytest

from crate_shield.core.errors import VersionParseError
from crate_shield.core.ranges import Comparator, VersionRange, VersionReq
from crate_shield.core.version import Version


def matches(requirement, version):
    return VersionReq.parse(requirement).matches(Version.parse(version))


class TestComparatorParsing:
    """Test parsing of single comparator terms."""

    def test_parse_with_space(self):
        """Test parsing an operator separated from its version."""
        comparator = Comparator.parse(">= 1.2.0")

        assert comparator.op == ">="
        assert (comparator.major, comparator.minor, comparator.patch) == (1, 2, 0)

    def test_parse_partial_version(self):
        """Test that partial versions are allowed in requirements."""
        comparator = Comparator.parse("~1.2")

        assert comparator.op == "~"
        assert comparator.minor == 2
        assert comparator.patch is None

    def test_bare_version_is_caret(self):
        """Test that a version without operator defaults to caret."""
        assert Comparator.parse("1.2.3").op == "^"

    def test_parse_prerelease(self):
        """Test parsing a comparator with a pre-release."""
        assert Comparator.parse(">=1.0.0-alpha.1").pre == ("alpha", 1)

    @pytest.mark.parametrize("text", [
        "",
        "   ",
        "*",
        "!= 1.0.0",
        "~> 1.0",
        "=> 1.0.0",
        ">= 1.x",
        ">= 1.0.0.0",
        ">= 1.0-alpha",
        ">= 1.0.0+build",
        ">= 1.0.0-",
        ">= 01.0.0",
    ])
    def test_parse_invalid(self, text):
        """Test that malformed terms fail at construction."""
        with pytest.raises(VersionParseError):
            Comparator.parse(text)

    def test_str(self):
        """Test display of comparators."""
        assert str(Comparator.parse(">=1.2.0")) == ">= 1.2.0"
        assert str(Comparator.parse("^0.9")) == "^0.9"
        assert str(Comparator.parse("1.2.3")) == "^1.2.3"


class TestComparisonOperators:
    """Test the plain comparison operators."""

    def test_open_closed_range(self):
        """Test a range that excludes its lower and includes its upper bound."""
        requirement = "> 1.0.0, <= 1.2.0"

        assert matches(requirement, "1.1.0")
        assert not matches(requirement, "1.0.0")
        assert matches(requirement, "1.2.0")
        assert not matches(requirement, "1.2.1")

    def test_exact(self):
        """Test exact and partial-exact requirements."""
        assert matches("=1.2.3", "1.2.3")
        assert not matches("=1.2.3", "1.2.4")
        assert matches("=1.2", "1.2.9")
        assert not matches("=1.2", "1.3.0")
        assert matches("=1", "1.9.0")

    def test_partial_bounds(self):
        """Test comparison operators against partial versions."""
        assert not matches(">1.2", "1.2.5")
        assert matches(">1.2", "1.3.0")
        assert matches("<=1.2", "1.2.9")
        assert not matches("<=1.2", "1.3.0")
        assert matches("<1.2", "1.1.9")
        assert not matches("<1.2", "1.2.0")
        assert matches(">=1", "1.0.0")
        assert not matches(">=1", "0.9.9")


class TestCaretAndTilde:
    """Test caret and tilde expansion."""

    @pytest.mark.parametrize("requirement,version,expected", [
        ("^1.2.3", "1.2.3", True),
        ("^1.2.3", "1.9.0", True),
        ("^1.2.3", "1.2.2", False),
        ("^1.2.3", "2.0.0", False),
        ("^0.2.3", "0.2.9", True),
        ("^0.2.3", "0.3.0", False),
        ("^0.0.3", "0.0.3", True),
        ("^0.0.3", "0.0.4", False),
        ("^1.2", "1.2.0", True),
        ("^1.2", "1.1.9", False),
        ("^1.2", "2.0.0", False),
        ("^0.0", "0.0.5", True),
        ("^0.0", "0.1.0", False),
        ("^0", "0.9.9", True),
        ("^0", "1.0.0", False),
        ("1.2.3", "1.5.0", True),
    ])
    def test_caret(self, requirement, version, expected):
        """Test caret requirements."""
        assert matches(requirement, version) is expected

    @pytest.mark.parametrize("requirement,version,expected", [
        ("~1.2.3", "1.2.3", True),
        ("~1.2.3", "1.2.9", True),
        ("~1.2.3", "1.2.2", False),
        ("~1.2.3", "1.3.0", False),
        ("~1.2", "1.2.0", True),
        ("~1.2", "1.2.7", True),
        ("~1.2", "1.3.0", False),
        ("~1", "1.5.0", True),
        ("~1", "2.0.0", False),
    ])
    def test_tilde(self, requirement, version, expected):
        """Test tilde requirements."""
        assert matches(requirement, version) is expected


class TestPrereleaseMatching:
    """Test pre-release handling."""

    def test_prerelease_does_not_match_release_bound(self):
        """Test that 1.0.0-alpha never satisfies >= 1.0.0."""
        assert not matches(">= 1.0.0", "1.0.0-alpha")

    def test_prerelease_matches_prerelease_bound(self):
        """Test that 1.0.0-alpha satisfies >= 1.0.0-alpha."""
        assert matches(">= 1.0.0-alpha", "1.0.0-alpha")
        assert matches(">= 1.0.0-alpha", "1.0.0-beta")
        assert matches(">= 1.0.0-alpha", "1.0.0")

    def test_prerelease_of_other_release_line_excluded(self):
        """Test that pre-releases of a different triple are not opted in."""
        assert not matches(">= 1.0.0", "1.1.0-alpha")
        assert not matches(">= 1.0.0-alpha", "1.1.0-alpha")

    def test_caret_with_prerelease(self):
        """Test caret requirements that carry a pre-release."""
        assert matches("^1.2.3-beta", "1.2.3-beta.2")
        assert not matches("^1.2.3-beta", "1.2.3-alpha")
        assert matches("^1.2.3-beta", "1.4.0")


class TestVersionReq:
    """Test term-group behavior."""

    def test_empty_group_matches_nothing(self):
        """Test that an empty group never matches."""
        assert not VersionReq().matches(Version.parse("1.0.0"))

    def test_conjunction(self):
        """Test that every term must hold."""
        requirement = VersionReq.parse(">= 0.10.25, < 0.11.0")

        assert requirement.matches(Version.parse("0.10.30"))
        assert not requirement.matches(Version.parse("0.11.0"))
        assert not requirement.matches(Version.parse("0.10.24"))

    def test_trailing_comma_rejected(self):
        """Test that an empty term in a group is an error."""
        with pytest.raises(VersionParseError):
            VersionReq.parse(">= 1.0.0,")

    def test_non_string_rejected(self):
        """Test that non-string requirements are rejected."""
        with pytest.raises(VersionParseError):
            VersionReq.parse(None)

    def test_str(self):
        """Test display of a group."""
        assert str(VersionReq.parse(">=0.10.25,<0.11.0")) == ">= 0.10.25, < 0.11.0"


class TestVersionRange:
    """Test range sets."""

    def test_empty_range_matches_nothing(self):
        """Test that an empty range never matches."""
        version_range = VersionRange.empty()

        assert not version_range.matches(Version.parse("0.0.0"))
        assert len(version_range) == 0

    def test_disjunction(self):
        """Test that any group may match."""
        version_range = VersionRange.parse(["^0.9.8", ">= 1.0.0"])

        assert version_range.matches(Version.parse("0.9.9"))
        assert version_range.matches(Version.parse("1.5.0"))
        assert not version_range.matches(Version.parse("0.9.7"))
        assert not version_range.matches(Version.parse("0.10.0"))

    def test_iteration(self):
        """Test iterating over groups."""
        version_range = VersionRange.parse([">= 1.2.0", "^0.9"])

        assert [str(requirement) for requirement in version_range] == [">= 1.2.0", "^0.9"]

    def test_bare_string_rejected(self):
        """Test that a single string is not silently split into characters."""
        with pytest.raises(VersionParseError):
            VersionRange.parse(">= 1.0.0")

    def test_malformed_group_rejected(self):
        """Test that one bad group fails the whole range."""
        with pytest.raises(VersionParseError):
            VersionRange.parse([">= 1.0.0", "nonsense"])
