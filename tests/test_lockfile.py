"""Tests for the lockfile model and the Cargo.lock parser."""

from pathlib import Path

import pytest

from crate_shield.core.errors import LockfileParseError, VersionParseError
from crate_shield.core.lockfile import Lockfile, Package
from crate_shield.core.version import Version
from crate_shield.sources.cargo import CargoLockParser


class TestLockfileModel:
    """Test Package and Lockfile."""

    def test_from_pairs(self):
        """Test building a lockfile from raw pairs."""
        lockfile = Lockfile.from_pairs([("foo", "1.1.0"), ("foo", "1.2.0"), ("bar", "0.1.0")])

        assert len(lockfile) == 3
        assert [str(package) for package in lockfile] == ["foo 1.1.0", "foo 1.2.0", "bar 0.1.0"]
        assert lockfile.packages[0].version == Version.parse("1.1.0")

    def test_from_pairs_invalid_version(self):
        """Test that a bad version surfaces as a lockfile error."""
        with pytest.raises(LockfileParseError, match="foo") as exc_info:
            Lockfile.from_pairs([("foo", "1.0")])

        assert isinstance(exc_info.value.__cause__, VersionParseError)

    def test_package_requires_name(self):
        """Test package validation."""
        with pytest.raises(LockfileParseError):
            Package(name="", version=Version.parse("1.0.0"))

    def test_package_requires_parsed_version(self):
        """Test that versions must be parsed before building a package."""
        with pytest.raises(LockfileParseError):
            Package(name="foo", version="1.0.0")

    def test_empty_lockfile(self):
        """Test an empty lockfile."""
        assert len(Lockfile()) == 0
        assert list(Lockfile()) == []

    def test_packages_copied_to_tuple(self):
        """Test that a lockfile does not share the caller's list."""
        packages = [Package(name="foo", version=Version.parse("1.0.0"))]
        lockfile = Lockfile(packages=packages)
        packages.append(Package(name="bar", version=Version.parse("2.0.0")))

        assert isinstance(lockfile.packages, tuple)
        assert [package.name for package in lockfile] == ["foo"]


class TestCargoLockParser:
    """Test the Cargo.lock parser."""

    def test_can_parse(self, cargo_lock, tmp_path):
        """Test file detection."""
        parser = CargoLockParser()

        assert parser.can_parse(cargo_lock)
        assert not parser.can_parse(tmp_path / "Cargo.toml")

    def test_parse(self, cargo_lock):
        """Test parsing packages in file order."""
        lockfile = CargoLockParser().parse(cargo_lock)

        assert [(package.name, str(package.version)) for package in lockfile] == [
            ("foo", "1.1.0"),
            ("foo", "1.2.0"),
            ("bar", "0.3.1"),
        ]
        assert lockfile.packages[0].source == "registry+https://github.com/rust-lang/crates.io-index"

    def test_root_is_not_audited(self, cargo_lock):
        """Test that the legacy [root] table is skipped."""
        lockfile = CargoLockParser().parse(cargo_lock)

        assert "my-app" not in {package.name for package in lockfile}

    def test_parse_string_without_packages(self):
        """Test a lockfile with no dependencies."""
        assert len(CargoLockParser().parse_string("version = 3\n")) == 0

    def test_local_package_without_source(self):
        """Test path dependencies without a source."""
        lockfile = CargoLockParser().parse_string('[[package]]\nname = "local"\nversion = "0.1.0"\n')

        assert lockfile.packages[0].source is None

    def test_missing_file(self, tmp_path):
        """Test that a missing lockfile raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            CargoLockParser().parse(tmp_path / "Cargo.lock")

    def test_directory_rejected(self, tmp_path):
        """Test that a directory is not a lockfile."""
        with pytest.raises(LockfileParseError):
            CargoLockParser().parse(tmp_path)

    @pytest.mark.parametrize("content", [
        "[[package]\nname = ",
        '[[package]]\nversion = "1.0.0"\n',
        '[[package]]\nname = "foo"\n',
        '[[package]]\nname = "foo"\nversion = "1.0"\n',
        '[[package]]\nname = "foo"\nversion = 1\n',
        '[[package]]\nname = "foo"\nversion = "1.0.0"\nsource = 5\n',
        'package = "foo"\n',
    ])
    def test_malformed_lockfile(self, content):
        """Test that malformed lockfiles fail instead of dropping packages."""
        with pytest.raises(LockfileParseError):
            CargoLockParser().parse_string(content)

    def test_error_names_source(self, tmp_path):
        """Test that errors name the offending file."""
        lock_file = tmp_path / "Cargo.lock"
        lock_file.write_text('[[package]]\nname = "foo"\nversion = "x"\n')

        with pytest.raises(LockfileParseError, match="Cargo.lock"):
            CargoLockParser().parse(Path(lock_file))

    def test_invalid_utf8(self, tmp_path):
        """Test that a lockfile with undecodable bytes is a parse error."""
        lock_file = tmp_path / "Cargo.lock"
        lock_file.write_bytes(b'\xff\xfe[[package]]\nname = "foo"\nversion = "1.0.0"\n')

        with pytest.raises(LockfileParseError, match="Cargo.lock") as exc_info:
            CargoLockParser().parse(lock_file)

        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)
