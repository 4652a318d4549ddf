"""Cargo.lock parser."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.errors import LockfileParseError, VersionParseError
from ..core.lockfile import Lockfile, Package
from ..core.version import Version
from ..utils.logging import get_logger

try:
    import tomllib
except ImportError:
    import tomli as tomllib


class CargoLockParser:
    """Parser for Cargo ``Cargo.lock`` files."""

    def __init__(self) -> None:
        """Initialize the Cargo.lock parser."""
        self.logger = get_logger("CargoLockParser")

    def can_parse(self, file_path: Path) -> bool:
        """Check if this parser can handle the file.

        Args:
            file_path: Path to the file

        Returns:
            True if file is a Cargo.lock file
        """
        return file_path.name == "Cargo.lock"

    def parse(self, file_path: Path) -> Lockfile:
        """Parse a Cargo.lock file.

        Args:
            file_path: Path to the Cargo.lock file

        Returns:
            Lockfile with every ``[[package]]`` entry

        Raises:
            FileNotFoundError: If the file doesn't exist
            PermissionError: If the file is not readable
            LockfileParseError: If the file is malformed or not valid UTF-8
        """
        self.validate_file(file_path)

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise LockfileParseError(f"Failed to read {file_path}: {e}") from e

        lockfile = self.parse_string(content, source=str(file_path))
        self.logger.info(f"Parsed {len(lockfile)} packages from {file_path}")
        return lockfile

    def parse_string(self, content: str, source: str = "Cargo.lock") -> Lockfile:
        """Parse Cargo.lock content.

        Args:
            content: Lockfile text
            source: Name used in error messages

        Returns:
            Parsed lockfile
        """
        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError as e:
            raise LockfileParseError(f"Invalid TOML in {source}: {e}") from e

        entries = data.get("package", [])
        if not isinstance(entries, list):
            raise LockfileParseError(f"'package' must be an array of tables in {source}")

        # the legacy [root] table is the project being audited, not a dependency
        return Lockfile(tuple(
            self._create_package(entry, index, source)
            for index, entry in enumerate(entries, 1)
        ))

    def _create_package(self, entry: Dict[str, Any], index: int, source: str) -> Package:
        """Create a Package from one ``[[package]]`` table.

        Args:
            entry: Raw package table
            index: 1-based position, for error messages
            source: Lockfile name, for error messages

        Returns:
            Package object
        """
        if not isinstance(entry, dict):
            raise LockfileParseError(f"Package entry #{index} in {source} is not a table")

        name = entry.get("name")
        version_text = entry.get("version")
        if not isinstance(name, str) or not name:
            raise LockfileParseError(f"Package entry #{index} in {source} has no name")
        if not isinstance(version_text, str):
            raise LockfileParseError(f"Package {name} in {source} has no version")

        try:
            version = Version.parse(version_text)
        except VersionParseError as e:
            raise LockfileParseError(f"Package {name} in {source}: {e}") from e

        package_source: Optional[str] = entry.get("source")
        if package_source is not None and not isinstance(package_source, str):
            raise LockfileParseError(f"Package {name} in {source} has an invalid source")
        return Package(name=name, version=version, source=package_source)

    def validate_file(self, file_path: Path) -> None:
        """Validate that the file exists and is readable.

        Args:
            file_path: Path to validate

        Raises:
            FileNotFoundError: If file doesn't exist
            PermissionError: If file is not readable
        """
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        if not file_path.is_file():
            raise LockfileParseError(f"Path is not a file: {file_path}")

        if not os.access(file_path, os.R_OK):
            raise PermissionError(f"File is not readable: {file_path}")
