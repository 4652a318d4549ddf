"""Advisory sources: where raw advisory records come from.

The matching engine never touches the network or the file system itself;
it receives an ``AdvisoryDatabase`` built from one of these sources.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, List, Mapping

from ..core.errors import AdvisoryBuildError
from ..utils.logging import get_logger
from ..utils.performance import benchmark

try:
    import tomllib
except ImportError:
    import tomli as tomllib


class AdvisorySource(ABC):
    """Supplies raw advisory records to build an AdvisoryDatabase from."""

    @abstractmethod
    def load(self) -> List[Mapping[str, Any]]:
        """Load every raw advisory record.

        Returns:
            Raw records in a stable order

        Raises:
            AdvisoryBuildError: If the source holds malformed data
        """
        pass


class InMemoryAdvisorySource(AdvisorySource):
    """Advisory records held in memory, mostly for fixtures."""

    def __init__(self, records: Iterable[Mapping[str, Any]]) -> None:
        self._records = list(records)

    def load(self) -> List[Mapping[str, Any]]:
        return list(self._records)


class DirectoryAdvisorySource(AdvisorySource):
    """Advisory records stored as TOML on local disk.

    ``path`` may be a single ``Advisories.toml`` holding an ``[[advisory]]``
    array, or a directory tree (such as a checkout of an advisory database)
    where each ``*.toml`` file holds one ``[advisory]`` table.
    """

    def __init__(self, path: Path) -> None:
        """Initialize the source.

        Args:
            path: Advisory file or directory

        Raises:
            FileNotFoundError: If the path does not exist
        """
        self.path = Path(path)
        self.logger = get_logger("AdvisorySource")

        if not self.path.exists():
            raise FileNotFoundError(f"Advisory database not found: {self.path}")

    def load(self) -> List[Mapping[str, Any]]:
        return self.load_from_path()

    @benchmark
    def load_from_path(self) -> List[Mapping[str, Any]]:
        """Read raw advisory records from the configured path.

        Returns:
            Records in file order (directory files sorted by path)

        Raises:
            AdvisoryBuildError: If a directory holds no ``*.toml`` files, or any
                file is unreadable, is not valid TOML or holds no advisory
        """
        if self.path.is_file():
            files = [self.path]
        else:
            files = sorted(self.path.rglob("*.toml"))
            if not files:
                raise AdvisoryBuildError(f"No advisory files found under {self.path}")

        records: List[Mapping[str, Any]] = []
        for advisory_file in files:
            records.extend(self._read_file(advisory_file))

        self.logger.info(f"Read {len(records)} advisory records from {len(files)} file(s) under {self.path}")
        return records

    def _read_file(self, advisory_file: Path) -> List[Mapping[str, Any]]:
        """Read the advisory entries of a single TOML file.

        Args:
            advisory_file: File to read

        Returns:
            List of raw advisory tables
        """
        try:
            with open(advisory_file, 'rb') as f:
                data = tomllib.load(f)
        except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
            raise AdvisoryBuildError(f"Failed to read advisory file {advisory_file}: {e}") from e

        entry = data.get("advisory")
        if isinstance(entry, dict):
            return [entry]
        if isinstance(entry, list) and entry and all(isinstance(item, dict) for item in entry):
            return entry

        raise AdvisoryBuildError(f"No [advisory] entry found in {advisory_file}")

