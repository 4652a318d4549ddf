"""Security advisories and the read-only advisory database."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from ..utils.logging import get_logger
from .errors import AdvisoryBuildError, DuplicateIdError, VersionParseError
from .ranges import VersionRange
from .version import Version

if TYPE_CHECKING:
    from ..sources.advisories import AdvisorySource


logger = get_logger("AdvisoryDatabase")


@dataclass(frozen=True)
class Advisory:
    """A single known vulnerability affecting one crate."""

    id: str
    crate_name: str
    title: str = ""
    description: str = ""
    url: Optional[str] = None
    date: Optional[str] = None
    patched_versions: VersionRange = field(default_factory=VersionRange.empty)
    unaffected_versions: VersionRange = field(default_factory=VersionRange.empty)
    aliases: Tuple[str, ...] = field(default_factory=tuple)
    keywords: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate advisory data."""
        if not self.id:
            raise AdvisoryBuildError("Advisory ID cannot be empty")
        if not self.crate_name:
            raise AdvisoryBuildError(f"Advisory {self.id} has no crate name")
        if not isinstance(self.patched_versions, VersionRange):
            raise AdvisoryBuildError(f"Advisory {self.id}: patched_versions must be a VersionRange")
        if not isinstance(self.unaffected_versions, VersionRange):
            raise AdvisoryBuildError(f"Advisory {self.id}: unaffected_versions must be a VersionRange")

    def is_version_vulnerable(self, version: Version) -> bool:
        """Check whether a locked version is exposed to this advisory.

        A version is safe if it is patched or was never affected. With no
        patched versions at all, everything outside the unaffected range is
        vulnerable.

        Args:
            version: Locked version to test

        Returns:
            True if the version is vulnerable
        """
        if self.patched_versions.matches(version):
            return False
        if self.unaffected_versions.matches(version):
            return False
        return True


def _require_str(record: Mapping[str, Any], key: str, advisory_id: str) -> str:
    value = record.get(key)
    if not isinstance(value, str) or not value.strip():
        raise AdvisoryBuildError(f"Advisory {advisory_id}: missing required field '{key}'")
    return value.strip()


def _optional_str(record: Mapping[str, Any], key: str, advisory_id: str) -> Optional[str]:
    value = record.get(key)
    if value is None:
        return None
    # TOML dates come back as datetime.date
    if hasattr(value, "isoformat") and key == "date":
        return value.isoformat()
    if not isinstance(value, str):
        raise AdvisoryBuildError(f"Advisory {advisory_id}: field '{key}' must be a string")
    return value


def _str_list(record: Mapping[str, Any], key: str, advisory_id: str) -> List[str]:
    value = record.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise AdvisoryBuildError(f"Advisory {advisory_id}: field '{key}' must be a list of strings")
    return value


def advisory_from_record(record: Mapping[str, Any]) -> Advisory:
    """Build an Advisory from a raw advisory record.

    The record uses the advisory database field names (``package`` for the
    crate name). Any missing required field or badly-typed value is an
    error; nothing defaults to "not vulnerable".

    Args:
        record: Raw advisory mapping, e.g. one ``[advisory]`` TOML table

    Returns:
        Parsed Advisory

    Raises:
        AdvisoryBuildError: If the record is malformed
    """
    if not isinstance(record, Mapping):
        raise AdvisoryBuildError(f"Advisory record must be a table, got {type(record).__name__}")

    advisory_id = _require_str(record, "id", "<unknown>")
    crate_name = _require_str(record, "package", advisory_id)

    try:
        patched = VersionRange.parse(_str_list(record, "patched_versions", advisory_id))
        unaffected = VersionRange.parse(_str_list(record, "unaffected_versions", advisory_id))
    except VersionParseError as e:
        raise AdvisoryBuildError(f"Advisory {advisory_id}: {e}") from e

    return Advisory(
        id=advisory_id,
        crate_name=crate_name,
        title=_optional_str(record, "title", advisory_id) or "",
        description=_optional_str(record, "description", advisory_id) or "",
        url=_optional_str(record, "url", advisory_id),
        date=_optional_str(record, "date", advisory_id),
        patched_versions=patched,
        unaffected_versions=unaffected,
        aliases=tuple(_str_list(record, "aliases", advisory_id)),
        keywords=tuple(_str_list(record, "keywords", advisory_id)),
    )


class AdvisoryDatabase:
    """Immutable collection of advisories indexed by crate name."""

    def __init__(self, advisories: Iterable[Advisory] = ()) -> None:
        """Build the database and its crate-name index.

        Args:
            advisories: Advisories in the order they should be reported

        Raises:
            DuplicateIdError: If two advisories share an id
        """
        by_id: Dict[str, Advisory] = {}
        by_crate: Dict[str, List[Advisory]] = {}

        for advisory in advisories:
            if not isinstance(advisory, Advisory):
                raise AdvisoryBuildError(f"Expected Advisory, got {type(advisory).__name__}")
            if advisory.id in by_id:
                raise DuplicateIdError(advisory.id)
            by_id[advisory.id] = advisory
            by_crate.setdefault(advisory.crate_name, []).append(advisory)

        self._advisories: Tuple[Advisory, ...] = tuple(by_id.values())
        self._by_id: Mapping[str, Advisory] = MappingProxyType(by_id)
        self._by_crate: Mapping[str, Tuple[Advisory, ...]] = MappingProxyType(
            {name: tuple(entries) for name, entries in by_crate.items()}
        )
        logger.debug(f"Indexed {len(self._advisories)} advisories for {len(self._by_crate)} crates")

    @classmethod
    def from_advisories(cls, advisories: Iterable[Advisory]) -> "AdvisoryDatabase":
        """Build a database from already-parsed advisories."""
        return cls(advisories)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "AdvisoryDatabase":
        """Build a database from raw records, failing on the first bad one."""
        return cls(advisory_from_record(record) for record in records)

    @classmethod
    def from_source(cls, source: "AdvisorySource") -> "AdvisoryDatabase":
        """Build a database from an advisory source collaborator."""
        database = cls.from_records(source.load())
        logger.info(f"Loaded {len(database)} advisories for {len(database.crate_names())} crates")
        return database

    def find_by_crate(self, name: str) -> Iterator[Advisory]:
        """Iterate the advisories for a crate, in insertion order.

        Args:
            name: Exact crate name

        Returns:
            Iterator over matching advisories (empty if none)
        """
        return iter(self._by_crate.get(name, ()))

    def get(self, advisory_id: str) -> Optional[Advisory]:
        """Look up an advisory by id, or None if unknown."""
        return self._by_id.get(advisory_id)

    def crate_names(self) -> List[str]:
        """Get the names of every crate with at least one advisory."""
        return list(self._by_crate)

    def __iter__(self) -> Iterator[Advisory]:
        return iter(self._advisories)

    def __len__(self) -> int:
        return len(self._advisories)

    def __contains__(self, advisory_id: object) -> bool:
        return advisory_id in self._by_id

    def __repr__(self) -> str:
        return f"AdvisoryDatabase({len(self._advisories)} advisories)"
