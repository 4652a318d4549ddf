"""Exception types raised while building audit inputs."""


class VersionParseError(ValueError):
    """Raised when a version or version requirement cannot be parsed."""


class AdvisoryBuildError(ValueError):
    """Raised when an advisory or advisory database cannot be constructed."""


class DuplicateIdError(AdvisoryBuildError):
    """Raised when two advisories in one database share an id."""

    def __init__(self, advisory_id: str) -> None:
        super().__init__(f"Duplicate advisory id: {advisory_id}")
        self.advisory_id = advisory_id


class LockfileParseError(ValueError):
    """Raised when a lockfile or one of its packages is malformed."""
