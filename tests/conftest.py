"""Shared fixtures for crate-shield tests."""

import pytest

from crate_shield.core.advisory import Advisory
from crate_shield.core.ranges import VersionRange


def make_advisory(advisory_id, crate_name, patched=(), unaffected=(), **kwargs):
    """Build an advisory from requirement strings."""
    title = kwargs.pop("title", f"Problem in {crate_name}")
    return Advisory(
        id=advisory_id,
        crate_name=crate_name,
        title=title,
        patched_versions=VersionRange.parse(list(patched)),
        unaffected_versions=VersionRange.parse(list(unaffected)),
        **kwargs
    )


@pytest.fixture
def advisory_factory():
    """Factory for building advisories in tests."""
    return make_advisory


CARGO_LOCK = '''[root]
name = "my-app"
version = "0.1.0"
dependencies = [
 "foo 1.1.0 (registry+https://github.com/rust-lang/crates.io-index)",
]

[[package]]
name = "foo"
version = "1.1.0"
source = "registry+https://github.com/rust-lang/crates.io-index"

[[package]]
name = "foo"
version = "1.2.0"
source = "registry+https://github.com/rust-lang/crates.io-index"

[[package]]
name = "bar"
version = "0.3.1"
source = "registry+https://github.com/rust-lang/crates.io-index"

[metadata]
"checksum foo 1.1.0 (registry+https://github.com/rust-lang/crates.io-index)" = "abc"
'''

ADVISORIES_TOML = '''[[advisory]]
id = "RUSTSEC-0001"
package = "foo"
title = "Memory corruption in foo"
description = "foo could read out of bounds"
date = "2017-01-01"
url = "https://example.com/RUSTSEC-0001"
patched_versions = [">= 1.2.0"]

[[advisory]]
id = "RUSTSEC-0002"
package = "bar"
title = "bar leaks secrets"
description = "bar logged secrets"
patched_versions = ["^0.3.5", ">= 0.4.0"]
unaffected_versions = ["< 0.2.0"]
'''


@pytest.fixture
def cargo_lock(tmp_path):
    """Create a temporary Cargo.lock file."""
    lock_file = tmp_path / "Cargo.lock"
    lock_file.write_text(CARGO_LOCK)
    return lock_file


@pytest.fixture
def advisories_toml(tmp_path):
    """Create a temporary single-file advisory database."""
    db_file = tmp_path / "Advisories.toml"
    db_file.write_text(ADVISORIES_TOML)
    return db_file
