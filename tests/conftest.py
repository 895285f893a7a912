"""Shared fixtures for pathguard tests."""

from collections.abc import Iterator
from pathlib import Path

import pytest

from pathguard.core.config import get_config
from pathguard.core.roots import AllowedRoots, get_allowed_roots


@pytest.fixture(autouse=True)
def _fresh_config() -> Iterator[None]:
    """Drop the memoized config and allowlist so env changes take effect."""
    get_config.cache_clear()
    get_allowed_roots.cache_clear()
    yield
    get_config.cache_clear()
    get_allowed_roots.cache_clear()


@pytest.fixture
def root(tmp_path: Path) -> Path:
    """An allowed root directory with no symlinks in its path."""
    d = tmp_path.resolve() / "root"
    d.mkdir()
    return d


@pytest.fixture
def roots(root: Path) -> AllowedRoots:
    return AllowedRoots.only(root)


@pytest.fixture
def populated_root(root: Path) -> Path:
    """Allowed root holding a couple of files."""
    (root / "test-file.txt").write_text("test content")
    (root / "subdir").mkdir()
    (root / "subdir" / "nested.txt").write_text("nested content")
    return root
