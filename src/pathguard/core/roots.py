import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from functools import lru_cache

from pathguard.core.canonical import canonicalize, is_rooted, is_within

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AllowedRoots:
    """Immutable allowlist of canonical, absolute root directories."""

    roots: tuple[str, ...]

    def __post_init__(self) -> None:
        for root in self.roots:
            if not is_rooted(root) or canonicalize(root) != root:
                raise ValueError(f"Allowed root must be a canonical absolute path: {root!r}")

    @classmethod
    def from_paths(cls, paths: Iterable[str | os.PathLike[str]]) -> "AllowedRoots":
        """Build an allowlist from absolute paths, canonicalizing each one.

        Duplicates are dropped; order is kept.

        Raises:
            ValueError: If any path is relative.
        """
        roots: list[str] = []
        for path in paths:
            raw = os.fspath(path)
            if not is_rooted(raw):
                raise ValueError(f"Allowed root must be an absolute path: {raw!r}")
            root = canonicalize(raw)
            if root not in roots:
                roots.append(root)
        return cls(tuple(roots))

    @classmethod
    def only(cls, path: str | os.PathLike[str]) -> "AllowedRoots":
        return cls.from_paths([path])

    def find_root(self, path: str) -> str | None:
        for root in self.roots:
            if is_within(path, root):
                return root
        return None

    def contains(self, path: str) -> bool:
        return self.find_root(path) is not None

    def __iter__(self):
        return iter(self.roots)

    def __len__(self) -> int:
        return len(self.roots)


@lru_cache(maxsize=1)
def get_allowed_roots() -> AllowedRoots:
    """Process-wide allowlist, built once from the environment configuration."""
    from pathguard.core.config import get_config

    roots = get_config().allowed_roots_value()
    logger.info(f"Allowed roots: {', '.join(roots.roots) or '(none)'}")
    return roots
