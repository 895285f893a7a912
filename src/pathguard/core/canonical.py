"""Pure path algebra: canonical form and boundary-aware containment.

Nothing in this module touches the filesystem, so it works on paths that do
not exist yet.
"""

import os
import re

_SEPARATORS = re.compile(r"[\\/]+")


def is_rooted(path: str) -> bool:
    """True if *path* starts at a filesystem root (after any drive)."""
    _, rest = os.path.splitdrive(path)
    return rest[:1] in ("/", "\\")


def canonicalize(path: str) -> str:
    """Collapse ``.``/``..`` segments and repeated separators of a rooted path.

    Both ``/`` and ``\\`` count as separators. A ``..`` at the root stays at
    the root, as the operating system does.

    Raises:
        ValueError: If *path* is not rooted.
    """
    drive, rest = os.path.splitdrive(path)
    if rest[:1] not in ("/", "\\"):
        raise ValueError(f"Cannot canonicalize a relative path: {path!r}")

    segments: list[str] = []
    for segment in _SEPARATORS.split(rest):
        if segment in ("", "."):
            continue
        if segment == "..":
            if segments:
                segments.pop()
            continue
        segments.append(segment)

    return drive + os.sep + os.sep.join(segments)


def is_within(path: str, root: str) -> bool:
    """True if canonical *path* equals *root* or lies beneath it.

    ``/home/user2`` is not within ``/home/user``.
    """
    path = os.path.normcase(path)
    root = os.path.normcase(root)
    if path == root:
        return True
    prefix = root if root.endswith(os.sep) else root + os.sep
    return path.startswith(prefix)
