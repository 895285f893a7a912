"""Path safety utilities for preventing traversal attacks."""

import logging
import os

from pathguard.core.canonical import canonicalize, is_rooted, is_within
from pathguard.core.errors import PathSecurityError, ValidationResult, ViolationKind
from pathguard.core.roots import AllowedRoots, get_allowed_roots
from pathguard.utils.patterns import DEFAULT_DECODE_ROUNDS, inspect

logger = logging.getLogger(__name__)

MAX_PATH_BYTES = 4096


def _require_path_string(path: object) -> str:
    if not isinstance(path, str) or not path:
        raise PathSecurityError(
            ViolationKind.INVALID_INPUT, "Invalid path: path must be a non-empty string"
        )
    if len(path.encode("utf-8", errors="surrogatepass")) > MAX_PATH_BYTES:
        raise PathSecurityError(
            ViolationKind.INVALID_INPUT,
            f"Invalid path: path too long (max {MAX_PATH_BYTES} bytes)",
        )
    return path


def _require_base_dir(base_dir: object) -> str:
    raw = os.fspath(base_dir) if isinstance(base_dir, os.PathLike) else base_dir
    if not isinstance(raw, str) or not raw or not is_rooted(raw):
        raise PathSecurityError(
            ViolationKind.INVALID_INPUT, "Base directory must be an absolute path"
        )
    return canonicalize(raw)


def _outside(base: str | None) -> PathSecurityError:
    if base is not None:
        message = f"Invalid path: outside of allowed directory ({base})"
    else:
        message = "Invalid path: outside of allowed directories"
    return PathSecurityError(ViolationKind.OUTSIDE_ALLOWED_DIRECTORY, message)


def resolve_links(path: str, roots: AllowedRoots) -> str:
    """Resolve symlinks in the existing part of a canonical *path*.

    The deepest existing ancestor is passed through :func:`os.path.realpath`
    and the not-yet-existing tail re-appended, so the check also covers files
    about to be created. The result must still lie inside *roots*, compared
    against both the canonical and the resolved form of each root; a match on
    the resolved form is returned under the canonical root, so the result is
    always inside *roots*. A path with no existing component other than the
    filesystem root is returned as is.

    Raises:
        PathSecurityError: ``OUTSIDE_ALLOWED_DIRECTORY`` if a link escapes.
    """
    existing = path
    tail: list[str] = []
    while not os.path.lexists(existing):
        parent, name = os.path.split(existing)
        if parent == existing:
            return path
        tail.append(name)
        existing = parent

    resolved = os.path.join(os.path.realpath(existing), *reversed(tail))
    if resolved == path:
        return path

    for root in roots:
        if is_within(resolved, root):
            logger.debug(f"Resolved {path} -> {resolved}")
            return resolved
        real_root = os.path.realpath(root)
        if is_within(resolved, real_root):
            # Report the result under the configured root, not its target
            relative = os.path.relpath(resolved, real_root)
            mapped = root if relative == os.curdir else os.path.join(root, relative)
            logger.debug(f"Resolved {path} -> {mapped}")
            return mapped

    logger.warning(f"Symlink escapes allowed roots: {path} -> {resolved}")
    raise PathSecurityError(
        ViolationKind.OUTSIDE_ALLOWED_DIRECTORY,
        "Invalid path: symlink target is outside of allowed directories",
    )


def _contain(
    candidate: str,
    base: str | None,
    roots: AllowedRoots,
    follow_links: bool,
    max_rounds: int,
) -> str:
    decoded = inspect(candidate, max_rounds)

    if base is not None:
        anchored = os.path.join(base, decoded)
    elif is_rooted(decoded):
        anchored = decoded
    else:
        anchored = os.sep + decoded

    resolved = canonicalize(anchored)
    if not roots.contains(resolved):
        raise _outside(base)

    if follow_links:
        resolved = resolve_links(resolved, roots)
    return resolved


def validate_and_sanitize_path(
    path: str,
    base_dir: str | os.PathLike[str] | None = None,
    *,
    roots: AllowedRoots | None = None,
    follow_links: bool = False,
    max_rounds: int = DEFAULT_DECODE_ROUNDS,
) -> str:
    """Validate an untrusted path and return its canonical absolute form.

    Args:
        path: The untrusted path, absolute or relative.
        base_dir: Absolute directory to resolve *path* under. When given it
            is the only directory the result may fall in.
        roots: Allowlist used when no *base_dir* is given. Defaults to the
            configured process-wide roots.
        follow_links: Also resolve symlinks of the existing part of the path.
        max_rounds: Percent-decoding rounds to inspect.

    Returns:
        The canonical absolute path, inside the allowed directory.

    Raises:
        PathSecurityError: If the path is malformed, suspicious or outside.
    """
    candidate = _require_path_string(path)
    if base_dir is not None:
        base = _require_base_dir(base_dir)
        allowed = AllowedRoots.only(base)
    else:
        base = None
        allowed = roots if roots is not None else get_allowed_roots()
    return _contain(candidate, base, allowed, follow_links, max_rounds)


def safe_join(
    base_dir: str | os.PathLike[str],
    relative_path: str,
    *,
    follow_links: bool = False,
    max_rounds: int = DEFAULT_DECODE_ROUNDS,
) -> str:
    """Join *relative_path* under *base_dir*, ensuring it stays within it.

    Args:
        base_dir: The root directory that must contain the result.
        relative_path: A path from untrusted input.

    Returns:
        The canonical absolute path.

    Raises:
        PathSecurityError: If the base is not absolute or the joined path
            escapes it.
    """
    base = _require_base_dir(base_dir)
    if not isinstance(relative_path, str) or not relative_path:
        raise PathSecurityError(
            ViolationKind.INVALID_INPUT, "Relative path must be a non-empty string"
        )
    candidate = _require_path_string(relative_path)
    return _contain(candidate, base, AllowedRoots.only(base), follow_links, max_rounds)


def check_path(
    path: str,
    base_dir: str | os.PathLike[str] | None = None,
    *,
    roots: AllowedRoots | None = None,
    follow_links: bool = False,
) -> ValidationResult:
    """Like :func:`validate_and_sanitize_path`, but returns the outcome."""
    try:
        return ValidationResult.ok(
            validate_and_sanitize_path(path, base_dir, roots=roots, follow_links=follow_links)
        )
    except PathSecurityError as e:
        return ValidationResult.err(e)
