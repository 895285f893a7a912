"""File operations that validate their path before touching the filesystem.

Each helper validates first and acts second. A failed validation raises
:class:`SecurityViolationError` and nothing on disk is read, probed or written.
"""

import logging
import os
import stat
import tempfile

from pathguard.core.errors import PathSecurityError, SecurityViolationError
from pathguard.core.roots import AllowedRoots
from pathguard.utils.paths import validate_and_sanitize_path

logger = logging.getLogger(__name__)

BaseDir = str | os.PathLike[str] | None


def _validate(
    operation: str,
    path: str,
    base_dir: BaseDir,
    roots: AllowedRoots | None,
    follow_links: bool,
) -> str:
    try:
        return validate_and_sanitize_path(path, base_dir, roots=roots, follow_links=follow_links)
    except PathSecurityError as e:
        logger.warning(f"Blocked {operation} of {path!r}: {e}")
        raise SecurityViolationError.from_error(e) from e


def _file_mode(path: str) -> int:
    """Permission bits of an existing *path*, or the umask default for a new file."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def safe_read_file(
    path: str,
    base_dir: BaseDir = None,
    *,
    encoding: str | None = None,
    roots: AllowedRoots | None = None,
    follow_links: bool = True,
) -> bytes | str:
    """Read a file after validating its path.

    Returns bytes, or text when *encoding* is given.

    Raises:
        SecurityViolationError: If the path fails validation.
        OSError: If the file cannot be read.
    """
    validated = _validate("read", path, base_dir, roots, follow_links)
    with open(validated, "rb") as f:
        data = f.read()
    logger.debug(f"Read {len(data)} bytes from {validated}")
    return data.decode(encoding) if encoding else data


def safe_write_file(
    path: str,
    content: bytes | str,
    base_dir: BaseDir = None,
    *,
    encoding: str = "utf-8",
    roots: AllowedRoots | None = None,
    follow_links: bool = True,
) -> None:
    """Write *content* to a file after validating its path.

    The data goes to a temporary file in the same directory which then
    replaces the target, so readers never see a partial write. An existing
    file keeps its permission bits; a new one gets the umask default.

    Raises:
        SecurityViolationError: If the path fails validation.
        OSError: If the file cannot be written.
    """
    validated = _validate("write", path, base_dir, roots, follow_links)
    data = content.encode(encoding) if isinstance(content, str) else content
    mode = _file_mode(validated)

    fd, tmp_path = tempfile.mkstemp(
        dir=os.path.dirname(validated), prefix=".pathguard-", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, validated)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
    logger.debug(f"Wrote {len(data)} bytes to {validated}")


def safe_file_exists(
    path: str,
    base_dir: BaseDir = None,
    *,
    roots: AllowedRoots | None = None,
    follow_links: bool = True,
) -> bool:
    """Report whether a validated path exists.

    A valid path that does not exist gives ``False``; a path that fails
    validation raises instead of answering.

    Raises:
        SecurityViolationError: If the path fails validation.
    """
    validated = _validate("exists", path, base_dir, roots, follow_links)
    return os.path.exists(validated)


def safe_mkdir(
    path: str,
    base_dir: BaseDir = None,
    *,
    parents: bool = True,
    exist_ok: bool = True,
    roots: AllowedRoots | None = None,
    follow_links: bool = True,
) -> str:
    """Create a directory after validating its path and return it.

    Raises:
        SecurityViolationError: If the path fails validation.
        OSError: If the directory cannot be created.
    """
    validated = _validate("mkdir", path, base_dir, roots, follow_links)
    if parents:
        os.makedirs(validated, exist_ok=exist_ok)
    else:
        try:
            os.mkdir(validated)
        except FileExistsError:
            if not exist_ok or not os.path.isdir(validated):
                raise
    logger.debug(f"Created directory {validated}")
    return validated
