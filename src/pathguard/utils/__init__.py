"""Path validation and guarded file operations."""

from pathguard.core.canonical import canonicalize, is_within
from pathguard.utils.decoding import DecodingError, percent_decode
from pathguard.utils.names import check_project_name, validate_project_name
from pathguard.utils.paths import (
    check_path,
    resolve_links,
    safe_join,
    validate_and_sanitize_path,
)
from pathguard.utils.patterns import SIGNATURES, inspect, scan
from pathguard.utils.safe_io import (
    safe_file_exists,
    safe_mkdir,
    safe_read_file,
    safe_write_file,
)

__all__ = [
    "canonicalize",
    "is_within",
    "DecodingError",
    "percent_decode",
    "check_project_name",
    "validate_project_name",
    "check_path",
    "resolve_links",
    "safe_join",
    "validate_and_sanitize_path",
    "SIGNATURES",
    "inspect",
    "scan",
    "safe_file_exists",
    "safe_mkdir",
    "safe_read_file",
    "safe_write_file",
]
