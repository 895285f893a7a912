"""Validation of bare project-name identifiers."""

import re

from pathguard.core.errors import PathSecurityError, ValidationResult, ViolationKind

MAX_PROJECT_NAME_LENGTH = 255

# Windows device names, rejected on every host so projects stay portable.
RESERVED_NAMES = frozenset(
    ["con", "prn", "aux", "nul"]
    + [f"com{i}" for i in range(1, 10)]
    + [f"lpt{i}" for i in range(1, 10)]
)

_INVALID_CHARACTERS = re.compile(r'[<>:"|?*\x00/\\]')


def validate_project_name(name: str) -> str:
    """Validate a project name and return it unchanged.

    A project name is an identifier, not a path, so any separator is invalid
    in itself.

    Raises:
        PathSecurityError: If the name is empty, too long, contains invalid
            characters or is reserved.
    """
    if not isinstance(name, str) or not name:
        raise PathSecurityError(
            ViolationKind.INVALID_INPUT, "Project name must be a non-empty string"
        )

    if len(name) > MAX_PROJECT_NAME_LENGTH:
        raise PathSecurityError(
            ViolationKind.TOO_LONG,
            f"Project name too long (max {MAX_PROJECT_NAME_LENGTH} characters)",
        )

    if _INVALID_CHARACTERS.search(name):
        raise PathSecurityError(
            ViolationKind.RESERVED_NAME, "Project name contains invalid characters"
        )

    stem = name.split(".", 1)[0].rstrip(" ").lower()
    if stem in RESERVED_NAMES or not name.strip("."):
        raise PathSecurityError(ViolationKind.RESERVED_NAME, "Project name is reserved")

    return name


def check_project_name(name: str) -> ValidationResult:
    try:
        return ValidationResult.ok(validate_project_name(name))
    except PathSecurityError as e:
        return ValidationResult.err(e)
