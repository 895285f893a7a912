from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class ViolationKind(StrEnum):
    SUSPICIOUS_PATTERN = "suspicious_pattern"
    INVALID_ENCODING = "invalid_encoding"
    OUTSIDE_ALLOWED_DIRECTORY = "outside_allowed_directory"
    RESERVED_NAME = "reserved_name"
    INVALID_INPUT = "invalid_input"
    TOO_LONG = "too_long"


class PathSecurityError(ValueError):
    """Raised when a path or project name fails validation."""

    def __init__(self, kind: ViolationKind, message: str) -> None:
        self.kind = kind
        super().__init__(message)


class SecurityViolationError(PathSecurityError):
    """Raised by the safe I/O helpers; no filesystem call was made."""

    @classmethod
    def from_error(cls, error: PathSecurityError) -> "SecurityViolationError":
        return cls(error.kind, f"Security violation: {error}")


@dataclass(frozen=True)
class ValidationResult:
    path: str | None = None
    violation: ViolationKind | None = None
    message: str | None = None

    @classmethod
    def ok(cls, path: str) -> "ValidationResult":
        return cls(path=path)

    @classmethod
    def err(cls, error: PathSecurityError) -> "ValidationResult":
        return cls(violation=error.kind, message=str(error))

    @property
    def success(self) -> bool:
        return self.violation is None

    def unwrap(self) -> str:
        """Return the validated value or raise the recorded violation."""
        if self.violation is not None:
            raise PathSecurityError(self.violation, self.message or "Invalid path")
        if self.path is None:
            raise PathSecurityError(ViolationKind.INVALID_INPUT, "Invalid path: no path recorded")
        return self.path

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "path": self.path,
            "violation": self.violation.value if self.violation else None,
            "message": self.message,
        }
