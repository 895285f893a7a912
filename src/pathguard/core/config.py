import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pathguard.core.roots import AllowedRoots


def find_dotenv(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for a .env file.

    Returns the first `.env` path found, or ``None``.
    """
    current = (start or Path.cwd()).resolve()
    for parent in [current, *current.parents]:
        candidate = parent / ".env"
        if candidate.is_file():
            return candidate
    return None


def _default_allowed_roots() -> list[Path]:
    return [Path.home(), Path(tempfile.gettempdir()) / "pathguard-uploads"]


class Config(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=find_dotenv() or ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    allowed_roots: list[Path] = Field(
        default_factory=_default_allowed_roots,
        description="Directories every validated path must stay inside (JSON list in env)",
    )
    max_decode_rounds: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Percent-decoding rounds inspected before input counts as nested encoding",
    )
    follow_symlinks: bool = Field(
        default=True,
        description="Resolve symlinks of existing paths before file operations",
    )

    claude_projects_dir: Path = Field(
        default_factory=lambda: Path.home() / ".claude" / "projects",
        description="Base directory for Claude projects",
    )
    cursor_chats_dir: Path = Field(
        default_factory=lambda: Path.home() / ".cursor" / "chats",
        description="Base directory for Cursor chats",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional log file path",
    )

    @field_validator("allowed_roots", "claude_projects_dir", "cursor_chats_dir")
    @classmethod
    def _require_absolute(cls, value: list[Path] | Path) -> list[Path] | Path:
        paths = value if isinstance(value, list) else [value]
        for path in paths:
            if not path.is_absolute():
                raise ValueError(f"must be an absolute path: {path}")
        return value

    def allowed_roots_value(self) -> AllowedRoots:
        """The configured roots as an immutable allowlist."""
        return AllowedRoots.from_paths(self.allowed_roots)

    def model_post_init(self, __context: object) -> None:
        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)


@lru_cache(maxsize=1)
def get_config() -> Config:
    return Config()
