import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from pathguard.core.config import Config, find_dotenv, get_config


def test_config_default_values() -> None:
    """Test that config loads with default values."""
    config = Config(_env_file=None)  # type: ignore[call-arg]
    assert Path.home() in config.allowed_roots
    assert config.max_decode_rounds == 3
    assert config.follow_symlinks is True
    assert config.log_level == "INFO"
    assert config.log_file is None


def test_config_loads_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Test that config loads from environment variables."""
    monkeypatch.setenv("ALLOWED_ROOTS", json.dumps([str(tmp_path), "/srv/uploads"]))
    monkeypatch.setenv("MAX_DECODE_ROUNDS", "5")
    monkeypatch.setenv("FOLLOW_SYMLINKS", "false")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    config = Config(_env_file=None)  # type: ignore[call-arg]
    assert config.allowed_roots == [tmp_path, Path("/srv/uploads")]
    assert config.max_decode_rounds == 5
    assert config.follow_symlinks is False
    assert config.log_level == "DEBUG"


def test_config_with_env_file(tmp_path: Path) -> None:
    """Test that config loads from .env file."""
    env_file = tmp_path / ".env"
    env_file.write_text('ALLOWED_ROOTS=["/srv/a"]\nLOG_LEVEL=WARNING\n')

    config = Config(_env_file=env_file)  # type: ignore[call-arg]
    assert config.allowed_roots == [Path("/srv/a")]
    assert config.log_level == "WARNING"


def test_config_rejects_relative_roots() -> None:
    with pytest.raises(ValidationError, match="must be an absolute path"):
        Config(_env_file=None, allowed_roots=[Path("relative/dir")])  # type: ignore[call-arg]


def test_config_rejects_relative_provider_dir() -> None:
    with pytest.raises(ValidationError, match="must be an absolute path"):
        Config(_env_file=None, claude_projects_dir=Path("projects"))  # type: ignore[call-arg]


@pytest.mark.parametrize("rounds", [0, 11])
def test_config_bounds_decode_rounds(rounds: int) -> None:
    with pytest.raises(ValidationError):
        Config(_env_file=None, max_decode_rounds=rounds)  # type: ignore[call-arg]


def test_allowed_roots_value_is_canonical() -> None:
    config = Config(_env_file=None, allowed_roots=[Path("/srv/a/"), Path("/srv/a/b/..")])  # type: ignore[call-arg]
    assert config.allowed_roots_value().roots == ("/srv/a",)


def test_config_creates_log_dir(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "pathguard.log"
    Config(_env_file=None, log_file=log_file)  # type: ignore[call-arg]
    assert log_file.parent.is_dir()


def test_find_dotenv_walks_up(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("LOG_LEVEL=DEBUG\n")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    assert find_dotenv(nested) == (tmp_path / ".env").resolve()


def test_get_config_is_memoized() -> None:
    assert get_config() is get_config()
