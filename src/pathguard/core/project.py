import logging

from pathguard.core.config import Config, get_config
from pathguard.utils.names import validate_project_name
from pathguard.utils.paths import safe_join

logger = logging.getLogger(__name__)

PROVIDERS = ("claude", "cursor")


def get_claude_projects_dir(config: Config | None = None) -> str:
    return str((config or get_config()).claude_projects_dir)


def get_cursor_chats_dir(config: Config | None = None) -> str:
    return str((config or get_config()).cursor_chats_dir)


def get_project_dir(name: str, provider: str = "claude", config: Config | None = None) -> str:
    """Return the directory of a named project for a provider.

    Args:
        name: Bare project name (validated, never treated as a path)
        provider: ``"claude"`` or ``"cursor"``
        config: Configuration instance. If None, uses the process config.

    Raises:
        PathSecurityError: If the name is invalid or the result escapes the
            provider directory
        ValueError: If the provider is unknown
    """
    validated = validate_project_name(name)

    if provider == "claude":
        base_dir = get_claude_projects_dir(config)
    elif provider == "cursor":
        base_dir = get_cursor_chats_dir(config)
    else:
        raise ValueError(f"Unknown provider: {provider}")

    project_dir = safe_join(base_dir, validated)
    logger.debug(f"Project {validated!r} ({provider}) -> {project_dir}")
    return project_dir
