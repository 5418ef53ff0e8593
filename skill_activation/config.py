"""
Centralized configuration for skill-activation.

Defaults are defined here. Users can override by creating
~/.claude/skill-activation.json (or the file named by
SKILL_ACTIVATION_CONFIG).
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

# Default configuration values
DEFAULTS = {
    # Character budget for each injected SKILL.md
    "max_content_chars": 8000,
    # How many critical/high skills get their content injected
    "max_injected_skills": 3,
    # Seconds to wait for hook input on stdin before giving up
    "stdin_timeout": 2.0,
    # Extra directories to scan for SKILL.md files
    "content_roots": [],
    # Path segment marking installed (active) plugin content
    "active_path_marker": "cache",
    # Explicit rules file, tried before the conventional locations
    "rules_file": "",
    # Append debug lines to <log_dir>/skill-activation.log
    "debug": False,
    "log_dir": "~/.claude/logs",
}

DEBUG_ENV_VAR = "SKILL_ACTIVATION_DEBUG"

_config_cache: Optional[dict[str, Any]] = None


def get_config_path() -> Path:
    """Location of the user config file."""
    override = os.environ.get("SKILL_ACTIVATION_CONFIG")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".claude" / "skill-activation.json"


def _load_user_config() -> dict[str, Any]:
    """Load user config if it exists and holds a JSON object."""
    config_path = get_config_path()
    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, IOError):
            return {}
        return data if isinstance(data, dict) else {}
    return {}


def get_config() -> dict[str, Any]:
    """
    Get merged configuration (defaults + user overrides).

    Returns:
        Dict with all config values
    """
    global _config_cache
    if _config_cache is None:
        _config_cache = {**DEFAULTS, **_load_user_config()}
    return _config_cache


def get(key: str, default: Any = None) -> Any:
    """
    Get a specific config value.

    Args:
        key: Config key name
        default: Default if key not found

    Returns:
        Config value
    """
    config = get_config()
    return config.get(key, default)


def reload_config() -> dict[str, Any]:
    """
    Reload configuration from disk (clears cache).

    Returns:
        Fresh merged config
    """
    global _config_cache
    _config_cache = None
    return get_config()


def _as_int(value: Any, fallback: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return fallback


def _as_float(value: Any, fallback: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return fallback


# Convenience accessors for common settings
def max_content_chars() -> int:
    """Character budget for one injected skill."""
    return _as_int(get("max_content_chars"), DEFAULTS["max_content_chars"])


def max_injected_skills() -> int:
    """Number of critical/high skills whose content is injected."""
    return _as_int(get("max_injected_skills"), DEFAULTS["max_injected_skills"])


def stdin_timeout() -> float:
    """Seconds to wait for hook input."""
    return _as_float(get("stdin_timeout"), DEFAULTS["stdin_timeout"])


def content_roots() -> list[Path]:
    """Extra content roots from config and CLAUDE_SKILLS_PATH."""
    roots = get("content_roots") or []
    if isinstance(roots, str):
        roots = [roots]
    paths = [Path(r).expanduser() for r in roots if isinstance(r, str) and r]
    env_paths = os.environ.get("CLAUDE_SKILLS_PATH", "")
    for entry in env_paths.split(os.pathsep):
        entry = entry.strip()
        if entry:
            paths.append(Path(entry).expanduser())
    return paths


def active_path_marker() -> str:
    """Path segment that marks installed plugin content."""
    return get("active_path_marker") or DEFAULTS["active_path_marker"]


def rules_file() -> Optional[Path]:
    """Explicit rules file from SKILL_RULES_FILE or config, if any."""
    value = os.environ.get("SKILL_RULES_FILE") or get("rules_file")
    if isinstance(value, str) and value:
        return Path(value).expanduser()
    return None


def debug_enabled() -> bool:
    """Debug log is on when the env flag is truthy or config says so."""
    flag = os.environ.get(DEBUG_ENV_VAR, "").strip().lower()
    if flag:
        return flag not in ("0", "false", "no", "off")
    return bool(get("debug"))


def log_dir() -> Path:
    """Directory holding the debug log."""
    return Path(get("log_dir") or DEFAULTS["log_dir"]).expanduser()
