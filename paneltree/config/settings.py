"""Configuration utilities for paneltree."""

import logging
import math
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from ..exceptions import ConfigurationError
from .constants import (
    CONFIG_FILE_NAME,
    DEFAULT_GROUP_ID_PREFIX,
    DEFAULT_HISTORY_LIMIT,
    ENV_VAR_DEFINITIONS,
    MAX_SPLIT_RATIO,
    MIN_SPLIT_RATIO,
    SESSION_FILE_NAME,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineSettings:
    """Tunable engine boundaries.

    Attributes:
        min_ratio: Lower clamp bound for split ratios
        max_ratio: Upper clamp bound for split ratios
        max_rows: Maximum stacked rows (inf = unlimited)
        max_cols: Maximum side-by-side columns (inf = unlimited)
        group_id_prefix: Prefix for generated group ids
        history_limit: Undo snapshots kept by PanelStore
    """

    min_ratio: float = MIN_SPLIT_RATIO
    max_ratio: float = MAX_SPLIT_RATIO
    max_rows: float = math.inf
    max_cols: float = math.inf
    group_id_prefix: str = DEFAULT_GROUP_ID_PREFIX
    history_limit: int = DEFAULT_HISTORY_LIMIT

    def __post_init__(self) -> None:
        """Validate ratio bounds and limits."""
        if not 0 < self.min_ratio <= self.max_ratio < 1:
            raise ConfigurationError(
                "Ratio bounds must satisfy 0 < min_ratio <= max_ratio < 1",
                min_ratio=self.min_ratio,
                max_ratio=self.max_ratio,
            )
        if self.max_rows < 1 or self.max_cols < 1:
            raise ConfigurationError(
                "Split limits must be at least 1",
                max_rows=self.max_rows,
                max_cols=self.max_cols,
            )
        if self.history_limit < 0:
            raise ConfigurationError("history_limit must be non-negative", setting="history_limit")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineSettings":
        """Create settings from a dictionary (e.g., from YAML).

        Unknown keys are ignored; missing keys keep their defaults.
        """
        kwargs: Dict[str, Any] = {}
        for key in ("min_ratio", "max_ratio", "max_rows", "max_cols"):
            if data.get(key) is not None:
                kwargs[key] = _to_float(data[key], key)
        if data.get("group_id_prefix"):
            kwargs["group_id_prefix"] = str(data["group_id_prefix"])
        if data.get("history_limit") is not None:
            kwargs["history_limit"] = int(_to_float(data["history_limit"], "history_limit"))
        return cls(**kwargs)


def _to_float(value: Any, setting: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid number for {setting}: {value!r}", setting=setting) from e


def get_config_dir() -> Path:
    """Get the paneltree config directory (~/.config/paneltree)."""
    return Path.home() / ".config" / "paneltree"


def get_session_path(override: Optional[Path] = None) -> Path:
    """Get the CLI session file path.

    Resolution order: explicit override, PANELTREE_SESSION, then
    ~/.config/paneltree/session.yaml.
    """
    if override is not None:
        return override
    env_path = os.environ.get("PANELTREE_SESSION")
    if env_path:
        return Path(env_path)
    return get_config_dir() / SESSION_FILE_NAME


def validate_env_var(name: str, value: Optional[str]) -> Tuple[bool, Optional[str]]:
    """Validate a single environment variable value.

    Args:
        name: The environment variable name.
        value: The current value (or None if not set).

    Returns:
        Tuple of (is_valid, error_message).
    """
    if name not in ENV_VAR_DEFINITIONS:
        return True, None  # Unknown vars are always valid

    if value is None:
        return True, None

    valid_values = ENV_VAR_DEFINITIONS[name].get("valid_values")
    if valid_values is None:
        return True, None

    if value.lower() not in [v.lower() for v in valid_values]:
        return False, f"Invalid value '{value}' for {name}. Valid values: {valid_values}"

    return True, None


def get_env_var(name: str, validate: bool = True) -> Optional[str]:
    """Get an environment variable with optional validation.

    Raises:
        ConfigurationError: If validate=True and the value is invalid.
    """
    value = os.environ.get(name)

    if validate and value is not None:
        is_valid, error = validate_env_var(name, value)
        if not is_valid:
            raise ConfigurationError(error or "Invalid environment variable", setting=name)

    if value is None and name in ENV_VAR_DEFINITIONS:
        return ENV_VAR_DEFINITIONS[name].get("default")

    return value


_ENV_OVERRIDES = {
    "PANELTREE_MIN_RATIO": "min_ratio",
    "PANELTREE_MAX_RATIO": "max_ratio",
    "PANELTREE_MAX_ROWS": "max_rows",
    "PANELTREE_MAX_COLS": "max_cols",
}


def load_settings(path: Optional[Path] = None) -> EngineSettings:
    """Load engine settings from the YAML config file and environment.

    Environment variables win over the file. A missing file is not an error.

    Args:
        path: Config file to read (defaults to ~/.config/paneltree/config.yaml)

    Returns:
        EngineSettings instance

    Raises:
        ConfigurationError: If the file or an env var holds invalid values
    """
    config_path = path or get_config_dir() / CONFIG_FILE_NAME
    data: Dict[str, Any] = {}

    if config_path.exists():
        try:
            loaded = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}") from e
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigurationError(f"Config file must hold a mapping: {config_path}")
        loaded = loaded or {}
        section = loaded.get("engine", loaded)
        if section is None:
            section = {}
        if not isinstance(section, Mapping):
            raise ConfigurationError("Config 'engine' section must be a mapping", path=str(config_path))
        data = dict(section)
        logger.debug(f"Loaded settings from {config_path}")

    settings = EngineSettings.from_dict(data)

    overrides: Dict[str, Any] = {}
    for env_name, field_name in _ENV_OVERRIDES.items():
        value = get_env_var(env_name)
        if value is not None:
            overrides[field_name] = _to_float(value, env_name)
    if overrides:
        settings = replace(settings, **overrides)

    return settings
