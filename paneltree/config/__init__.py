"""Configuration for paneltree."""

from .constants import (
    DEFAULT_GROUP_ID,
    DEFAULT_GROUP_ID_PREFIX,
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_SPLIT_RATIO,
    MAX_SPLIT_RATIO,
    MIN_SPLIT_RATIO,
)
from .settings import (
    EngineSettings,
    get_config_dir,
    get_env_var,
    get_session_path,
    load_settings,
    validate_env_var,
)

__all__ = [
    "DEFAULT_GROUP_ID",
    "DEFAULT_GROUP_ID_PREFIX",
    "DEFAULT_HISTORY_LIMIT",
    "DEFAULT_SPLIT_RATIO",
    "MAX_SPLIT_RATIO",
    "MIN_SPLIT_RATIO",
    "EngineSettings",
    "get_config_dir",
    "get_env_var",
    "get_session_path",
    "load_settings",
    "validate_env_var",
]
