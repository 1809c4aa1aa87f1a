"""
Centralized constants for paneltree.

Ratio bounds, default ids and environment variable definitions live here so
the engine, the store and the CLI agree on the same boundary values.
"""

# =============================================================================
# SPLIT RATIOS
# =============================================================================

DEFAULT_SPLIT_RATIO = 0.5  # New splits divide space evenly
MIN_SPLIT_RATIO = 0.1  # No pane collapses below 10%
MAX_SPLIT_RATIO = 0.9

# =============================================================================
# IDS
# =============================================================================

DEFAULT_GROUP_ID = "g1"  # Group created by build_initial_state
DEFAULT_GROUP_ID_PREFIX = "g"

# =============================================================================
# STORE
# =============================================================================

DEFAULT_HISTORY_LIMIT = 100  # Undo snapshots kept by PanelStore

# =============================================================================
# PATHS
# =============================================================================

CONFIG_FILE_NAME = "config.yaml"
SESSION_FILE_NAME = "session.yaml"
LOG_FILE_NAME = "paneltree.log"

# =============================================================================
# ENVIRONMENT VARIABLES
# =============================================================================

ENV_VAR_DEFINITIONS = {
    "PANELTREE_MIN_RATIO": {
        "description": "Lower clamp bound for split ratios",
        "default": None,
        "valid_values": None,
    },
    "PANELTREE_MAX_RATIO": {
        "description": "Upper clamp bound for split ratios",
        "default": None,
        "valid_values": None,
    },
    "PANELTREE_MAX_ROWS": {
        "description": "Maximum number of stacked rows a split may create",
        "default": None,
        "valid_values": None,
    },
    "PANELTREE_MAX_COLS": {
        "description": "Maximum number of side-by-side columns a split may create",
        "default": None,
        "valid_values": None,
    },
    "PANELTREE_SESSION": {
        "description": "Session file used by the paneltree CLI",
        "default": None,
        "valid_values": None,
    },
    "PANELTREE_LOG_LEVEL": {
        "description": "Console log level for the CLI",
        "default": "warning",
        "valid_values": ["debug", "info", "warning", "error"],
    },
}
