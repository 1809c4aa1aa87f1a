"""
Panel layout engine: a binary tree of splits whose leaves are tab groups.

Provides pure, immutable operations for:
- Splitting groups and closing them (the parent split collapses)
- Ordering, activating and moving tabs between groups
- Focus navigation in reading order
- Split limits, rectangle geometry and plain-record persistence

Example usage:
    from paneltree import TabDefinition, DropZone, build_initial_state, move_tab

    state = build_initial_state([TabDefinition("editor"), TabDefinition("logs")])
    state = move_tab(state, "logs", "g1", DropZone("g1", "split-right"))

For a stateful owner with undo/redo:
    from paneltree import PanelStore

    store = PanelStore(state)
    store.subscribe(lambda s: print(s.focused_group_id))
    store.focus_next()
"""

__version__ = "0.1.0"

from .exceptions import (
    BoundaryPolicyError,
    CannotCloseLastGroupError,
    ConfigurationError,
    DuplicateGroupError,
    DuplicateTabError,
    InvariantViolationError,
    MalformedTreeError,
    PanelTreeError,
    RecordFormatError,
)
from .focus import focus_group_index, focused_group, next_group, prev_group, set_focused_group
from .geometry import Rect, compute_rects
from .groups import (
    add_tab_to_group,
    add_tab_to_group_at_index,
    create_empty_group,
    remove_tab_from_group,
    reorder_tab_within_group,
    set_active_tab,
)
from .ids import CallableIdFactory, IdFactory, SequentialIdFactory, as_id_factory
from .limits import SplitLimits, can_split_direction, normalize_split_limits
from .moves import move_tab, move_tab_to_index, resolve_drop_zone
from .records import state_from_dict, state_to_dict, tree_from_dict, tree_to_dict
from .state import (
    activate_tab,
    add_tab,
    adjust_split_ratio,
    build_initial_state,
    close_group,
    prune_empty_groups,
    refresh_group_order,
    remove_tab,
    reorder_tab,
    resize_split,
    split_group,
    validate_state,
)
from .store import PanelStore
from .tree import (
    close_leaf,
    collect_groups_in_order,
    find_leaf_path,
    get_at_path,
    is_group,
    set_split_ratio,
    split_leaf,
)
from .types import (
    DraggingTab,
    DropZone,
    GroupModel,
    Leaf,
    PanelSystemState,
    PanelTree,
    Split,
    TabDefinition,
)

__all__ = [
    "__version__",
    # Data model
    "DraggingTab",
    "DropZone",
    "GroupModel",
    "Leaf",
    "PanelSystemState",
    "PanelTree",
    "Split",
    "TabDefinition",
    # Tree
    "close_leaf",
    "collect_groups_in_order",
    "find_leaf_path",
    "get_at_path",
    "is_group",
    "set_split_ratio",
    "split_leaf",
    # Groups
    "add_tab_to_group",
    "add_tab_to_group_at_index",
    "create_empty_group",
    "remove_tab_from_group",
    "reorder_tab_within_group",
    "set_active_tab",
    # State
    "activate_tab",
    "add_tab",
    "adjust_split_ratio",
    "build_initial_state",
    "close_group",
    "prune_empty_groups",
    "refresh_group_order",
    "remove_tab",
    "reorder_tab",
    "resize_split",
    "split_group",
    "validate_state",
    # Moves
    "move_tab",
    "move_tab_to_index",
    "resolve_drop_zone",
    # Focus
    "focus_group_index",
    "focused_group",
    "next_group",
    "prev_group",
    "set_focused_group",
    # Ids
    "CallableIdFactory",
    "IdFactory",
    "SequentialIdFactory",
    "as_id_factory",
    # Limits and geometry
    "Rect",
    "SplitLimits",
    "can_split_direction",
    "compute_rects",
    "normalize_split_limits",
    # Records
    "state_from_dict",
    "state_to_dict",
    "tree_from_dict",
    "tree_to_dict",
    # Store
    "PanelStore",
    # Errors
    "BoundaryPolicyError",
    "CannotCloseLastGroupError",
    "ConfigurationError",
    "DuplicateGroupError",
    "DuplicateTabError",
    "InvariantViolationError",
    "MalformedTreeError",
    "PanelTreeError",
    "RecordFormatError",
]
