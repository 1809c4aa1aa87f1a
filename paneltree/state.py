"""
State-level commands for the panel system.

Every function takes a ``PanelSystemState`` and returns a new one. Commands
referencing an unknown group or tab return the input state object unchanged.
Malformed input raises an ``InvariantViolationError`` subclass.
"""

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence

from .config.constants import DEFAULT_GROUP_ID, MAX_SPLIT_RATIO, MIN_SPLIT_RATIO
from .exceptions import (
    CannotCloseLastGroupError,
    DuplicateGroupError,
    DuplicateTabError,
    InvariantViolationError,
)
from .groups import (
    TabRef,
    add_tab_to_group,
    add_tab_to_group_at_index,
    remove_tab_from_group,
    reorder_tab_within_group,
    set_active_tab,
    tab_id_of,
)
from .ids import IdFactory, SequentialIdFactory
from .limits import SplitLimits, can_split_direction
from .tree import (
    close_leaf,
    collect_groups_in_order,
    find_leaf_path,
    first_group,
    get_at_path,
    set_split_ratio,
    split_leaf,
    validate_tree,
)
from .types import (
    GroupId,
    GroupModel,
    Leaf,
    NodePath,
    PanelId,
    PanelSystemState,
    Placement,
    SplitDirection,
    TabDefinition,
)

logger = logging.getLogger(__name__)


def build_initial_state(tabs: Sequence[TabDefinition], group_id: GroupId = DEFAULT_GROUP_ID) -> PanelSystemState:
    """Create a single-leaf workspace with one group holding every tab.

    The first tab is active and the group is focused.

    Raises:
        DuplicateTabError: If two tabs share an id
    """
    panels: Dict[PanelId, TabDefinition] = {}
    for tab in tabs:
        if tab.id in panels:
            raise DuplicateTabError(tab_id=tab.id)
        panels[tab.id] = tab
    tab_ids = tuple(panels)
    group = GroupModel(id=group_id, tabs=tab_ids, active_tab_id=tab_ids[0] if tab_ids else None)
    return PanelSystemState(
        tree=Leaf(group_id),
        groups_by_id={group_id: group},
        focused_group_id=group_id,
        panels=panels,
    )


def validate_state(state: PanelSystemState) -> None:
    """Check every state invariant, raising on the first violation."""
    validate_tree(state.tree)

    leaf_ids = list(collect_groups_in_order(state.tree))
    if set(leaf_ids) != set(state.groups_by_id):
        raise InvariantViolationError(
            "Tree leaves and group table disagree",
            missing_groups=sorted(set(leaf_ids) - set(state.groups_by_id)),
            orphan_groups=sorted(set(state.groups_by_id) - set(leaf_ids)),
        )

    seen_tabs: Dict[PanelId, GroupId] = {}
    for group_id, group in state.groups_by_id.items():
        if group.id != group_id:
            raise InvariantViolationError("Group stored under a foreign key", key=group_id, group_id=group.id)
        for tab_id in group.tabs:
            if tab_id in seen_tabs:
                raise DuplicateTabError(tab_id=tab_id, groups=[seen_tabs[tab_id], group_id])
            if tab_id not in state.panels:
                raise InvariantViolationError("Tab is not registered", tab_id=tab_id, group_id=group_id)
            seen_tabs[tab_id] = group_id
        if group.active_tab_id is not None and group.active_tab_id not in group.tabs:
            raise InvariantViolationError(
                "Active tab is not in its group", group_id=group_id, active_tab_id=group.active_tab_id
            )

    if state.focused_group_id is not None and state.focused_group_id not in state.groups_by_id:
        raise InvariantViolationError("Focused group is not in the tree", group_id=state.focused_group_id)


def refresh_group_order(state: PanelSystemState) -> Dict[GroupId, int]:
    """Derive each group's position in focus order."""
    return {group_id: index for index, group_id in enumerate(collect_groups_in_order(state.tree))}


def _require_group(state: PanelSystemState, group_id: GroupId, operation: str) -> Optional[GroupModel]:
    group = state.groups_by_id.get(group_id)
    if group is None:
        logger.debug(f"{operation}: group {group_id} not found")
    return group


def _with_group(state: PanelSystemState, group: GroupModel) -> PanelSystemState:
    if state.groups_by_id.get(group.id) is group:
        return state
    return replace(state, groups_by_id={**state.groups_by_id, group.id: group})


# =============================================================================
# Split / close
# =============================================================================


def split_group(
    state: PanelSystemState,
    target_group_id: GroupId,
    direction: SplitDirection,
    new_group_id: Optional[GroupId] = None,
    tabs: Iterable[TabRef] = (),
    placement: Placement = "after",
    limits: Optional[SplitLimits] = None,
    id_factory: Optional[IdFactory] = None,
) -> PanelSystemState:
    """Split a group's leaf and create the new group.

    ``tabs`` become the new group's tabs; each is detached from the group that
    held it, and a group left empty by that detachment is closed. The new
    group is focused.

    Args:
        state: Current state
        target_group_id: Group to split
        direction: ``vertical`` (side by side) or ``horizontal`` (stacked)
        new_group_id: Id for the new group; drawn from ``id_factory`` when None
        tabs: TabDefinitions or registered panel ids for the new group
        placement: Whether the new group goes ``before`` or ``after`` the target
        limits: Refuse the split (return ``state``) if it would exceed these
        id_factory: Id source used when ``new_group_id`` is None

    Raises:
        DuplicateGroupError: If the new group id is already taken
        DuplicateTabError: If ``tabs`` repeats a tab id
    """
    if _require_group(state, target_group_id, "split_group") is None:
        return state
    if not can_split_direction(state.tree, target_group_id, direction, limits):
        logger.debug(f"split_group: {direction} split of {target_group_id} exceeds {limits}")
        return state

    if new_group_id is None:
        new_group_id = (id_factory or SequentialIdFactory.for_state(state)).next()
    if new_group_id in state.groups_by_id:
        raise DuplicateGroupError("Id factory produced a taken group id", group_id=new_group_id)

    tree = split_leaf(state.tree, target_group_id, direction, new_group_id, placement)
    if tree is state.tree:
        raise InvariantViolationError("Group has no leaf in the tree", group_id=target_group_id)

    groups = dict(state.groups_by_id)
    panels = dict(state.panels)
    new_tab_ids: List[PanelId] = []
    emptied: List[GroupId] = []
    for tab in tabs:
        tab_id = tab_id_of(tab)
        if tab_id in new_tab_ids:
            raise DuplicateTabError(tab_id=tab_id)
        if isinstance(tab, TabDefinition):
            panels[tab_id] = tab
        elif tab_id not in panels:
            panels[tab_id] = TabDefinition(id=tab_id, title=tab_id)
        owner = state.find_group_of_tab(tab_id)
        if owner is not None:
            groups[owner] = remove_tab_from_group(groups[owner], tab_id)
            if groups[owner].is_empty and owner not in emptied:
                emptied.append(owner)
        new_tab_ids.append(tab_id)

    groups[new_group_id] = GroupModel(
        id=new_group_id,
        tabs=tuple(new_tab_ids),
        active_tab_id=new_tab_ids[0] if new_tab_ids else None,
    )
    result = replace(state, tree=tree, groups_by_id=groups, panels=panels, focused_group_id=new_group_id)
    logger.debug(f"split_group: {target_group_id} -> {new_group_id} ({direction}, {placement})")

    for group_id in emptied:
        result = close_if_empty(result, group_id)
    return result


def close_group(state: PanelSystemState, group_id: GroupId) -> PanelSystemState:
    """Close a group together with its tabs.

    The parent split collapses into the sibling subtree. If the closed group
    had focus, focus moves to the first group of that sibling subtree.

    Raises:
        CannotCloseLastGroupError: If this is the only group
    """
    group = _require_group(state, group_id, "close_group")
    if group is None:
        return state
    path = find_leaf_path(state.tree, group_id)
    if path is None:
        raise InvariantViolationError("Group has no leaf in the tree", group_id=group_id)
    if not path:
        raise CannotCloseLastGroupError(group_id=group_id)

    parent = get_at_path(state.tree, path[:-1])
    sibling = parent.second if path[-1] == "first" else parent.first
    tree = close_leaf(state.tree, group_id)

    groups = {gid: g for gid, g in state.groups_by_id.items() if gid != group_id}
    panels = {pid: tab for pid, tab in state.panels.items() if pid not in group.tabs}
    focused = state.focused_group_id
    if focused == group_id:
        focused = first_group(sibling)

    logger.debug(f"close_group: closed {group_id}, focus on {focused}")
    return replace(state, tree=tree, groups_by_id=groups, panels=panels, focused_group_id=focused)


def close_if_empty(state: PanelSystemState, group_id: GroupId) -> PanelSystemState:
    """Close ``group_id`` when it holds no tabs, unless it is the last group."""
    group = state.groups_by_id.get(group_id)
    if group is None or not group.is_empty or len(state.groups_by_id) <= 1:
        return state
    return close_group(state, group_id)


def prune_empty_groups(state: PanelSystemState, keep: Iterable[GroupId] = ()) -> PanelSystemState:
    """Close every empty group except those in ``keep``; at least one group stays.

    Returns ``state`` itself when nothing needs closing.
    """
    kept = set(keep)
    result = state
    for group_id in list(collect_groups_in_order(state.tree)):
        if group_id not in kept:
            result = close_if_empty(result, group_id)
    return result


# =============================================================================
# Tabs
# =============================================================================


def add_tab(
    state: PanelSystemState,
    group_id: GroupId,
    tab: TabDefinition,
    index: Optional[int] = None,
) -> PanelSystemState:
    """Open a new tab in a group, registering its definition.

    Raises:
        DuplicateTabError: If the tab already lives in another group
    """
    group = _require_group(state, group_id, "add_tab")
    if group is None:
        return state
    owner = state.find_group_of_tab(tab.id)
    if owner is not None and owner != group_id:
        raise DuplicateTabError("Tab already open in another group", tab_id=tab.id, group_id=owner)

    updated = add_tab_to_group(group, tab) if index is None else add_tab_to_group_at_index(group, tab, index)
    result = _with_group(state, updated)
    if state.panels.get(tab.id) != tab:
        result = replace(result, panels={**result.panels, tab.id: tab})
    return result


def remove_tab(state: PanelSystemState, group_id: GroupId, tab_id: PanelId, prune: bool = True) -> PanelSystemState:
    """Close a tab. With ``prune``, a group left empty is closed too."""
    group = _require_group(state, group_id, "remove_tab")
    if group is None or tab_id not in group.tabs:
        return state
    result = _with_group(state, remove_tab_from_group(group, tab_id))
    result = replace(result, panels={pid: tab for pid, tab in result.panels.items() if pid != tab_id})
    if prune:
        result = close_if_empty(result, group_id)
    return result


def reorder_tab(state: PanelSystemState, group_id: GroupId, tab_id: PanelId, to_index: int) -> PanelSystemState:
    group = _require_group(state, group_id, "reorder_tab")
    if group is None:
        return state
    return _with_group(state, reorder_tab_within_group(group, tab_id, to_index))


def activate_tab(state: PanelSystemState, group_id: GroupId, tab_id: PanelId) -> PanelSystemState:
    """Make a tab active and focus its group."""
    group = _require_group(state, group_id, "activate_tab")
    if group is None or tab_id not in group.tabs:
        return state
    result = _with_group(state, set_active_tab(group, tab_id))
    if result.focused_group_id != group_id:
        result = replace(result, focused_group_id=group_id)
    return result


# =============================================================================
# Ratios
# =============================================================================


def resize_split(
    state: PanelSystemState,
    split_path: NodePath,
    ratio: float,
    min_ratio: float = MIN_SPLIT_RATIO,
    max_ratio: float = MAX_SPLIT_RATIO,
) -> PanelSystemState:
    """Set the ratio of the split at ``split_path`` (clamped)."""
    tree = set_split_ratio(state.tree, split_path, ratio, min_ratio, max_ratio)
    if tree is state.tree:
        return state
    return replace(state, tree=tree)


def adjust_split_ratio(
    state: PanelSystemState,
    split_path: NodePath,
    delta: float,
    min_ratio: float = MIN_SPLIT_RATIO,
    max_ratio: float = MAX_SPLIT_RATIO,
) -> PanelSystemState:
    """Shift a split's ratio by ``delta`` (clamped), as a divider drag does."""
    node = get_at_path(state.tree, split_path)
    if node is None or isinstance(node, Leaf):
        return state
    return resize_split(state, split_path, node.ratio + delta, min_ratio, max_ratio)
