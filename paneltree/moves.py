"""
Cross-group tab moves (drag and drop).

The pointer layer resolves where a tab was dropped into a ``DropZone``; this
module turns that into a structural change. Tabs are moved, never copied or
dropped, so the multiset of tab ids across all groups is unchanged by any
``move_tab`` call.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple, Union

from .groups import add_tab_to_group_at_index, remove_tab_from_group, reorder_tab_within_group, set_active_tab
from .ids import IdFactory
from .limits import SplitLimits
from .state import close_if_empty, split_group
from .types import (
    DropPosition,
    DropZone,
    GroupId,
    PanelId,
    PanelSystemState,
    Placement,
    SplitDirection,
)

logger = logging.getLogger(__name__)

SPLIT_POSITIONS: Dict[DropPosition, Tuple[SplitDirection, Placement]] = {
    "split-left": ("vertical", "before"),
    "split-right": ("vertical", "after"),
    "split-top": ("horizontal", "before"),
    "split-bottom": ("horizontal", "after"),
}


@dataclass(frozen=True)
class InsertTarget:
    """Insert into ``group_id`` at ``index``, counted with the moved tab removed."""

    group_id: GroupId
    index: int


@dataclass(frozen=True)
class SplitTarget:
    """Split ``group_id`` and put the moved tab alone in the new group."""

    group_id: GroupId
    direction: SplitDirection
    placement: Placement


DropTarget = Union[InsertTarget, SplitTarget]


def resolve_drop_zone(
    state: PanelSystemState,
    tab_id: PanelId,
    source_group_id: GroupId,
    drop_zone: DropZone,
) -> Optional[DropTarget]:
    """Work out what a drop means for the current state.

    ``before-tab``/``after-tab`` resolve to an index next to the reference tab,
    or the end of the list when the reference is missing. ``split-*`` resolve
    to a direction and placement.

    Returns:
        The target, or None when the source, target or tab is unknown
    """
    source = state.groups_by_id.get(source_group_id)
    target = state.groups_by_id.get(drop_zone.target_group_id)
    if source is None or target is None or tab_id not in source.tabs:
        return None

    if drop_zone.is_split:
        direction, placement = SPLIT_POSITIONS[drop_zone.position]
        return SplitTarget(group_id=target.id, direction=direction, placement=placement)

    reference = drop_zone.reference_tab_id
    if reference == tab_id and target.id == source.id:
        return InsertTarget(group_id=target.id, index=source.index_of(tab_id))

    remaining = tuple(t for t in target.tabs if t != tab_id)
    if reference is None or reference not in remaining:
        return InsertTarget(group_id=target.id, index=len(remaining))
    index = remaining.index(reference)
    if drop_zone.position == "after-tab":
        index += 1
    return InsertTarget(group_id=target.id, index=index)


def move_tab(
    state: PanelSystemState,
    tab_id: PanelId,
    source_group_id: GroupId,
    drop_zone: DropZone,
    id_factory: Optional[IdFactory] = None,
    limits: Optional[SplitLimits] = None,
) -> PanelSystemState:
    """Move a tab to the place described by ``drop_zone``.

    The moved tab becomes active in its destination and the destination group
    is focused. A source group emptied by the move is closed, collapsing its
    parent split. Dropping a tab where it already is returns ``state`` itself.

    Args:
        state: Current state
        tab_id: Tab being moved
        source_group_id: Group the drag started in
        drop_zone: Resolved drop location
        id_factory: Id source for a group created by a ``split-*`` drop
        limits: Split limits; a split drop exceeding them is ignored
    """
    target = resolve_drop_zone(state, tab_id, source_group_id, drop_zone)
    if target is None:
        logger.debug(f"move_tab: nothing to move for {tab_id} from {source_group_id} to {drop_zone}")
        return state

    if isinstance(target, SplitTarget):
        source = state.groups_by_id[source_group_id]
        if target.group_id == source_group_id and len(source.tabs) == 1:
            # Splitting a group off its only tab would leave the layout as it was.
            return state
        return split_group(
            state,
            target.group_id,
            target.direction,
            tabs=[tab_id],
            placement=target.placement,
            limits=limits,
            id_factory=id_factory,
        )

    source = state.groups_by_id[source_group_id]
    if target.group_id == source_group_id:
        if source.index_of(tab_id) == target.index:
            return state
        reordered = set_active_tab(reorder_tab_within_group(source, tab_id, target.index), tab_id)
        return replace(
            state,
            groups_by_id={**state.groups_by_id, source_group_id: reordered},
            focused_group_id=source_group_id,
        )

    destination = state.groups_by_id[target.group_id]
    groups = {
        **state.groups_by_id,
        source_group_id: remove_tab_from_group(source, tab_id),
        target.group_id: add_tab_to_group_at_index(destination, tab_id, target.index),
    }
    moved = replace(state, groups_by_id=groups, focused_group_id=target.group_id)
    logger.debug(f"move_tab: {tab_id} {source_group_id} -> {target.group_id}[{target.index}]")
    return close_if_empty(moved, source_group_id)


def move_tab_to_index(
    state: PanelSystemState,
    tab_id: PanelId,
    source_group_id: GroupId,
    target_group_id: GroupId,
    index: int,
) -> PanelSystemState:
    """Drop a tab onto a tab bar at ``index`` (counted without the moved tab)."""
    target = state.groups_by_id.get(target_group_id)
    if target is None:
        return state
    remaining = tuple(t for t in target.tabs if t != tab_id)
    bounded = max(0, min(index, len(remaining)))
    if bounded < len(remaining):
        zone = DropZone(target_group_id, "before-tab", remaining[bounded])
    else:
        zone = DropZone(target_group_id, "after-tab", remaining[-1] if remaining else None)
    return move_tab(state, tab_id, source_group_id, zone)
