"""
Focus navigation.

Focus order is the in-order walk of the tree. Navigation stops at either end
instead of wrapping around: groups form a fixed 2D arrangement, not a
carousel.
"""

import logging
from dataclasses import replace
from typing import List, Optional

from .tree import collect_groups_in_order, contains_group
from .types import GroupId, GroupModel, PanelSystemState

logger = logging.getLogger(__name__)


def set_focused_group(state: PanelSystemState, group_id: GroupId) -> PanelSystemState:
    """Focus a group. No-op if it is not a leaf of the tree."""
    if not contains_group(state.tree, group_id):
        logger.debug(f"set_focused_group: {group_id} is not in the tree")
        return state
    if state.focused_group_id == group_id:
        return state
    return replace(state, focused_group_id=group_id)


def focus_group_index(state: PanelSystemState, index: int) -> PanelSystemState:
    """Focus the ``index``-th group in focus order, counting from 1.

    Indices below 1 or past the last group leave the state unchanged.
    """
    order = list(collect_groups_in_order(state.tree))
    if not 1 <= index <= len(order):
        logger.debug(f"focus_group_index: {index} out of range for {len(order)} groups")
        return state
    return set_focused_group(state, order[index - 1])


def _step(state: PanelSystemState, offset: int) -> PanelSystemState:
    order: List[GroupId] = list(collect_groups_in_order(state.tree))
    current = state.focused_group_id
    if current not in order:
        return set_focused_group(state, order[0] if offset > 0 else order[-1])
    index = order.index(current) + offset
    if not 0 <= index < len(order):
        return state
    return set_focused_group(state, order[index])


def next_group(state: PanelSystemState) -> PanelSystemState:
    """Focus the next group; stays on the last one. Without focus, picks the first."""
    return _step(state, 1)


def prev_group(state: PanelSystemState) -> PanelSystemState:
    """Focus the previous group; stays on the first one. Without focus, picks the last."""
    return _step(state, -1)


def focused_group(state: PanelSystemState) -> Optional[GroupModel]:
    if state.focused_group_id is None:
        return None
    return state.groups_by_id.get(state.focused_group_id)
