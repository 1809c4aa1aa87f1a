"""
Tab list operations on a single group.

Each function takes a ``GroupModel`` and returns a new one. A call that
changes nothing returns the very same object so callers can short-circuit
with ``is``.
"""

import logging
from dataclasses import replace
from typing import Optional, Union

from .types import GroupId, GroupModel, PanelId, TabDefinition

logger = logging.getLogger(__name__)

TabRef = Union[TabDefinition, PanelId]


def tab_id_of(tab: TabRef) -> PanelId:
    """Accept either a TabDefinition or a bare panel id."""
    return tab.id if isinstance(tab, TabDefinition) else tab


def create_empty_group(group_id: GroupId) -> GroupModel:
    return GroupModel(id=group_id, tabs=(), active_tab_id=None)


def add_tab_to_group(group: GroupModel, tab: TabRef) -> GroupModel:
    """Append a tab and make it active."""
    return add_tab_to_group_at_index(group, tab, len(group.tabs))


def add_tab_to_group_at_index(group: GroupModel, tab: TabRef, index: int) -> GroupModel:
    """Insert a tab at ``index`` (clamped to ``[0, len(tabs)]``) and make it active.

    A tab already in the group keeps its position and is only activated.
    """
    tab_id = tab_id_of(tab)
    if tab_id in group.tabs:
        return set_active_tab(group, tab_id)
    bounded = max(0, min(index, len(group.tabs)))
    tabs = group.tabs[:bounded] + (tab_id,) + group.tabs[bounded:]
    return replace(group, tabs=tabs, active_tab_id=tab_id)


def remove_tab_from_group(group: GroupModel, tab_id: PanelId) -> GroupModel:
    """Remove a tab.

    If it was active, the tab that slides into its index becomes active, or the
    new last tab when it was at the end, or nothing when the group is empty.
    """
    index = group.index_of(tab_id)
    if index == -1:
        logger.debug(f"remove_tab_from_group: tab {tab_id} not in group {group.id}")
        return group
    tabs = group.tabs[:index] + group.tabs[index + 1:]
    active: Optional[PanelId] = group.active_tab_id
    if active == tab_id:
        if not tabs:
            active = None
        elif index < len(tabs):
            active = tabs[index]
        else:
            active = tabs[-1]
    return replace(group, tabs=tabs, active_tab_id=active)


def reorder_tab_within_group(group: GroupModel, tab_id: PanelId, to_index: int) -> GroupModel:
    """Move a tab to ``to_index``, keeping the relative order of the others.

    No-op when the tab is absent, ``to_index`` is outside ``[0, len(tabs) - 1]``
    or equals the current index.
    """
    current = group.index_of(tab_id)
    if current == -1 or not 0 <= to_index < len(group.tabs) or to_index == current:
        return group
    rest = group.tabs[:current] + group.tabs[current + 1:]
    tabs = rest[:to_index] + (tab_id,) + rest[to_index:]
    return replace(group, tabs=tabs)


def set_active_tab(group: GroupModel, tab_id: PanelId) -> GroupModel:
    if tab_id not in group.tabs or group.active_tab_id == tab_id:
        return group
    return replace(group, active_tab_id=tab_id)
