"""
PanelStore: an explicit owner for panel state.

The engine itself is a set of pure functions. A UI needs somewhere to keep
the current snapshot, an id factory and undo history, and to tell views when
the snapshot changes. PanelStore is that place; views subscribe to it and
re-render from ``store.state``.

Usage:
    store = PanelStore(build_initial_state([TabDefinition("a"), TabDefinition("b")]))
    store.subscribe(lambda state: render(state))
    store.move_tab("b", "g1", DropZone("g1", "split-right"))
    store.undo()
"""

import logging
from collections import deque
from typing import Callable, Deque, Iterable, List, Optional

from .config.settings import EngineSettings
from .focus import focus_group_index, next_group, prev_group, set_focused_group
from .groups import TabRef
from .ids import IdFactory, SequentialIdFactory
from .limits import SplitLimits, normalize_split_limits
from .moves import move_tab, move_tab_to_index
from .state import (
    activate_tab,
    add_tab,
    adjust_split_ratio,
    close_group,
    prune_empty_groups,
    remove_tab,
    reorder_tab,
    resize_split,
    split_group,
    validate_state,
)
from .tree import first_group
from .types import (
    DropZone,
    GroupId,
    NodePath,
    PanelId,
    PanelSystemState,
    Placement,
    SplitDirection,
    TabDefinition,
)

logger = logging.getLogger(__name__)

Listener = Callable[[PanelSystemState], None]
Command = Callable[[PanelSystemState], PanelSystemState]


class PanelStore:
    """
    Holds the current PanelSystemState and applies commands to it.

    Every command goes through ``dispatch``: the pure command runs and, if it
    returned a new state, empty groups other than the focused one are pruned
    (when ``prune_empty``), the result is recorded for undo and listeners are
    notified. A command that returns the state unchanged does nothing. Not
    thread-safe; callers serialize commands.
    """

    def __init__(
        self,
        initial_state: PanelSystemState,
        id_factory: Optional[IdFactory] = None,
        settings: Optional[EngineSettings] = None,
        prune_empty: bool = True,
    ) -> None:
        validate_state(initial_state)
        self.settings = settings or EngineSettings()
        self.prune_empty = prune_empty
        self.limits: SplitLimits = normalize_split_limits(
            {"rows": self.settings.max_rows, "cols": self.settings.max_cols}
        )
        self._id_factory = id_factory or SequentialIdFactory.for_state(
            initial_state, prefix=self.settings.group_id_prefix
        )
        self._state = initial_state
        self._undo: Deque[PanelSystemState] = deque(maxlen=self.settings.history_limit)
        self._redo: List[PanelSystemState] = []
        self._listeners: List[Listener] = []

    @property
    def state(self) -> PanelSystemState:
        return self._state

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._state)

    def dispatch(self, command: Command, label: str = "command") -> PanelSystemState:
        """Apply a pure command to the current state."""
        next_state = command(self._state)
        if next_state is self._state:
            logger.debug(f"{label}: no change")
            return self._state
        if self.prune_empty:
            keep = [next_state.focused_group_id] if next_state.focused_group_id else []
            next_state = prune_empty_groups(next_state, keep=keep)
        self._undo.append(self._state)
        self._redo.clear()
        self._state = next_state
        logger.debug(f"{label}: applied")
        self._notify()
        return self._state

    def undo(self) -> bool:
        if not self._undo:
            return False
        self._redo.append(self._state)
        self._state = self._undo.pop()
        self._notify()
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        self._undo.append(self._state)
        self._state = self._redo.pop()
        self._notify()
        return True

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _focused_or_first(self) -> GroupId:
        return self._state.focused_group_id or first_group(self._state.tree)

    def split_group(
        self,
        group_id: GroupId,
        direction: SplitDirection,
        placement: Placement = "after",
        tabs: Iterable[TabRef] = (),
    ) -> PanelSystemState:
        """Split a group; the new group takes ``tabs`` and receives focus."""
        tabs = tuple(tabs)
        return self.dispatch(
            lambda s: split_group(
                s,
                group_id,
                direction,
                tabs=tabs,
                placement=placement,
                limits=self.limits,
                id_factory=self._id_factory,
            ),
            "split_group",
        )

    def split_focused(
        self,
        direction: SplitDirection,
        placement: Placement = "after",
        tabs: Iterable[TabRef] = (),
    ) -> PanelSystemState:
        return self.split_group(self._focused_or_first(), direction, placement, tabs)

    def close_group(self, group_id: GroupId) -> PanelSystemState:
        """Close a group and its tabs. Raises CannotCloseLastGroupError for the last group."""
        return self.dispatch(lambda s: close_group(s, group_id), "close_group")

    def close_focused(self) -> PanelSystemState:
        return self.close_group(self._focused_or_first())

    def focus_group(self, group_id: GroupId) -> PanelSystemState:
        return self.dispatch(lambda s: set_focused_group(s, group_id), "focus_group")

    def focus_index(self, index: int) -> PanelSystemState:
        return self.dispatch(lambda s: focus_group_index(s, index), "focus_index")

    def focus_next(self) -> PanelSystemState:
        return self.dispatch(next_group, "focus_next")

    def focus_prev(self) -> PanelSystemState:
        return self.dispatch(prev_group, "focus_prev")

    def add_tab(self, group_id: GroupId, tab: TabDefinition, index: Optional[int] = None) -> PanelSystemState:
        return self.dispatch(lambda s: add_tab(s, group_id, tab, index), "add_tab")

    def remove_tab(self, group_id: GroupId, tab_id: PanelId) -> PanelSystemState:
        return self.dispatch(lambda s: remove_tab(s, group_id, tab_id), "remove_tab")

    def activate_tab(self, group_id: GroupId, tab_id: PanelId) -> PanelSystemState:
        return self.dispatch(lambda s: activate_tab(s, group_id, tab_id), "activate_tab")

    def reorder_tab(self, group_id: GroupId, tab_id: PanelId, to_index: int) -> PanelSystemState:
        return self.dispatch(lambda s: reorder_tab(s, group_id, tab_id, to_index), "reorder_tab")

    def move_tab(self, tab_id: PanelId, source_group_id: GroupId, drop_zone: DropZone) -> PanelSystemState:
        return self.dispatch(
            lambda s: move_tab(s, tab_id, source_group_id, drop_zone, self._id_factory, self.limits),
            "move_tab",
        )

    def tab_drop(
        self,
        tab_id: PanelId,
        source_group_id: GroupId,
        target_group_id: GroupId,
        index: int,
    ) -> PanelSystemState:
        return self.dispatch(
            lambda s: move_tab_to_index(s, tab_id, source_group_id, target_group_id, index),
            "tab_drop",
        )

    def set_split_ratio(self, split_path: NodePath, ratio: float) -> PanelSystemState:
        return self.dispatch(
            lambda s: resize_split(s, split_path, ratio, self.settings.min_ratio, self.settings.max_ratio),
            "set_split_ratio",
        )

    def adjust_split_ratio(self, split_path: NodePath, delta: float) -> PanelSystemState:
        return self.dispatch(
            lambda s: adjust_split_ratio(s, split_path, delta, self.settings.min_ratio, self.settings.max_ratio),
            "adjust_split_ratio",
        )
