"""
Panel system data model.

A workspace is a binary tree of splits whose leaves each point at one tab
group. Every type here is immutable: operations build new values and share
untouched subtrees with the previous state.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Literal, Optional, Tuple, Union

PanelId = str
GroupId = str

SplitDirection = Literal["horizontal", "vertical"]
Placement = Literal["before", "after"]
PathSegment = Literal["first", "second"]
NodePath = Tuple[PathSegment, ...]

DropPosition = Literal[
    "before-tab",
    "after-tab",
    "split-left",
    "split-right",
    "split-top",
    "split-bottom",
]

SPLIT_DIRECTIONS = ("horizontal", "vertical")
PLACEMENTS = ("before", "after")
DROP_POSITIONS = (
    "before-tab",
    "after-tab",
    "split-left",
    "split-right",
    "split-top",
    "split-bottom",
)


@dataclass(frozen=True)
class TabDefinition:
    """A caller-owned tab. The engine only looks at ``id``.

    Attributes:
        id: Unique panel id
        title: Display title
        render: Optional render callback, never called by the engine
    """

    id: PanelId
    title: str = ""
    render: Optional[Callable[[], Any]] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class GroupModel:
    """An ordered list of tab ids sharing one region, with one active tab."""

    id: GroupId
    tabs: Tuple[PanelId, ...] = ()
    active_tab_id: Optional[PanelId] = None

    def __contains__(self, tab_id: object) -> bool:
        return tab_id in self.tabs

    def index_of(self, tab_id: PanelId) -> int:
        """Position of a tab, or -1 when absent."""
        try:
            return self.tabs.index(tab_id)
        except ValueError:
            return -1

    @property
    def is_empty(self) -> bool:
        return not self.tabs


@dataclass(frozen=True)
class Leaf:
    """A tree node wrapping exactly one group."""

    group_id: GroupId


@dataclass(frozen=True)
class Split:
    """A tree node dividing space between two children.

    ``vertical`` places the children side by side (the divider is vertical),
    ``horizontal`` stacks them. ``ratio`` is the share given to ``first``.
    """

    direction: SplitDirection
    ratio: float
    first: "PanelTree"
    second: "PanelTree"


PanelTree = Union[Leaf, Split]


@dataclass(frozen=True)
class PanelSystemState:
    """The complete engine state.

    Attributes:
        tree: Split/leaf layout
        groups_by_id: Every group referenced by a leaf, keyed by id
        focused_group_id: Group receiving keyboard focus, if any
        panels: Registry of tab definitions keyed by panel id
    """

    tree: PanelTree
    groups_by_id: Dict[GroupId, GroupModel]
    focused_group_id: Optional[GroupId] = None
    panels: Dict[PanelId, TabDefinition] = field(default_factory=dict)

    def group(self, group_id: GroupId) -> Optional[GroupModel]:
        return self.groups_by_id.get(group_id)

    def find_group_of_tab(self, tab_id: PanelId) -> Optional[GroupId]:
        """Return the id of the group holding ``tab_id``."""
        for group in self.groups_by_id.values():
            if tab_id in group.tabs:
                return group.id
        return None

    def tabs_of(self, group_id: GroupId) -> Tuple[TabDefinition, ...]:
        """Resolve a group's tab ids to their definitions."""
        group = self.groups_by_id.get(group_id)
        if group is None:
            return ()
        return tuple(self.panels.get(tab_id, TabDefinition(tab_id)) for tab_id in group.tabs)


@dataclass(frozen=True)
class DraggingTab:
    """An in-progress drag. Owned by the UI; the engine never sees it."""

    tab_id: PanelId
    source_group_id: GroupId


@dataclass(frozen=True)
class DropZone:
    """The semantic target of a completed drag-and-drop gesture."""

    target_group_id: GroupId
    position: DropPosition
    reference_tab_id: Optional[PanelId] = None

    def __post_init__(self) -> None:
        if self.position not in DROP_POSITIONS:
            raise ValueError(
                f"Invalid drop position '{self.position}'. Must be one of: {DROP_POSITIONS}"
            )

    @property
    def is_split(self) -> bool:
        return self.position.startswith("split-")
