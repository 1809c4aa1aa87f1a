"""
Tree operations for the panel system.

Pure transformations of ``PanelTree`` values: traversal, split, close and
ratio updates. Nodes never hold parent pointers; an operation that needs to
replace a node locates it as a path of ``first``/``second`` choices and
rebuilds only the ancestors on that path.

No group registry or focus concerns live here; see ``paneltree.state``.
"""

import logging
import math
from dataclasses import replace
from typing import Iterable, Iterator, Optional, Set, Tuple

from .config.constants import DEFAULT_SPLIT_RATIO, MAX_SPLIT_RATIO, MIN_SPLIT_RATIO
from .exceptions import CannotCloseLastGroupError, DuplicateGroupError, MalformedTreeError
from .types import (
    PLACEMENTS,
    SPLIT_DIRECTIONS,
    GroupId,
    Leaf,
    NodePath,
    PanelTree,
    Placement,
    Split,
    SplitDirection,
)

logger = logging.getLogger(__name__)

ROOT_PATH: NodePath = ()


def is_group(node: PanelTree) -> bool:
    """Return True for a Leaf, False for a Split.

    Raises:
        MalformedTreeError: If ``node`` is neither
    """
    if isinstance(node, Leaf):
        return True
    if isinstance(node, Split):
        return False
    raise MalformedTreeError(f"Not a panel tree node: {type(node).__name__}")


def iter_groups_in_order(tree: PanelTree) -> Iterator[GroupId]:
    """Yield every leaf's group id, first subtree before second."""
    if is_group(tree):
        yield tree.group_id
        return
    yield from iter_groups_in_order(tree.first)
    yield from iter_groups_in_order(tree.second)


class GroupOrder(Iterable[GroupId]):
    """Lazy, restartable view of a tree's groups in focus order.

    Each iteration walks the tree again, so the view can be consumed any
    number of times.
    """

    def __init__(self, tree: PanelTree) -> None:
        self._tree = tree

    def __iter__(self) -> Iterator[GroupId]:
        return iter_groups_in_order(self._tree)

    def __len__(self) -> int:
        return count_leaves(self._tree)

    def __repr__(self) -> str:
        return f"GroupOrder({list(self)!r})"


def collect_groups_in_order(tree: PanelTree) -> GroupOrder:
    """Canonical focus and reading order of a tree's groups."""
    return GroupOrder(tree)


def count_leaves(tree: PanelTree) -> int:
    if is_group(tree):
        return 1
    return count_leaves(tree.first) + count_leaves(tree.second)


def contains_group(tree: PanelTree, group_id: GroupId) -> bool:
    return any(gid == group_id for gid in iter_groups_in_order(tree))


def first_group(tree: PanelTree) -> GroupId:
    """The first group in focus order. Trees are never empty."""
    return next(iter_groups_in_order(tree))


# =============================================================================
# Paths
# =============================================================================


def get_at_path(tree: PanelTree, path: NodePath) -> Optional[PanelTree]:
    """Return the node addressed by ``path``, or None if the path runs past a leaf."""
    node = tree
    for segment in path:
        if is_group(node):
            return None
        node = node.first if segment == "first" else node.second
    return node


def set_at_path(tree: PanelTree, path: NodePath, value: PanelTree) -> PanelTree:
    """Return a copy of ``tree`` with the node at ``path`` replaced by ``value``.

    Only the ancestors on ``path`` are rebuilt; every other subtree is shared.
    An invalid path returns ``tree`` unchanged.
    """
    if not path:
        return value
    if is_group(tree):
        return tree
    head, rest = path[0], path[1:]
    if head == "first":
        child = set_at_path(tree.first, rest, value)
        return tree if child is tree.first else replace(tree, first=child)
    child = set_at_path(tree.second, rest, value)
    return tree if child is tree.second else replace(tree, second=child)


def find_leaf_path(tree: PanelTree, group_id: GroupId, path: NodePath = ROOT_PATH) -> Optional[NodePath]:
    """Locate the leaf for ``group_id`` and return its path from the root."""
    if is_group(tree):
        return path if tree.group_id == group_id else None
    found = find_leaf_path(tree.first, group_id, path + ("first",))
    if found is not None:
        return found
    return find_leaf_path(tree.second, group_id, path + ("second",))


def iter_split_paths(tree: PanelTree, path: NodePath = ROOT_PATH) -> Iterator[Tuple[NodePath, Split]]:
    """Yield ``(path, split)`` for every Split, parents before children."""
    if is_group(tree):
        return
    yield path, tree
    yield from iter_split_paths(tree.first, path + ("first",))
    yield from iter_split_paths(tree.second, path + ("second",))


def format_path(path: NodePath) -> str:
    """Render a path as ``root`` or ``first.second``."""
    return ".".join(path) if path else "root"


def parse_path(text: str) -> NodePath:
    """Parse the output of ``format_path``.

    Raises:
        ValueError: On segments other than ``first``/``second``
    """
    text = text.strip()
    if text in ("", "root"):
        return ROOT_PATH
    segments = tuple(part.strip() for part in text.split("."))
    for segment in segments:
        if segment not in ("first", "second"):
            raise ValueError(f"Invalid path segment '{segment}'. Use 'first' or 'second'")
    return segments  # type: ignore[return-value]


# =============================================================================
# Structural operations
# =============================================================================


def split_leaf(
    tree: PanelTree,
    target_group_id: GroupId,
    direction: SplitDirection,
    new_group_id: GroupId,
    placement: Placement = "after",
) -> PanelTree:
    """Replace the target leaf with a Split holding it and a new leaf.

    Args:
        tree: Current tree
        target_group_id: Group whose leaf is split
        direction: ``vertical`` (side by side) or ``horizontal`` (stacked)
        new_group_id: Group id for the new leaf
        placement: ``before`` puts the new leaf first, ``after`` second

    Returns:
        The new tree, or ``tree`` itself when the target is absent

    Raises:
        DuplicateGroupError: If ``new_group_id`` is already in the tree
    """
    if direction not in SPLIT_DIRECTIONS:
        raise ValueError(f"Invalid direction '{direction}'. Must be one of: {SPLIT_DIRECTIONS}")
    if placement not in PLACEMENTS:
        raise ValueError(f"Invalid placement '{placement}'. Must be one of: {PLACEMENTS}")

    path = find_leaf_path(tree, target_group_id)
    if path is None:
        logger.debug(f"split_leaf: group {target_group_id} not in tree")
        return tree
    if contains_group(tree, new_group_id):
        raise DuplicateGroupError("New group id already in tree", group_id=new_group_id)

    original = Leaf(target_group_id)
    created = Leaf(new_group_id)
    first, second = (created, original) if placement == "before" else (original, created)
    replacement = Split(direction=direction, ratio=DEFAULT_SPLIT_RATIO, first=first, second=second)
    return set_at_path(tree, path, replacement)


def close_leaf(tree: PanelTree, group_id: GroupId) -> PanelTree:
    """Remove a leaf and collapse its parent Split into the sibling subtree.

    Only the immediate parent can become single-child, so the collapse is
    exactly one level deep.

    Returns:
        The new tree, or ``tree`` itself when the group is absent

    Raises:
        CannotCloseLastGroupError: If the leaf is the whole tree
    """
    path = find_leaf_path(tree, group_id)
    if path is None:
        logger.debug(f"close_leaf: group {group_id} not in tree")
        return tree
    if not path:
        raise CannotCloseLastGroupError(group_id=group_id)

    parent_path, side = path[:-1], path[-1]
    parent = get_at_path(tree, parent_path)
    sibling = parent.second if side == "first" else parent.first
    return set_at_path(tree, parent_path, sibling)


def clamp_ratio(ratio: float, min_ratio: float = MIN_SPLIT_RATIO, max_ratio: float = MAX_SPLIT_RATIO) -> float:
    """Clamp ``ratio`` into ``[min_ratio, max_ratio]``.

    Raises:
        ValueError: If ``ratio`` is NaN
    """
    if math.isnan(ratio):
        raise ValueError("Split ratio must be a number, got NaN")
    return min(max(ratio, min_ratio), max_ratio)


def set_split_ratio(
    tree: PanelTree,
    split_path: NodePath,
    ratio: float,
    min_ratio: float = MIN_SPLIT_RATIO,
    max_ratio: float = MAX_SPLIT_RATIO,
) -> PanelTree:
    """Set the ratio of the Split at ``split_path``, clamped to the bounds.

    Returns ``tree`` itself when the path does not address a Split or the
    clamped ratio equals the current one.
    """
    node = get_at_path(tree, split_path)
    if node is None or is_group(node):
        logger.debug(f"set_split_ratio: no split at {format_path(split_path)}")
        return tree
    clamped = clamp_ratio(ratio, min_ratio, max_ratio)
    if clamped != ratio:
        logger.debug(f"set_split_ratio: clamped {ratio} to {clamped}")
    if clamped == node.ratio:
        return tree
    return set_at_path(tree, split_path, replace(node, ratio=clamped))


# =============================================================================
# Validation
# =============================================================================


def validate_tree(tree: PanelTree) -> None:
    """Check structural invariants, raising on the first violation.

    Raises:
        MalformedTreeError: Unknown node, bad direction or ratio
        DuplicateGroupError: A group id on more than one leaf
    """
    seen: Set[GroupId] = set()
    _validate_node(tree, ROOT_PATH, seen)


def _validate_node(node: PanelTree, path: NodePath, seen: Set[GroupId]) -> None:
    if isinstance(node, Leaf):
        if not isinstance(node.group_id, str) or not node.group_id:
            raise MalformedTreeError("Leaf has no group id", path=path)
        if node.group_id in seen:
            raise DuplicateGroupError("Group appears on more than one leaf", group_id=node.group_id)
        seen.add(node.group_id)
        return
    if not isinstance(node, Split):
        raise MalformedTreeError(f"Not a panel tree node: {type(node).__name__}", path=path)
    if node.direction not in SPLIT_DIRECTIONS:
        raise MalformedTreeError(f"Invalid split direction '{node.direction}'", path=path)
    if not isinstance(node.ratio, (int, float)) or not 0 < node.ratio < 1:
        raise MalformedTreeError(f"Split ratio must be in (0, 1), got {node.ratio!r}", path=path)
    _validate_node(node.first, path + ("first",), seen)
    _validate_node(node.second, path + ("second",), seen)
