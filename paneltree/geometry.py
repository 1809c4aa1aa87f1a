"""
Rectangle geometry for a panel tree.

Turns split ratios into per-group rectangles, in percent of the workspace by
default. Useful for callers positioning groups absolutely.
"""

from dataclasses import dataclass
from typing import Dict

from .tree import is_group
from .types import GroupId, PanelTree


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float


FULL_BOUNDS = Rect(0.0, 0.0, 100.0, 100.0)


def compute_rects(tree: PanelTree, bounds: Rect = FULL_BOUNDS) -> Dict[GroupId, Rect]:
    """Map each group to its rectangle inside ``bounds``.

    Vertical splits divide the width, horizontal splits divide the height.
    The result is ordered like ``collect_groups_in_order``.
    """
    result: Dict[GroupId, Rect] = {}
    _walk(tree, bounds, result)
    return result


def _walk(node: PanelTree, rect: Rect, result: Dict[GroupId, Rect]) -> None:
    if is_group(node):
        result[node.group_id] = rect
        return
    if node.direction == "vertical":
        first_w = rect.w * node.ratio
        _walk(node.first, Rect(rect.x, rect.y, first_w, rect.h), result)
        _walk(node.second, Rect(rect.x + first_w, rect.y, rect.w - first_w, rect.h), result)
        return
    first_h = rect.h * node.ratio
    _walk(node.first, Rect(rect.x, rect.y, rect.w, first_h), result)
    _walk(node.second, Rect(rect.x, rect.y + first_h, rect.w, rect.h - first_h), result)
