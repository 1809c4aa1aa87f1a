"""
Split limits.

Caps how many rows (stacked panes) and columns (side-by-side panes) a
workspace may grow to. A ``horizontal`` split stacks its children and adds
rows; a ``vertical`` split places them side by side and adds columns.
"""

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from .tree import is_group, split_leaf
from .types import GroupId, PanelTree, SplitDirection

_PREVIEW_GROUP_ID = "__preview__"


@dataclass(frozen=True)
class SplitLimits:
    """Maximum rows and columns. ``math.inf`` means unlimited."""

    rows: float = math.inf
    cols: float = math.inf

    @property
    def unlimited(self) -> bool:
        return math.isinf(self.rows) and math.isinf(self.cols)


@dataclass(frozen=True)
class SplitExtents:
    """How many rows (``horizontal``) and columns (``vertical``) a tree spans."""

    horizontal: int
    vertical: int


def _clamp_limit(value: Any) -> float:
    if value is None:
        return math.inf
    try:
        number = float(value)
    except (TypeError, ValueError):
        return math.inf
    if math.isnan(number):
        return math.inf
    return max(number, 1.0)


def normalize_split_limits(limits: Union[None, int, float, Mapping[str, Any], SplitLimits] = None) -> SplitLimits:
    """Normalize the accepted limit shapes into ``SplitLimits``.

    Accepts:
    - None: unlimited
    - a number: same limit for rows and columns
    - {"rows": n, "cols": m}: either key may be missing
    - {"maxHorizontal": n, "maxVertical": m}: legacy shape (rows, cols)

    Values below 1 are raised to 1; non-numeric values mean unlimited.
    """
    if limits is None:
        return SplitLimits()
    if isinstance(limits, SplitLimits):
        return SplitLimits(rows=_clamp_limit(limits.rows), cols=_clamp_limit(limits.cols))
    if isinstance(limits, (int, float)):
        normalized = _clamp_limit(limits)
        return SplitLimits(rows=normalized, cols=normalized)
    if "rows" in limits or "cols" in limits:
        return SplitLimits(rows=_clamp_limit(limits.get("rows")), cols=_clamp_limit(limits.get("cols")))
    return SplitLimits(
        rows=_clamp_limit(limits.get("maxHorizontal")),
        cols=_clamp_limit(limits.get("maxVertical")),
    )


def measure_split_extents(tree: PanelTree) -> SplitExtents:
    if is_group(tree):
        return SplitExtents(horizontal=1, vertical=1)
    a = measure_split_extents(tree.first)
    b = measure_split_extents(tree.second)
    if tree.direction == "horizontal":
        return SplitExtents(horizontal=a.horizontal + b.horizontal, vertical=max(a.vertical, b.vertical))
    return SplitExtents(horizontal=max(a.horizontal, b.horizontal), vertical=a.vertical + b.vertical)


def can_split_direction(
    tree: PanelTree,
    group_id: GroupId,
    direction: SplitDirection,
    limits: Optional[SplitLimits],
) -> bool:
    """Return True if splitting ``group_id`` keeps the tree within ``limits``."""
    if limits is None or limits.unlimited:
        return True
    preview = split_leaf(tree, group_id, direction, _PREVIEW_GROUP_ID)
    extents = measure_split_extents(preview)
    return extents.horizontal <= limits.rows and extents.vertical <= limits.cols
