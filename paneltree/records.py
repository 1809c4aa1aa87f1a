"""
Plain nested records for panel state.

Converts engine values to dicts, lists, strings and floats (and back) so a
caller can persist them in any format. Render callbacks are not recorded.
"""

from typing import Any, Dict, Mapping

from .exceptions import RecordFormatError
from .state import validate_state
from .types import GroupModel, Leaf, PanelSystemState, PanelTree, Split, TabDefinition

RECORD_VERSION = 1


def tree_to_dict(node: PanelTree) -> Dict[str, Any]:
    """Convert a tree to a nested dictionary."""
    if isinstance(node, Leaf):
        return {"type": "group", "group_id": node.group_id}
    if isinstance(node, Split):
        return {
            "type": "split",
            "direction": node.direction,
            "ratio": node.ratio,
            "first": tree_to_dict(node.first),
            "second": tree_to_dict(node.second),
        }
    raise RecordFormatError(f"Unknown node type: {type(node).__name__}")


def tree_from_dict(data: Mapping[str, Any]) -> PanelTree:
    """Rebuild a tree from ``tree_to_dict`` output.

    Raises:
        RecordFormatError: On missing keys or unknown node types
    """
    if not isinstance(data, Mapping):
        raise RecordFormatError(f"Tree node must be a mapping, got {type(data).__name__}")
    node_type = data.get("type")
    try:
        if node_type == "group":
            group_id = data["group_id"]
            if not isinstance(group_id, (str, int)) or isinstance(group_id, bool):
                raise RecordFormatError("Group id must be a string", group_id=group_id)
            return Leaf(group_id=str(group_id))
        if node_type == "split":
            return Split(
                direction=data["direction"],
                ratio=float(data["ratio"]),
                first=tree_from_dict(data["first"]),
                second=tree_from_dict(data["second"]),
            )
    except KeyError as e:
        raise RecordFormatError(f"Tree node is missing {e.args[0]!r}", node_type=node_type) from e
    except (TypeError, ValueError) as e:
        raise RecordFormatError(f"Invalid tree node value: {e}", node_type=node_type) from e
    raise RecordFormatError(f"Unknown node type: {node_type!r}")


def state_to_dict(state: PanelSystemState) -> Dict[str, Any]:
    """Convert a full state to a nested dictionary."""
    return {
        "version": RECORD_VERSION,
        "tree": tree_to_dict(state.tree),
        "groups": {
            group_id: {
                "tabs": list(group.tabs),
                "active_tab_id": group.active_tab_id,
            }
            for group_id, group in state.groups_by_id.items()
        },
        "focused_group_id": state.focused_group_id,
        "panels": {panel_id: {"title": tab.title} for panel_id, tab in state.panels.items()},
    }


def state_from_dict(data: Mapping[str, Any]) -> PanelSystemState:
    """Rebuild and validate a state from ``state_to_dict`` output.

    Raises:
        RecordFormatError: On malformed records
        InvariantViolationError: If the decoded state breaks an invariant
    """
    if not isinstance(data, Mapping):
        raise RecordFormatError(f"State record must be a mapping, got {type(data).__name__}")
    version = data.get("version", RECORD_VERSION)
    if version != RECORD_VERSION:
        raise RecordFormatError("Unsupported record version", version=version)
    if "tree" not in data:
        raise RecordFormatError("State record is missing 'tree'")

    tree = tree_from_dict(data["tree"])

    groups: Dict[str, GroupModel] = {}
    for group_id, record in (data.get("groups") or {}).items():
        if not isinstance(record, Mapping):
            raise RecordFormatError("Group record must be a mapping", group_id=group_id)
        tabs = record.get("tabs") or ()
        if not isinstance(tabs, (list, tuple)):
            raise RecordFormatError("Group tabs must be a list", group_id=group_id)
        groups[str(group_id)] = GroupModel(
            id=str(group_id),
            tabs=tuple(str(tab_id) for tab_id in tabs),
            active_tab_id=record.get("active_tab_id"),
        )

    panels: Dict[str, TabDefinition] = {}
    for panel_id, record in (data.get("panels") or {}).items():
        title = record.get("title", "") if isinstance(record, Mapping) else str(record or "")
        panels[str(panel_id)] = TabDefinition(id=str(panel_id), title=title)

    state = PanelSystemState(
        tree=tree,
        groups_by_id=groups,
        focused_group_id=data.get("focused_group_id"),
        panels=panels,
    )
    validate_state(state)
    return state
