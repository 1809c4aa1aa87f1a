"""Shared pytest fixtures for paneltree tests."""

import logging
from pathlib import Path
from typing import Dict, Optional, Sequence

import pytest

from paneltree.ids import SequentialIdFactory
from paneltree.state import build_initial_state
from paneltree.types import GroupModel, PanelSystemState, PanelTree, TabDefinition


def make_tabs(*tab_ids: str):
    """Build TabDefinitions titled after their ids."""
    return [TabDefinition(tab_id, title=tab_id.title()) for tab_id in tab_ids]


def make_state(
    tree: PanelTree,
    groups: Dict[str, Sequence[str]],
    focused: Optional[str] = None,
    active: Optional[Dict[str, str]] = None,
) -> PanelSystemState:
    """Assemble a state from a tree and ``{group_id: [tab ids]}``.

    Each group's first tab is active unless ``active`` says otherwise.
    """
    active = active or {}
    groups_by_id = {
        group_id: GroupModel(
            id=group_id,
            tabs=tuple(tabs),
            active_tab_id=active.get(group_id, tabs[0] if tabs else None),
        )
        for group_id, tabs in groups.items()
    }
    panels = {
        tab_id: TabDefinition(tab_id, title=tab_id.title())
        for tabs in groups.values()
        for tab_id in tabs
    }
    return PanelSystemState(tree=tree, groups_by_id=groups_by_id, focused_group_id=focused, panels=panels)


@pytest.fixture
def two_tab_state():
    """Single group g1 holding tabs a and b."""
    return build_initial_state(make_tabs("a", "b"))


@pytest.fixture
def three_tab_state():
    """Single group g1 holding tabs a, b and c."""
    return build_initial_state(make_tabs("a", "b", "c"))


@pytest.fixture
def id_factory():
    """Sequential ids that skip the initial group."""
    return SequentialIdFactory(taken=["g1"])


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point the home directory at tmp_path and clear paneltree env vars."""
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    for name in (
        "PANELTREE_SESSION",
        "PANELTREE_MIN_RATIO",
        "PANELTREE_MAX_RATIO",
        "PANELTREE_MAX_ROWS",
        "PANELTREE_MAX_COLS",
        "PANELTREE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture(autouse=True)
def reset_paneltree_logger():
    """Close handlers installed by setup_logging."""
    yield
    logger = logging.getLogger("paneltree")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
