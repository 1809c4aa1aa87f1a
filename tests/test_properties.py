"""
Property checks over seeded random command sequences.
"""

import random
from collections import Counter

import pytest

from conftest import make_tabs
from paneltree.ids import SequentialIdFactory
from paneltree.moves import move_tab
from paneltree.state import add_tab, build_initial_state, close_group, remove_tab, reorder_tab, split_group, validate_state
from paneltree.tree import (
    close_leaf,
    collect_groups_in_order,
    count_leaves,
    get_at_path,
    iter_split_paths,
    set_split_ratio,
    split_leaf,
)
from paneltree.types import DROP_POSITIONS, SPLIT_DIRECTIONS, DropZone, Leaf, TabDefinition

SEEDS = range(25)


def all_tabs(state):
    return Counter(tab_id for group in state.groups_by_id.values() for tab_id in group.tabs)


def random_move(rng, state, ids):
    groups = list(collect_groups_in_order(state.tree))
    source = rng.choice(groups)
    tabs = state.groups_by_id[source].tabs
    if not tabs:
        return state
    target = rng.choice(groups)
    target_tabs = state.groups_by_id[target].tabs
    reference = rng.choice(target_tabs) if target_tabs and rng.random() < 0.8 else None
    zone = DropZone(target, rng.choice(DROP_POSITIONS), reference)
    return move_tab(state, rng.choice(tabs), source, zone, ids)


def random_reorder(rng, state):
    group_id = rng.choice(list(state.groups_by_id))
    tabs = state.groups_by_id[group_id].tabs
    if not tabs:
        return state
    return reorder_tab(state, group_id, rng.choice(tabs), rng.randint(-1, len(tabs)))


def random_tree(rng, splits):
    tree = Leaf("g1")
    for n in range(2, splits + 2):
        target = rng.choice(list(collect_groups_in_order(tree)))
        tree = split_leaf(tree, target, rng.choice(SPLIT_DIRECTIONS), f"g{n}", rng.choice(("before", "after")))
    return tree


class TestTabConservation:
    """Moves and reorders never create or lose tabs."""

    @pytest.mark.parametrize("seed", SEEDS)
    def test_moves_and_reorders(self, seed):
        rng = random.Random(seed)
        state = build_initial_state(make_tabs(*"abcdefg"))
        ids = SequentialIdFactory.for_state(state)
        expected = all_tabs(state)

        for _ in range(60):
            if rng.random() < 0.7:
                state = random_move(rng, state, ids)
            else:
                state = random_reorder(rng, state)
            assert all_tabs(state) == expected
            validate_state(state)

    @pytest.mark.parametrize("seed", SEEDS)
    def test_add_and_remove_change_one_tab(self, seed):
        """Opening or closing a tab changes the multiset by exactly that tab."""
        rng = random.Random(seed)
        state = build_initial_state(make_tabs("a", "b"))
        ids = SequentialIdFactory.for_state(state)
        for n in range(30):
            before = all_tabs(state)
            roll = rng.random()
            if roll < 0.3:
                group_id = rng.choice(list(state.groups_by_id))
                state = add_tab(state, group_id, TabDefinition(f"t{n}"), rng.randint(0, 5))
                assert all_tabs(state) - before == Counter({f"t{n}": 1})
            elif roll < 0.5 and sum(before.values()) > 1:
                group_id = rng.choice([g for g, model in state.groups_by_id.items() if model.tabs])
                tab_id = rng.choice(state.groups_by_id[group_id].tabs)
                state = remove_tab(state, group_id, tab_id)
                assert before - all_tabs(state) == Counter({tab_id: 1})
            else:
                state = random_move(rng, state, ids)
                assert all_tabs(state) == before
            validate_state(state)


class TestFocusOrder:
    """Focus order always lists every leaf exactly once."""

    @pytest.mark.parametrize("seed", SEEDS)
    def test_after_splits_and_closes(self, seed):
        rng = random.Random(seed)
        state = build_initial_state(make_tabs("a"))
        ids = SequentialIdFactory.for_state(state)

        for _ in range(40):
            groups = list(collect_groups_in_order(state.tree))
            if len(groups) > 1 and rng.random() < 0.4:
                state = close_group(state, rng.choice(groups))
            else:
                state = split_group(
                    state,
                    rng.choice(groups),
                    rng.choice(SPLIT_DIRECTIONS),
                    placement=rng.choice(("before", "after")),
                    id_factory=ids,
                )
            order = list(collect_groups_in_order(state.tree))
            assert len(order) == count_leaves(state.tree)
            assert len(set(order)) == len(order)
            assert set(order) == set(state.groups_by_id)


class TestSplitRoundTrip:
    """Splitting a leaf and closing the new leaf restores the tree."""

    @pytest.mark.parametrize("seed", SEEDS)
    def test_random_trees(self, seed):
        rng = random.Random(seed)
        tree = random_tree(rng, rng.randint(0, 8))
        for group_id in collect_groups_in_order(tree):
            for direction in SPLIT_DIRECTIONS:
                placement = rng.choice(("before", "after"))
                assert close_leaf(split_leaf(tree, group_id, direction, "new", placement), "new") == tree


class TestRatioClamp:
    """Out-of-range ratios land on the nearest bound."""

    @pytest.mark.parametrize("seed", SEEDS)
    def test_random_ratios(self, seed):
        rng = random.Random(seed)
        tree = random_tree(rng, rng.randint(1, 6))
        for path, _split in list(iter_split_paths(tree)):
            low = rng.uniform(-10.0, 0.099)
            high = rng.uniform(0.901, 10.0)
            assert get_at_path(set_split_ratio(tree, path, low), path).ratio == 0.1
            assert get_at_path(set_split_ratio(tree, path, high), path).ratio == 0.9
