"""
Tests for PanelTree traversal and structural operations.
"""

import math

import pytest

from paneltree.exceptions import CannotCloseLastGroupError, DuplicateGroupError, MalformedTreeError
from paneltree.tree import (
    clamp_ratio,
    close_leaf,
    collect_groups_in_order,
    contains_group,
    count_leaves,
    find_leaf_path,
    first_group,
    format_path,
    get_at_path,
    is_group,
    iter_split_paths,
    parse_path,
    set_at_path,
    set_split_ratio,
    split_leaf,
    validate_tree,
)
from paneltree.types import Leaf, Split


@pytest.fixture
def three_leaf_tree():
    """a | (b over c)"""
    return Split(
        "vertical",
        0.5,
        Leaf("a"),
        Split("horizontal", 0.4, Leaf("b"), Leaf("c")),
    )


class TestTraversal:
    """Tests for reading a tree."""

    def test_is_group(self):
        """Leaves are groups, splits are not."""
        assert is_group(Leaf("g1")) is True
        assert is_group(Split("vertical", 0.5, Leaf("a"), Leaf("b"))) is False

    def test_is_group_rejects_foreign_values(self):
        """Anything other than a node is a malformed tree."""
        with pytest.raises(MalformedTreeError):
            is_group("g1")

    def test_groups_in_order(self, three_leaf_tree):
        """Focus order visits first subtrees before second ones."""
        assert list(collect_groups_in_order(three_leaf_tree)) == ["a", "b", "c"]

    def test_group_order_is_restartable(self, three_leaf_tree):
        """The order view can be iterated more than once."""
        order = collect_groups_in_order(three_leaf_tree)
        assert list(order) == list(order)
        assert len(order) == 3

    def test_count_and_contains(self, three_leaf_tree):
        """Leaf counting and membership."""
        assert count_leaves(three_leaf_tree) == 3
        assert contains_group(three_leaf_tree, "c")
        assert not contains_group(three_leaf_tree, "z")
        assert first_group(three_leaf_tree) == "a"

    def test_get_at_path(self, three_leaf_tree):
        """Paths address nodes from the root."""
        assert get_at_path(three_leaf_tree, ()) is three_leaf_tree
        assert get_at_path(three_leaf_tree, ("second", "first")) == Leaf("b")
        assert get_at_path(three_leaf_tree, ("first", "first")) is None

    def test_find_leaf_path(self, three_leaf_tree):
        """Leaves are located by group id."""
        assert find_leaf_path(three_leaf_tree, "a") == ("first",)
        assert find_leaf_path(three_leaf_tree, "c") == ("second", "second")
        assert find_leaf_path(three_leaf_tree, "z") is None
        assert find_leaf_path(Leaf("solo"), "solo") == ()

    def test_iter_split_paths(self, three_leaf_tree):
        """Every split is reported with its path, parents first."""
        paths = [path for path, _split in iter_split_paths(three_leaf_tree)]
        assert paths == [(), ("second",)]


class TestPaths:
    """Tests for path editing and formatting."""

    def test_set_at_path_shares_untouched_subtrees(self, three_leaf_tree):
        """Only ancestors on the path are rebuilt."""
        updated = set_at_path(three_leaf_tree, ("second", "first"), Leaf("x"))
        assert list(collect_groups_in_order(updated)) == ["a", "x", "c"]
        assert updated.first is three_leaf_tree.first
        assert updated.second.second is three_leaf_tree.second.second

    def test_set_at_invalid_path_returns_same_tree(self, three_leaf_tree):
        """A path running past a leaf changes nothing."""
        assert set_at_path(three_leaf_tree, ("first", "first"), Leaf("x")) is three_leaf_tree

    def test_format_and_parse(self):
        """Paths print as dotted segments and parse back."""
        assert format_path(()) == "root"
        assert format_path(("first", "second")) == "first.second"
        assert parse_path("root") == ()
        assert parse_path("first.second") == ("first", "second")

    def test_parse_rejects_unknown_segments(self):
        """Only first and second are valid segments."""
        with pytest.raises(ValueError, match="left"):
            parse_path("first.left")


class TestSplitLeaf:
    """Tests for split_leaf."""

    def test_split_after(self):
        """The new leaf goes second by default, at an even ratio."""
        tree = split_leaf(Leaf("g1"), "g1", "vertical", "g2")
        assert tree == Split("vertical", 0.5, Leaf("g1"), Leaf("g2"))

    def test_split_before(self):
        """Placement before puts the new leaf first."""
        tree = split_leaf(Leaf("g1"), "g1", "horizontal", "g2", placement="before")
        assert tree == Split("horizontal", 0.5, Leaf("g2"), Leaf("g1"))

    def test_split_nested_leaf(self, three_leaf_tree):
        """Splitting a deep leaf leaves the rest of the tree shared."""
        tree = split_leaf(three_leaf_tree, "c", "vertical", "d")
        assert list(collect_groups_in_order(tree)) == ["a", "b", "c", "d"]
        assert tree.first is three_leaf_tree.first

    def test_split_missing_target_is_noop(self, three_leaf_tree):
        """An unknown target returns the same tree."""
        assert split_leaf(three_leaf_tree, "zzz", "vertical", "d") is three_leaf_tree

    def test_split_rejects_taken_id(self, three_leaf_tree):
        """A new id already present is an invariant violation."""
        with pytest.raises(DuplicateGroupError):
            split_leaf(three_leaf_tree, "a", "vertical", "b")

    def test_split_rejects_bad_direction(self):
        """Directions are horizontal or vertical."""
        with pytest.raises(ValueError, match="diagonal"):
            split_leaf(Leaf("g1"), "g1", "diagonal", "g2")


class TestCloseLeaf:
    """Tests for close_leaf."""

    def test_close_collapses_parent(self, three_leaf_tree):
        """The sibling takes the parent's place."""
        tree = close_leaf(three_leaf_tree, "b")
        assert tree == Split("vertical", 0.5, Leaf("a"), Leaf("c"))

    def test_close_first_child_promotes_subtree(self, three_leaf_tree):
        """Closing a root child promotes the whole sibling subtree."""
        tree = close_leaf(three_leaf_tree, "a")
        assert tree is three_leaf_tree.second

    def test_close_missing_is_noop(self, three_leaf_tree):
        """Unknown groups are ignored."""
        assert close_leaf(three_leaf_tree, "zzz") is three_leaf_tree

    def test_close_last_leaf_refused(self):
        """The root leaf cannot be closed."""
        with pytest.raises(CannotCloseLastGroupError) as exc_info:
            close_leaf(Leaf("g1"), "g1")
        assert exc_info.value.code == "CANNOT_CLOSE_LAST_GROUP"
        assert exc_info.value.context["group_id"] == "g1"

    @pytest.mark.parametrize("placement", ["before", "after"])
    @pytest.mark.parametrize("direction", ["horizontal", "vertical"])
    @pytest.mark.parametrize("target", ["a", "b", "c"])
    def test_split_then_close_restores_tree(self, three_leaf_tree, target, direction, placement):
        """Closing the leaf a split created gives back the original tree."""
        split = split_leaf(three_leaf_tree, target, direction, "new", placement)
        assert close_leaf(split, "new") == three_leaf_tree


class TestRatios:
    """Tests for ratio clamping and updates."""

    @pytest.mark.parametrize(
        "ratio, expected",
        [(0.0, 0.1), (-3.0, 0.1), (0.05, 0.1), (0.5, 0.5), (0.95, 0.9), (7.0, 0.9), (math.inf, 0.9)],
    )
    def test_clamp(self, ratio, expected):
        """Ratios are clamped to the default bounds."""
        assert clamp_ratio(ratio) == expected

    def test_clamp_rejects_nan(self):
        """NaN is not a ratio."""
        with pytest.raises(ValueError):
            clamp_ratio(float("nan"))

    def test_set_split_ratio(self, three_leaf_tree):
        """Ratios are set at a path."""
        tree = set_split_ratio(three_leaf_tree, ("second",), 0.75)
        assert tree.second.ratio == 0.75
        assert tree.ratio == 0.5
        assert tree.first is three_leaf_tree.first

    @pytest.mark.parametrize("ratio, expected", [(0.01, 0.1), (0.99, 0.9), (-1.0, 0.1), (2.0, 0.9)])
    def test_set_split_ratio_clamps(self, three_leaf_tree, ratio, expected):
        """Out-of-range ratios land on the nearest bound."""
        tree = set_split_ratio(three_leaf_tree, (), ratio)
        assert tree.ratio == expected

    def test_set_split_ratio_custom_bounds(self, three_leaf_tree):
        """Callers may pass their own bounds."""
        tree = set_split_ratio(three_leaf_tree, (), 0.1, min_ratio=0.25, max_ratio=0.75)
        assert tree.ratio == 0.25

    def test_unchanged_ratio_returns_same_tree(self, three_leaf_tree):
        """Setting the current ratio is a no-op."""
        assert set_split_ratio(three_leaf_tree, (), 0.5) is three_leaf_tree

    def test_leaf_path_is_noop(self, three_leaf_tree):
        """Paths that do not address a split change nothing."""
        assert set_split_ratio(three_leaf_tree, ("first",), 0.3) is three_leaf_tree
        assert set_split_ratio(three_leaf_tree, ("first", "first"), 0.3) is three_leaf_tree


class TestValidateTree:
    """Tests for structural validation."""

    def test_valid_tree(self, three_leaf_tree):
        """A well-formed tree passes."""
        validate_tree(three_leaf_tree)

    def test_bad_ratio(self):
        """Ratios must be strictly between 0 and 1."""
        with pytest.raises(MalformedTreeError, match="ratio"):
            validate_tree(Split("vertical", 1.0, Leaf("a"), Leaf("b")))

    def test_bad_direction(self):
        """Unknown directions are rejected."""
        with pytest.raises(MalformedTreeError, match="direction"):
            validate_tree(Split("diagonal", 0.5, Leaf("a"), Leaf("b")))

    def test_missing_child(self):
        """A split without a child node is malformed."""
        with pytest.raises(MalformedTreeError) as exc_info:
            validate_tree(Split("vertical", 0.5, Leaf("a"), None))
        assert exc_info.value.context["path"] == "second"

    def test_duplicate_leaf(self):
        """Each group id appears on exactly one leaf."""
        with pytest.raises(DuplicateGroupError):
            validate_tree(Split("vertical", 0.5, Leaf("a"), Leaf("a")))
