"""Tests for the exception hierarchy."""

import pytest

from paneltree.exceptions import (
    BoundaryPolicyError,
    CannotCloseLastGroupError,
    ConfigurationError,
    DuplicateGroupError,
    DuplicateTabError,
    InvariantViolationError,
    MalformedTreeError,
    PanelTreeError,
    RecordFormatError,
)


class TestHierarchy:
    """Tests for exception classes and their codes."""

    @pytest.mark.parametrize(
        "error_class, parent",
        [
            (MalformedTreeError, InvariantViolationError),
            (DuplicateGroupError, InvariantViolationError),
            (DuplicateTabError, InvariantViolationError),
            (RecordFormatError, InvariantViolationError),
            (CannotCloseLastGroupError, BoundaryPolicyError),
            (InvariantViolationError, PanelTreeError),
            (BoundaryPolicyError, PanelTreeError),
            (ConfigurationError, PanelTreeError),
        ],
    )
    def test_inheritance(self, error_class, parent):
        assert issubclass(error_class, parent)

    def test_codes_are_distinct(self):
        classes = [
            PanelTreeError,
            InvariantViolationError,
            MalformedTreeError,
            DuplicateGroupError,
            DuplicateTabError,
            RecordFormatError,
            BoundaryPolicyError,
            CannotCloseLastGroupError,
            ConfigurationError,
        ]
        assert len({cls.code for cls in classes}) == len(classes)


class TestMessages:
    """Tests for message and context formatting."""

    def test_plain_message(self):
        error = PanelTreeError("Something broke")
        assert str(error) == "Something broke"
        assert error.context == {}

    def test_context_in_message(self):
        error = PanelTreeError("Something broke", group_id="g1")
        assert str(error) == "Something broke (group_id='g1')"

    def test_cannot_close_last_group(self):
        error = CannotCloseLastGroupError(group_id="g1")
        assert error.message == "Cannot close the last group"
        assert error.context == {"group_id": "g1"}
        assert error.code == "CANNOT_CLOSE_LAST_GROUP"

    def test_malformed_tree_path(self):
        assert MalformedTreeError(path=()).context["path"] == "root"
        assert MalformedTreeError(path=("first", "second")).context["path"] == "first.second"

    def test_duplicate_tab_extra_context(self):
        error = DuplicateTabError(tab_id="a", groups=["g1", "g2"])
        assert error.context == {"tab_id": "a", "groups": ["g1", "g2"]}

    def test_configuration_setting(self):
        error = ConfigurationError("Bad value", setting="min_ratio")
        assert error.context["setting"] == "min_ratio"
