"""Custom exception hierarchy for paneltree.

The engine distinguishes three kinds of failure:

1. Not-found conditions (a stale group or tab id) are NOT exceptions. Every
   command returns the unchanged state instead, so late UI events are harmless.
2. Invariant violations mean the caller handed the engine something malformed
   (a broken tree, a duplicated id). They are raised immediately and never
   repaired.
3. Boundary policy refusals are explicit decisions, such as refusing to close
   the very last group of a workspace.

Exception Hierarchy:
    PanelTreeError (base)
    ├── InvariantViolationError - malformed input, programmer error
    │   ├── MalformedTreeError
    │   ├── DuplicateGroupError
    │   ├── DuplicateTabError
    │   └── RecordFormatError
    ├── BoundaryPolicyError - a documented refusal
    │   └── CannotCloseLastGroupError
    └── ConfigurationError - settings/env var problems

Usage:
    from paneltree.exceptions import CannotCloseLastGroupError

    try:
        state = close_group(state, "g1")
    except CannotCloseLastGroupError:
        ...
"""

from typing import Any, Optional


class PanelTreeError(Exception):
    """Base exception for all paneltree errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error (ids, paths, values)
        code: Stable machine-readable error code
    """

    code = "PANELTREE_ERROR"

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


# =============================================================================
# Invariant Violations
# =============================================================================


class InvariantViolationError(PanelTreeError):
    """The engine was given state that breaks a structural invariant."""

    code = "INVARIANT_VIOLATION"


class MalformedTreeError(InvariantViolationError):
    """A PanelTree node is missing a child, has a bad ratio or direction."""

    code = "MALFORMED_TREE"

    def __init__(
        self,
        message: str = "Malformed panel tree",
        *,
        path: Optional[tuple] = None,
        **context: Any,
    ) -> None:
        if path is not None:
            context["path"] = ".".join(path) or "root"
        super().__init__(message, **context)


class DuplicateGroupError(InvariantViolationError):
    """A group id appears twice, or an id factory produced a taken id."""

    code = "DUPLICATE_GROUP"

    def __init__(
        self,
        message: str = "Duplicate group id",
        *,
        group_id: Optional[str] = None,
        **context: Any,
    ) -> None:
        if group_id is not None:
            context["group_id"] = group_id
        super().__init__(message, **context)


class DuplicateTabError(InvariantViolationError):
    """A tab id is present in more than one place."""

    code = "DUPLICATE_TAB"

    def __init__(
        self,
        message: str = "Duplicate tab id",
        *,
        tab_id: Optional[str] = None,
        **context: Any,
    ) -> None:
        if tab_id is not None:
            context["tab_id"] = tab_id
        super().__init__(message, **context)


class RecordFormatError(InvariantViolationError):
    """A plain record could not be decoded into engine types."""

    code = "RECORD_FORMAT"


# =============================================================================
# Boundary Policy
# =============================================================================


class BoundaryPolicyError(PanelTreeError):
    """An operation hit a documented boundary and was refused."""

    code = "BOUNDARY_POLICY"


class CannotCloseLastGroupError(BoundaryPolicyError):
    """The last remaining group of a workspace cannot be closed."""

    code = "CANNOT_CLOSE_LAST_GROUP"

    def __init__(
        self,
        message: str = "Cannot close the last group",
        *,
        group_id: Optional[str] = None,
        **context: Any,
    ) -> None:
        if group_id is not None:
            context["group_id"] = group_id
        super().__init__(message, **context)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(PanelTreeError):
    """Configuration or settings error."""

    code = "CONFIGURATION"

    def __init__(
        self,
        message: str = "Configuration error",
        *,
        setting: Optional[str] = None,
        **context: Any,
    ) -> None:
        if setting:
            context["setting"] = setting
        super().__init__(message, **context)
