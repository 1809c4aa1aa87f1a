"""
Group id factories.

The engine never owns a global counter. Whoever issues commands passes an
``IdFactory`` in, and the factory must hand out ids that stay unique for the
lifetime of the state it feeds.
"""

from typing import Callable, Iterable, Protocol, Set, Union

from .config.constants import DEFAULT_GROUP_ID_PREFIX
from .types import GroupId, PanelSystemState


class IdFactory(Protocol):
    """Capability that produces fresh group ids."""

    def next(self) -> GroupId:
        ...


class SequentialIdFactory:
    """Produce ``g1``, ``g2``, ... skipping ids that are already taken.

    Example:
        >>> ids = SequentialIdFactory(taken=["g1"])
        >>> ids.next()
        'g2'
    """

    def __init__(
        self,
        prefix: str = DEFAULT_GROUP_ID_PREFIX,
        start: int = 1,
        taken: Iterable[GroupId] = (),
    ) -> None:
        self.prefix = prefix
        self._counter = start
        self._taken: Set[GroupId] = set(taken)

    @classmethod
    def for_state(cls, state: PanelSystemState, prefix: str = DEFAULT_GROUP_ID_PREFIX) -> "SequentialIdFactory":
        """Create a factory that avoids every group id in ``state``."""
        return cls(prefix=prefix, taken=state.groups_by_id.keys())

    def reserve(self, group_id: GroupId) -> None:
        """Mark an id as taken without producing it."""
        self._taken.add(group_id)

    def next(self) -> GroupId:
        while True:
            candidate = f"{self.prefix}{self._counter}"
            self._counter += 1
            if candidate not in self._taken:
                self._taken.add(candidate)
                return candidate

    def __call__(self) -> GroupId:
        return self.next()


class CallableIdFactory:
    """Adapt a zero-argument callable to the ``IdFactory`` interface."""

    def __init__(self, fn: Callable[[], GroupId]) -> None:
        self._fn = fn

    def next(self) -> GroupId:
        return self._fn()

    def __call__(self) -> GroupId:
        return self._fn()


def as_id_factory(source: Union[IdFactory, Callable[[], GroupId]]) -> IdFactory:
    """Accept either an IdFactory or a bare callable."""
    if hasattr(source, "next"):
        return source  # type: ignore[return-value]
    if callable(source):
        return CallableIdFactory(source)
    raise TypeError(f"Expected an IdFactory or callable, got {type(source).__name__}")
