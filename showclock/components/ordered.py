"""Ordered, uniquely-owned container with a reentrancy guard.

The container exclusively owns its storage. Outside callers only get a
tuple snapshot (``items``) or read-only protocol access, never the list.

Structural changes (add, move, remove, clear) are rejected while the same
container is inside :meth:`OrderedEntityList.iterate`. This protects a pass
from callbacks that try to change the very list being walked, e.g. a fired
schedule entry whose action removes entries.
"""
from contextlib import contextmanager
from typing import Callable, Generic, Iterator, TypeVar

from loguru import logger

from ..errors import (
    DuplicateMemberError,
    NotFoundError,
    ReentrancyError,
    ValidationError,
)
from .entity import Entity

logger = logger.bind(module="components.ordered")

E = TypeVar("E", bound=Entity)


class OrderedEntityList(Generic[E]):
    """Ordered container of entities with contiguous 0-based indices."""

    def __init__(self, name: str = "entities"):
        self.name = name
        self._items: list[E] = []
        self._iterating: E | None = None

    # ============== Read-only view ==============

    @property
    def items(self) -> tuple[E, ...]:
        return tuple(self._items)

    @property
    def iterating(self) -> E | None:
        """Member currently being visited by :meth:`iterate`, if any."""
        return self._iterating

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[E]:
        return iter(tuple(self._items))

    def __getitem__(self, index: int) -> E:
        return self._items[index]

    def __contains__(self, entity: object) -> bool:
        return any(item is entity for item in self._items)

    def find(self, label: str) -> E | None:
        """Return the first member with the given label."""
        for item in self._items:
            if item.label == label:
                return item
        return None

    # ============== Structural operations ==============

    def add(self, entity: E, index: int | None = None) -> E:
        """Insert an entity, appending when no index is given."""
        if entity is None:
            raise ValidationError(f"Cannot add None to {self.name}")
        if index is None:
            index = len(self._items)
        if index < 0 or index > len(self._items):
            raise ValidationError(
                f"Invalid index {index} for {self.name} of size {len(self._items)}",
                detail={"index": index, "size": len(self._items)},
            )
        self._check_reentrancy(entity, "add")
        if entity in self:
            raise DuplicateMemberError(f"Cannot add {entity!r} to {self.name} twice")
        if entity.owner is not None:
            raise DuplicateMemberError(f"{entity!r} already belongs to another container")
        entity.check_alive()

        self._items.insert(index, entity)
        entity._attach(self)
        self._reindex()
        logger.debug(f"Added {entity!r} to {self.name}")
        return entity

    def move(self, entity: E, index: int) -> E:
        """Relocate a member, clamping the target index into range."""
        if entity not in self:
            raise NotFoundError(f"Cannot move {entity!r}, not in {self.name}")
        self._check_reentrancy(entity, "move")

        self._items.remove(entity)
        index = max(0, min(index, len(self._items)))
        self._items.insert(index, entity)
        self._reindex()
        return entity

    def remove(self, entity: E) -> E:
        """Detach and dispose a member."""
        if entity not in self:
            raise NotFoundError(f"Cannot remove {entity!r}, not in {self.name}")
        self._check_reentrancy(entity, "remove")

        self._items.remove(entity)
        entity._detach()
        entity.dispose()
        self._reindex()
        logger.debug(f"Removed {entity!r} from {self.name}")
        return entity

    def clear(self) -> list[E]:
        """Remove every member, last to first. Returns them in removal order."""
        self._check_reentrancy(None, "clear")
        removed = []
        for entity in reversed(tuple(self._items)):
            removed.append(self.remove(entity))
        return removed

    # ============== Iteration ==============

    def iterate(self, visitor: Callable[[E], None]) -> None:
        """Visit a snapshot of the members in index order.

        Any structural call on this container from inside ``visitor`` raises
        :class:`ReentrancyError`.
        """
        snapshot = tuple(self._items)
        with self._iteration() as mark:
            for entity in snapshot:
                mark(entity)
                visitor(entity)

    @contextmanager
    def _iteration(self) -> Iterator[Callable[[E], None]]:
        previous = self._iterating

        def mark(entity: E) -> None:
            self._iterating = entity

        try:
            yield mark
        finally:
            self._iterating = previous

    # ============== Internals ==============

    def _check_reentrancy(self, target: E | None, operation: str) -> None:
        if self._iterating is not None:
            raise ReentrancyError(
                f"{self.name} may not be modified while iterating, "
                f"iterating: {self._iterating!r} {operation}: {target!r}",
                detail={"operation": operation, "iterating": self._iterating, "target": target},
            )

    def _reindex(self) -> None:
        for i, entity in enumerate(self._items):
            entity._set_index(i)
