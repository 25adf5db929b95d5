"""Base shape for members of an ordered container."""
import uuid
from typing import Any

from ..errors import ValidationError


class Entity:
    """A uniquely owned, ordered member of a container.

    Membership is by object identity. ``index`` is maintained by the owning
    container and is ``-1`` while the entity is detached.
    """

    def __init__(self, label: str | None = None):
        self.id: str = str(uuid.uuid4())
        self.label = label
        self._index = -1
        self._owner: Any = None
        self._disposed = False

    @property
    def index(self) -> int:
        return self._index

    @property
    def owner(self) -> Any:
        """Container currently holding this entity, or None."""
        return self._owner

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _attach(self, owner: Any) -> None:
        self._owner = owner

    def _detach(self) -> None:
        self._owner = None
        self._index = -1

    def _set_index(self, index: int) -> None:
        self._index = index

    def check_alive(self) -> None:
        if self._disposed:
            raise ValidationError(f"{self!r} has been disposed")

    def dispose(self) -> None:
        """Release the entity. Terminal: no further mutation is valid."""
        self._disposed = True

    def __repr__(self) -> str:
        name = self.label or self.id[:8]
        return f"{type(self).__name__}({name}, index={self._index})"
