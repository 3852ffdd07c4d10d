"""Entity base with change tracking."""

from typing import Any

from pydantic import BaseModel, ConfigDict, PrivateAttr


class Entity(BaseModel):
    """A mutable domain object with identity.

    An entity remembers the serialized state it had when it was last loaded
    from or written to storage. ``is_dirty()`` compares the current state
    against that snapshot; an entity that was never persisted is always dirty.
    """

    model_config = ConfigDict(validate_assignment=True)

    _persisted: dict[str, Any] | None = PrivateAttr(default=None)

    def snapshot(self) -> dict[str, Any]:
        """Serialized state as storage would see it."""
        return self.model_dump(mode="json")

    def mark_clean(self) -> None:
        """Record the current state as the persisted one."""
        self._persisted = self.snapshot()

    def is_new(self) -> bool:
        return self._persisted is None

    def is_dirty(self) -> bool:
        return self._persisted is None or self._persisted != self.snapshot()
