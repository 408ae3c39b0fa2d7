"""Base class for domain entities."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class Entity(BaseModel):
    """
    Base class for entities (have identity).

    Scheduling entities are snapshots of records owned by the caller's
    persistence layer, so they are frozen: a change produces a new instance
    via ``model_copy(update=...)`` and the old one stays valid for rollback.
    """

    id: int

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def __eq__(self, other: Any) -> bool:
        """Entities of the same type compare by all fields, not only ID."""
        if not isinstance(other, self.__class__):
            return False
        return self.model_dump() == other.model_dump()

    def __hash__(self) -> int:
        """Hash based on entity type and ID."""
        return hash((self.__class__.__name__, self.id))
