"""Base pydantic models shared by all character records."""

from typing import Any, Self
from uuid import uuid4

from pydantic import BaseModel, ConfigDict


def new_id() -> str:
    """Generate a fresh record identifier."""
    return uuid4().hex


class FrozenModel(BaseModel):
    """Immutable record. Updates go through copy-on-write."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    def with_changes(self, **changes: Any) -> Self:
        """Return a copy of this record with the given fields replaced."""
        return self.model_copy(update=changes)
