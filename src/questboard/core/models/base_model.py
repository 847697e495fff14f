# ♥♥─── QuestBoard Base Models ─────────────────────────────────────────────────
"""Common Pydantic models and configurations for QuestBoard."""

from __future__ import annotations

from typing import Any, Self
import uuid

from humps import camelize
from pydantic import BaseModel, ConfigDict
from sqlmodel import Field, SQLModel


# ─── Common Model Configuration ────────────────────────────────────────────────
QUESTBOARD_MODEL_CONFIG = ConfigDict(
    extra="ignore",
    populate_by_name=True,
    alias_generator=camelize,
    arbitrary_types_allowed=True,
    validate_assignment=True,
    use_enum_values=True,
)


def new_entity_id() -> str:
    """Return a fresh unique identifier for a stored entity."""
    return uuid.uuid4().hex


# ─── Base Models ──────────────────────────────────────────────────────────────
class QuestBoardBaseModel(BaseModel):
    """Base Pydantic model with shared project configuration."""

    model_config = QUESTBOARD_MODEL_CONFIG

    @classmethod
    def from_api_dict(cls, data: dict[str, Any]) -> Self:
        """Create a model instance from a dictionary.

        :param data: The input dictionary.
        :returns: An instance of the model.
        """
        return cls.model_validate(data)

    def to_api_dict(self) -> dict[str, Any]:
        """Serialize the model with its camelCase wire names.

        :returns: A JSON-compatible dictionary.
        """
        return self.model_dump(mode="json", by_alias=True)


class QuestBoardSQLModel(SQLModel):
    """Base SQLModel for all database tables."""

    model_config = QUESTBOARD_MODEL_CONFIG  # type: ignore
    id: str = Field(primary_key=True)
