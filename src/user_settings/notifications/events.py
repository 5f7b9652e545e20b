"""Pydantic models for audit events."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from ..utils import format_timestamp

SETTINGS_UPDATED = "USER_SETTINGS_UPDATED"


class SettingChange(BaseModel):
    key: str
    value: str


class SettingsUpdateEvent(BaseModel):
    """One event per ``updateSettings`` call, covering every key in the batch."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    event_type: Literal["USER_SETTINGS_UPDATED"] = Field(
        default=SETTINGS_UPDATED, alias="eventType"
    )
    user_id: str = Field(alias="userId")
    # Serialized as null for system/anonymous actors, never dropped
    actor_id: str | None = Field(alias="actorId")
    at: datetime
    changes: list[SettingChange] = []

    @field_serializer("at")
    def _serialize_at(self, value: datetime) -> str:
        return format_timestamp(value)

    def to_payload(self) -> dict:
        """JSON-ready body with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
