"""Plain records passed between the store, the writer and the GraphQL layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from ..dbmodels import Users


@dataclass(frozen=True)
class SettingPair:
    """One requested (key, value) change."""

    key: str
    value: str


@dataclass(frozen=True)
class SettingRecord:
    """State of a settings row as returned by an upsert."""

    id: str
    key: str
    value: str
    updated_at: datetime
    updated_by: str | None


@dataclass
class SettingsUpdateResult:
    """Outcome of a successful ``update_settings`` call."""

    user: Users
    settings: list[SettingRecord] = field(default_factory=list)
    success: bool = True
