"""Read-side lookups for users and their settings.

None of these cache results: every call reflects the rows committed at the
time it runs.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..dbmodels import Users
from .store import SettingsStore


async def get_user(store: SettingsStore, user_id: str) -> Users | None:
    return await store.get_user(user_id)


async def get_users(store: SettingsStore, user_ids: Sequence[str]) -> list[Users | None]:
    """Look up users by id, answering ``None`` in place of any id with no row."""
    return await store.get_users(user_ids)


async def count_settings(store: SettingsStore, user_id: str) -> int:
    return await store.count_settings(user_id)


async def resolve_updated_by(store: SettingsStore, actor_id: str | None) -> Users | None:
    if not actor_id:
        return None
    return await store.get_user(actor_id)
