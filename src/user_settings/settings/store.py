"""Record store used by the settings reader and writer."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import Settings, Users, new_id
from ..errors import StorageError
from ..logging import get_logger
from .records import SettingRecord

logger = get_logger(__name__)


class SettingsStore(Protocol):
    """Storage operations the settings workflows depend on."""

    async def get_user(self, user_id: str) -> Users | None: ...

    async def get_users(self, user_ids: Sequence[str]) -> list[Users | None]: ...

    async def count_settings(self, user_id: str) -> int: ...

    async def upsert_setting(
        self,
        *,
        user_id: str,
        key: str,
        value: str,
        updated_at: datetime,
        updated_by: str | None,
    ) -> SettingRecord: ...


class SqlAlchemySettingsStore:
    """``SettingsStore`` backed by an async SQLAlchemy session on PostgreSQL.

    Every upsert is committed on its own, so a failure part-way through a
    batch leaves the earlier rows in place.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_user(self, user_id: str) -> Users | None:
        stmt = select(Users).where(Users.id == user_id)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load user: {e}") from e
        return result.scalar_one_or_none()

    async def get_users(self, user_ids: Sequence[str]) -> list[Users | None]:
        if not user_ids:
            return []
        stmt = select(Users).where(Users.id.in_(set(user_ids)))
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load users: {e}") from e
        users_map = {user.id: user for user in result.scalars().all()}
        return [users_map.get(user_id) for user_id in user_ids]

    async def count_settings(self, user_id: str) -> int:
        stmt = select(func.count(Settings.id)).where(Settings.user_id == user_id)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to count settings: {e}") from e
        return int(result.scalar() or 0)

    async def upsert_setting(
        self,
        *,
        user_id: str,
        key: str,
        value: str,
        updated_at: datetime,
        updated_by: str | None,
    ) -> SettingRecord:
        insert_stmt = pg_insert(Settings).values(
            id=new_id(),
            user_id=user_id,
            key=key,
            value=value,
            updated_at=updated_at,
            updated_by=updated_by,
        )
        stmt = insert_stmt.on_conflict_do_update(
            index_elements=[Settings.user_id, Settings.key],
            set_={
                "value": insert_stmt.excluded.value,
                "updated_at": insert_stmt.excluded.updated_at,
                "updated_by": insert_stmt.excluded.updated_by,
            },
        ).returning(
            Settings.id,
            Settings.key,
            Settings.value,
            Settings.updated_at,
            Settings.updated_by,
        )

        try:
            result = await self.session.execute(stmt)
            row = result.one()
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Setting upsert failed", user_id=user_id, key=key, error=str(e))
            raise StorageError(f"Failed to write setting '{key}': {e}") from e

        return SettingRecord(
            id=row.id,
            key=row.key,
            value=row.value,
            updated_at=row.updated_at,
            updated_by=row.updated_by,
        )
