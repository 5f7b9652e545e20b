from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

from ...database.connection import get_async_session
from ...dbmodels import Users
from ...logging import get_logger
from ...settings import reader
from ...settings.store import SqlAlchemySettingsStore
from ...utils import format_timestamp

if TYPE_CHECKING:
    from ..types.setting import Setting
    from ..types.user import User

logger = get_logger(__name__)


def user_from_model(user: Users) -> User:
    """Convert a SQLAlchemy user row to the GraphQL type."""
    from ..types.user import User as UserType
    from ..types.user import UserRole

    return UserType(
        id=strawberry.ID(user.id),
        email=user.email,
        role=UserRole(user.role.value),
        created_at=format_timestamp(user.created_at),
    )


# Query resolvers
async def resolve_user_by_id(info: strawberry.Info, id: str) -> User | None:
    async with get_async_session() as session:
        user = await reader.get_user(SqlAlchemySettingsStore(session), id)

    if user is None:
        logger.info("User not found", user_id=id)
        return None
    return user_from_model(user)


async def resolve_users_by_ids(info: strawberry.Info, ids: list[str]) -> list[User | None]:
    """
    Resolve several users at once.

    The result lines up with ``ids``; unknown ids yield ``None`` in place.
    """
    async with get_async_session() as session:
        users = await reader.get_users(SqlAlchemySettingsStore(session), ids)

    return [user_from_model(user) if user is not None else None for user in users]


# Field resolvers
async def resolve_settings_count(user: User, info: strawberry.Info) -> int:
    async with get_async_session() as session:
        return await reader.count_settings(SqlAlchemySettingsStore(session), str(user.id))


async def resolve_setting_updated_by(setting: Setting, info: strawberry.Info) -> User | None:
    async with get_async_session() as session:
        user = await reader.resolve_updated_by(
            SqlAlchemySettingsStore(session), setting.updated_by_id
        )
    return user_from_model(user) if user is not None else None
