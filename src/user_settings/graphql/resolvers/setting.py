from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

from ...database.connection import get_async_session
from ...logging import get_logger
from ...settings import SettingPair, SqlAlchemySettingsStore, update_settings
from ...utils import format_timestamp
from ..context import get_actor_id_from_info, get_notification_sink_from_info
from .user import user_from_model

if TYPE_CHECKING:
    from ..types.setting import SettingInput, SettingsPayload

logger = get_logger(__name__)


# Mutation resolvers
async def resolve_update_settings(
    info: strawberry.Info, user_id: str, settings: list[SettingInput]
) -> SettingsPayload:
    """
    Upsert the given settings for a user and send one audit event.

    Errors propagate as GraphQL errors. When the audit call fails the
    settings have already been written; the error reports the failed
    notification only.
    """
    from ..types.setting import Setting as SettingType
    from ..types.setting import SettingsPayload as SettingsPayloadType

    actor_id = get_actor_id_from_info(info)
    sink = get_notification_sink_from_info(info)
    pairs = [SettingPair(key=item.key, value=item.value) for item in settings]

    async with get_async_session() as session:
        result = await update_settings(
            SqlAlchemySettingsStore(session),
            sink,
            user_id,
            pairs,
            actor_id=actor_id,
        )

    return SettingsPayloadType(
        success=result.success,
        user=user_from_model(result.user),
        settings=[
            SettingType(
                id=strawberry.ID(record.id),
                key=record.key,
                value=record.value,
                updated_at=format_timestamp(record.updated_at),
                updated_by_id=record.updated_by,
            )
            for record in result.settings
        ],
    )
