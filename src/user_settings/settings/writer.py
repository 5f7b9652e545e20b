"""Settings update workflow: upsert a batch of keys, then emit one audit event.

The workflow is not transactional across steps:

1. The target user must exist, otherwise nothing is written or sent.
2. Every row in the batch is stamped with the same ``now``.
3. Rows are upserted one at a time in input order; each is committed as it
   is written, and the first storage failure aborts the rest.
4. Exactly one ``SettingsUpdateEvent`` covering the whole batch is sent
   once all upserts have finished.
5. A non-2xx status from the sink fails the call even though the rows are
   already committed. Nothing is rolled back or retried.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

from ..errors import NotificationError, StorageError, UserNotFoundError
from ..logging import get_logger, settings_owner_context
from ..notifications.events import SettingChange, SettingsUpdateEvent
from ..notifications.sink import NotificationSink, is_success_status
from .records import SettingPair, SettingRecord, SettingsUpdateResult
from .store import SettingsStore

logger = get_logger(__name__)


async def update_settings(
    store: SettingsStore,
    sink: NotificationSink,
    user_id: str,
    pairs: Iterable[SettingPair],
    *,
    actor_id: str | None = None,
    now: datetime | None = None,
) -> SettingsUpdateResult:
    """
    Upsert ``pairs`` for ``user_id`` and notify the audit sink.

    Args:
        store: Record store used for the user lookup and the upserts
        sink: Destination for the single audit event
        user_id: Owner of the settings
        pairs: Ordered (key, value) changes; may be empty
        actor_id: Identity of the caller, recorded as ``updated_by``
        now: Batch timestamp (defaults to the current UTC time)

    Returns:
        SettingsUpdateResult with the user and the upserted rows in input order

    Raises:
        UserNotFoundError: No user has id ``user_id``
        StorageError: An upsert failed; earlier rows stay committed
        NotificationError: The sink rejected the event or was unreachable
    """
    with settings_owner_context(user_id):
        return await _apply_batch(store, sink, user_id, list(pairs), actor_id, now)


async def _apply_batch(
    store: SettingsStore,
    sink: NotificationSink,
    user_id: str,
    pairs: list[SettingPair],
    actor_id: str | None,
    now: datetime | None,
) -> SettingsUpdateResult:
    user = await store.get_user(user_id)
    if user is None:
        logger.info("Settings update for unknown user")
        raise UserNotFoundError(user_id)

    batch_at = now or datetime.now(UTC)

    updated: list[SettingRecord] = []
    for pair in pairs:
        try:
            record = await store.upsert_setting(
                user_id=user_id,
                key=pair.key,
                value=pair.value,
                updated_at=batch_at,
                updated_by=actor_id,
            )
        except StorageError:
            logger.error(
                "Aborting settings update after storage failure",
                key=pair.key,
                written=len(updated),
                remaining=len(pairs) - len(updated),
            )
            raise
        updated.append(record)

    event = SettingsUpdateEvent(
        user_id=user_id,
        actor_id=actor_id,
        at=batch_at,
        changes=[SettingChange(key=record.key, value=record.value) for record in updated],
    )

    status_code = await sink.send(event)
    if not is_success_status(status_code):
        logger.error(
            "Audit service rejected settings event; settings remain updated",
            status_code=status_code,
            written=len(updated),
        )
        raise NotificationError(f"Audit service failed: {status_code}", status_code=status_code)

    logger.info("Settings updated", keys=[record.key for record in updated])
    return SettingsUpdateResult(user=user, settings=updated)
