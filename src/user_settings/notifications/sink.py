"""Outbound delivery of audit events."""

from __future__ import annotations

from typing import Protocol

import httpx

from ..errors import NotificationError
from ..logging import get_logger
from .events import SettingsUpdateEvent

logger = get_logger(__name__)


def is_success_status(status_code: int) -> bool:
    """True for 2xx statuses."""
    return 200 <= status_code < 300


class NotificationSink(Protocol):
    """Anything that can deliver an event and report an HTTP-style status."""

    async def send(self, event: SettingsUpdateEvent) -> int: ...


class HttpNotificationSink:
    """Posts events as JSON to the audit service.

    A single request per event; no retry. Transport failures are raised as
    ``NotificationError`` so callers see one failure type for "unreachable"
    and "rejected".
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def send(self, event: SettingsUpdateEvent) -> int:
        payload = event.to_payload()
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    self.url,
                    json=payload,
                    headers={"content-type": "application/json"},
                    timeout=self.timeout,
                )
        except httpx.HTTPError as e:
            logger.error(
                "Audit service unreachable",
                url=self.url,
                user_id=event.user_id,
                error=str(e),
            )
            raise NotificationError(f"Audit service unreachable: {e}") from e

        logger.debug(
            "Audit event delivered",
            url=self.url,
            user_id=event.user_id,
            status_code=response.status_code,
            change_count=len(event.changes),
        )
        return response.status_code
