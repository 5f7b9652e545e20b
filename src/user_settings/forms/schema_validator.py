"""Async form-field validator for user-entered Spark schema DDL.

The form layer awaits ``validate(value)`` before allowing submission. Any
rejection from the remote query, and any failure while running it, is shown
to the user as the same generic "Invalid schema" message; the underlying
error is kept on the exception for logging.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import httpx

from ..config import settings
from ..logging import get_logger

logger = get_logger(__name__)

SCHEMA_REQUIRED = "Schema is required"
INVALID_SCHEMA = "Invalid schema"

VALIDATE_SCHEMA_QUERY = """
query ValidateSparkSchemaDDL($sparkSchemaDDL: String!) {
  validateSparkSchemaDDL(sparkSchemaDDL: $sparkSchemaDDL)
}
"""


class SchemaValidationError(Exception):
    """Validation failure with a user-facing message and an optional hidden cause."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class RemoteQueryError(Exception):
    """Error reported inside a GraphQL response body."""

    def __init__(self, messages: list[str]) -> None:
        super().__init__("; ".join(messages) or "Unknown GraphQL error")
        self.messages = messages


@dataclass
class QueryResult:
    data: Any = None
    error: Exception | None = None


SchemaQuery = Callable[[str], Awaitable[QueryResult]]


class RemoteSchemaValidationQuery:
    """Runs the ``validateSparkSchemaDDL`` query against a GraphQL endpoint."""

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.headers = headers or {}
        self._transport = transport

    async def __call__(self, schema_ddl: str) -> QueryResult:
        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.post(
                self.url,
                json={
                    "operationName": "ValidateSparkSchemaDDL",
                    "query": VALIDATE_SCHEMA_QUERY,
                    "variables": {"sparkSchemaDDL": schema_ddl},
                },
                headers={"content-type": "application/json", **self.headers},
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()

        errors = body.get("errors") or []
        if errors:
            return QueryResult(
                data=body.get("data"),
                error=RemoteQueryError([str(e.get("message", e)) for e in errors]),
            )
        return QueryResult(data=body.get("data"))


def schema_validator(run_query: SchemaQuery) -> Callable[[str | None], Awaitable[None]]:
    """Build a form validator around ``run_query``.

    The returned coroutine function resolves to ``None`` when the schema is
    accepted and raises ``SchemaValidationError`` otherwise.
    """

    async def validate(value: str | None) -> None:
        if not value:
            raise SchemaValidationError(SCHEMA_REQUIRED)

        try:
            result = await run_query(value)
            if result.error is not None:
                raise result.error
        except Exception as e:
            logger.info("Schema rejected", error=str(e), error_type=type(e).__name__)
            raise SchemaValidationError(INVALID_SCHEMA, cause=e) from e

    return validate


def default_schema_validator(
    transport: httpx.AsyncBaseTransport | None = None,
) -> Callable[[str | None], Awaitable[None]]:
    """Validator backed by the configured schema validation endpoint."""
    return schema_validator(
        RemoteSchemaValidationQuery(
            settings.schema_validation_url,
            timeout=settings.schema_validation_timeout,
            transport=transport,
        )
    )
