"""Form-field validators used by the settings UI."""

from .schema_validator import (
    INVALID_SCHEMA,
    SCHEMA_REQUIRED,
    QueryResult,
    RemoteSchemaValidationQuery,
    SchemaValidationError,
    default_schema_validator,
    schema_validator,
)

__all__ = [
    "INVALID_SCHEMA",
    "SCHEMA_REQUIRED",
    "QueryResult",
    "RemoteSchemaValidationQuery",
    "SchemaValidationError",
    "default_schema_validator",
    "schema_validator",
]
