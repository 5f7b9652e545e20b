"""
Setting GraphQL type definitions
"""

import strawberry

from .user import User


@strawberry.type
class Setting:
    """A single key/value setting owned by a user."""

    id: strawberry.ID
    key: str
    value: str
    updated_at: str
    updated_by_id: strawberry.Private[str | None] = None

    @strawberry.field
    async def updated_by(self, info: strawberry.Info) -> User | None:
        """User who last wrote this setting, if recorded."""
        from ..resolvers.user import resolve_setting_updated_by

        return await resolve_setting_updated_by(self, info)


@strawberry.input
class SettingInput:
    """One key/value change requested by ``updateSettings``."""

    key: str
    value: str


@strawberry.type
class SettingsPayload:
    """Result of ``updateSettings``."""

    success: bool
    user: User
    settings: list[Setting]
