"""
Root GraphQL mutation definitions
"""

import strawberry

from ..types.setting import SettingInput, SettingsPayload


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    @strawberry.mutation(name="updateSettings")
    async def update_settings(
        self,
        info: strawberry.Info,
        user_id: strawberry.ID,
        settings: list[SettingInput],
    ) -> SettingsPayload:
        """Upsert settings for a user and record one audit event."""
        from ..resolvers.setting import resolve_update_settings

        return await resolve_update_settings(info, str(user_id), settings)
