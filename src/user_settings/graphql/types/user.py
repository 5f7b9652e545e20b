"""
User GraphQL type definitions
"""

from enum import Enum

import strawberry


@strawberry.enum
class UserRole(Enum):
    """Role of a user account."""

    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


@strawberry.type
class User:
    """User type for GraphQL API."""

    id: strawberry.ID
    email: str
    role: UserRole
    created_at: str

    @strawberry.field
    async def settings_count(self, info: strawberry.Info) -> int:
        """Number of settings rows owned by this user."""
        from ..resolvers.user import resolve_settings_count

        return await resolve_settings_count(self, info)
