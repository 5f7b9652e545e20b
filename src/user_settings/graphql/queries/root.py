"""
Root GraphQL query definitions
"""

import strawberry

from ..types.user import User


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def user(self, info: strawberry.Info, id: strawberry.ID) -> User | None:
        """Get a user by ID."""
        from ..resolvers.user import resolve_user_by_id

        return await resolve_user_by_id(info, str(id))

    @strawberry.field
    async def users(self, info: strawberry.Info, ids: list[strawberry.ID]) -> list[User | None]:
        """Get several users by ID, with null in place of any unknown ID."""
        from ..resolvers.user import resolve_users_by_ids

        return await resolve_users_by_ids(info, [str(id) for id in ids])
