"""
Helpers for reading request-scoped collaborators out of the GraphQL context
"""

import strawberry

from ..notifications import NotificationSink


def get_actor_id_from_info(info: strawberry.Info) -> str | None:
    """
    Return the caller-supplied actor identity, or None for anonymous calls.

    The identity is trusted as given; no authentication is performed.
    """
    return info.context.get("actor_id") or None


def get_notification_sink_from_info(info: strawberry.Info) -> NotificationSink:
    """Return the audit sink placed in the context by ``create_graphql_router``."""
    sink = info.context.get("notification_sink")
    if sink is None:
        raise RuntimeError("GraphQL context has no notification sink")
    return sink
