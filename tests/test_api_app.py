"""
HTTP-level tests for the FastAPI application
"""

from contextlib import asynccontextmanager
from unittest.mock import MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from user_settings import __version__
from user_settings.api.app import create_app
from user_settings.middleware import operation_name_from_payload


@asynccontextmanager
async def fake_session():
    yield MagicMock()


@pytest.fixture
def client_factory(store, sink):
    @asynccontextmanager
    async def make_client():
        app = create_app(notification_sink=sink)
        with (
            patch("user_settings.graphql.resolvers.user.get_async_session", fake_session),
            patch("user_settings.graphql.resolvers.setting.get_async_session", fake_session),
            patch(
                "user_settings.graphql.resolvers.user.SqlAlchemySettingsStore",
                lambda session: store,
            ),
            patch(
                "user_settings.graphql.resolvers.setting.SqlAlchemySettingsStore",
                lambda session: store,
            ),
        ):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client

    return make_client


class TestHealth:
    @pytest.mark.asyncio
    async def test_health_reports_version_and_request_id(self, client_factory):
        async with client_factory() as client:
            response = await client.get("/health", headers={"x-request-id": "req-123"})

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": __version__}
        assert response.headers["x-request-id"] == "req-123"


class TestGraphQLEndpoint:
    @pytest.mark.asyncio
    async def test_actor_header_is_recorded_on_event(self, client_factory, sink, user):
        mutation = """
        mutation Update($userId: ID!) {
          updateSettings(userId: $userId, settings: [{key: "theme", value: "dark"}]) {
            success
            settings { key value }
          }
        }
        """
        async with client_factory() as client:
            response = await client.post(
                "/graphql",
                json={
                    "query": mutation,
                    "operationName": "Update",
                    "variables": {"userId": user.id},
                },
                headers={"x-user-id": "admin-9"},
            )

        assert response.status_code == 200
        body = response.json()
        assert "errors" not in body
        assert body["data"]["updateSettings"] == {
            "success": True,
            "settings": [{"key": "theme", "value": "dark"}],
        }
        assert sink.events[0].actor_id == "admin-9"

    @pytest.mark.asyncio
    async def test_missing_user_is_reported_as_graphql_error(self, client_factory, sink):
        query = """
        mutation {
          updateSettings(userId: "ghost", settings: []) { success }
        }
        """
        async with client_factory() as client:
            response = await client.post("/graphql", json={"query": query})

        body = response.json()
        assert body["data"] is None
        assert body["errors"][0]["message"] == "User not found"
        assert sink.events == []


@pytest.mark.parametrize(
    "payload,expected",
    [
        ({"operationName": "Update", "query": "mutation Update { x }"}, "Update"),
        ({"query": "mutation SaveThings { x }"}, "mutation:SaveThings"),
        ({"query": "query Users { users(ids: []) { id } }"}, "Users"),
        ({"query": "{ __schema { types { name } } }"}, "__introspection"),
        ({"query": "{ user(id: 1) { id } }"}, "unnamed_operation"),
        ({}, None),
    ],
)
def test_operation_name_from_payload(payload, expected):
    assert operation_name_from_payload(payload) == expected
