"""
Shared pytest fixtures and configuration for all tests.
"""

import os
import shutil
from collections.abc import Generator, Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest
import pytest_asyncio

from user_settings.dbmodels import UserRole, Users, new_id
from user_settings.errors import StorageError
from user_settings.notifications import SettingsUpdateEvent
from user_settings.settings.records import SettingRecord

if TYPE_CHECKING:
    from psycopg import Connection  # type: ignore[import]

PROJECT_ROOT = Path(__file__).parent.parent

HAS_POSTGRES = bool(shutil.which("pg_ctl") or shutil.which("pg_config"))


class InMemorySettingsStore:
    """Dict-backed ``SettingsStore`` with the same upsert semantics as PostgreSQL."""

    def __init__(self, call_log: list[str] | None = None) -> None:
        self.users: dict[str, Users] = {}
        self.rows: dict[tuple[str, str], SettingRecord] = {}
        self.call_log = call_log if call_log is not None else []
        self.fail_on_key: str | None = None

    def add_user(
        self,
        user_id: str | None = None,
        email: str = "user@example.com",
        role: UserRole = UserRole.MEMBER,
        created_at: datetime | None = None,
    ) -> Users:
        user = Users(
            id=user_id or new_id(),
            email=email,
            role=role,
            created_at=created_at or datetime(2024, 5, 1, 9, 30, tzinfo=UTC),
        )
        self.users[user.id] = user
        return user

    def rows_for(self, user_id: str) -> list[SettingRecord]:
        return [row for (owner, _), row in self.rows.items() if owner == user_id]

    async def get_user(self, user_id: str) -> Users | None:
        self.call_log.append(f"get_user:{user_id}")
        return self.users.get(user_id)

    async def get_users(self, user_ids: Sequence[str]) -> list[Users | None]:
        self.call_log.append("get_users")
        return [self.users.get(user_id) for user_id in user_ids]

    async def count_settings(self, user_id: str) -> int:
        self.call_log.append(f"count:{user_id}")
        return len(self.rows_for(user_id))

    async def upsert_setting(
        self,
        *,
        user_id: str,
        key: str,
        value: str,
        updated_at: datetime,
        updated_by: str | None,
    ) -> SettingRecord:
        self.call_log.append(f"upsert:{key}")
        if key == self.fail_on_key:
            raise StorageError(f"Failed to write setting '{key}': connection lost")
        existing = self.rows.get((user_id, key))
        record = SettingRecord(
            id=existing.id if existing else new_id(),
            key=key,
            value=value,
            updated_at=updated_at,
            updated_by=updated_by,
        )
        self.rows[(user_id, key)] = record
        return record


class RecordingSink:
    """``NotificationSink`` double that records events and answers a fixed status."""

    def __init__(self, status_code: int = 200, call_log: list[str] | None = None) -> None:
        self.status_code = status_code
        self.events: list[SettingsUpdateEvent] = []
        self.call_log = call_log if call_log is not None else []

    async def send(self, event: SettingsUpdateEvent) -> int:
        self.call_log.append("notify")
        self.events.append(event)
        return self.status_code


@pytest.fixture
def call_log() -> list[str]:
    return []


@pytest.fixture
def store(call_log: list[str]) -> InMemorySettingsStore:
    return InMemorySettingsStore(call_log)


@pytest.fixture
def sink(call_log: list[str]) -> RecordingSink:
    return RecordingSink(call_log=call_log)


@pytest.fixture
def user(store: InMemorySettingsStore) -> Users:
    return store.add_user(user_id="user-1", email="ada@example.com", role=UserRole.ADMIN)


@pytest.fixture(scope="function")
def test_database(postgresql: "Connection[Any]") -> Generator[str, None, None]:
    """Return the DSN for the running pytest-postgresql database."""
    info = postgresql.info
    dsn = (
        f"postgresql://{info.user}:{getattr(info, 'password', '') or ''}"
        f"@{info.host}:{info.port}/{info.dbname}"
    )
    yield dsn


@pytest.fixture(scope="function")
def alembic_migrate(test_database: str) -> Generator[None, None, None]:
    """Run Alembic upgrade to head against the pytest-postgresql instance."""
    from alembic import command
    from alembic.config import Config

    os.environ["USER_SETTINGS_DATABASE_URL"] = test_database
    cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    command.upgrade(cfg, "head")
    yield
    command.downgrade(cfg, "base")


@pytest_asyncio.fixture(scope="function")
async def db_session(alembic_migrate: None, test_database: str) -> Any:
    """Provide an async SQLAlchemy session bound to the migrated test database."""
    _ = alembic_migrate
    from user_settings.database.connection import (
        get_async_engine,
        get_async_session,
        init_database,
        reset_database,
    )

    reset_database()
    init_database(test_database, force_reinit=True)
    async with get_async_session() as session:
        yield session
    engine = get_async_engine()
    if engine is not None:
        await engine.dispose()
    reset_database()


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


def pytest_collection_modifyitems(config: Any, items: list[pytest.Item]) -> None:
    """Skip database tests when no PostgreSQL installation is available."""
    if HAS_POSTGRES:
        return
    skip_db = pytest.mark.skip(reason="PostgreSQL binaries (pg_ctl) not found")
    for item in items:
        if "requires_db" in item.keywords:
            item.add_marker(skip_db)
