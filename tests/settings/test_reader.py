"""
Unit tests for settings read helpers
"""

import pytest

from user_settings.settings import SettingPair, update_settings
from user_settings.settings import reader


class TestReader:
    @pytest.mark.asyncio
    async def test_get_user_missing_is_none(self, store):
        assert await reader.get_user(store, "ghost") is None

    @pytest.mark.asyncio
    async def test_get_users_keeps_positions(self, store, user):
        result = await reader.get_users(store, [user.id, "ghost"])

        assert len(result) == 2
        assert result[0] is user
        assert result[1] is None

    @pytest.mark.asyncio
    async def test_count_reflects_current_rows(self, store, sink, user):
        assert await reader.count_settings(store, user.id) == 0

        await update_settings(store, sink, user.id, [SettingPair("a", "1")])
        assert await reader.count_settings(store, user.id) == 1

        await update_settings(store, sink, user.id, [SettingPair("b", "2")])
        assert await reader.count_settings(store, user.id) == 2

    @pytest.mark.asyncio
    async def test_resolve_updated_by_without_actor_skips_lookup(self, store, call_log):
        assert await reader.resolve_updated_by(store, None) is None
        assert call_log == []

    @pytest.mark.asyncio
    async def test_resolve_updated_by_looks_up_user(self, store, user):
        assert await reader.resolve_updated_by(store, user.id) is user
        assert await reader.resolve_updated_by(store, "ghost") is None
