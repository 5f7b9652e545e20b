"""Audit notifications emitted after settings updates."""

from .events import SETTINGS_UPDATED, SettingChange, SettingsUpdateEvent
from .sink import HttpNotificationSink, NotificationSink, is_success_status

__all__ = [
    "SETTINGS_UPDATED",
    "HttpNotificationSink",
    "NotificationSink",
    "SettingChange",
    "SettingsUpdateEvent",
    "is_success_status",
]
