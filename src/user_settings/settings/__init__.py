"""Per-user key/value settings: storage, reads and the update workflow."""

from .records import SettingPair, SettingRecord, SettingsUpdateResult
from .store import SettingsStore, SqlAlchemySettingsStore
from .writer import update_settings

__all__ = [
    "SettingPair",
    "SettingRecord",
    "SettingsStore",
    "SettingsUpdateResult",
    "SqlAlchemySettingsStore",
    "update_settings",
]
