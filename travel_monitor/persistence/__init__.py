"""Durable key-value persistence for the monitor configuration."""

from .settings_store import (
    DurableStore,
    InMemorySettingsStore,
    MonitorConfigRepository,
    SqliteSettingsStore,
)

__all__ = [
    "DurableStore",
    "InMemorySettingsStore",
    "MonitorConfigRepository",
    "SqliteSettingsStore",
]
