"""Tests for the durable settings store."""

import sqlite3
import tempfile

import pytest
from unittest.mock import patch

from travel_monitor.config.defaults import StorageParams
from travel_monitor.errors import PersistenceError
from travel_monitor.persistence import (
    InMemorySettingsStore,
    MonitorConfigRepository,
    SqliteSettingsStore,
)
from travel_monitor.state.models import MonitorConfig


class TestSqliteSettingsStore:
    """Test SQLite-backed store."""

    def setup_method(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.db_path = f"{self.temp_dir.name}/settings/travel.db"
        self.store = SqliteSettingsStore(self.db_path)

    def teardown_method(self):
        self.temp_dir.cleanup()

    def test_missing_key_is_none(self):
        assert self.store.get("travelNotif.enabled") is None

    def test_values_keep_their_type(self):
        self.store.set("travelNotif.enabled", True)
        self.store.set("travelNotif.lastRegion", "Finland")

        assert self.store.get("travelNotif.enabled") is True
        assert self.store.get("travelNotif.lastRegion") == "Finland"

    def test_overwrite_is_single_row(self):
        self.store.set("travelNotif.lastRegion", "Finland")
        self.store.set("travelNotif.lastRegion", "Sweden")

        assert self.store.get("travelNotif.lastRegion") == "Sweden"
        assert self.store.get_stats()["total_keys"] == 1

    def test_survives_new_store_instance(self):
        self.store.set("travelNotif.enabled", True)
        self.store.set("travelNotif.lastRegion", "Sweden")

        reopened = SqliteSettingsStore(self.db_path)

        assert reopened.get("travelNotif.enabled") is True
        assert reopened.get("travelNotif.lastRegion") == "Sweden"

    def test_unsupported_type_rejected(self):
        with pytest.raises(PersistenceError) as exc_info:
            self.store.set("travelNotif.enabled", 1)

        assert exc_info.value.operation == "set"
        assert exc_info.value.key == "travelNotif.enabled"

    def test_foreign_values_read_as_missing(self):
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                "INSERT INTO settings (key, value, updated_at) VALUES (?, ?, ?)",
                ("numeric", "42", "2024-01-01T00:00:00+00:00"),
            )
            conn.execute(
                "INSERT INTO settings (key, value, updated_at) VALUES (?, ?, ?)",
                ("garbled", "{not json", "2024-01-01T00:00:00+00:00"),
            )

        assert self.store.get("numeric") is None
        assert self.store.get("garbled") is None

    def test_sqlite_failure_becomes_persistence_error(self):
        with patch("travel_monitor.persistence.settings_store.sqlite3.connect",
                   side_effect=sqlite3.OperationalError("disk I/O error")):
            with pytest.raises(PersistenceError) as exc_info:
                self.store.get("travelNotif.enabled")

        assert exc_info.value.operation == "get"
        assert exc_info.value.recoverable is False

    def test_stats(self):
        self.store.set("travelNotif.enabled", False)
        stats = self.store.get_stats()

        assert stats["db_path"].endswith("travel.db")
        assert stats["total_keys"] == 1
        assert stats["last_write"] is not None


class TestInMemorySettingsStore:
    """Test dictionary-backed store."""

    def test_records_writes(self):
        store = InMemorySettingsStore({"travelNotif.enabled": True})
        store.set("travelNotif.lastRegion", "Norway")

        assert store.get("travelNotif.enabled") is True
        assert store.writes == [("travelNotif.lastRegion", "Norway")]


class TestMonitorConfigRepository:
    """Test mapping between MonitorConfig and the store keys."""

    def test_first_run_defaults(self):
        repository = MonitorConfigRepository(InMemorySettingsStore())
        assert repository.load() == MonitorConfig(enabled=False, last_known_region=None)

    def test_round_trip_through_keys(self):
        store = InMemorySettingsStore()
        repository = MonitorConfigRepository(store)

        repository.save_enabled(True)
        repository.save_last_region("Sweden")

        assert store.writes == [
            ("travelNotif.enabled", True),
            ("travelNotif.lastRegion", "Sweden"),
        ]
        assert repository.load() == MonitorConfig(enabled=True, last_known_region="Sweden")

    def test_mistyped_values_fall_back(self):
        store = InMemorySettingsStore({
            "travelNotif.enabled": "yes",
            "travelNotif.lastRegion": True,
        })
        assert MonitorConfigRepository(store).load() == MonitorConfig()

    def test_custom_keys(self):
        store = InMemorySettingsStore({"trip.on": True, "trip.region": "Italy"})
        repository = MonitorConfigRepository(
            store, StorageParams(enabled_key="trip.on", last_region_key="trip.region")
        )
        assert repository.load() == MonitorConfig(enabled=True, last_known_region="Italy")
