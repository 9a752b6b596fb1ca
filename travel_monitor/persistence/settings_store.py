"""Durable key-value persistence for the monitor configuration."""

import json
import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

from ..config.defaults import StorageParams
from ..errors import PersistenceError
from ..logging.config import get_logger
from ..state.models import MonitorConfig

StoredValue = Union[str, bool]


class DurableStore(ABC):
    """Process-wide durable key-value store."""

    @abstractmethod
    def get(self, key: str) -> Optional[StoredValue]:
        """Return the stored value, or None when the key was never written."""

    @abstractmethod
    def set(self, key: str, value: StoredValue) -> None:
        """Atomically overwrite a single key."""


class InMemorySettingsStore(DurableStore):
    """Dictionary-backed store for tests and ephemeral runs."""

    def __init__(self, initial: Optional[dict[str, StoredValue]] = None):
        self._values: dict[str, StoredValue] = dict(initial or {})
        self.writes: list[tuple[str, StoredValue]] = []

    def get(self, key: str) -> Optional[StoredValue]:
        return self._values.get(key)

    def set(self, key: str, value: StoredValue) -> None:
        self._values[key] = value
        self.writes.append((key, value))


class SqliteSettingsStore(DurableStore):
    """SQLite-based key-value store; values are JSON encoded to keep their type."""

    def __init__(self, db_path: str = "travel_monitor.db"):
        self.db_path = Path(db_path)
        self.logger = get_logger("settings.store")
        self._lock = threading.Lock()

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        try:
            if self.db_path.parent and not self.db_path.parent.exists():
                self.db_path.parent.mkdir(parents=True, exist_ok=True)

            with self._get_connection() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS settings (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                """)
                conn.commit()
        except (OSError, sqlite3.Error) as e:
            raise PersistenceError(
                f"Cannot initialize settings database: {e}",
                operation="init",
                key=None,
                context={"db_path": str(self.db_path)}
            ) from e

    @contextmanager
    def _get_connection(self):
        """Get database connection with proper error handling."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", error=str(e), db_path=str(self.db_path))
            raise
        finally:
            if conn:
                conn.close()

    def get(self, key: str) -> Optional[StoredValue]:
        with self._lock:
            try:
                with self._get_connection() as conn:
                    row = conn.execute(
                        "SELECT value FROM settings WHERE key = ?", (key,)
                    ).fetchone()
            except sqlite3.Error as e:
                raise PersistenceError(
                    f"Failed to read setting {key}: {e}", operation="get", key=key
                ) from e

        if row is None:
            return None

        try:
            value = json.loads(row["value"])
        except json.JSONDecodeError:
            self.logger.warning("Ignoring undecodable setting", key=key)
            return None

        if not isinstance(value, (str, bool)):
            self.logger.warning("Ignoring setting of unexpected type", key=key,
                                value_type=type(value).__name__)
            return None
        return value

    def set(self, key: str, value: StoredValue) -> None:
        if not isinstance(value, (str, bool)):
            raise PersistenceError(
                f"Unsupported value type for {key}: {type(value).__name__}",
                operation="set",
                key=key
            )

        with self._lock:
            try:
                with self._get_connection() as conn:
                    conn.execute("""
                        INSERT INTO settings (key, value, updated_at) VALUES (?, ?, ?)
                        ON CONFLICT(key) DO UPDATE SET
                            value = excluded.value,
                            updated_at = excluded.updated_at
                    """, (key, json.dumps(value), datetime.now(timezone.utc).isoformat()))
                    conn.commit()
            except sqlite3.Error as e:
                raise PersistenceError(
                    f"Failed to write setting {key}: {e}", operation="set", key=key
                ) from e

        self.logger.debug("Setting stored", key=key)

    def get_stats(self) -> dict[str, Any]:
        """Get store statistics."""
        with self._lock, self._get_connection() as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS total, MAX(updated_at) AS last_write FROM settings"
            ).fetchone()
        return {
            "db_path": str(self.db_path),
            "total_keys": row["total"],
            "last_write": row["last_write"],
        }


class MonitorConfigRepository:
    """Reads and writes MonitorConfig under its two stable keys."""

    def __init__(self, store: DurableStore, params: Optional[StorageParams] = None):
        self.store = store
        self.params = params or StorageParams()
        self.logger = get_logger("settings.repository")

    def load(self) -> MonitorConfig:
        """
        Load the monitor configuration.

        A missing or mistyped value falls back to the first-run default
        (disabled, no region).
        """
        enabled = self.store.get(self.params.enabled_key)
        region = self.store.get(self.params.last_region_key)

        if enabled is not None and not isinstance(enabled, bool):
            self.logger.warning("Stored enabled flag is not a boolean",
                                key=self.params.enabled_key)
            enabled = None
        if region is not None and (not isinstance(region, str) or not region):
            self.logger.warning("Stored region is not a string",
                                key=self.params.last_region_key)
            region = None

        return MonitorConfig(enabled=bool(enabled), last_known_region=region)

    def save_enabled(self, enabled: bool) -> None:
        self.store.set(self.params.enabled_key, enabled)

    def save_last_region(self, region: str) -> None:
        self.store.set(self.params.last_region_key, region)
