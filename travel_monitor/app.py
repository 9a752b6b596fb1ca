"""
Application composition root.

Builds the single TravelRegionMonitor for the process and wires it to the
platform adapters, the durable store and the loaded settings. Hosts call
launch() once, on_foreground() whenever the app becomes active and
shutdown() on exit.
"""

from pathlib import Path
from typing import Any, Optional

from .config.defaults import MonitorSettings
from .config.delivery import DeliveryDestination, DeliveryMethod, get_default_delivery_destination
from .config.loader import load_settings
from .delivery.base import LocalNotificationCenter
from .delivery.file_delivery import FileNotificationCenter
from .delivery.stdout_delivery import StdoutNotificationCenter
from .errors import ConfigurationError
from .geocoding.providers import GeocoderLibraryGeocoder
from .logging.config import configure_logging, get_logger
from .monitor import TravelRegionMonitor
from .persistence.settings_store import DurableStore, SqliteSettingsStore
from .platform.base import LocationSubsystem, NotificationCenter, ReverseGeocoder
from .state.machine import describe_location_authorization, describe_notification_authorization

logger = get_logger(__name__)


def create_notification_center(
    destination: Optional[DeliveryDestination] = None
) -> LocalNotificationCenter:
    """Create the bundled notification center for a destination."""
    destination = destination or get_default_delivery_destination()

    if destination.method == DeliveryMethod.STDOUT:
        return StdoutNotificationCenter(destination.name, destination.config)
    if destination.method == DeliveryMethod.FILE_OUTPUT:
        return FileNotificationCenter(destination.name, destination.config)

    raise ConfigurationError(f"Unsupported delivery method: {destination.method}")


def create_geocoder(settings: MonitorSettings) -> ReverseGeocoder:
    """Reverse geocoder backed by the geocoder package."""
    return GeocoderLibraryGeocoder(settings.geocoding)


class TravelApp:
    """Owns the one monitor instance and forwards app lifecycle events to it."""

    def __init__(self, monitor: TravelRegionMonitor, settings: MonitorSettings):
        self.monitor = monitor
        self.settings = settings
        self.logger = logger
        self._launched = False

    async def launch(self) -> None:
        """Cold start: start the event worker and reconcile without prompting."""
        if self._launched:
            return
        await self.monitor.start()
        self._launched = True
        self.logger.info("Travel app launched", **self.status())

    async def on_foreground(self) -> None:
        """Pick up permission changes made in system settings."""
        await self.monitor.sync()

    async def shutdown(self) -> None:
        await self.monitor.shutdown()
        self._launched = False

    def status(self) -> dict[str, Any]:
        """Settings screen view of the monitor."""
        snapshot = self.monitor.snapshot()
        return {
            "enabled": snapshot.enabled,
            "is_monitoring": snapshot.is_monitoring,
            "state": snapshot.state.value,
            "location": describe_location_authorization(snapshot.location_authorization),
            "notifications": describe_notification_authorization(
                snapshot.notification_authorization
            ),
            "last_region": snapshot.last_known_region,
        }

    async def __aenter__(self) -> "TravelApp":
        await self.launch()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()


def create_app(
    location: LocationSubsystem,
    notifications: Optional[NotificationCenter] = None,
    geocoder: Optional[ReverseGeocoder] = None,
    store: Optional[DurableStore] = None,
    settings: Optional[MonitorSettings] = None,
    config_path: Optional[Path] = None,
    configure_logs: bool = True
) -> TravelApp:
    """
    Wire a TravelApp.

    Settings are loaded from config_path (or travel_monitor.yaml in the
    working directory) unless given. Missing collaborators fall back to the
    stdout notification center, the geocoder package and a SQLite store.

    Raises:
        ConfigurationError: If the configuration file is invalid
    """
    settings = settings or load_settings(config_path)

    if configure_logs:
        configure_logging(
            level=settings.logging.level,
            format_json=settings.logging.format_json,
            include_timestamp=settings.logging.include_timestamp,
            include_caller=settings.logging.include_caller,
        )

    monitor = TravelRegionMonitor(
        store=store or SqliteSettingsStore(settings.storage.db_path),
        location=location,
        notifications=notifications or create_notification_center(),
        geocoder=geocoder or create_geocoder(settings),
        settings=settings,
    )
    return TravelApp(monitor, settings)
