"""Default configuration parameters for the travel monitor."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class StorageParams:
    """Durable key-value store parameters."""
    db_path: str = "travel_monitor.db"
    enabled_key: str = "travelNotif.enabled"
    last_region_key: str = "travelNotif.lastRegion"


@dataclass(frozen=True)
class LocationParams:
    """Significant-change monitoring parameters."""
    desired_accuracy_m: float = 3000.0               # Country-level accuracy
    distance_filter_m: Optional[float] = None        # No distance filter
    pauses_automatically: bool = True
    request_timeout_seconds: Optional[float] = None  # Permission prompts wait on the user


@dataclass(frozen=True)
class GeocodingParams:
    """Reverse geocoding parameters."""
    provider: str = "osm"
    region_field: str = "country"
    timeout_seconds: Optional[float] = 10.0


@dataclass(frozen=True)
class NotificationParams:
    """Local notification parameters."""
    category_id: str = "TRAVEL_COUNTRY_CHANGE"
    title_template: str = "Welcome to {region}"
    body_template: str = (
        "You've arrived in {region}. "
        "Open Trefo to start collecting your photos in travel mode."
    )
    sound: Optional[str] = "default"
    authorization_options: tuple[str, ...] = ("alert", "sound", "badge")
    timeout_seconds: Optional[float] = None


@dataclass(frozen=True)
class RuntimeParams:
    """Monitor runtime parameters."""
    outcome_history: int = 50                        # Suppressed outcomes kept for inspection


@dataclass(frozen=True)
class LoggingParams:
    """Logging parameters."""
    level: str = "INFO"
    format_json: bool = False
    include_timestamp: bool = True
    include_caller: bool = False


@dataclass(frozen=True)
class MonitorSettings:
    """Complete monitor configuration."""
    storage: StorageParams = field(default_factory=StorageParams)
    location: LocationParams = field(default_factory=LocationParams)
    geocoding: GeocodingParams = field(default_factory=GeocodingParams)
    notifications: NotificationParams = field(default_factory=NotificationParams)
    runtime: RuntimeParams = field(default_factory=RuntimeParams)
    logging: LoggingParams = field(default_factory=LoggingParams)


def get_default_settings() -> MonitorSettings:
    """Get the default configuration instance."""
    return MonitorSettings(
        storage=StorageParams(),
        location=LocationParams(),
        geocoding=GeocodingParams(),
        notifications=NotificationParams(),
        runtime=RuntimeParams(),
        logging=LoggingParams(),
    )
