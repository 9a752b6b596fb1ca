"""Pytest configuration and shared fixtures."""

import asyncio
import shutil
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

import pytest

from travel_monitor.config.defaults import MonitorSettings, get_default_settings
from travel_monitor.monitor import TravelRegionMonitor
from travel_monitor.persistence.settings_store import DurableStore, InMemorySettingsStore
from travel_monitor.platform.simulated import (
    ScriptedGeocoder,
    SimulatedLocationSubsystem,
    SimulatedNotificationCenter,
)
from travel_monitor.state.models import (
    LocationAuthorization,
    LocationFix,
    NotificationAuthorization,
)

ENABLED_KEY = "travelNotif.enabled"
REGION_KEY = "travelNotif.lastRegion"


@dataclass
class MonitorHarness:
    """A monitor wired to simulated subsystems."""
    monitor: TravelRegionMonitor
    store: DurableStore
    location: SimulatedLocationSubsystem
    notifications: SimulatedNotificationCenter
    geocoder: ScriptedGeocoder


@pytest.fixture
def settings() -> MonitorSettings:
    """Default monitor settings."""
    return get_default_settings()


@pytest.fixture
def temp_dir():
    """Temporary directory removed after the test."""
    path = Path(tempfile.mkdtemp())
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def sample_fix() -> LocationFix:
    """A fix in central Stockholm."""
    return LocationFix(
        latitude=59.3293,
        longitude=18.0686,
        timestamp=datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def build_monitor(settings):
    """Factory for monitors over simulated subsystems."""

    def _build(
        enabled: bool = False,
        region: Optional[str] = None,
        location: LocationAuthorization = LocationAuthorization.NOT_DETERMINED,
        notification: NotificationAuthorization = NotificationAuthorization.NOT_DETERMINED,
        responses: Iterable = (),
        store: Optional[DurableStore] = None,
        gate: Optional[asyncio.Event] = None,
        monitor_settings: Optional[MonitorSettings] = None,
        **location_kwargs
    ) -> MonitorHarness:
        if store is None:
            initial = {}
            if enabled:
                initial[ENABLED_KEY] = True
            if region is not None:
                initial[REGION_KEY] = region
            store = InMemorySettingsStore(initial)

        location_subsystem = SimulatedLocationSubsystem(status=location, **location_kwargs)
        notifications = SimulatedNotificationCenter(status=notification)
        geocoder = ScriptedGeocoder(responses, gate=gate)
        monitor = TravelRegionMonitor(
            store, location_subsystem, notifications, geocoder,
            monitor_settings or settings
        )
        return MonitorHarness(monitor, store, location_subsystem, notifications, geocoder)

    return _build
