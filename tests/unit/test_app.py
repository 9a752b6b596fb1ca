"""Unit tests for the application composition root."""

import pytest
import yaml
from unittest.mock import patch

from travel_monitor.app import TravelApp, create_app, create_geocoder, create_notification_center
from travel_monitor.config.defaults import get_default_settings
from travel_monitor.config.delivery import (
    DeliveryDestination,
    create_file_destination,
    get_default_delivery_destination,
)
from travel_monitor.delivery import FileNotificationCenter, StdoutNotificationCenter
from travel_monitor.errors import ConfigurationError
from travel_monitor.geocoding.providers import GeocoderLibraryGeocoder
from travel_monitor.persistence import InMemorySettingsStore, SqliteSettingsStore
from travel_monitor.platform.simulated import (
    ScriptedGeocoder,
    SimulatedLocationSubsystem,
    SimulatedNotificationCenter,
)
from travel_monitor.state.models import LocationAuthorization


class TestFactories:
    """Test collaborator factories."""

    def test_default_center_is_stdout(self):
        center = create_notification_center(get_default_delivery_destination())
        assert isinstance(center, StdoutNotificationCenter)

    def test_file_center(self, temp_dir):
        center = create_notification_center(
            create_file_destination("trip", str(temp_dir / "out.jsonl"))
        )
        assert isinstance(center, FileNotificationCenter)
        assert center.name == "trip"

    def test_unknown_method_rejected(self):
        with pytest.raises(ConfigurationError):
            create_notification_center(DeliveryDestination("pager", "pager", None))

    def test_geocoder_uses_settings(self):
        settings = get_default_settings()
        geocoder = create_geocoder(settings)
        assert isinstance(geocoder, GeocoderLibraryGeocoder)
        assert geocoder.params is settings.geocoding


class TestCreateApp:
    """Test wiring of the single monitor."""

    def test_defaults_wire_sqlite_and_stdout(self):
        settings = get_default_settings()
        with patch("travel_monitor.app.SqliteSettingsStore") as store_cls:
            store_cls.return_value = InMemorySettingsStore()
            app = create_app(SimulatedLocationSubsystem(), settings=settings,
                             configure_logs=False)

        store_cls.assert_called_once_with("travel_monitor.db")
        assert isinstance(app.monitor.dispatcher.center, StdoutNotificationCenter)
        assert isinstance(app.monitor.resolver.geocoder, GeocoderLibraryGeocoder)

    def test_settings_loaded_from_config_file(self, temp_dir):
        path = temp_dir / "travel_monitor.yaml"
        path.write_text(yaml.safe_dump({
            "storage": {"db_path": str(temp_dir / "travel.db")},
            "notifications": {"title_template": "Hello {region}"},
        }))

        app = create_app(SimulatedLocationSubsystem(), config_path=path, configure_logs=False)

        assert app.settings.notifications.title_template == "Hello {region}"
        assert isinstance(app.monitor.repository.store, SqliteSettingsStore)
        assert (temp_dir / "travel.db").exists()

    def test_invalid_config_file_raises(self, temp_dir):
        path = temp_dir / "travel_monitor.yaml"
        path.write_text(yaml.safe_dump({"location": {"desired_accuracy_m": 5}}))

        with pytest.raises(ConfigurationError):
            create_app(SimulatedLocationSubsystem(), config_path=path, configure_logs=False)

    def test_configures_logging_from_settings(self):
        settings = get_default_settings()
        with patch("travel_monitor.app.configure_logging") as configure:
            create_app(SimulatedLocationSubsystem(), SimulatedNotificationCenter(),
                       ScriptedGeocoder(), InMemorySettingsStore(), settings)

        configure.assert_called_once_with(
            level="INFO", format_json=False, include_timestamp=True, include_caller=False
        )


class TestTravelApp:
    """Test lifecycle forwarding."""

    def make_app(self, **store_values) -> TravelApp:
        self.location = SimulatedLocationSubsystem(status=LocationAuthorization.ALWAYS)
        return create_app(
            self.location,
            SimulatedNotificationCenter(),
            ScriptedGeocoder(),
            InMemorySettingsStore(store_values),
            get_default_settings(),
            configure_logs=False,
        )

    @pytest.mark.asyncio
    async def test_launch_reconciles_once(self):
        app = self.make_app(**{"travelNotif.enabled": True})

        await app.launch()
        await app.launch()

        assert app.monitor.is_monitoring is True
        assert self.location.start_calls == 1
        await app.shutdown()

    @pytest.mark.asyncio
    async def test_foreground_syncs(self):
        app = self.make_app(**{"travelNotif.enabled": True})
        await app.launch()

        self.location.set_authorization(LocationAuthorization.DENIED)
        await app.on_foreground()

        assert app.monitor.is_monitoring is False
        await app.shutdown()

    @pytest.mark.asyncio
    async def test_async_context_manager(self):
        app = self.make_app()

        async with app as running:
            assert running is app
            status = running.status()

        assert status == {
            "enabled": False,
            "is_monitoring": False,
            "state": "disabled",
            "location": "Always",
            "notifications": "Not Determined",
            "last_region": None,
        }
        assert app.monitor._worker is None

    @pytest.mark.asyncio
    async def test_status_shows_last_region(self):
        app = self.make_app(**{"travelNotif.lastRegion": "Finland"})

        async with app:
            assert app.status()["last_region"] == "Finland"
