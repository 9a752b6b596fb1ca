#!/usr/bin/env python3
"""
Basic Usage Example - Travel Region Monitor

This script walks through a short trip on simulated OS subsystems. It shows
how to:
- Wire the app with create_app
- Turn travel notifications on (permission prompts included)
- Feed significant location changes and receive "Welcome to" notifications
- React to the user revoking location access in system settings

Run: python examples/basic_usage.py
"""

import asyncio

from travel_monitor.app import create_app
from travel_monitor.config.defaults import get_default_settings
from travel_monitor.config.delivery import StdoutDeliveryConfig
from travel_monitor.delivery import StdoutNotificationCenter
from travel_monitor.persistence import InMemorySettingsStore
from travel_monitor.platform.simulated import ScriptedGeocoder, SimulatedLocationSubsystem
from travel_monitor.state.models import LocationAuthorization

TRIP = [
    ("Helsinki", 60.1699, 24.9384, "Finland"),
    ("Espoo", 60.2055, 24.6559, "Finland"),
    ("Stockholm", 59.3293, 18.0686, "Sweden"),
    ("Oslo", 59.9139, 10.7522, "Norway"),
]


def print_status(app, label: str) -> None:
    status = app.status()
    print(f"\n📋 {label}")
    for key, value in status.items():
        print(f"   {key}: {value}")


async def main() -> None:
    print("🧳 Travel Region Monitor - basic usage")
    print("=" * 50)

    location = SimulatedLocationSubsystem()
    app = create_app(
        location,
        StdoutNotificationCenter(config=StdoutDeliveryConfig(format="pretty")),
        ScriptedGeocoder(region for _, _, _, region in TRIP),
        InMemorySettingsStore(),
        get_default_settings(),
        configure_logs=False,
    )

    async with app:
        print_status(app, "After launch")

        print("\n🔔 Turning travel notifications on...")
        await app.monitor.set_enabled(True)
        print_status(app, "After enabling")

        print("\n🗺️  Travelling...")
        for city, latitude, longitude, _ in TRIP:
            print(f"   📍 {city}")
            location.deliver_fix(latitude, longitude)
            await app.monitor.drain()

        print("\n🚫 User switches location access to 'Never' in system settings")
        location.set_authorization(LocationAuthorization.DENIED)
        await app.on_foreground()
        print_status(app, "After revoking location")

    print(f"\n✅ Last known region: {app.monitor.last_known_region}")


if __name__ == "__main__":
    asyncio.run(main())
