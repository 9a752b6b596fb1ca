#!/usr/bin/env python3
"""Replay a recorded trip through the travel region monitor.

The trip file is YAML:

    location_authorization: always       # optional, default always
    notification_authorization: authorized
    last_known_region: Finland           # optional starting region
    fixes:
      - {latitude: 60.17, longitude: 24.94, region: Finland}
      - {latitude: 59.33, longitude: 18.07, region: Sweden}
      - {latitude: 55.68, longitude: 12.57, region: null}   # no geocoding result

Each fix is resolved to its scripted region label, so no network lookup
is made. Notifications are printed to stdout as JSON lines.

Usage:
    python scripts/replay_fixes.py trip.yaml
"""

import asyncio
import sys
from pathlib import Path
from typing import Any

import yaml

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from travel_monitor.config.defaults import get_default_settings
from travel_monitor.config.delivery import StdoutDeliveryConfig
from travel_monitor.delivery.stdout_delivery import StdoutNotificationCenter
from travel_monitor.logging.config import configure_logging
from travel_monitor.monitor import TravelRegionMonitor
from travel_monitor.persistence.settings_store import InMemorySettingsStore
from travel_monitor.platform.simulated import ScriptedGeocoder, SimulatedLocationSubsystem
from travel_monitor.state.models import LocationAuthorization, LocationFix
from travel_monitor.utils.time import utc_now


def load_trip(path: Path) -> dict[str, Any]:
    with open(path) as f:
        trip = yaml.safe_load(f) or {}
    if not isinstance(trip, dict) or not isinstance(trip.get("fixes"), list):
        raise ValueError(f"{path} must contain a mapping with a 'fixes' list")
    return trip


async def replay(trip: dict[str, Any]) -> int:
    settings = get_default_settings()
    store = InMemorySettingsStore()
    if trip.get("last_known_region"):
        store.set(settings.storage.last_region_key, trip["last_known_region"])

    location = SimulatedLocationSubsystem(
        status=LocationAuthorization(trip.get("location_authorization", "always"))
    )
    notifications = StdoutNotificationCenter(config=StdoutDeliveryConfig(
        authorization=trip.get("notification_authorization", "authorized")
    ))
    geocoder = ScriptedGeocoder(fix.get("region") for fix in trip["fixes"])

    monitor = TravelRegionMonitor(store, location, notifications, geocoder, settings)
    await monitor.start()
    await monitor.set_enabled(True)

    changes = 0
    for fix in trip["fixes"]:
        change = await monitor.on_location_fix(LocationFix(
            latitude=fix["latitude"], longitude=fix["longitude"], timestamp=utc_now()
        ))
        if change is not None:
            changes += 1
    await monitor.drain()
    await monitor.shutdown()

    print(f"\n📍 {len(trip['fixes'])} fixes replayed, {changes} region changes", file=sys.stderr)
    print(f"   final region: {monitor.last_known_region}", file=sys.stderr)
    for outcome in monitor.suppressed_outcomes:
        print(f"   ⚠️  {outcome.operation}: {outcome.status.value} ({outcome.reason})",
              file=sys.stderr)
    return 0


def main() -> int:
    if len(sys.argv) != 2:
        print(__doc__, file=sys.stderr)
        return 2

    configure_logging(level="WARNING")
    try:
        trip = load_trip(Path(sys.argv[1]))
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"❌ Cannot load trip: {e}", file=sys.stderr)
        return 1

    return asyncio.run(replay(trip))


if __name__ == "__main__":
    sys.exit(main())
