#!/usr/bin/env python3
"""Configuration validation script.

Usage:
    python scripts/validate_config.py [path/to/travel_monitor.yaml]

Without an argument the travel_monitor.yaml in the working directory is
checked; a missing file validates the built-in defaults.
"""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from travel_monitor.config.loader import ConfigLoader
from travel_monitor.errors import ConfigurationError


def main() -> int:
    """Main validation function."""
    config_path = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_path)

    print(f"🔍 Validating {loader.config_path}...")
    if not loader.config_path.exists():
        print("ℹ️  File not found, validating defaults only")

    try:
        settings = loader.load_settings()
    except ConfigurationError as e:
        if e.errors:
            print(f"❌ Found {len(e.errors)} validation errors:")
            for error in e.errors:
                print(f"  • {error.field}: {error.message} (value: {error.value!r})")
        else:
            print(f"❌ {e}")
        return 1

    print("✅ Configuration is valid")
    print(f"  • store: {settings.storage.db_path}")
    print(f"  • accuracy: {settings.location.desired_accuracy_m:.0f} m")
    print(f"  • geocoding: {settings.geocoding.provider} ({settings.geocoding.region_field})")
    print(f"  • category: {settings.notifications.category_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
