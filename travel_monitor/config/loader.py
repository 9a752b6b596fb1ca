"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from .defaults import MonitorSettings, get_default_settings
from .validation import ConfigValidator, ValidationError

CONFIG_FILENAME = "travel_monitor.yaml"


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_path: Path
    defaults: MonitorSettings

    @classmethod
    def create(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILENAME

        return cls(
            config_path=Path(config_path),
            defaults=get_default_settings(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load overrides from the YAML configuration file, if present."""
        if not self.config_path.exists():
            return {}

        try:
            with open(self.config_path) as f:
                file_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Cannot read configuration file {self.config_path}: {e}"
            ) from e

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"Configuration file {self.config_path} must contain a mapping"
            )
        return file_config

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. YAML configuration file
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)
        config = self._deep_merge(config, self.load_file_config())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load_settings(self, overrides: Optional[dict[str, Any]] = None) -> MonitorSettings:
        """
        Load, validate and build the monitor settings.

        Raises:
            ConfigurationError: If any field fails validation
        """
        config = self.merge_config(overrides)
        errors = ConfigValidator.validate_config(config)
        errors.extend(self._unknown_fields(config))

        if errors:
            details = "; ".join(f"{err.field}: {err.message} (got: {err.value!r})" for err in errors)
            raise ConfigurationError(f"Invalid configuration: {details}", errors=errors)

        return self._build_settings(config)

    def _unknown_fields(self, config: dict[str, Any]) -> list[ValidationError]:
        errors = []
        for section in fields(MonitorSettings):
            values = config.get(section.name)
            if not isinstance(values, dict):
                continue
            known = {f.name for f in fields(getattr(self.defaults, section.name))}
            for key in values:
                if key not in known:
                    errors.append(ValidationError(
                        field=f"{section.name}.{key}",
                        message="Unknown configuration field",
                        value=values[key]
                    ))
        return errors

    def _build_settings(self, config: dict[str, Any]) -> MonitorSettings:
        sections = {}
        for section in fields(MonitorSettings):
            params_cls = type(getattr(self.defaults, section.name))
            values = dict(config.get(section.name) or {})
            if section.name == "notifications" and "authorization_options" in values:
                values["authorization_options"] = tuple(values["authorization_options"])
            sections[section.name] = params_cls(**values)
        return MonitorSettings(**sections)

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def load_settings(
    config_path: Optional[Path] = None,
    overrides: Optional[dict[str, Any]] = None
) -> MonitorSettings:
    """Convenience wrapper around ConfigLoader for the composition root."""
    return ConfigLoader.create(config_path).load_settings(overrides)
