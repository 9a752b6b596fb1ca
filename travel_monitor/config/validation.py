"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any, Optional

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _check_timeout(errors: list[ValidationError], name: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        errors.append(ValidationError(
            field=name,
            message="Must be a positive number or null",
            value=value
        ))


def _check_string(errors: list[ValidationError], name: str, value: Any) -> None:
    if not isinstance(value, str) or not value.strip():
        errors.append(ValidationError(
            field=name,
            message="Must be a non-empty string",
            value=value
        ))


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_storage_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate durable store parameters."""
        errors: list[ValidationError] = []

        for name in ("db_path", "enabled_key", "last_region_key"):
            if name in params:
                _check_string(errors, f"storage.{name}", params[name])

        if (params.get("enabled_key") is not None
                and params.get("enabled_key") == params.get("last_region_key")):
            errors.append(ValidationError(
                field="storage.last_region_key",
                message="Must differ from storage.enabled_key",
                value=params.get("last_region_key")
            ))

        return errors

    @staticmethod
    def validate_location_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate monitoring session parameters."""
        errors: list[ValidationError] = []

        if "desired_accuracy_m" in params:
            value = params["desired_accuracy_m"]
            # Country resolution never needs better than kilometre accuracy
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 1000:
                errors.append(ValidationError(
                    field="location.desired_accuracy_m",
                    message="Must be a number of at least 1000 meters",
                    value=value
                ))

        if params.get("distance_filter_m") is not None:
            value = params["distance_filter_m"]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                errors.append(ValidationError(
                    field="location.distance_filter_m",
                    message="Must be a non-negative number or null",
                    value=value
                ))

        if "pauses_automatically" in params and not isinstance(params["pauses_automatically"], bool):
            errors.append(ValidationError(
                field="location.pauses_automatically",
                message="Must be a boolean",
                value=params["pauses_automatically"]
            ))

        if "request_timeout_seconds" in params:
            _check_timeout(errors, "location.request_timeout_seconds",
                           params["request_timeout_seconds"])

        return errors

    @staticmethod
    def validate_geocoding_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate reverse geocoding parameters."""
        errors: list[ValidationError] = []

        if "provider" in params:
            _check_string(errors, "geocoding.provider", params["provider"])

        if "region_field" in params:
            value = params["region_field"]
            if value not in ("country", "state"):
                errors.append(ValidationError(
                    field="geocoding.region_field",
                    message="Must be 'country' or 'state'",
                    value=value
                ))

        if "timeout_seconds" in params:
            _check_timeout(errors, "geocoding.timeout_seconds", params["timeout_seconds"])

        return errors

    @staticmethod
    def validate_notification_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate notification parameters."""
        errors: list[ValidationError] = []

        if "category_id" in params:
            _check_string(errors, "notifications.category_id", params["category_id"])

        for name in ("title_template", "body_template"):
            if name not in params:
                continue
            value = params[name]
            if not isinstance(value, str):
                errors.append(ValidationError(
                    field=f"notifications.{name}",
                    message="Must be a string",
                    value=value
                ))
                continue
            try:
                value.format(region="Finland")
            except (KeyError, IndexError, ValueError):
                errors.append(ValidationError(
                    field=f"notifications.{name}",
                    message="May only reference the {region} placeholder",
                    value=value
                ))

        if "authorization_options" in params:
            value = params["authorization_options"]
            allowed = {"alert", "sound", "badge", "provisional"}
            if not isinstance(value, (list, tuple)) or not set(value) <= allowed:
                errors.append(ValidationError(
                    field="notifications.authorization_options",
                    message=f"Must be a list drawn from {sorted(allowed)}",
                    value=value
                ))

        if "timeout_seconds" in params:
            _check_timeout(errors, "notifications.timeout_seconds", params["timeout_seconds"])

        return errors

    @staticmethod
    def validate_runtime_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate runtime parameters."""
        errors: list[ValidationError] = []

        if "outcome_history" in params:
            value = params["outcome_history"]
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                errors.append(ValidationError(
                    field="runtime.outcome_history",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors: list[ValidationError] = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
                errors.append(ValidationError(
                    field="logging.level",
                    message=f"Must be one of {', '.join(LOG_LEVELS)}",
                    value=value
                ))

        for name in ("format_json", "include_timestamp", "include_caller"):
            if name in params and not isinstance(params[name], bool):
                errors.append(ValidationError(
                    field=f"logging.{name}",
                    message="Must be a boolean",
                    value=params[name]
                ))

        return errors

    @classmethod
    def validate_config(cls, config: dict[str, Any]) -> list[ValidationError]:
        """Validate a complete configuration dictionary."""
        errors: list[ValidationError] = []
        sections = {
            "storage": cls.validate_storage_params,
            "location": cls.validate_location_params,
            "geocoding": cls.validate_geocoding_params,
            "notifications": cls.validate_notification_params,
            "runtime": cls.validate_runtime_params,
            "logging": cls.validate_logging_params,
        }

        for key in config:
            if key not in sections:
                errors.append(ValidationError(
                    field=key,
                    message="Unknown configuration section",
                    value=config[key]
                ))

        for name, validator in sections.items():
            section: Optional[Any] = config.get(name)
            if section is None:
                continue
            if not isinstance(section, dict):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a mapping",
                    value=section
                ))
                continue
            errors.extend(validator(section))

        return errors
