"""
Configuration management module.

Provides default parameters, YAML loading with override precedence and
validation for the travel monitor.
"""

from .defaults import MonitorSettings, get_default_settings
from .loader import ConfigLoader, load_settings
from .validation import ConfigValidator, ValidationError

__all__ = [
    "ConfigLoader",
    "ConfigValidator",
    "MonitorSettings",
    "ValidationError",
    "get_default_settings",
    "load_settings",
]
