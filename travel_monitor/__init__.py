"""
Travel Monitor - Background Region Change Notifications

Watches the device's coarse location while travel notifications are enabled,
resolves each fix to a country/region label and posts one local notification
whenever the region changes.
"""

__version__ = "0.1.0"
__author__ = "Trefo Team"
