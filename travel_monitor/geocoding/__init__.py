"""Reverse geocoding of location fixes into region labels."""

from .resolver import RegionResolver, normalize_region_label

__all__ = ["RegionResolver", "normalize_region_label"]
