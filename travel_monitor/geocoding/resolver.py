"""Region resolution from location fixes."""

import asyncio
from typing import Optional

from ..config.defaults import GeocodingParams
from ..errors import GeocodingError
from ..logging.config import get_logger
from ..platform.base import ReverseGeocoder
from ..state.models import LocationFix

logger = get_logger(__name__)


def normalize_region_label(label: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace; blank labels count as no result."""
    if label is None:
        return None
    label = label.strip()
    return label or None


class RegionResolver:
    """
    Converts a location fix into a region label.

    Stateless per call. Any failure of the underlying geocoder, including a
    timeout, surfaces as GeocodingError; the caller decides to drop the fix.
    """

    def __init__(self, geocoder: ReverseGeocoder, params: Optional[GeocodingParams] = None):
        self.geocoder = geocoder
        self.params = params or GeocodingParams()

    async def resolve(self, fix: LocationFix) -> Optional[str]:
        """
        Resolve a fix to a region label.

        Returns:
            The region label, or None when the geocoder found nothing

        Raises:
            GeocodingError: On geocoder failure or timeout
        """
        timeout = self.params.timeout_seconds
        try:
            if timeout is None:
                label = await self.geocoder.resolve(fix)
            else:
                label = await asyncio.wait_for(self.geocoder.resolve(fix), timeout)
        except asyncio.TimeoutError as e:
            raise GeocodingError(
                f"Reverse geocoding timed out after {timeout}s",
                latitude=fix.latitude,
                longitude=fix.longitude
            ) from e
        except GeocodingError:
            raise
        except Exception as e:
            raise GeocodingError(
                f"Reverse geocoding failed: {e}",
                latitude=fix.latitude,
                longitude=fix.longitude
            ) from e

        label = normalize_region_label(label)
        logger.debug(
            "Resolved location fix",
            latitude=fix.latitude,
            longitude=fix.longitude,
            region=label
        )
        return label
