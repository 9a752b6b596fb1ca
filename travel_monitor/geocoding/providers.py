"""Reverse geocoder backed by the geocoder package."""

import asyncio
from typing import Optional

import geocoder

from ..config.defaults import GeocodingParams
from ..errors import GeocodingError
from ..logging.config import get_logger
from ..platform.base import ReverseGeocoder
from ..state.models import LocationFix

logger = get_logger(__name__)


class GeocoderLibraryGeocoder(ReverseGeocoder):
    """
    Reverse geocoding through a geocoder provider (OpenStreetMap by default).

    The geocoder package is blocking, so each lookup runs in a worker thread.
    """

    def __init__(self, params: Optional[GeocodingParams] = None, **provider_kwargs):
        self.params = params or GeocodingParams()
        self.provider_kwargs = provider_kwargs

    async def resolve(self, fix: LocationFix) -> Optional[str]:
        result = await asyncio.to_thread(self._lookup, fix)

        if not result.ok:
            status = str(getattr(result, "status", "") or "")
            if "no results" in status.lower():
                logger.debug("No reverse geocoding result", provider=self.params.provider)
                return None
            raise GeocodingError(
                f"{self.params.provider} reverse lookup failed: {status or 'unknown error'}",
                latitude=fix.latitude,
                longitude=fix.longitude
            )

        return getattr(result, self.params.region_field, None)

    def _lookup(self, fix: LocationFix):
        return geocoder.reverse(
            [fix.latitude, fix.longitude],
            provider=self.params.provider,
            **self.provider_kwargs
        )
