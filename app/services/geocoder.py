import logging
from typing import Optional

import httpx

from app.config import Settings
from app.schemas.geocode import GeocodeResult

logger = logging.getLogger(__name__)


class GeocodingError(Exception):
    pass


class NominatimGeocoder:
    """
    Address lookup against OpenStreetMap Nominatim.
    Used by the CMS to fill coordinates and address lines on the edit form.
    """

    def __init__(self, base_url: str, user_agent: str,
                 timeout: float = 10.0, client: Optional[httpx.Client] = None):
        self.base_url = base_url
        self.client = client or httpx.Client(timeout=timeout, follow_redirects=True)
        self.client.headers["User-Agent"] = user_agent

    @classmethod
    def from_settings(cls, settings: Settings, client: Optional[httpx.Client] = None) -> "NominatimGeocoder":
        return cls(
            base_url=settings.nominatim_url,
            user_agent=settings.geocoder_user_agent,
            timeout=settings.http_timeout,
            client=client,
        )

    def search(self, address: str) -> Optional[GeocodeResult]:
        """First match for the address, or None when nothing is found"""
        params = {"format": "json", "q": address, "limit": 1, "addressdetails": 1}
        try:
            response = self.client.get(self.base_url, params=params)
            response.raise_for_status()
            results = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Geocoding failed for '{address}': {e}")
            raise GeocodingError(str(e)) from e
        except ValueError as e:
            logger.error(f"Geocoder returned invalid JSON for '{address}': {e}")
            raise GeocodingError("Invalid geocoder response") from e

        if not results:
            logger.info(f"Address not found: '{address}'")
            return None

        return self._parse_result(results[0])

    def _parse_result(self, result: dict) -> GeocodeResult:
        addr = result.get("address") or {}

        line1_parts = [
            addr.get("house_number"),
            addr.get("road") or addr.get("street") or addr.get("pedestrian"),
        ]
        line2_parts = [
            addr.get("neighbourhood"),
            addr.get("city") or addr.get("town") or addr.get("village"),
            addr.get("state") or addr.get("province"),
            addr.get("postcode"),
        ]

        return GeocodeResult(
            lat=float(result["lat"]),
            lng=float(result["lon"]),
            formatted_address=result.get("display_name", ""),
            address_line1=" ".join(part for part in line1_parts if part),
            address_line2=", ".join(part for part in line2_parts if part),
        )
