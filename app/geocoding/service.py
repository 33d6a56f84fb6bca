"""Address geocoding using the Nominatim search API."""

import logging
from typing import Any, List, Optional
from urllib.parse import quote
import httpx

from app.core.config import get_settings
from app.geocoding.models import Candidate, Coordinates, parse_candidates

settings = get_settings()
logger = logging.getLogger(__name__)

# Characters left as-is by the browser's encodeURIComponent
_QUERY_SAFE = "-_.!~*'()"


class GeocodingService:
    """Free-text address lookups against an OpenStreetMap Nominatim instance."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = settings.GEOCODER_BASE_URL.rstrip("/")
        self.transport = transport

    def search_url(self, query: str, limit: int) -> str:
        return f"{self.base_url}/search?format=json&q={quote(query, safe=_QUERY_SAFE)}&limit={limit}"

    async def fetch_raw(self, query: str, limit: Optional[int] = None) -> Any:
        """
        Issue one search request and return the decoded JSON body.

        Raises httpx.HTTPError on transport or status failure and ValueError
        when the body is not JSON.
        """
        limit = limit or settings.SUGGESTION_LIMIT
        headers = {
            "Accept-Language": settings.GEOCODER_ACCEPT_LANGUAGE,
            "User-Agent": settings.GEOCODER_USER_AGENT,
        }

        async with httpx.AsyncClient(
            transport=self.transport,
            timeout=settings.GEOCODER_TIMEOUT_SECONDS,
        ) as client:
            response = await client.get(self.search_url(query, limit), headers=headers)
            response.raise_for_status()
            return response.json()

    async def search(self, query: str, limit: Optional[int] = None) -> List[Candidate]:
        """Ranked candidates for ``query``; any lookup failure degrades to no candidates."""
        if not (query or "").strip():
            return []

        limit = limit or settings.SUGGESTION_LIMIT
        try:
            payload = await self.fetch_raw(query, limit)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error searching locations for {query!r}: {e}")
            return []

        return parse_candidates(payload, limit)

    async def geocode(self, address: str) -> Optional[Coordinates]:
        """Coordinates of the best match for ``address``, or None."""
        candidates = await self.search(address, limit=1)
        if not candidates:
            return None
        return candidates[0].coordinates


def get_geocoding_service() -> GeocodingService:
    """FastAPI dependency for the geocoding service."""
    return GeocodingService()
