"""Geocoding models and upstream payload parsing."""

import logging
import math
from typing import Any, List, Literal, Optional
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class Coordinates(BaseModel):
    """WGS-84 point in decimal degrees."""
    latitude: float
    longitude: float


class Candidate(BaseModel):
    """One geocoding result offered as an address suggestion."""
    label: str = Field(..., description="Display label, used verbatim as the address")
    latitude: float
    longitude: float

    class Config:
        frozen = True

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(latitude=self.latitude, longitude=self.longitude)


SuggestionState = Literal["idle", "typing", "loading", "populated", "empty", "cancelled"]


class SuggestionPanel(BaseModel):
    """Snapshot of the address suggestion panel pushed to the client."""
    query: str
    address: str
    visible: bool
    loading: bool
    state: SuggestionState
    candidates: List[Candidate]


class AddressSearchResponse(BaseModel):
    """Response for stateless address search."""
    query: str
    candidates: List[Candidate]


def _parse_candidate(item: Any) -> Optional[Candidate]:
    if not isinstance(item, dict):
        return None

    label = item.get("display_name")
    if not isinstance(label, str) or not label:
        return None

    try:
        lat = float(item["lat"])
        lon = float(item["lon"])
    except (KeyError, TypeError, ValueError):
        return None

    if not (math.isfinite(lat) and math.isfinite(lon)):
        return None

    return Candidate(label=label, latitude=lat, longitude=lon)


def parse_candidates(payload: Any, limit: int) -> List[Candidate]:
    """
    Turn a Nominatim search payload into at most ``limit`` candidates.

    Anything other than a JSON array yields an empty list. Entries without a
    label or with unusable coordinates are skipped; relevance order is kept.
    """
    if not isinstance(payload, list):
        logger.warning(f"Geocoder returned {type(payload).__name__} instead of a list")
        return []

    candidates = []
    for item in payload:
        if len(candidates) >= limit:
            break
        candidate = _parse_candidate(item)
        if candidate is None:
            logger.debug(f"Skipping malformed geocoder entry: {item!r}")
            continue
        candidates.append(candidate)

    return candidates
