"""API routes for address search."""

from fastapi import APIRouter, Depends, Query

from app.geocoding.models import AddressSearchResponse
from app.geocoding.service import GeocodingService, get_geocoding_service

router = APIRouter(prefix="/geocoding", tags=["Geocoding"])


@router.get("/search", response_model=AddressSearchResponse)
async def search_addresses(
    q: str = Query("", description="Free-text address"),
    limit: int = Query(5, ge=1, le=10, description="Max candidates to return"),
    service: GeocodingService = Depends(get_geocoding_service),
):
    """
    Address suggestions for free text.

    Lookup failures return an empty candidate list rather than an error.
    """
    candidates = await service.search(q, limit=limit)
    return AddressSearchResponse(query=q, candidates=candidates)
