"""Service layer for property listings."""

import logging
from typing import Optional

from app.core.backend import DataBackend
from app.core.config import get_settings
from app.core.exceptions import BadRequestException
from app.geocoding.models import Coordinates
from app.geocoding.service import GeocodingService
from app.properties.models import (
    PropertyCreate,
    PropertyDetailResponse,
    PropertyResponse,
    PropertySummary,
)

settings = get_settings()
logger = logging.getLogger(__name__)


class PropertyService:
    """Browsing, detail and creation of property listings."""

    TABLE_NAME = "properties"

    @classmethod
    async def list_properties(
        cls,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        min_bedrooms: Optional[int] = None,
        min_bathrooms: Optional[int] = None,
        token: Optional[str] = None,
    ) -> list[PropertySummary]:
        """
        Newest listings first.

        Filters are passed through to the backend query layer.
        """
        if min_price is not None and max_price is not None and min_price > max_price:
            raise BadRequestException("min_price cannot be greater than max_price")

        params = {"select": "*", "order": "created_at.desc"}
        if min_price is not None and max_price is not None:
            # PostgREST needs and=() to apply two filters to one column
            params["and"] = f"(price.gte.{min_price},price.lte.{max_price})"
        elif min_price is not None:
            params["price"] = f"gte.{min_price}"
        elif max_price is not None:
            params["price"] = f"lte.{max_price}"
        if min_bedrooms is not None:
            params["bedrooms"] = f"gte.{min_bedrooms}"
        if min_bathrooms is not None:
            params["bathrooms"] = f"gte.{min_bathrooms}"

        rows = await DataBackend.select(cls.TABLE_NAME, params, token=token)
        return [cls.to_summary(row) for row in rows]

    @staticmethod
    def to_summary(row: dict) -> PropertySummary:
        images = row.get("images") or []
        return PropertySummary(
            id=str(row["id"]),
            title=row["title"],
            price=row["price"],
            bedrooms=row["bedrooms"],
            bathrooms=row["bathrooms"],
            square_feet=row["square_feet"],
            cover_image=images[0] if images else settings.DEFAULT_PROPERTY_IMAGE,
        )

    @classmethod
    async def get_property(cls, property_id: str, token: Optional[str] = None) -> PropertyResponse:
        """Fetch one property; NotFoundException if it does not exist."""
        row = await DataBackend.select(
            cls.TABLE_NAME,
            {"select": "*", "id": f"eq.{property_id}"},
            token=token,
            single=True,
        )
        return PropertyResponse(**row)

    @classmethod
    async def get_property_details(
        cls,
        property_id: str,
        geocoder: GeocodingService,
        token: Optional[str] = None,
    ) -> PropertyDetailResponse:
        """Property with its location and an embeddable map."""
        prop = await cls.get_property(property_id, token=token)
        location = await cls.resolve_location(prop, geocoder)

        return PropertyDetailResponse(
            **prop.model_dump(),
            location=location,
            map_embed_url=map_embed_url(location) if location else None,
        )

    @staticmethod
    async def resolve_location(
        prop: PropertyResponse,
        geocoder: GeocodingService,
    ) -> Optional[Coordinates]:
        """Stored coordinates win; otherwise geocode the address. Never raises on lookup failure."""
        if prop.latitude is not None and prop.longitude is not None:
            return Coordinates(latitude=prop.latitude, longitude=prop.longitude)

        if not prop.address:
            return None

        logger.info(f"Geocoding address for property {prop.id}")
        return await geocoder.geocode(prop.address)

    @classmethod
    async def create_property(cls, owner_id: str, data: PropertyCreate, token: str) -> PropertyResponse:
        """Insert a listing owned by ``owner_id``."""
        row = data.model_dump(exclude_none=True)
        row["owner_id"] = owner_id

        created = await DataBackend.insert(cls.TABLE_NAME, [row], token=token)
        if not created:
            raise BadRequestException("Property was not created")

        logger.info(f"Property {created[0].get('id')} listed by {owner_id}")
        return PropertyResponse(**created[0])


def map_embed_url(location: Coordinates) -> str:
    """OpenStreetMap embed centred on ``location`` with a marker."""
    lat, lng = location.latitude, location.longitude
    d = settings.MAP_BBOX_DELTA
    return (
        "https://www.openstreetmap.org/export/embed.html"
        f"?bbox={lng - d}%2C{lat - d}%2C{lng + d}%2C{lat + d}"
        f"&marker={lat}%2C{lng}&layer=mapnik"
    )
