"""Property listing models and schemas."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from app.geocoding.models import Coordinates


class PropertyBase(BaseModel):
    """Fields shared by listing input and output."""
    title: str = Field(..., min_length=1)
    description: str = ""
    price: float = Field(..., ge=0)
    address: str = Field(..., min_length=1)
    bedrooms: int = Field(..., ge=0)
    bathrooms: int = Field(..., ge=0)
    square_feet: float = Field(..., ge=0)
    images: List[str] = []


class PropertyCreate(PropertyBase):
    """Schema for listing a new property."""
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    @field_validator("images", mode="before")
    @classmethod
    def split_images(cls, v):
        """Accept a comma-separated string and drop blank URLs."""
        if isinstance(v, str):
            v = v.split(",")
        return [url.strip() for url in v if url and url.strip()]


class PropertyResponse(PropertyBase):
    """A property row as stored by the data backend."""
    id: str
    owner_id: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: Optional[datetime] = None


class PropertySummary(BaseModel):
    """Card shown in the property grid."""
    id: str
    title: str
    price: float
    bedrooms: int
    bathrooms: int
    square_feet: float
    cover_image: str


class PropertyListResponse(BaseModel):
    """List response for property browsing."""
    properties: List[PropertySummary]
    count: int


class PropertyDetailResponse(PropertyResponse):
    """Property details with resolved location."""
    location: Optional[Coordinates] = None
    map_embed_url: Optional[str] = None
