"""Property application models and schemas."""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApplicationCreate(BaseModel):
    """Schema for applying to a property."""
    email: EmailStr
    phone: str = Field(..., min_length=3, max_length=32)
    message: str = Field("", max_length=5000)


class ApplicationStatusUpdate(BaseModel):
    """Owner decision on an application."""
    status: ApplicationStatus


class ApplicationProperty(BaseModel):
    """Embedded property reference."""
    title: str
    address: str


class ApplicationResponse(BaseModel):
    """An application row with its property."""
    id: str
    property_id: str
    applicant_id: str
    email: str
    phone: str
    message: str = ""
    status: ApplicationStatus = ApplicationStatus.PENDING
    created_at: Optional[datetime] = None
    property: Optional[ApplicationProperty] = None


class ApplicationsOverview(BaseModel):
    """Applications the user sent and received for their own listings."""
    sent: List[ApplicationResponse]
    received: List[ApplicationResponse]
