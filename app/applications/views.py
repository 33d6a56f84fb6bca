"""API routes for property applications."""

from fastapi import APIRouter, Depends, status

from app.core.dependencies import get_current_user
from app.applications.models import (
    ApplicationCreate,
    ApplicationResponse,
    ApplicationStatusUpdate,
    ApplicationsOverview,
)
from app.applications.service import ApplicationService

router = APIRouter(tags=["Applications"])


@router.post(
    "/properties/{property_id}/applications",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_application(
    property_id: str,
    data: ApplicationCreate,
    current_user: dict = Depends(get_current_user),
):
    """
    Apply to rent or buy a property.
    
    The application is sent to the property owner for review.
    """
    return await ApplicationService.submit(property_id, current_user, data)


@router.get("/applications", response_model=ApplicationsOverview)
async def get_applications(current_user: dict = Depends(get_current_user)):
    """Applications you sent, and applications received for your listings."""
    return await ApplicationService.overview(current_user)


@router.patch("/applications/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    current_user: dict = Depends(get_current_user),
):
    """Approve or reject an application for one of your properties."""
    return await ApplicationService.update_status(application_id, update.status, current_user)
