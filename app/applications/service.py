"""Service layer for property applications."""

import logging

from app.core.backend import DataBackend
from app.core.exceptions import BadRequestException, NotFoundException
from app.applications.models import (
    ApplicationCreate,
    ApplicationResponse,
    ApplicationStatus,
    ApplicationsOverview,
)
from app.properties.service import PropertyService

logger = logging.getLogger(__name__)


class ApplicationService:
    """Submitting and reviewing rental/purchase applications."""

    TABLE_NAME = "property_applications"

    # Embeds the property; !inner lets the owner filter drop unrelated rows
    SELECT_WITH_PROPERTY = "*,property:properties!inner(title,address,owner_id)"

    @classmethod
    async def submit(
        cls,
        property_id: str,
        applicant: dict,
        data: ApplicationCreate,
    ) -> ApplicationResponse:
        """
        Apply to a property.

        Owners cannot apply to their own listing.
        """
        prop = await PropertyService.get_property(property_id, token=applicant["token"])
        if prop.owner_id == applicant["id"]:
            raise BadRequestException("You cannot apply to your own property")

        row = {
            "property_id": property_id,
            "applicant_id": applicant["id"],
            "email": data.email,
            "phone": data.phone,
            "message": data.message,
        }
        created = await DataBackend.insert(cls.TABLE_NAME, [row], token=applicant["token"])
        if not created:
            raise BadRequestException("Application was not submitted")

        logger.info(f"Application for property {property_id} submitted by {applicant['id']}")
        return ApplicationResponse(**created[0])

    @classmethod
    async def list_sent(cls, user: dict) -> list[ApplicationResponse]:
        rows = await DataBackend.select(
            cls.TABLE_NAME,
            {
                "select": cls.SELECT_WITH_PROPERTY,
                "applicant_id": f"eq.{user['id']}",
                "order": "created_at.desc",
            },
            token=user["token"],
        )
        return [ApplicationResponse(**row) for row in rows]

    @classmethod
    async def list_received(cls, user: dict) -> list[ApplicationResponse]:
        rows = await DataBackend.select(
            cls.TABLE_NAME,
            {
                "select": cls.SELECT_WITH_PROPERTY,
                "property.owner_id": f"eq.{user['id']}",
                "order": "created_at.desc",
            },
            token=user["token"],
        )
        return [ApplicationResponse(**row) for row in rows]

    @classmethod
    async def overview(cls, user: dict) -> ApplicationsOverview:
        sent = await cls.list_sent(user)
        received = await cls.list_received(user)
        return ApplicationsOverview(sent=sent, received=received)

    @classmethod
    async def update_status(
        cls,
        application_id: str,
        new_status: ApplicationStatus,
        user: dict,
    ) -> ApplicationResponse:
        """Approve or reject an application. The backend decides who may do so."""
        updated = await DataBackend.update(
            cls.TABLE_NAME,
            {"status": new_status.value},
            {"id": f"eq.{application_id}"},
            token=user["token"],
        )
        if not updated:
            raise NotFoundException("Application not found")

        logger.info(f"Application {application_id} marked {new_status.value} by {user['id']}")
        return ApplicationResponse(**updated[0])
