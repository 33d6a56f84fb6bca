"""Property listing API routes."""

import asyncio
import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status

from app.auth.service import AuthService
from app.core.config import get_settings
from app.core.dependencies import get_current_user, get_current_user_optional
from app.core.exceptions import AppException
from app.geocoding.service import GeocodingService, get_geocoding_service
from app.properties.form import PropertyDraft
from app.properties.models import (
    PropertyCreate,
    PropertyDetailResponse,
    PropertyListResponse,
    PropertyResponse,
)
from app.properties.service import PropertyService

router = APIRouter(prefix="/properties", tags=["Properties"])
logger = logging.getLogger(__name__)

WS_UNAUTHORIZED = 4401


def _token(user: Optional[dict]) -> Optional[str]:
    return user["token"] if user else None


@router.get("", response_model=PropertyListResponse)
async def list_properties(
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    min_bedrooms: Optional[int] = Query(None, ge=0),
    min_bathrooms: Optional[int] = Query(None, ge=0),
    current_user: Optional[dict] = Depends(get_current_user_optional),
):
    """
    Browse available properties, newest first.

    Optional price and room filters narrow the list.
    """
    properties = await PropertyService.list_properties(
        min_price=min_price,
        max_price=max_price,
        min_bedrooms=min_bedrooms,
        min_bathrooms=min_bathrooms,
        token=_token(current_user),
    )
    return PropertyListResponse(properties=properties, count=len(properties))


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
async def create_property(
    data: PropertyCreate,
    current_user: dict = Depends(get_current_user),
):
    """List a new property owned by the current user."""
    return await PropertyService.create_property(current_user["id"], data, current_user["token"])


@router.get("/{property_id}", response_model=PropertyDetailResponse)
async def get_property(
    property_id: str,
    current_user: Optional[dict] = Depends(get_current_user_optional),
    geocoder: GeocodingService = Depends(get_geocoding_service),
):
    """
    Property details with location.

    Stored coordinates are used when present; otherwise the address is
    geocoded. A failed lookup only leaves the location empty.
    """
    return await PropertyService.get_property_details(
        property_id, geocoder, token=_token(current_user)
    )


@router.websocket("/draft")
async def property_draft(
    websocket: WebSocket,
    token: Optional[str] = Query(None),
    geocoder: GeocodingService = Depends(get_geocoding_service),
):
    """
    Interactive listing form.

    Client messages: ``field`` {name, value}, ``address`` {text}, ``focus``,
    ``blur``, ``select`` {index} and ``submit``. The server pushes
    ``suggestions`` panel snapshots, ``created`` and ``error`` messages.
    """
    await websocket.accept()

    user = AuthService.user_from_token(token)
    if not user:
        await websocket.send_json({"type": "error", "detail": "You must be logged in to create a property"})
        await websocket.close(code=WS_UNAUTHORIZED)
        return

    settings = get_settings()
    outbox: asyncio.Queue = asyncio.Queue()
    draft = PropertyDraft(
        lookup=lambda query: geocoder.fetch_raw(query, settings.SUGGESTION_LIMIT),
        on_change=lambda panel: outbox.put_nowait({"type": "suggestions", **panel.model_dump()}),
        delay=settings.SUGGESTION_DEBOUNCE_MS / 1000,
    )

    async def pump():
        while True:
            message = await outbox.get()
            await websocket.send_json(message)

    sender = asyncio.create_task(pump())
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except ValueError:
                outbox.put_nowait({"type": "error", "detail": "Message is not valid JSON"})
                continue
            if not isinstance(message, dict):
                outbox.put_nowait({"type": "error", "detail": "Message must be a JSON object"})
                continue
            await _handle_draft_message(draft, message, user, outbox)
    except WebSocketDisconnect:
        logger.info(f"Listing draft session closed for {user['id']}")
    finally:
        draft.close()
        sender.cancel()


async def _handle_draft_message(draft: PropertyDraft, message: dict, user: dict, outbox: asyncio.Queue):
    kind = message.get("type")
    try:
        if kind == "field":
            draft.handle_change(message.get("name", ""), str(message.get("value", "")))
        elif kind == "address":
            draft.type_address(str(message.get("text", "")))
        elif kind == "focus":
            draft.suggestions.on_focus()
        elif kind == "blur":
            draft.suggestions.on_blur()
        elif kind == "select":
            index = message.get("index")
            if not isinstance(index, int) or isinstance(index, bool):
                raise ValueError("Suggestion index must be an integer")
            draft.suggestions.select_index(index)
        elif kind == "submit":
            created = await PropertyService.create_property(user["id"], draft.to_create(), user["token"])
            outbox.put_nowait({"type": "created", "property": created.model_dump(mode="json")})
        else:
            outbox.put_nowait({"type": "error", "detail": f"Unknown message type: {kind}"})
    except (IndexError, ValueError) as e:
        outbox.put_nowait({"type": "error", "detail": str(e)})
    except AppException as e:
        outbox.put_nowait({"type": "error", "detail": e.detail})
