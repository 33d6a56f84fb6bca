"""
Hosted data backend (Supabase PostgREST) connection and utilities.
"""

import logging
from typing import Any, Optional

import httpx

from app.core.config import get_settings
from app.core.exceptions import (
    BadRequestException,
    ForbiddenException,
    NotFoundException,
    UnauthorizedException,
    UpstreamException,
)

settings = get_settings()
logger = logging.getLogger(__name__)


class DataBackend:
    """PostgREST client manager. Row-level policies run on the backend with the caller's token."""

    client: httpx.AsyncClient = None

    @classmethod
    async def connect(cls):
        """Open the shared HTTP client."""
        cls.client = httpx.AsyncClient(
            base_url=f"{settings.SUPABASE_URL.rstrip('/')}/rest/v1",
            headers={"apikey": settings.SUPABASE_ANON_KEY},
            timeout=settings.DATA_BACKEND_TIMEOUT_SECONDS,
        )
        logger.info(f"Connected to data backend: {settings.SUPABASE_URL}")

    @classmethod
    async def disconnect(cls):
        """Close the shared HTTP client."""
        if cls.client:
            await cls.client.aclose()
            cls.client = None
            logger.info("Disconnected from data backend")

    @staticmethod
    def _headers(token: Optional[str], **extra: str) -> dict:
        headers = dict(extra)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    @classmethod
    async def _request(cls, method: str, table: str, **kwargs) -> Any:
        if cls.client is None:
            raise UpstreamException("Data backend is not connected")

        try:
            response = await cls.client.request(method, f"/{table}", **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise _map_status_error(e.response)
        except httpx.HTTPError as e:
            logger.error(f"Data backend {method} /{table} failed: {e}")
            raise UpstreamException(f"Data backend request failed: {str(e)}")

        if not response.content:
            return []
        try:
            return response.json()
        except ValueError:
            logger.error(f"Data backend {method} /{table} returned a non-JSON body")
            raise UpstreamException("Data backend returned an unreadable response")

    @classmethod
    async def select(
        cls,
        table: str,
        params: Optional[dict] = None,
        token: Optional[str] = None,
        single: bool = False,
    ) -> Any:
        """
        Read rows from a table.

        ``params`` are PostgREST query parameters (``select``, ``order``,
        ``column=op.value`` filters). With ``single=True`` the first row is
        returned, or NotFoundException is raised when there is none.
        """
        rows = await cls._request("GET", table, params=params or {}, headers=cls._headers(token))
        if not single:
            return rows
        if not rows:
            raise NotFoundException(f"No matching row in {table}")
        return rows[0]

    @classmethod
    async def insert(cls, table: str, rows: list[dict], token: Optional[str] = None) -> list[dict]:
        """Insert rows and return them as stored."""
        return await cls._request(
            "POST",
            table,
            json=rows,
            headers=cls._headers(token, Prefer="return=representation"),
        )

    @classmethod
    async def update(
        cls,
        table: str,
        values: dict,
        filters: dict,
        token: Optional[str] = None,
    ) -> list[dict]:
        """Patch rows matching ``filters`` and return the updated rows."""
        return await cls._request(
            "PATCH",
            table,
            params=filters,
            json=values,
            headers=cls._headers(token, Prefer="return=representation"),
        )


def _map_status_error(response: httpx.Response) -> Exception:
    """Translate a PostgREST error response into an application exception."""
    try:
        body = response.json()
        if isinstance(body, dict):
            message = body.get("message") or body.get("msg") or response.text
        else:
            message = response.text
    except ValueError:
        message = response.text

    code = response.status_code
    if code == 401:
        return UnauthorizedException(message or "Unauthorized")
    if code == 403:
        return ForbiddenException(message or "Forbidden")
    if code == 404:
        return NotFoundException(message or "Resource not found")
    if code in (400, 409, 422):
        return BadRequestException(message or "Bad request")

    logger.error(f"Data backend returned {code}: {message}")
    return UpstreamException(f"Data backend error ({code})")
