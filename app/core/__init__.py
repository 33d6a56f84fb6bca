"""Core module - config, data backend, dependencies, exceptions, scheduling."""

from app.core.config import get_settings, Settings
from app.core.backend import DataBackend
from app.core.dependencies import get_current_user, get_current_user_optional
from app.core.exceptions import (
    AppException,
    NotFoundException,
    UnauthorizedException,
    ForbiddenException,
    BadRequestException,
    UpstreamException,
)
from app.core.scheduler import DebounceScheduler

__all__ = [
    "get_settings",
    "Settings",
    "DataBackend",
    "get_current_user",
    "get_current_user_optional",
    "AppException",
    "NotFoundException",
    "UnauthorizedException",
    "ForbiddenException",
    "BadRequestException",
    "UpstreamException",
    "DebounceScheduler",
]
