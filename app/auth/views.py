"""Authentication and navigation API routes."""

from typing import Optional
from fastapi import APIRouter, Depends

from app.core.dependencies import get_current_user, get_current_user_optional
from app.auth.models import CurrentUser, NavLink, NavigationResponse

router = APIRouter(tags=["Authentication"])


@router.get("/auth/me", response_model=CurrentUser)
async def get_me(current_user: dict = Depends(get_current_user)):
    """Get the currently signed-in user."""
    return CurrentUser(id=current_user["id"], email=current_user.get("email"))


@router.get("/navigation", response_model=NavigationResponse)
async def get_navigation(current_user: Optional[dict] = Depends(get_current_user_optional)):
    """
    Site navigation for the current auth state.
    
    Listing a property and reviewing applications are only offered to
    signed-in users.
    """
    links = [NavLink(label="Properties", href="/properties")]
    
    if current_user:
        links += [
            NavLink(label="List Property", href="/properties/new"),
            NavLink(label="Applications", href="/applications"),
            NavLink(label="Sign Out", href="/auth/sign-out", kind="action"),
        ]
        return NavigationResponse(
            authenticated=True,
            user=CurrentUser(id=current_user["id"], email=current_user.get("email")),
            links=links,
        )
    
    links.append(NavLink(label="Sign In", href="/auth/sign-in", kind="action"))
    return NavigationResponse(authenticated=False, links=links)
