"""User identity and navigation models."""

from typing import List, Literal, Optional
from pydantic import BaseModel


class CurrentUser(BaseModel):
    """Signed-in user as seen by the API."""
    id: str
    email: Optional[str] = None


class NavLink(BaseModel):
    """One entry of the site navigation."""
    label: str
    href: str
    kind: Literal["link", "action"] = "link"


class NavigationResponse(BaseModel):
    """Navigation for the current auth state."""
    authenticated: bool
    user: Optional[CurrentUser] = None
    links: List[NavLink]
