"""Authentication service - access token validation and user identity."""

from typing import Optional
import jwt

from app.core.config import get_settings

settings = get_settings()


class AuthService:
    """Validates access tokens issued by the hosted auth provider."""
    
    @staticmethod
    def decode_token(token: str) -> Optional[dict]:
        """Decode and validate a JWT token."""
        try:
            payload = jwt.decode(
                token, 
                settings.SUPABASE_JWT_SECRET, 
                algorithms=[settings.JWT_ALGORITHM],
                audience=settings.JWT_AUDIENCE,
            )
            return payload
        except jwt.ExpiredSignatureError:
            return None
        except jwt.InvalidTokenError:
            return None
    
    @classmethod
    def user_from_token(cls, token: Optional[str]) -> Optional[dict]:
        """
        Build the request user from a raw token.
        
        The token itself is kept so backend calls run under the user's
        row-level policies.
        """
        if not token:
            return None
        
        payload = cls.decode_token(token)
        if not payload or not payload.get("sub"):
            return None
        
        return {
            "id": payload["sub"],
            "email": payload.get("email"),
            "token": token,
        }
