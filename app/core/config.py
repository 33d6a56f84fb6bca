"""
Application configuration using Pydantic Settings.
Loads from environment variables / .env file.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # App
    APP_NAME: str = "Estately API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = True
    
    # Supabase (hosted data backend + auth provider)
    SUPABASE_URL: str = "http://localhost:54321"
    SUPABASE_ANON_KEY: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""  # maintenance scripts only
    SUPABASE_JWT_SECRET: str = "super-secret-jwt-token-with-at-least-32-characters-long"
    DATA_BACKEND_TIMEOUT_SECONDS: float = 15.0
    
    # JWT
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str = "authenticated"
    
    # Geocoding (Nominatim)
    GEOCODER_BASE_URL: str = "https://nominatim.openstreetmap.org"
    GEOCODER_ACCEPT_LANGUAGE: str = "en-US,en;q=0.9"
    GEOCODER_USER_AGENT: str = "estately-api/0.1"
    GEOCODER_TIMEOUT_SECONDS: float = 10.0
    
    # Address suggestions
    SUGGESTION_DEBOUNCE_MS: int = 500
    SUGGESTION_LIMIT: int = 5
    
    # Listings
    DEFAULT_PROPERTY_IMAGE: str = "https://images.unsplash.com/photo-1600596542815-ffad4c1539a9?ixlib=rb-4.0.3"
    MAP_BBOX_DELTA: float = 0.01
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"



@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
