"""
PixelTube Settings Configuration
Loads configuration from environment variables
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Adapter settings loaded from environment."""

    # Instance
    BASE_URL: str = "https://pixeltube.org"
    CDN_URL: str = "https://cdn.pixeltube.org"
    LOGO_URL: str = "https://stefancruz.github.io/grayjay-plugin-pixeltube/PixelTubeIcon.png"

    # Listing page sizes (custom REST API)
    VIDEO_PAGE_SIZE: int = 24
    CHANNEL_PAGE_SIZE: int = 12

    # HTTP
    REQUEST_TIMEOUT: float = 15.0
    USER_AGENT: str = "pixeltube-source/0.1"

    # Logging
    LOG_LEVEL: str = "INFO"

    @field_validator("BASE_URL", "CDN_URL", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v):
        """Normalise instance URLs so paths can be appended directly."""
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v

    class Config:
        env_prefix = "PIXELTUBE_"
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
