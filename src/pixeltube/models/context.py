"""Per-enable platform context threaded into every entity constructor."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from pixeltube.config import Settings

PLATFORM = "PixelTube"


class PlatformContext(BaseModel):
    """Immutable view of the instance URLs and host-assigned plugin id."""

    plugin_id: Optional[str] = Field(
        default=None, description="Plugin id assigned by the host config"
    )
    base_url: str = Field(..., description="Instance base URL, no trailing slash")
    cdn_url: str = Field(..., description="CDN base URL for media fallbacks")
    logo_url: str = Field(..., description="Plugin logo used as avatar fallback")
    video_page_size: int = Field(default=24, ge=1)
    channel_page_size: int = Field(default=12, ge=1)

    model_config = {"frozen": True}

    @classmethod
    def from_settings(
        cls, settings: Settings, config: Optional[Dict[str, Any]] = None
    ) -> "PlatformContext":
        """Build a context from adapter settings and the host's plugin config."""
        config = config or {}
        plugin_id = config.get("id")
        return cls(
            plugin_id=str(plugin_id) if plugin_id is not None else None,
            base_url=settings.BASE_URL,
            cdn_url=settings.CDN_URL,
            logo_url=settings.LOGO_URL,
            video_page_size=settings.VIDEO_PAGE_SIZE,
            channel_page_size=settings.CHANNEL_PAGE_SIZE,
        )

    @property
    def own_domain(self) -> str:
        """Host part of the instance URL, e.g. 'pixeltube.org'."""
        host = self.base_url.split("://", 1)[-1].split("/", 1)[0]
        return host[4:] if host.startswith("www.") else host

    def video_url(self, video_id: str) -> str:
        return f"{self.base_url}/w/{video_id}"

    def channel_url(self, username: str) -> str:
        return f"{self.base_url}/c/{username}"

    def actor_url(self, username: str) -> str:
        return f"{self.base_url}/actors/{username}"

    def outbox_url(self, username: str) -> str:
        return f"{self.actor_url(username)}/outbox?page=true"

    def thumbnail_fallback(self, video_id: str) -> str:
        return f"{self.cdn_url}/thumbnails/{video_id}.jpg"
