"""Pydantic models for PixelTube entities and listing cursors."""

from pixeltube.models.context import PLATFORM, PlatformContext
from pixeltube.models.media import (
    AuthorLink,
    Capabilities,
    Channel,
    PlatformID,
    Rating,
    RecommendationContext,
    Thumbnail,
    Video,
    VideoDetails,
    VideoSource,
)
from pixeltube.models.pager import (
    ChannelSearchCursor,
    HomeCursor,
    OutboxCursor,
    Page,
    PageCursor,
    VideoSearchCursor,
)

__all__ = [
    "PLATFORM",
    "PlatformContext",
    "AuthorLink",
    "Capabilities",
    "Channel",
    "PlatformID",
    "Rating",
    "RecommendationContext",
    "Thumbnail",
    "Video",
    "VideoDetails",
    "VideoSource",
    "ChannelSearchCursor",
    "HomeCursor",
    "OutboxCursor",
    "Page",
    "PageCursor",
    "VideoSearchCursor",
]
