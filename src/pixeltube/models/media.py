"""Media models returned to the host.

Video / VideoDetails: a playable item, as listed in feeds or fully resolved.
Channel / AuthorLink: a PixelTube channel, in full or as a reference.
All counts are non-negative; normalisation happens before construction.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional

from pydantic import BaseModel, Field, PrivateAttr

from pixeltube.models.context import PLATFORM


class PlatformID(BaseModel):
    """Platform-scoped identifier tagged with the host's plugin id."""

    platform: str = Field(default=PLATFORM)
    value: str = Field(..., description="Video UUID/id or channel username")
    plugin_id: Optional[str] = Field(default=None)


class Thumbnail(BaseModel):
    url: str
    quality: int = 0


class AuthorLink(BaseModel):
    """A reference to a channel, embedded in videos or listed by search."""

    id: PlatformID
    name: str = Field(default="")
    url: str = Field(..., description="Channel page URL")
    thumbnail: str = Field(..., description="Avatar URL")
    subscribers: Optional[int] = Field(default=None, ge=0)


class Video(BaseModel):
    """A video as it appears in listings."""

    id: PlatformID
    name: str = Field(default="Untitled")
    thumbnails: List[Thumbnail] = Field(default_factory=list)
    author: AuthorLink
    datetime: int = Field(default=0, description="Unix seconds, 0 when unknown")
    duration: int = Field(default=0, ge=0, description="Seconds")
    view_count: int = Field(default=0, ge=0)
    url: str = Field(..., description="Canonical video page URL")
    is_live: bool = Field(default=False)


class VideoSource(BaseModel):
    """A single direct-play rendition."""

    name: str
    url: str
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)
    container: str = Field(..., description="Media type, e.g. video/mp4")
    codec: str = Field(..., description="VP9 for webm, H264 otherwise")


class Rating(BaseModel):
    likes: int = Field(default=0, ge=0)
    dislikes: int = Field(default=0, ge=0)


class VideoDetails(Video):
    """A fully resolved video with its sources and rating."""

    description: str = Field(default="")
    video_sources: List[VideoSource] = Field(..., min_length=1)
    rating: Rating = Field(default_factory=Rating)

    _recommendations: Optional[Callable[[], Awaitable[Any]]] = PrivateAttr(
        default=None
    )

    def set_recommendations(self, resolver: Callable[[], Awaitable[Any]]) -> None:
        """Attach the deferred related-content resolver."""
        self._recommendations = resolver

    async def get_content_recommendations(self) -> Any:
        """Resolve related videos (other uploads from the same channel)."""
        if self._recommendations is None:
            return None
        return await self._recommendations()


class Channel(BaseModel):
    """A PixelTube channel resolved from its ActivityPub actor."""

    id: PlatformID
    name: str
    thumbnail: str = Field(..., description="Avatar URL")
    banner: str = Field(default="")
    subscribers: int = Field(default=0, ge=0)
    description: str = Field(default="")
    url: str
    links: Dict[str, str] = Field(
        default_factory=dict, description="Social platform name -> URL"
    )


class Capabilities(BaseModel):
    """Feed types, sorts and filters advertised to the host."""

    types: List[str] = Field(default_factory=list)
    sorts: List[str] = Field(default_factory=list)
    filters: List[str] = Field(default_factory=list)


class RecommendationContext(BaseModel):
    """Channel facts already known when asking for related videos."""

    channel_username: Optional[str] = None
    channel_avatar: Optional[str] = None
    channel_name: Optional[str] = None
