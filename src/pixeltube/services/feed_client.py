"""REST Feed Client - home feed and search over the custom listing API.

ActivityPub has no global feed or search, so these listings use:
  GET {base}/api/videos?page=N&limit=24[&search=q]    -> {videos: [...], total}
  GET {base}/api/channels?page=N&limit=12[&search=q]  -> {channels: [...], total}

Feed browsing degrades to an empty, terminal page on any failure.
"""

from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from pixeltube.models import (
    AuthorLink,
    ChannelSearchCursor,
    HomeCursor,
    Page,
    PageCursor,
    PlatformContext,
    PlatformID,
    Thumbnail,
    Video,
    VideoSearchCursor,
)
from pixeltube.services.activitystreams import parse_iso_date, safe_count, text_or
from pixeltube.services.http_client import HttpClient, parse_json
from pixeltube.utils.logging import get_logger

API_VIDEOS = "/api/videos"
API_CHANNELS = "/api/channels"


class FeedClient:
    """Stateless paginated reads against the PixelTube listing API."""

    def __init__(self, http: HttpClient, ctx: PlatformContext):
        self.http = http
        self.ctx = ctx
        self.logger = get_logger(__name__, plugin_id=ctx.plugin_id)

    async def get_home(self, page: int = 1) -> Page[Video]:
        """Home feed page (newest videos)."""
        data = await self._get_listing(API_VIDEOS, page, self.ctx.video_page_size)
        if data is None:
            return Page()
        videos = self._map_items(data.get("videos"), self._to_video)
        cursor = None
        if _has_more(data, page, self.ctx.video_page_size):
            cursor = HomeCursor(page=page + 1)
        return Page(results=videos, next_cursor=cursor)

    async def search_videos(self, query: str, page: int = 1) -> Page[Video]:
        """Video search results page."""
        data = await self._get_listing(
            API_VIDEOS, page, self.ctx.video_page_size, query
        )
        if data is None:
            return Page()
        videos = self._map_items(data.get("videos"), self._to_video)
        cursor = None
        if _has_more(data, page, self.ctx.video_page_size):
            cursor = VideoSearchCursor(page=page + 1, search=query)
        return Page(results=videos, next_cursor=cursor)

    async def search_channels(
        self, query: Optional[str], page: int = 1
    ) -> Page[AuthorLink]:
        """Channel search results page."""
        data = await self._get_listing(
            API_CHANNELS, page, self.ctx.channel_page_size, query
        )
        if data is None:
            return Page()
        channels = self._map_items(data.get("channels"), self._to_author_link)
        cursor: Optional[PageCursor] = None
        if _has_more(data, page, self.ctx.channel_page_size):
            cursor = ChannelSearchCursor(page=page + 1, search=query)
        return Page(results=channels, next_cursor=cursor)

    # =========================================================================
    # Internals
    # =========================================================================

    async def _get_listing(
        self, path: str, page: int, limit: int, search: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if search:
            params["search"] = search

        response = await self.http.get(f"{self.ctx.base_url}{path}", params=params)
        if not response.is_ok:
            self.logger.warning(f"Failed to fetch {path} page {page}: {response.code}")
            return None

        data = parse_json(response, f"{path} page {page}")
        if not isinstance(data, dict):
            return None
        return data

    def _map_items(self, items: Any, mapper) -> List[Any]:
        if not isinstance(items, list):
            return []
        mapped = []
        for item in items:
            if not isinstance(item, Mapping):
                continue
            try:
                mapped.append(mapper(item))
            except (ValidationError, KeyError, TypeError) as e:
                self.logger.warning(f"Skipping malformed listing item: {e}")
        return mapped

    def _to_video(self, v: Mapping[str, Any]) -> Video:
        video_id = str(v["id"])
        username = str(v.get("channelUsername") or "")
        return Video(
            id=PlatformID(value=video_id, plugin_id=self.ctx.plugin_id),
            name=text_or(v.get("name"), "Untitled"),
            thumbnails=[
                Thumbnail(
                    url=v.get("thumbnailUrl") or self.ctx.thumbnail_fallback(video_id)
                )
            ],
            author=AuthorLink(
                id=PlatformID(value=username, plugin_id=self.ctx.plugin_id),
                name=text_or(v.get("channelName"), username),
                url=self.ctx.channel_url(username),
                thumbnail=v.get("channelAvatar") or self.ctx.logo_url,
            ),
            datetime=parse_iso_date(v.get("publishedAt")),
            duration=safe_count(v.get("duration")),
            view_count=safe_count(v.get("views")),
            url=self.ctx.video_url(video_id),
            is_live=False,
        )

    def _to_author_link(self, c: Mapping[str, Any]) -> AuthorLink:
        username = str(c["username"])
        return AuthorLink(
            id=PlatformID(value=username, plugin_id=self.ctx.plugin_id),
            name=text_or(c.get("name"), username),
            url=self.ctx.channel_url(username),
            thumbnail=c.get("avatar") or self.ctx.logo_url,
            subscribers=safe_count(c.get("followers")),
        )


def _has_more(data: Mapping[str, Any], page: int, limit: int) -> bool:
    return safe_count(data.get("total")) > page * limit
