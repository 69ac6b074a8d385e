"""PixelTube Source - the host-facing entry points.

Host -> PixelTubeSource -> FeedClient (REST listings) / FederationFetcher
(ActivityPub) -> normalised models and Pagers.
"""

from typing import Any, Dict, Optional, Union

from pixeltube.config import Settings, get_settings
from pixeltube.errors import PixelTubeError
from pixeltube.models import (
    AuthorLink,
    Capabilities,
    Channel,
    ChannelSearchCursor,
    HomeCursor,
    PlatformContext,
    RecommendationContext,
    Video,
    VideoDetails,
    VideoSearchCursor,
)
from pixeltube.services.federation import FederationFetcher
from pixeltube.services.feed_client import FeedClient
from pixeltube.services.http_client import HttpClient
from pixeltube.services.pagers import PageLoader, Pager
from pixeltube.utils.logging import get_logger, set_log_level

FEED_MIXED = "MIXED"
FEED_VIDEOS = "VIDEOS"


class PixelTubeSource:
    """Media source adapter for a PixelTube instance."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http: Optional[HttpClient] = None,
    ):
        self.settings = settings or get_settings()
        self.http = http or HttpClient(
            timeout=self.settings.REQUEST_TIMEOUT,
            user_agent=self.settings.USER_AGENT,
        )
        self.user_settings: Dict[str, Any] = {}
        self._bind(PlatformContext.from_settings(self.settings))

    def _bind(self, ctx: PlatformContext) -> None:
        self.ctx = ctx
        self.logger = get_logger(__name__, plugin_id=ctx.plugin_id)
        self._feed = FeedClient(self.http, ctx)
        self._federation = FederationFetcher(self.http, ctx)
        self._loader = PageLoader(self._feed, self._federation)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def enable(
        self,
        config: Optional[Dict[str, Any]] = None,
        settings: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Bind the host's plugin config; called on load and on settings change."""
        set_log_level(self.settings.LOG_LEVEL)
        self.user_settings = dict(settings or {})
        self._bind(PlatformContext.from_settings(self.settings, config))
        self.logger.info("PixelTube plugin enabled")

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> "PixelTubeSource":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # =========================================================================
    # Feeds and search (REST API)
    # =========================================================================

    async def get_home(self) -> Pager[Video]:
        return await Pager.first(HomeCursor(page=1), self._loader)

    def get_search_capabilities(self) -> Capabilities:
        return Capabilities(types=[FEED_MIXED])

    async def search(self, query: str) -> Pager[Video]:
        """Search videos; a pasted video URL resolves straight to that video."""
        if self.is_content_details_url(query):
            try:
                details = await self.get_content_details(query)
                return Pager([details])
            except PixelTubeError as e:
                self.logger.info(f"Error fetching video from URL, falling back to search: {e}")
        return await Pager.first(VideoSearchCursor(page=1, search=query), self._loader)

    async def search_channels(self, query: str) -> Pager[AuthorLink]:
        return await Pager.first(
            ChannelSearchCursor(page=1, search=query or None), self._loader
        )

    # =========================================================================
    # Videos (ActivityPub)
    # =========================================================================

    def is_content_details_url(self, url: str) -> bool:
        return self._federation.is_video_url(url)

    async def get_content_details(self, url: str) -> VideoDetails:
        """Full video details; related videos resolve lazily from the channel outbox."""
        details, context = await self._federation.get_video_details(url)

        async def _recommendations() -> Pager[Video]:
            return await self.get_content_recommendations(url, context)

        details.set_recommendations(_recommendations)
        return details

    async def get_content_recommendations(
        self,
        url: str,
        context: Optional[Union[RecommendationContext, Dict[str, Any]]] = None,
    ) -> Pager[Video]:
        page = await self._federation.get_content_recommendations(url, context)
        return Pager.from_page(page, self._loader)

    # =========================================================================
    # Channels (ActivityPub)
    # =========================================================================

    def is_channel_url(self, url: str) -> bool:
        return self._federation.is_channel_url(url)

    async def get_channel(self, url: str) -> Channel:
        return await self._federation.get_channel_details(url)

    def get_channel_capabilities(self) -> Capabilities:
        return Capabilities(types=[FEED_VIDEOS])

    async def get_channel_contents(self, url: str) -> Pager[Video]:
        page = await self._federation.get_channel_contents(url)
        return Pager.from_page(page, self._loader)
