"""Pagers - the host's "more results" contract over every listing flow.

A Pager holds exactly one page of results and the cursor for the next one.
next_page() loads that cursor through PageLoader, which dispatches on the
cursor kind, and replaces the pager's state in place. Pages are never merged.
"""

from typing import Any, Dict, Generic, List, Optional, TypeVar

from pixeltube.errors import PagerExhaustedError
from pixeltube.models import (
    ChannelSearchCursor,
    HomeCursor,
    OutboxCursor,
    Page,
    PageCursor,
    VideoSearchCursor,
)
from pixeltube.services.federation import FederationFetcher
from pixeltube.services.feed_client import FeedClient
from pixeltube.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class PageLoader:
    """Fetches the page a cursor points at."""

    def __init__(self, feed: FeedClient, federation: FederationFetcher):
        self.feed = feed
        self.federation = federation

    async def load(self, cursor: PageCursor) -> Page:
        if isinstance(cursor, HomeCursor):
            return await self.feed.get_home(cursor.page)
        if isinstance(cursor, VideoSearchCursor):
            return await self.feed.search_videos(cursor.search, cursor.page)
        if isinstance(cursor, ChannelSearchCursor):
            return await self.feed.search_channels(cursor.search, cursor.page)
        if isinstance(cursor, OutboxCursor):
            return await self.federation.get_channel_outbox_page(
                cursor.username,
                cursor.page_url,
                channel_avatar=cursor.channel_avatar,
                channel_name=cursor.channel_name,
            )
        raise TypeError(f"Unsupported cursor: {cursor!r}")


class Pager(Generic[T]):
    """One page of results plus how to get the next."""

    def __init__(
        self,
        results: List[T],
        cursor: Optional[PageCursor] = None,
        loader: Optional[PageLoader] = None,
    ):
        self.results = list(results)
        self.cursor = cursor
        self._loader = loader

    @classmethod
    def from_page(cls, page: Page, loader: Optional[PageLoader]) -> "Pager":
        return cls(page.results, page.next_cursor, loader)

    @classmethod
    async def first(cls, cursor: PageCursor, loader: PageLoader) -> "Pager":
        """Load the page ``cursor`` points at and wrap it."""
        return cls.from_page(await loader.load(cursor), loader)

    @property
    def has_more(self) -> bool:
        return self.cursor is not None and self._loader is not None

    async def next_page(self) -> "Pager":
        """Replace this pager's results with the next page."""
        if not self.has_more:
            raise PagerExhaustedError("No more results")

        page = await self._loader.load(self.cursor)
        logger.debug(
            f"Loaded {len(page.results)} results for {self.cursor.kind} cursor"
        )
        self.results = list(page.results)
        self.cursor = page.next_cursor
        return self

    def state(self) -> Dict[str, Any]:
        """Serialisable snapshot of the pager (for comparison and debugging)."""
        return {
            "results": [r.model_dump() for r in self.results],
            "cursor": self.cursor.model_dump() if self.cursor else None,
        }

    def __repr__(self) -> str:
        kind = self.cursor.kind if self.cursor else None
        return f"Pager(results={len(self.results)}, next={kind})"
