"""Cursor variants for the four listing flows.

A cursor describes how to fetch a page. Pagers store the cursor for the
*next* page, or None once the listing is exhausted.
"""

from typing import Annotated, Generic, List, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, Field

T = TypeVar("T")


class HomeCursor(BaseModel):
    kind: Literal["home"] = "home"
    page: int = Field(default=1, ge=1)


class VideoSearchCursor(BaseModel):
    kind: Literal["video_search"] = "video_search"
    page: int = Field(default=1, ge=1)
    search: str


class ChannelSearchCursor(BaseModel):
    kind: Literal["channel_search"] = "channel_search"
    page: int = Field(default=1, ge=1)
    search: Optional[str] = None


class OutboxCursor(BaseModel):
    """Federation outbox position; page_url None means the first page."""

    kind: Literal["outbox"] = "outbox"
    username: str
    page_url: Optional[str] = None
    channel_avatar: Optional[str] = None
    channel_name: Optional[str] = None


PageCursor = Annotated[
    Union[HomeCursor, VideoSearchCursor, ChannelSearchCursor, OutboxCursor],
    Field(discriminator="kind"),
]


class Page(BaseModel, Generic[T]):
    """One page of results plus the cursor for the page after it."""

    results: List[T] = Field(default_factory=list)
    next_cursor: Optional[PageCursor] = None

    @property
    def has_more(self) -> bool:
        return self.next_cursor is not None
