"""Federation Fetcher - canonical video, channel and outbox data over ActivityPub.

Every PixelTube page URL also serves its ActivityStreams representation when
asked with ``Accept: application/activity+json``:
  GET {base}/w/{id}                      Video object
  GET {base}/actors/{username}           Actor (channel)
  GET {base}/actors/{username}/followers OrderedCollection (totalItems)
  GET {base}/actors/{username}/outbox?page=true  OrderedCollectionPage

Only the primary fetch of an operation can fail it. Follow-up requests are
batched and any of them may fail; their data then falls back to defaults.
"""

import re
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pixeltube.errors import ContentUnavailableError, InvalidUrlError
from pixeltube.models import (
    AuthorLink,
    Channel,
    OutboxCursor,
    Page,
    PlatformContext,
    PlatformID,
    Rating,
    RecommendationContext,
    Thumbnail,
    Video,
    VideoDetails,
)
from pixeltube.services.activitystreams import (
    actor_display_name,
    collection_total,
    extract_channel_from_attributors,
    extract_video_sources,
    next_page_url,
    outbox_videos,
    parse_iso_date,
    parse_iso_duration,
    resolve_image_url,
    safe_count,
    text_or,
)
from pixeltube.services.http_client import (
    ACTIVITYPUB_HEADERS,
    HttpClient,
    HttpResponse,
    parse_json,
)
from pixeltube.services.social_links import extract_channel_links
from pixeltube.utils.logging import get_logger

UNKNOWN_CHANNEL = "Unknown Channel"


class FederationFetcher:
    """Builds PixelTube entities from ActivityPub objects."""

    def __init__(self, http: HttpClient, ctx: PlatformContext):
        self.http = http
        self.ctx = ctx
        self.logger = get_logger(__name__, plugin_id=ctx.plugin_id)
        host = re.escape(ctx.own_domain)
        self._video_url_re = re.compile(
            rf"^https?://(www\.)?{host}/w/([a-zA-Z0-9_-]+)", re.IGNORECASE
        )
        self._channel_url_re = re.compile(
            rf"^https?://(www\.)?{host}/c/([a-zA-Z0-9_-]+)", re.IGNORECASE
        )

    # =========================================================================
    # URL recognition
    # =========================================================================

    def extract_video_id(self, url: str) -> Optional[str]:
        match = self._video_url_re.match(url or "")
        return match.group(2) if match else None

    def extract_channel_username(self, url: str) -> Optional[str]:
        match = self._channel_url_re.match(url or "")
        return match.group(2) if match else None

    def is_video_url(self, url: str) -> bool:
        return self.extract_video_id(url) is not None

    def is_channel_url(self, url: str) -> bool:
        return self.extract_channel_username(url) is not None

    # =========================================================================
    # Video details
    # =========================================================================

    async def get_video_details(
        self, url: str
    ) -> Tuple[VideoDetails, RecommendationContext]:
        """Resolve a video page URL into full details.

        1. GET the Video object (fatal on failure)
        2. Batch the channel actor, likes and dislikes collections,
           each only if the video references it
        3. Assemble the entity from whatever follow-ups succeeded

        Returns the details plus the channel context used to look up
        related videos later.
        """
        video_id = self.extract_video_id(url)
        if not video_id:
            raise InvalidUrlError(url, "video")

        page_url = self.ctx.video_url(video_id)
        response = await self.http.get(page_url, ACTIVITYPUB_HEADERS)
        if not response.is_ok:
            raise ContentUnavailableError(
                f"Failed to fetch video: {response.code}",
                status_code=response.code,
                url=page_url,
            )
        ap_video = parse_json(response, "video object")
        if not isinstance(ap_video, Mapping):
            raise ContentUnavailableError("Malformed video object", url=page_url)

        channel = extract_channel_from_attributors(ap_video.get("attributedTo"))
        likes_url = _link_href(ap_video.get("likes"))
        dislikes_url = _link_href(ap_video.get("dislikes"))

        batch = self.http.batch()
        if channel.actor_url:
            batch.get(channel.actor_url, ACTIVITYPUB_HEADERS)
        if likes_url:
            batch.get(likes_url, ACTIVITYPUB_HEADERS)
        if dislikes_url:
            batch.get(dislikes_url, ACTIVITYPUB_HEADERS)
        responses = await batch.execute()

        # Responses are positional; an index only exists for included requests.
        channel_idx = 0 if channel.actor_url else -1
        likes_idx = (1 if channel.actor_url else 0) if likes_url else -1
        dislikes_idx = (
            (1 if channel.actor_url else 0) + (1 if likes_url else 0)
            if dislikes_url
            else -1
        )

        channel_name = channel.username or UNKNOWN_CHANNEL
        channel_avatar = self.ctx.logo_url
        actor = parse_json(_at(responses, channel_idx), "channel data")
        if isinstance(actor, Mapping):
            channel_name = actor_display_name(actor, channel_name)
            channel_avatar = resolve_image_url(actor.get("icon"), channel_avatar)

        likes = collection_total(parse_json(_at(responses, likes_idx), "likes"))
        dislikes = collection_total(
            parse_json(_at(responses, dislikes_idx), "dislikes")
        )

        sources = extract_video_sources(ap_video)
        if not sources:
            raise ContentUnavailableError("No video sources found", url=page_url)

        username = channel.username
        details = VideoDetails(
            id=PlatformID(value=video_id, plugin_id=self.ctx.plugin_id),
            name=text_or(ap_video.get("name"), "Untitled"),
            thumbnails=[
                Thumbnail(
                    url=resolve_image_url(
                        ap_video.get("icon"), self.ctx.thumbnail_fallback(video_id)
                    )
                )
            ],
            author=AuthorLink(
                id=PlatformID(value=username or "unknown", plugin_id=self.ctx.plugin_id),
                name=channel_name,
                url=self.ctx.channel_url(username) if username else self.ctx.base_url,
                thumbnail=channel_avatar,
            ),
            datetime=parse_iso_date(ap_video.get("published")),
            duration=parse_iso_duration(ap_video.get("duration")),
            view_count=safe_count(ap_video.get("views")),
            url=page_url,
            is_live=False,
            description=_text(ap_video.get("content")),
            video_sources=sources,
            rating=Rating(likes=likes, dislikes=dislikes),
        )

        context = RecommendationContext(
            channel_username=username,
            channel_avatar=channel_avatar,
            channel_name=channel_name,
        )
        self.logger.debug(
            f"Resolved video {video_id}: {len(sources)} sources, "
            f"channel={username!r}, likes={likes}, dislikes={dislikes}"
        )
        return details, context

    async def get_content_recommendations(
        self,
        url: str,
        context: Optional[Union[RecommendationContext, Dict[str, Any]]] = None,
    ) -> Page[Video]:
        """Other uploads from the video's channel, minus the video itself."""
        if isinstance(context, Mapping):
            context = RecommendationContext(**context)
        context = context or RecommendationContext()

        video_id = self.extract_video_id(url)
        username = context.channel_username

        if not username and video_id:
            response = await self.http.get(
                self.ctx.video_url(video_id), ACTIVITYPUB_HEADERS
            )
            ap_video = parse_json(response, "video for recommendations")
            if isinstance(ap_video, Mapping):
                username = extract_channel_from_attributors(
                    ap_video.get("attributedTo")
                ).username

        if not username:
            return Page()

        page = await self.get_channel_outbox_page(
            username,
            None,
            channel_avatar=context.channel_avatar,
            channel_name=context.channel_name,
        )
        page.results = [v for v in page.results if v.id.value != video_id]
        return page

    # =========================================================================
    # Channels
    # =========================================================================

    async def get_channel_details(self, url: str) -> Channel:
        """Resolve a channel URL into a Channel.

        The followers collection is requested speculatively alongside the
        actor. It is only trusted when the actor's declared followers URL
        matches (case-insensitively); otherwise the declared URL is fetched.
        """
        username = self.extract_channel_username(url)
        if not username:
            raise InvalidUrlError(url, "channel")

        actor_url = self.ctx.actor_url(username)
        speculative_url = f"{actor_url}/followers"

        actor_response, speculative_response = await (
            self.http.batch()
            .get(actor_url, ACTIVITYPUB_HEADERS)
            .get(speculative_url, ACTIVITYPUB_HEADERS)
            .execute()
        )

        if not actor_response.is_ok:
            raise ContentUnavailableError(
                f"Failed to fetch channel: {actor_response.code}",
                status_code=actor_response.code,
                url=actor_url,
            )
        actor = parse_json(actor_response, "channel actor")
        if not isinstance(actor, Mapping):
            raise ContentUnavailableError("Malformed channel actor", url=actor_url)

        followers = 0
        declared_url = _link_href(actor.get("followers"))
        if declared_url:
            followers_response: Optional[HttpResponse]
            if (
                declared_url.lower() == speculative_url.lower()
                and speculative_response.is_ok
            ):
                followers_response = speculative_response
            else:
                followers_response = await self.http.get(
                    declared_url, ACTIVITYPUB_HEADERS
                )
            followers = collection_total(
                parse_json(followers_response, "followers data")
            )

        summary = _text(actor.get("summary"))
        links = extract_channel_links(
            summary, _text(actor.get("support")), self.ctx.own_domain
        )

        return Channel(
            id=PlatformID(value=username, plugin_id=self.ctx.plugin_id),
            name=actor_display_name(actor, username),
            thumbnail=resolve_image_url(actor.get("icon"), self.ctx.logo_url),
            banner=resolve_image_url(actor.get("image"), ""),
            subscribers=followers,
            description=summary,
            url=self.ctx.channel_url(username),
            links=links,
        )

    async def get_channel_outbox_page(
        self,
        username: str,
        page_url: Optional[str] = None,
        channel_avatar: Optional[str] = None,
        channel_name: Optional[str] = None,
    ) -> Page[Video]:
        """One outbox page; a failed fetch is an empty, terminal page."""
        url = page_url or self.ctx.outbox_url(username)
        response = await self.http.get(url, ACTIVITYPUB_HEADERS)
        if not response.is_ok:
            self.logger.warning(f"Failed to fetch channel outbox: {response.code}")
            return Page()
        return self._parse_outbox(
            parse_json(response, "outbox page"), username, channel_avatar, channel_name
        )

    async def get_channel_contents(self, url: str) -> Page[Video]:
        """First outbox page of a channel URL, labelled with the actor's name/avatar.

        The actor and the outbox are fetched together; a failed actor fetch
        only loses the labels.
        """
        username = self.extract_channel_username(url)
        if not username:
            return Page()

        actor_response, outbox_response = await (
            self.http.batch()
            .get(self.ctx.actor_url(username), ACTIVITYPUB_HEADERS)
            .get(self.ctx.outbox_url(username), ACTIVITYPUB_HEADERS)
            .execute()
        )

        avatar: Optional[str] = None
        name: Optional[str] = None
        actor = parse_json(actor_response, "channel avatar")
        if isinstance(actor, Mapping):
            name = actor_display_name(actor, username)
            avatar = resolve_image_url(actor.get("icon"), "") or None

        if not outbox_response.is_ok:
            self.logger.warning(f"Failed to fetch channel outbox: {outbox_response.code}")
            return Page()
        return self._parse_outbox(
            parse_json(outbox_response, "outbox page"), username, avatar, name
        )

    def _parse_outbox(
        self,
        data: Any,
        username: str,
        channel_avatar: Optional[str],
        channel_name: Optional[str],
    ) -> Page[Video]:
        videos = outbox_videos(data, username, channel_avatar, channel_name, self.ctx)
        next_url = next_page_url(data)
        cursor = None
        if next_url:
            cursor = OutboxCursor(
                username=username,
                page_url=next_url,
                channel_avatar=channel_avatar,
                channel_name=channel_name,
            )
        return Page(results=videos, next_cursor=cursor)


# ======================================================================
# Module-level helpers
# ======================================================================


def _at(responses: List[HttpResponse], index: int) -> Optional[HttpResponse]:
    if 0 <= index < len(responses):
        return responses[index]
    return None


def _link_href(value: Any) -> Optional[str]:
    """A collection reference as a URL (bare string or object with id)."""
    if isinstance(value, str) and value:
        return value
    if isinstance(value, Mapping):
        ref = value.get("id") or value.get("href")
        if isinstance(ref, str) and ref:
            return ref
    return None


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""
