"""ActivityStreams normaliser - raw federation JSON to strict fields.

ActivityStreams lets most properties be a single value or a list, and a link
be a bare string or a Link object. Everything here accepts either shape and
falls back to a default instead of raising.

See https://www.w3.org/TR/activitystreams-core/#jsonld
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from pixeltube.models import AuthorLink, PlatformContext, PlatformID, Thumbnail, Video, VideoSource
from pixeltube.utils.logging import get_logger

logger = get_logger(__name__)

MIRROR_MARKER = "/mirrorservice"

_ISO_DURATION_RE = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")
_ACTOR_USERNAME_RE = re.compile(r"/actors/([^/]+)/?$")
_TRAILING_UUID_RE = re.compile(r"([a-f0-9-]{36})$", re.IGNORECASE)


@dataclass(frozen=True)
class ChannelRef:
    """Channel resolved from attributedTo; both None when unknown."""
    username: Optional[str] = None
    actor_url: Optional[str] = None


def to_array(value: Any) -> List[Any]:
    """Normalise a scalar-or-array ActivityStreams property to a list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    return [value]


def resolve_image_url(field: Any, default: str) -> str:
    """First icon/image URL of a property, or ``default``."""
    items = to_array(field)
    if not items:
        return default
    first = items[0]
    if isinstance(first, str) and first:
        return first
    if isinstance(first, Mapping):
        candidate = first.get("url")
        if isinstance(candidate, str) and candidate:
            return candidate
    return default


def parse_iso_date(value: Any) -> int:
    """Parse an ISO 8601 timestamp to Unix seconds; 0 when absent or invalid."""
    if not value or not isinstance(value, str):
        return 0
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return int(parsed.timestamp())
    except (ValueError, OverflowError, OSError):
        return 0


def parse_iso_duration(value: Any) -> int:
    """Convert ISO 8601 durations (PTxxHxxMxxS) into seconds."""
    if not value or not isinstance(value, str):
        return 0
    match = _ISO_DURATION_RE.search(value)
    if not match:
        return 0
    hours, minutes, seconds = match.groups()
    return (int(hours or 0) * 3600) + (int(minutes or 0) * 60) + int(seconds or 0)


def text_or(value: Any, default: str) -> str:
    """``value`` if it is a non-empty string, else ``default``."""
    return value if isinstance(value, str) and value else default


def safe_count(value: Any) -> int:
    """Coerce a count-ish value to a non-negative int."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, str):
        value = value.strip()
    elif not isinstance(value, (int, float)):
        return 0
    try:
        return max(0, int(value))
    except (ValueError, OverflowError):
        return 0


def collection_total(data: Any) -> int:
    """totalItems of an OrderedCollection, 0 if missing."""
    if not isinstance(data, Mapping):
        return 0
    return safe_count(data.get("totalItems"))


def extract_channel_from_attributors(attributed_to: Any) -> ChannelRef:
    """Resolve the origin channel, skipping mirror/relay actors.

    The first non-mirror entry wins even when its URL does not carry an
    ``/actors/{username}`` path; the username is then None.
    """
    for actor in to_array(attributed_to):
        if not actor:
            continue
        actor_url = actor if isinstance(actor, str) else None
        if isinstance(actor, Mapping):
            actor_url = actor.get("id")
        if not isinstance(actor_url, str) or not actor_url:
            continue
        if MIRROR_MARKER in actor_url:
            continue
        match = _ACTOR_USERNAME_RE.search(actor_url)
        return ChannelRef(
            username=match.group(1) if match else None,
            actor_url=actor_url,
        )
    return ChannelRef()


def extract_attributed_name(attributed_to: Any) -> Optional[str]:
    """Display name of the first embedded actor object that carries one."""
    for actor in to_array(attributed_to):
        if isinstance(actor, Mapping):
            name = actor.get("name")
            if isinstance(name, str) and name:
                return name
    return None


def _source_name(link: Mapping[str, Any], media_type: str) -> str:
    height = safe_count(link.get("height"))
    if height:
        return f"{height}p"
    width = safe_count(link.get("width"))
    if width:
        return f"{width}w"
    return media_type.replace("video/", "", 1).upper()


def extract_video_sources(video: Mapping[str, Any]) -> List[VideoSource]:
    """Direct video links of a Video object, highest resolution first.

    The url list also holds the HTML permalink and other non-video links;
    only ``Link`` entries with a ``video/*`` media type are sources.
    """
    sources: List[VideoSource] = []
    for link in to_array(video.get("url")):
        if not isinstance(link, Mapping):
            continue
        media_type = link.get("mediaType")
        href = link.get("href")
        if link.get("type") != "Link" or not isinstance(media_type, str):
            continue
        if not media_type.startswith("video/") or not isinstance(href, str):
            continue
        sources.append(
            VideoSource(
                name=_source_name(link, media_type),
                url=href,
                width=safe_count(link.get("width")),
                height=safe_count(link.get("height")),
                container=media_type,
                codec="VP9" if media_type == "video/webm" else "H264",
            )
        )

    # sorted() is stable, equal heights keep document order
    return sorted(sources, key=lambda s: s.height, reverse=True)


def extract_video_uuid(video: Mapping[str, Any]) -> Optional[str]:
    """Video id: explicit uuid, else trailing UUID of id, else last path segment."""
    uuid = video.get("uuid")
    if isinstance(uuid, str) and uuid:
        return uuid

    object_id = video.get("id")
    if not isinstance(object_id, str) or not object_id:
        return None

    match = _TRAILING_UUID_RE.search(object_id)
    if match:
        return match.group(1)
    return object_id.rstrip("/").split("/")[-1] or None


def video_from_activitystreams(
    video: Mapping[str, Any],
    username: str,
    channel_avatar: Optional[str],
    channel_name: Optional[str],
    ctx: PlatformContext,
) -> Optional[Video]:
    """Map an outbox Video object to a listing entry; None if it has no id."""
    video_id = extract_video_uuid(video)
    if not video_id:
        logger.debug(f"Skipping outbox video without id: {video.get('name')!r}")
        return None

    author_name = (
        extract_attributed_name(video.get("attributedTo"))
        or channel_name
        or username
    )

    return Video(
        id=PlatformID(value=video_id, plugin_id=ctx.plugin_id),
        name=text_or(video.get("name"), "Untitled"),
        thumbnails=[
            Thumbnail(
                url=resolve_image_url(
                    video.get("icon"), ctx.thumbnail_fallback(video_id)
                )
            )
        ],
        author=AuthorLink(
            id=PlatformID(value=username, plugin_id=ctx.plugin_id),
            name=author_name,
            url=ctx.channel_url(username),
            thumbnail=channel_avatar or ctx.logo_url,
        ),
        datetime=parse_iso_date(video.get("published")),
        duration=parse_iso_duration(video.get("duration")),
        view_count=safe_count(video.get("views")),
        url=ctx.video_url(video_id),
        is_live=False,
    )


def outbox_videos(
    page: Any,
    username: str,
    channel_avatar: Optional[str],
    channel_name: Optional[str],
    ctx: PlatformContext,
) -> List[Video]:
    """Videos published by Create activities on an OrderedCollectionPage."""
    if not isinstance(page, Mapping):
        return []

    videos: List[Video] = []
    for activity in to_array(page.get("orderedItems")):
        if not isinstance(activity, Mapping) or activity.get("type") != "Create":
            continue
        obj = activity.get("object")
        if not isinstance(obj, Mapping) or obj.get("type") != "Video":
            continue
        try:
            video = video_from_activitystreams(
                obj, username, channel_avatar, channel_name, ctx
            )
        except ValidationError as e:
            logger.warning(f"Skipping malformed outbox video: {e}")
            continue
        if video:
            videos.append(video)
    return videos


def next_page_url(page: Any) -> Optional[str]:
    """The page's ``next`` link, as a string, if any."""
    if not isinstance(page, Mapping):
        return None
    nxt = page.get("next")
    if isinstance(nxt, Mapping):
        nxt = nxt.get("id") or nxt.get("href")
    return nxt if isinstance(nxt, str) and nxt else None


def actor_display_name(actor: Dict[str, Any], fallback: str) -> str:
    """Actor name, then preferredUsername, then ``fallback``."""
    return text_or(
        actor.get("name"), text_or(actor.get("preferredUsername"), fallback)
    )
