"""
Pytest configuration and shared fixtures for adapter tests.

Network access is replaced by an httpx.MockTransport routed by URL, so tests
can both script responses and count how often each URL was requested.
"""

import json
from collections import Counter
from typing import Any, Callable, Dict, List, Union

import httpx
import pytest

from pixeltube.config import Settings
from pixeltube.models import PlatformContext
from pixeltube.services.federation import FederationFetcher
from pixeltube.services.feed_client import FeedClient
from pixeltube.services.http_client import HttpClient
from pixeltube.services.pagers import PageLoader
from pixeltube.source import PixelTubeSource

BASE = "https://pixeltube.org"
VIDEO_UUID = "0b7a2a6e-6f1c-4a0e-9d0f-3c8b1d2e4f5a"

Route = Union[tuple, Callable[[httpx.Request], httpx.Response], Exception]


class FakeServer:
    """Scripted responses keyed by URL; unknown URLs return 404."""

    def __init__(self):
        self.routes: Dict[str, Route] = {}
        self.requests: List[httpx.Request] = []

    def add(self, url: str, body: Any = None, status: int = 200) -> None:
        self.routes[url] = (status, body)

    def add_handler(self, url: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[url] = handler

    def fail(self, url: str, exc: Exception) -> None:
        self.routes[url] = exc

    @property
    def hits(self) -> Counter:
        return Counter(str(r.url).lower() for r in self.requests)

    def count(self, url: str) -> int:
        return self.hits[url.lower()]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        full = str(request.url)
        bare = str(request.url.copy_with(query=None))
        route = self.routes.get(full, self.routes.get(bare))

        if route is None:
            return httpx.Response(404, text="not found")
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(request)

        status, body = route
        if isinstance(body, (dict, list)):
            return httpx.Response(status, text=json.dumps(body))
        return httpx.Response(status, text=body or "")


# =============================================================================
# Core fixtures
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def ctx(settings) -> PlatformContext:
    return PlatformContext.from_settings(settings, {"id": "plugin-123"})


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
async def http(server):
    client = HttpClient(timeout=5.0, transport=httpx.MockTransport(server))
    yield client
    await client.aclose()


@pytest.fixture
def federation(http, ctx) -> FederationFetcher:
    return FederationFetcher(http, ctx)


@pytest.fixture
def feed(http, ctx) -> FeedClient:
    return FeedClient(http, ctx)


@pytest.fixture
def loader(feed, federation) -> PageLoader:
    return PageLoader(feed, federation)


@pytest.fixture
def source(settings, http) -> PixelTubeSource:
    src = PixelTubeSource(settings=settings, http=http)
    src.enable({"id": "plugin-123"}, {})
    return src


# =============================================================================
# ActivityStreams sample data
# =============================================================================

@pytest.fixture
def ap_video() -> Dict[str, Any]:
    """A PixelTube Video object as served at /w/{id}."""
    return {
        "type": "Video",
        "id": f"{BASE}/videos/watch/{VIDEO_UUID}",
        "uuid": VIDEO_UUID,
        "name": "Building a Birdhouse",
        "duration": "PT22M57S",
        "published": "2024-03-01T12:00:00Z",
        "views": 1500,
        "content": "How to build a birdhouse.",
        "icon": [
            {"type": "Image", "url": f"https://cdn.pixeltube.org/thumbs/{VIDEO_UUID}.jpg"},
        ],
        "url": [
            {"type": "Link", "mediaType": "text/html", "href": f"{BASE}/w/{VIDEO_UUID}"},
            {"type": "Link", "mediaType": "video/mp4", "href": "https://cdn.pixeltube.org/v/720.mp4",
             "height": 720, "width": 1280},
            {"type": "Link", "mediaType": "video/webm", "href": "https://cdn.pixeltube.org/v/1080.webm",
             "height": 1080, "width": 1920},
        ],
        "attributedTo": [
            {"type": "Application", "id": f"{BASE}/mirrorservice/actors/bot"},
            {"type": "Person", "id": f"{BASE}/actors/alice"},
        ],
        "likes": f"{BASE}/w/{VIDEO_UUID}/likes",
        "dislikes": f"{BASE}/w/{VIDEO_UUID}/dislikes",
    }


@pytest.fixture
def ap_actor() -> Dict[str, Any]:
    return {
        "type": "Person",
        "id": f"{BASE}/actors/alice",
        "preferredUsername": "alice",
        "name": "Alice Makes Things",
        "summary": "Woodworking. [Patreon](https://patreon.com/alice) https://twitter.com/alice",
        "support": "Tips: https://ko-fi.com/alice https://patreon.com/other",
        "icon": {"type": "Image", "url": "https://cdn.pixeltube.org/avatars/alice.png"},
        "image": [{"type": "Image", "url": "https://cdn.pixeltube.org/banners/alice.png"}],
        "followers": f"{BASE}/actors/alice/followers",
        "outbox": f"{BASE}/actors/alice/outbox",
    }


def _outbox_page(videos: List[Dict[str, Any]], next_url: Union[str, None] = None) -> Dict[str, Any]:
    page: Dict[str, Any] = {
        "type": "OrderedCollectionPage",
        "orderedItems": [{"type": "Create", "object": v} for v in videos],
    }
    if next_url:
        page["next"] = next_url
    return page


def _outbox_video(uuid: str, name: str = "A video") -> Dict[str, Any]:
    return {
        "type": "Video",
        "id": f"{BASE}/videos/watch/{uuid}",
        "name": name,
        "duration": "PT90S",
        "published": "2024-01-01T00:00:00Z",
        "views": 3,
    }


@pytest.fixture
def make_outbox_page():
    """Factory: OrderedCollectionPage wrapping videos in Create activities."""
    return _outbox_page


@pytest.fixture
def make_outbox_video():
    """Factory: minimal outbox Video object with the given uuid."""
    return _outbox_video
