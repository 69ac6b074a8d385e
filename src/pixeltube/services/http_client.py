"""HTTP transport - single GETs and batched parallel GETs over httpx.

Every request resolves to an HttpResponse; transport errors and timeouts are
reported as a non-OK response with code 0 so callers can treat any failed
sub-request as absent data.
"""

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import httpx

from pixeltube.utils.logging import get_logger

logger = get_logger(__name__)

ACTIVITYPUB_HEADERS = {"Accept": "application/activity+json"}


@dataclass
class HttpResponse:
    """Outcome of one GET."""
    url: str
    code: int                    # HTTP status, 0 when no response arrived
    body: str = ""

    @property
    def is_ok(self) -> bool:
        return 200 <= self.code < 300

    def json(self) -> Any:
        """Decode the body; raises ValueError on malformed JSON."""
        return json.loads(self.body)


class HttpClient:
    """Thin wrapper over httpx.AsyncClient owned by one PixelTubeSource."""

    def __init__(
        self,
        timeout: float = 15.0,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"User-Agent": user_agent} if user_agent else None
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers=headers,
            follow_redirects=True,
            transport=transport,
        )

    async def get(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> HttpResponse:
        """GET a URL. Never raises for network failures."""
        try:
            resp = await self._client.get(url, headers=headers, params=params)
        except httpx.HTTPError as e:
            logger.warning(f"GET {url} failed: {e}")
            return HttpResponse(url=url, code=0)

        if resp.is_error:
            logger.debug(f"GET {url} returned {resp.status_code}")
        return HttpResponse(url=url, code=resp.status_code, body=resp.text)

    def batch(self) -> "RequestBatch":
        """Start a batch of GETs executed together."""
        return RequestBatch(self)

    async def aclose(self) -> None:
        await self._client.aclose()


class RequestBatch:
    """Queue of independent GETs awaited as a unit.

    Responses come back in submission order.
    """

    def __init__(self, client: HttpClient):
        self._client = client
        self._requests: List[Tuple[str, Optional[Dict[str, str]]]] = []

    def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> "RequestBatch":
        self._requests.append((url, headers))
        return self

    async def execute(self) -> List[HttpResponse]:
        if not self._requests:
            return []

        tasks = [self._client.get(url, headers) for url, headers in self._requests]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        responses: List[HttpResponse] = []
        for (url, _), result in zip(self._requests, results):
            if isinstance(result, Exception):
                logger.warning(f"Batched GET {url} failed: {result}")
                responses.append(HttpResponse(url=url, code=0))
            else:
                responses.append(result)
        return responses


def parse_json(response: Optional[HttpResponse], what: str) -> Optional[Any]:
    """Decode an OK response body, or None if absent, failed or malformed."""
    if response is None or not response.is_ok:
        return None
    try:
        return response.json()
    except ValueError as e:
        logger.warning(f"Error parsing {what}: {e}")
        return None
