"""
Exception hierarchy surfaced to the host.

Callers see an error for a URL the adapter does not recognise, for content
that cannot be played, and for paging past the last page. Everything else is
absorbed by the fetchers and mapped to defaults.
"""

from typing import Any, Dict, Optional


class PixelTubeError(Exception):
    """Base exception for all PixelTube adapter errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidUrlError(PixelTubeError):
    """The caller supplied a URL that is not a PixelTube video or channel URL."""

    def __init__(self, url: str, kind: str = "content"):
        self.url = url
        super().__init__(f"Invalid {kind} URL: {url}", {"url": url})


class ContentUnavailableError(PixelTubeError):
    """The primary fetch failed, or a video has no playable sources."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        self.status_code = status_code
        self.url = url
        details: Dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        if url:
            details["url"] = url
        super().__init__(message, details)


class PagerExhaustedError(PixelTubeError):
    """next_page() was called on a pager that has no continuation."""
