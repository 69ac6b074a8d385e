"""PixelTube media source adapter (REST listings + ActivityPub federation)."""

from pixeltube.errors import (
    ContentUnavailableError,
    InvalidUrlError,
    PagerExhaustedError,
    PixelTubeError,
)
from pixeltube.source import PixelTubeSource

__version__ = "0.1.0"

__all__ = [
    "ContentUnavailableError",
    "InvalidUrlError",
    "PagerExhaustedError",
    "PixelTubeError",
    "PixelTubeSource",
]
