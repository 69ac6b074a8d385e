"""
Configuration module - environment-backed settings for the PixelTube adapter.
"""

from .settings import (
    get_settings,
    Settings,
)

__all__ = [
    "get_settings",
    "Settings",
]
