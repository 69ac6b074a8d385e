"""
Adapter logging: every record is tagged ``[PixelTube]`` so host logs can be
filtered per plugin. Loggers built from a PlatformContext that carries a
plugin id are tagged ``[PixelTube plugin-id]``.

    logger = get_logger(__name__, plugin_id=ctx.plugin_id)
    logger.warning("Failed to fetch channel outbox: 502")
    # [PixelTube plugin-123] Failed to fetch channel outbox: 502

Handlers and the root level belong to the host; the adapter only sets the
level of its own ``pixeltube`` logger.
"""

import logging
from typing import Optional

DEFAULT_PREFIX = "PixelTube"
PACKAGE_LOGGER = "pixeltube"


class PrefixedLogger(logging.LoggerAdapter):
    """LoggerAdapter that tags messages with the adapter prefix and plugin id."""

    def __init__(
        self,
        logger: logging.Logger,
        prefix: str = DEFAULT_PREFIX,
        plugin_id: Optional[str] = None,
    ):
        super().__init__(logger, {})
        self.tag = f"[{prefix} {plugin_id}]" if plugin_id else f"[{prefix}]"

    def process(self, msg, kwargs):
        return f"{self.tag} {msg}", kwargs


def get_logger(
    name: str,
    prefix: Optional[str] = DEFAULT_PREFIX,
    plugin_id: Optional[str] = None,
) -> logging.Logger:
    """Logger for ``name``; pass ``prefix=None`` for an untagged stdlib logger."""
    base_logger = logging.getLogger(name)
    if prefix:
        return PrefixedLogger(base_logger, prefix, plugin_id)
    return base_logger


def set_log_level(level: str = "INFO") -> None:
    """Apply a level name to the ``pixeltube`` logger tree; unknown names mean INFO."""
    logging.getLogger(PACKAGE_LOGGER).setLevel(
        getattr(logging, level.upper(), logging.INFO)
    )
