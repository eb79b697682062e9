"""Per-session logging for the Kodi client."""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any

type KodiLogger = logging.Logger | logging.LoggerAdapter[Any]


class KodiLoggerAdapter(logging.LoggerAdapter):  # type: ignore[type-arg]
    """Prefix every record with the endpoint of the session it belongs to.

    The endpoint is also attached to the record as ``kodi_host`` and
    ``kodi_port`` for handlers that format structured output.
    """

    def __init__(self, logger: logging.Logger, host: str, port: int) -> None:
        """Initialize the adapter.

        Args:
            logger: Underlying logger.
            host: Kodi host of the session.
            port: Kodi port of the session.
        """
        super().__init__(logger, {"kodi_host": host, "kodi_port": port})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        """Add the endpoint prefix and extra fields."""
        extra = self.extra or {}
        kwargs["extra"] = {**extra, **kwargs.get("extra", {})}
        return f"[{extra['kodi_host']}:{extra['kodi_port']}] {msg}", kwargs


__all__ = ["KodiLogger", "KodiLoggerAdapter"]
