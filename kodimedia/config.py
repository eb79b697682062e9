"""Configuration for Kodi sessions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final, Self

import voluptuous as vol

from .const import (
    DEFAULT_PORT,
    DEFAULT_RECONNECT_INTERVAL,
    DEFAULT_TIMEOUT,
    DIRECTION_NEXT,
    DIRECTION_PREVIOUS,
)

# Configuration keys
CONF_HOST: Final = "host"
CONF_PORT: Final = "port"
CONF_RECONNECT_INTERVAL: Final = "reconnect_interval"
CONF_TIMEOUT: Final = "timeout"

# Volume limits
MIN_VOLUME: Final = 0
MAX_VOLUME: Final = 100


def _non_empty_string(value: Any) -> str:
    """Validate a non-empty, stripped string."""
    if not isinstance(value, str) or not value.strip():
        raise vol.Invalid("expected a non-empty string")
    return value.strip()


CONFIG_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_HOST): _non_empty_string,
        vol.Optional(CONF_PORT, default=DEFAULT_PORT): vol.All(
            vol.Coerce(int), vol.Range(min=1, max=65535)
        ),
        vol.Optional(CONF_RECONNECT_INTERVAL, default=DEFAULT_RECONNECT_INTERVAL): vol.All(
            vol.Coerce(float), vol.Range(min=0, min_included=False)
        ),
        vol.Optional(CONF_TIMEOUT, default=DEFAULT_TIMEOUT): vol.All(
            vol.Coerce(float), vol.Range(min=0, min_included=False)
        ),
    }
)

VOLUME_SCHEMA = vol.Schema(
    vol.All(vol.Coerce(int), vol.Range(min=MIN_VOLUME, max=MAX_VOLUME))
)

DIRECTION_SCHEMA = vol.Schema(vol.In([DIRECTION_NEXT, DIRECTION_PREVIOUS]))


@dataclass(frozen=True, slots=True)
class KodiSessionConfig:
    """Validated settings for one Kodi endpoint.

    Attributes:
        host: Kodi hostname or IP address.
        port: Kodi WebSocket (JSON-RPC) port.
        reconnect_interval: Seconds between reconnect attempts.
        timeout: Seconds to wait for each JSON-RPC response.
    """

    host: str
    port: int = DEFAULT_PORT
    reconnect_interval: float = DEFAULT_RECONNECT_INTERVAL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Validate a mapping and build the configuration.

        Raises:
            vol.Invalid: If the mapping does not match CONFIG_SCHEMA.
        """
        validated = CONFIG_SCHEMA(dict(data))
        return cls(
            host=validated[CONF_HOST],
            port=validated[CONF_PORT],
            reconnect_interval=validated[CONF_RECONNECT_INTERVAL],
            timeout=validated[CONF_TIMEOUT],
        )


__all__ = [
    "CONFIG_SCHEMA",
    "DIRECTION_SCHEMA",
    "VOLUME_SCHEMA",
    "KodiSessionConfig",
]
