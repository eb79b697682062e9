"""Connection supervision for a Kodi endpoint."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any

import aiohttp

from .const import DEFAULT_RECONNECT_INTERVAL, EVENT_CLOSE, EVENT_ERROR
from .exceptions import KodiError
from .log import KodiLogger
from .models import Availability
from .websocket import KodiTransport

_LOGGER = logging.getLogger(__name__)

# Failures of a connect attempt that re-arm the reconnect timer
CONNECT_ERRORS = (KodiError, aiohttp.ClientError, OSError, TimeoutError)


class AvailabilityChange(StrEnum):
    """Availability transitions reported to the session."""

    CONNECTED = "connected"
    RECONNECTED = "reconnected"
    UNAVAILABLE = "unavailable"


type TransportFactory = Callable[[str, int], Awaitable[KodiTransport]]
type ConnectedCallback = Callable[[KodiTransport], None]
type AvailabilityCallback = Callable[[AvailabilityChange], None]


class KodiConnectionSupervisor:
    """Keep one transport to Kodi alive, reconnecting at a fixed interval.

    The supervisor is either available with a live transport, or unavailable
    with exactly one reconnect attempt scheduled. Failed attempts are retried
    forever at the same interval; only ``async_teardown`` ends the loop.

    The reconnect timer stays set from the moment it is scheduled until an
    attempt succeeds, so duplicate ``close``/``error`` signals and losses
    reported while an attempt is in flight never schedule a second timer.
    """

    def __init__(
        self,
        transport_factory: TransportFactory,
        on_connected: ConnectedCallback,
        on_availability: AvailabilityCallback,
        reconnect_interval: float = DEFAULT_RECONNECT_INTERVAL,
        logger: KodiLogger | None = None,
    ) -> None:
        """Initialize the supervisor.

        Args:
            transport_factory: Opens a connected transport for (host, port).
            on_connected: Called with every new transport before the
                supervisor reports itself available.
            on_availability: Called on every availability transition.
            reconnect_interval: Seconds between reconnect attempts.
            logger: Logger to use instead of the module logger.
        """
        self._transport_factory = transport_factory
        self._on_connected = on_connected
        self._on_availability = on_availability
        self._reconnect_interval = reconnect_interval
        self._logger = logger or _LOGGER
        self._availability = Availability.DISCONNECTED
        self._transport: KodiTransport | None = None
        self._unsubscribers: list[Callable[[], None]] = []
        self._reconnect_timer: asyncio.TimerHandle | None = None
        self._connect_task: asyncio.Task[bool] | None = None
        self._cleanup_tasks: set[asyncio.Task[None]] = set()
        self._torn_down = False

    @property
    def availability(self) -> Availability:
        """Return the current availability."""
        return self._availability

    @property
    def transport(self) -> KodiTransport | None:
        """Return the live transport, if any."""
        return self._transport

    @property
    def reconnect_pending(self) -> bool:
        """Return True while a reconnect timer is active."""
        return self._reconnect_timer is not None

    async def async_connect(self, host: str, port: int) -> bool:
        """Attempt to connect to Kodi.

        On failure a reconnect to the same endpoint is scheduled.

        Args:
            host: Kodi host.
            port: Kodi port.

        Returns:
            True if the transport is now live.
        """
        if self._torn_down:
            return False

        self._logger.debug("Connecting to Kodi at %s:%s", host, port)
        try:
            transport = await self._transport_factory(host, port)
        except CONNECT_ERRORS as err:
            self._logger.error("Failed to connect to Kodi at %s:%s: %s", host, port, err)
            self._set_unavailable()
            self._schedule_reconnect(host, port)
            return False

        if self._torn_down:
            await transport.async_disconnect()
            return False

        reconnected = self._cancel_reconnect()
        self._transport = transport
        self._unsubscribers = [
            transport.on(EVENT_CLOSE, self._loss_handler(host, port)),
            transport.on(EVENT_ERROR, self._loss_handler(host, port)),
        ]
        self._on_connected(transport)

        self._availability = Availability.AVAILABLE
        if reconnected:
            self._logger.info("Reconnected to Kodi at %s:%s", host, port)
            self._on_availability(AvailabilityChange.RECONNECTED)
        else:
            self._logger.info("Connected to Kodi at %s:%s", host, port)
            self._on_availability(AvailabilityChange.CONNECTED)
        return True

    async def async_teardown(self) -> None:
        """Stop reconnecting and close the transport.

        Safe to call at any time, including before the first connect.
        """
        self._torn_down = True
        self._cancel_reconnect()

        task = self._connect_task
        self._connect_task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        transport = self._release_transport()
        if transport is not None:
            await transport.async_disconnect()

        for cleanup in list(self._cleanup_tasks):
            with contextlib.suppress(asyncio.CancelledError, *CONNECT_ERRORS):
                await cleanup

        self._availability = Availability.DISCONNECTED
        self._logger.debug("Connection supervisor torn down")

    def _loss_handler(self, host: str, port: int) -> Callable[..., None]:
        def handle(*_args: Any) -> None:
            self._handle_connection_lost(host, port)

        return handle

    def _handle_connection_lost(self, host: str, port: int) -> None:
        """React to ``close`` or ``error`` on the live transport."""
        if self._torn_down or self._reconnect_timer is not None:
            return

        self._logger.warning("Connection lost to Kodi at %s:%s", host, port)
        self._disconnect_later(self._release_transport())
        self._set_unavailable()
        self._schedule_reconnect(host, port)

    def _disconnect_later(self, transport: KodiTransport | None) -> None:
        if transport is None:
            return
        cleanup = asyncio.get_running_loop().create_task(transport.async_disconnect())
        self._cleanup_tasks.add(cleanup)
        cleanup.add_done_callback(self._cleanup_tasks.discard)

    def _release_transport(self) -> KodiTransport | None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        transport, self._transport = self._transport, None
        if transport is not None:
            transport.remove_all_listeners()
        return transport

    def _set_unavailable(self) -> None:
        if self._availability == Availability.UNAVAILABLE:
            return
        self._availability = Availability.UNAVAILABLE
        self._on_availability(AvailabilityChange.UNAVAILABLE)

    def _schedule_reconnect(self, host: str, port: int) -> None:
        if self._torn_down:
            return
        if self._reconnect_timer is not None:
            self._reconnect_timer.cancel()
        self._logger.warning(
            "Retrying connection to %s:%s in %.1f seconds",
            host,
            port,
            self._reconnect_interval,
        )
        self._reconnect_timer = asyncio.get_running_loop().call_later(
            self._reconnect_interval, self._on_reconnect_timer, host, port
        )

    def _on_reconnect_timer(self, host: str, port: int) -> None:
        if self._torn_down:
            return
        task = asyncio.get_running_loop().create_task(self.async_connect(host, port))
        task.add_done_callback(lambda done: self._on_reconnect_done(host, port, done))
        self._connect_task = task

    def _on_reconnect_done(self, host: str, port: int, task: asyncio.Task[bool]) -> None:
        """Keep retrying when a timer-driven attempt failed unexpectedly."""
        if task.cancelled() or self._torn_down:
            return
        err = task.exception()
        if err is None:
            return
        self._logger.error(
            "Unexpected error reconnecting to Kodi at %s:%s", host, port, exc_info=err
        )
        self._disconnect_later(self._release_transport())
        self._set_unavailable()
        self._schedule_reconnect(host, port)

    def _cancel_reconnect(self) -> bool:
        """Cancel the reconnect timer; return True if one was active."""
        if self._reconnect_timer is None:
            return False
        self._reconnect_timer.cancel()
        self._reconnect_timer = None
        return True


__all__ = ["AvailabilityChange", "KodiConnectionSupervisor", "TransportFactory"]
