"""WebSocket JSON-RPC transport for Kodi."""

from __future__ import annotations

import asyncio
import contextlib
import itertools
import json
import logging
from collections.abc import Callable, Mapping
from typing import Any, Protocol

import aiohttp

from .const import (
    DEFAULT_HEARTBEAT,
    DEFAULT_TIMEOUT,
    EVENT_CLOSE,
    EVENT_ERROR,
    JSONRPC_PATH,
    JSONRPC_VERSION,
)
from .exceptions import KodiConnectionError, KodiRpcError, KodiTimeoutError
from .log import KodiLogger

_LOGGER = logging.getLogger(__name__)

type NotificationHandler = Callable[[Any], None]


class KodiTransport(Protocol):
    """Request/response and push channel to one Kodi instance."""

    async def async_call(self, method: str, params: Mapping[str, Any] | None = None) -> Any:
        """Call a JSON-RPC method and return its result."""

    def on(self, event: str, handler: Callable[..., None]) -> Callable[[], None]:
        """Register a ``close`` or ``error`` handler."""

    def notification(self, method: str, handler: NotificationHandler) -> Callable[[], None]:
        """Register a handler for a push notification."""

    def remove_all_listeners(self) -> None:
        """Drop every registered handler."""

    async def async_disconnect(self) -> None:
        """Close the channel."""


class KodiWebSocket:
    """JSON-RPC 2.0 client over Kodi's WebSocket server.

    Multiplexes requests by id, dispatches notifications to per-method
    handlers and reports connection loss through ``close``/``error``
    handlers. ``close`` fires at most once per connection.

    Attributes:
        host: Kodi host.
        port: Kodi WebSocket port (9090 by default).
    """

    def __init__(
        self,
        host: str,
        port: int,
        session: aiohttp.ClientSession,
        timeout: float = DEFAULT_TIMEOUT,
        logger: KodiLogger | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            host: Kodi hostname or IP address.
            port: Kodi WebSocket port.
            session: aiohttp ClientSession for the connection.
            timeout: Seconds to wait for each call's response.
            logger: Logger to use instead of the module logger.
        """
        self.host = host
        self.port = port
        self._session = session
        self._timeout = timeout
        self._logger = logger or _LOGGER
        self._ws: aiohttp.ClientWebSocketResponse | None = None
        self._receive_task: asyncio.Task[None] | None = None
        self._ids = itertools.count(1)
        self._pending: dict[int, tuple[str, asyncio.Future[Any]]] = {}
        self._notification_handlers: dict[str, list[NotificationHandler]] = {}
        self._event_handlers: dict[str, list[Callable[..., None]]] = {}
        self._close_fired = False

    @classmethod
    async def async_open(
        cls,
        session: aiohttp.ClientSession,
        host: str,
        port: int,
        timeout: float = DEFAULT_TIMEOUT,
        logger: KodiLogger | None = None,
    ) -> KodiWebSocket:
        """Create a transport and connect it.

        Raises:
            KodiConnectionError: If the connection cannot be established.
        """
        transport = cls(host, port, session, timeout=timeout, logger=logger)
        await transport.async_connect()
        return transport

    @property
    def connected(self) -> bool:
        """Return True if the WebSocket is open."""
        return self._ws is not None and not self._ws.closed

    def _build_connection_url(self) -> str:
        return f"ws://{self.host}:{self.port}{JSONRPC_PATH}"

    async def async_connect(self) -> None:
        """Open the WebSocket and start receiving.

        Raises:
            KodiConnectionError: If the connection fails.
        """
        url = self._build_connection_url()
        self._logger.debug("Connecting to WebSocket: %s", url)

        try:
            self._ws = await self._session.ws_connect(url, heartbeat=DEFAULT_HEARTBEAT)
        except (aiohttp.ClientError, OSError, TimeoutError) as err:
            self._ws = None
            raise KodiConnectionError(
                f"Failed to connect to {self.host}:{self.port}: {err}",
                host=self.host,
                port=self.port,
            ) from err

        self._close_fired = False
        self._logger.info("WebSocket connected to Kodi")
        self._receive_task = asyncio.get_running_loop().create_task(
            self._async_receive_loop()
        )

    async def async_disconnect(self) -> None:
        """Close the WebSocket connection."""
        if self._ws is not None and not self._ws.closed:
            await self._ws.close()
            self._logger.info("WebSocket disconnected")

        if self._receive_task is not None and self._receive_task is not asyncio.current_task():
            self._receive_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._receive_task
        self._receive_task = None
        self._ws = None
        self._fail_pending()

    async def async_call(self, method: str, params: Mapping[str, Any] | None = None) -> Any:
        """Call a JSON-RPC method.

        Args:
            method: Method name, e.g. ``Player.GetActivePlayers``.
            params: Method parameters.

        Returns:
            The ``result`` member of the response.

        Raises:
            KodiConnectionError: Not connected, or the connection dropped.
            KodiTimeoutError: No response within the timeout.
            KodiRpcError: Kodi returned an error object.
        """
        if not self.connected:
            raise KodiConnectionError(
                f"Cannot call {method}: WebSocket is not connected",
                host=self.host,
                port=self.port,
            )

        request_id = next(self._ids)
        message: dict[str, Any] = {
            "jsonrpc": JSONRPC_VERSION,
            "id": request_id,
            "method": method,
        }
        if params is not None:
            message["params"] = dict(params)

        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._pending[request_id] = (method, future)
        self._logger.debug("Kodi RPC request #%d: %s %s", request_id, method, params)

        try:
            await self._ws.send_str(json.dumps(message))  # type: ignore[union-attr]
            async with asyncio.timeout(self._timeout):
                return await future
        except TimeoutError as err:
            raise KodiTimeoutError(
                f"{method} timed out after {self._timeout}s",
                host=self.host,
                port=self.port,
            ) from err
        except (aiohttp.ClientError, ConnectionResetError) as err:
            raise KodiConnectionError(
                f"Failed to send {method}: {err}",
                host=self.host,
                port=self.port,
            ) from err
        finally:
            self._pending.pop(request_id, None)

    def on(self, event: str, handler: Callable[..., None]) -> Callable[[], None]:
        """Register a connection event handler.

        Args:
            event: ``close`` or ``error``.
            handler: Called when the event occurs.

        Returns:
            Function that removes the handler.
        """
        return self._add_handler(self._event_handlers, event, handler)

    def notification(self, method: str, handler: NotificationHandler) -> Callable[[], None]:
        """Register a push notification handler.

        Args:
            method: Notification method, e.g. ``Player.OnPlay``.
            handler: Called with the notification ``params``.

        Returns:
            Function that removes the handler.
        """
        return self._add_handler(self._notification_handlers, method, handler)

    def remove_all_listeners(self) -> None:
        """Drop every notification and connection event handler."""
        self._notification_handlers.clear()
        self._event_handlers.clear()

    @staticmethod
    def _add_handler[H](
        registry: dict[str, list[H]], key: str, handler: H
    ) -> Callable[[], None]:
        registry.setdefault(key, []).append(handler)

        def remove() -> None:
            handlers = registry.get(key, [])
            if handler in handlers:
                handlers.remove(handler)

        return remove

    def _emit(self, event: str, *args: Any) -> None:
        for handler in list(self._event_handlers.get(event, [])):
            try:
                handler(*args)
            except Exception:
                self._logger.exception("Error in %s handler", event)

    def _fail_pending(self) -> None:
        for _, future in self._pending.values():
            if not future.done():
                future.set_exception(
                    KodiConnectionError(
                        "Connection to Kodi lost",
                        host=self.host,
                        port=self.port,
                    )
                )
        self._pending.clear()

    def _process_message(self, msg: aiohttp.WSMessage) -> None:
        """Process a received WebSocket message.

        Args:
            msg: The WebSocket message to process.
        """
        if msg.type == aiohttp.WSMsgType.TEXT:
            try:
                data = json.loads(msg.data)
            except json.JSONDecodeError:
                self._logger.warning("Received malformed JSON from Kodi: %s", msg.data[:100])
                return
            if isinstance(data, list):
                for entry in data:
                    self._process_payload(entry)
            else:
                self._process_payload(data)

        elif msg.type == aiohttp.WSMsgType.CLOSED:
            self._logger.info("WebSocket connection closed by Kodi")

        elif msg.type == aiohttp.WSMsgType.ERROR:
            self._logger.error("WebSocket error received")
            self._emit(EVENT_ERROR, self._ws.exception() if self._ws is not None else None)

    def _process_payload(self, data: Any) -> None:
        if not isinstance(data, dict):
            return

        request_id = data.get("id")
        if request_id is not None:
            pending = self._pending.get(request_id)
            if pending is None or pending[1].done():
                self._logger.debug("Dropping response for unknown request #%s", request_id)
                return
            request_method, future = pending
            if "error" in data:
                error = data["error"] or {}
                future.set_exception(
                    KodiRpcError(request_method, error.get("code", 0), error.get("message", ""))
                )
            else:
                future.set_result(data.get("result"))
            return

        method = data.get("method")
        if method is None:
            return
        self._logger.debug("Received notification: %s", method)
        for handler in list(self._notification_handlers.get(method, [])):
            try:
                handler(data.get("params") or {})
            except Exception:
                self._logger.exception("Error in %s notification handler", method)

    async def _async_receive_loop(self) -> None:
        """Receive and process messages until the connection ends."""
        if self._ws is None:
            return

        try:
            async for msg in self._ws:
                self._process_message(msg)

                if msg.type in (aiohttp.WSMsgType.CLOSED, aiohttp.WSMsgType.ERROR):
                    break
        except (aiohttp.ClientError, OSError) as err:
            self._logger.warning("WebSocket receive failed: %s", err)
            self._emit(EVENT_ERROR, err)
        finally:
            self._fail_pending()
            if not self._close_fired:
                self._close_fired = True
                self._emit(EVENT_CLOSE)


__all__ = ["KodiTransport", "KodiWebSocket", "NotificationHandler"]
