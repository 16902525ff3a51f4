"""
Cadence Bridge

Single contract between the UI core and everything outside it:

- `init("http" | "ws", {...})` opens the server transports and maintains
  the shared ConnectionState
- `ask(channel, payload)` is a request/response call into the host process
- `say(channel, payload)` is a fire-and-forget signal to the host process
- `listen` / `remove_listener` subscribe to pushed messages, whether they
  come from the host (`emit`) or from the server stream
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Callable, Optional

from cadence.bridge.http import HttpResponse, HttpTransport
from cadence.bridge.stream import StreamTransport
from cadence.config import Settings
from cadence.errors import BridgeError, StreamUpgradeFailed, TransportUnreachable
from cadence.obs import logger
from cadence.state import ConnectionState


TRANSPORT_HTTP = "http"
TRANSPORT_WS = "ws"


class Bridge:

    def __init__(
        self,
        settings: Optional[Settings] = None,
        state: Optional[ConnectionState] = None,
        http_factory: Callable[..., HttpTransport] = HttpTransport,
        stream_factory: Callable[..., StreamTransport] = StreamTransport,
    ):
        self.settings = settings or Settings()
        self.state = state or ConnectionState()
        self.http_factory = http_factory
        self.stream_factory = stream_factory

        self._http: Optional[HttpTransport] = None
        self._stream: Optional[StreamTransport] = None
        self._responders: dict[str, Callable] = {}
        self._listeners: dict[str, list[Callable]] = {}
        self._signals: set[asyncio.Task] = set()

    # --- Boundary flags ---

    @property
    def http_connection_established(self) -> bool:
        return self.state.http_connected

    @property
    def ws_connection_established(self) -> bool:
        return self.state.ws_connected

    # --- Server transports ---

    async def init(self, kind: str, options: dict):
        """
        Open one transport.

        Raises TransportUnreachable (http) or StreamUpgradeFailed (ws). A
        stream failure leaves the request transport flag untouched.
        """
        host = options["host"]
        port = int(options["port"])
        timeout = self.settings.request_timeout

        if kind == TRANSPORT_HTTP:
            await self._close_stream()
            await self._close_http()
            transport = self.http_factory(
                host,
                port,
                scheme=options.get("scheme", self.settings.http_scheme),
                timeout=timeout,
                server_header=self.settings.server_header,
            )
            try:
                await transport.check()
            except TransportUnreachable:
                self.state.mark_http(False)
                await transport.close()
                raise
            self._http = transport
            self.state.mark_http(True)

        elif kind == TRANSPORT_WS:
            if not self.state.http_connected:
                raise StreamUpgradeFailed("Request transport must be established before the stream")
            await self._close_stream()
            transport = self.stream_factory(
                host,
                port,
                scheme=options.get("scheme", self.settings.ws_scheme),
                timeout=timeout,
                on_message=self._on_stream_message,
                on_close=self._on_stream_closed,
            )
            await transport.open()
            self._stream = transport
            self.state.mark_ws(True)

        else:
            raise ValueError(f"Unknown transport kind: {kind!r}")

    async def http_api(self, path: str, method: str = "GET", **kwargs) -> HttpResponse:
        if self._http is None:
            raise BridgeError("Request transport is not established")
        return await self._http.request(method, path, **kwargs)

    async def send(self, channel: str, payload: Any = None):
        if self._stream is None:
            raise BridgeError("Stream transport is not established")
        await self._stream.send(channel, payload)

    def _on_stream_message(self, message: dict):
        channel = message.get("channel")
        if not channel:
            logger.warning(f"Stream message without channel: {message!r}")
            return
        self.emit(channel, message.get("payload"))

    def _on_stream_closed(self):
        self.state.mark_ws(False)

    async def _close_http(self):
        if self._http is not None:
            await self._http.close()
            self._http = None
        self.state.mark_http(False)

    async def _close_stream(self):
        if self._stream is not None:
            stream, self._stream = self._stream, None
            await stream.close()
        self.state.mark_ws(False)

    async def close(self):
        """Close both transports and wait for outstanding signals."""
        await self._close_stream()
        await self._close_http()
        if self._signals:
            await asyncio.gather(*self._signals, return_exceptions=True)

    # --- Host process channels ---

    def handle(self, channel: str, responder: Callable):
        """Register the host-side responder for a channel."""
        self._responders[channel] = responder

    async def ask(self, channel: str, payload: Any = None) -> Any:
        responder = self._responders.get(channel)
        if responder is None:
            raise BridgeError(f"No host handler for channel {channel!r}")
        result = responder(payload)
        if inspect.isawaitable(result):
            result = await result
        return result

    def say(self, channel: str, payload: Any = None):
        responder = self._responders.get(channel)
        if responder is None:
            logger.debug(f"Signal {channel!r} has no host handler, dropped")
            return
        result = responder(payload)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._signals.add(task)
            task.add_done_callback(self._signal_done)

    def _signal_done(self, task: asyncio.Task):
        self._signals.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Host signal failed: {task.exception()}")

    # --- Pushed messages ---

    def listen(self, channel: str, handler: Callable):
        self._listeners.setdefault(channel, []).append(handler)

    def remove_listener(self, channel: str, handler: Callable):
        handlers = self._listeners.get(channel, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, channel: str, payload: Any = None):
        """Deliver a pushed message to every listener of the channel, in order."""
        for handler in list(self._listeners.get(channel, [])):
            try:
                handler(payload)
            except Exception as e:
                logger.error(f"{channel} listener {getattr(handler, '__name__', handler)!r} failed: {e}")
