"""
Persistent streaming transport (WebSocket) to a media server.

Messages are JSON objects of the form {"channel": ..., "payload": ...}.
Every inbound message is handed to `on_message`; `on_close` runs once when
the socket goes away for any reason.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Callable, Optional

import aiohttp

from cadence.errors import StreamUpgradeFailed
from cadence.obs import logger


class StreamTransport:

    def __init__(
        self,
        host: str,
        port: int,
        scheme: str = "ws://",
        timeout: float = 5.0,
        on_message: Optional[Callable[[dict], None]] = None,
        on_close: Optional[Callable[[], None]] = None,
    ):
        self.url = f"{scheme}{host}:{port}"
        self.timeout = timeout
        self.on_message = on_message
        self.on_close = on_close

        self._session: Optional[aiohttp.ClientSession] = None
        self._ws: Optional[aiohttp.ClientWebSocketResponse] = None
        self._reader: Optional[asyncio.Task] = None

    @property
    def connected(self) -> bool:
        return self._ws is not None and not self._ws.closed

    async def open(self):
        """Open the socket and start the reader task."""
        self._session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=None, connect=self.timeout)
        )
        try:
            self._ws = await asyncio.wait_for(self._session.ws_connect(self.url), self.timeout)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            await self._session.close()
            self._session = None
            raise StreamUpgradeFailed(f"{self.url} stream upgrade failed: {e}") from e

        self._reader = asyncio.create_task(self._read_loop())
        logger.debug(f"  Stream open at {self.url}")

    async def _read_loop(self):
        try:
            async for msg in self._ws:
                if msg.type == aiohttp.WSMsgType.TEXT:
                    try:
                        data = json.loads(msg.data)
                    except ValueError:
                        logger.warning(f"Dropping non-JSON stream message: {msg.data[:200]!r}")
                        continue
                    if self.on_message and isinstance(data, dict):
                        try:
                            self.on_message(data)
                        except Exception as e:
                            logger.error(f"Stream message handler failed: {e}")
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    logger.error(f"Stream error: {self._ws.exception()}")
                    break
        finally:
            logger.info(f"Stream to {self.url} closed")
            if self.on_close:
                self.on_close()

    async def send(self, channel: str, payload: Any = None):
        if not self.connected:
            raise StreamUpgradeFailed(f"Stream to {self.url} is not open")
        await self._ws.send_json({"channel": channel, "payload": payload})

    async def close(self):
        if self._ws is not None and not self._ws.closed:
            await self._ws.close()
        if self._reader is not None:
            try:
                await self._reader
            except asyncio.CancelledError:
                pass
            self._reader = None
        if self._session is not None:
            await self._session.close()
            self._session = None
