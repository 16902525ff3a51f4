"""
Cadence Connection Bootstrap

Decides, at startup, whether the app can talk to its media server or must
show the connection lock screen.

    IDLE -> CHECKING_DEFAULT -> HANDSHAKING -> CONNECTED
    IDLE -> CHECKING_DEFAULT -> NO_DEFAULT -> LOCKED
    HANDSHAKING -> HANDSHAKE_FAILED -> LOCKED
    LOCKED -> HANDSHAKING (manual connection from the lock screen)

There is no retry loop. A failed autoconnect lands on LOCKED and stays there
until the user connects manually.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

from cadence.bridge import TRANSPORT_HTTP, TRANSPORT_WS
from cadence.config import STREAM_PORT_OFFSET
from cadence.errors import NoDefaultServer, StreamUpgradeFailed, TransportUnreachable, ValidationError
from cadence.obs import logger
from cadence.servers import ServerRecord, ServerRegistry

if TYPE_CHECKING:
    from cadence.bridge import Bridge
    from cadence.ui.view import ViewModel


LOCK_SCREEN_OVERLAY = "server-connect"

REASON_AUTOCONNECT_FAILED = "autoconnect-failed"
REASON_CONNECT_FAILED = "connect-failed"


class BootstrapState(str, Enum):
    IDLE = "idle"
    CHECKING_DEFAULT = "checking_default"
    HANDSHAKING = "handshaking"
    CONNECTED = "connected"
    NO_DEFAULT = "no_default"
    HANDSHAKE_FAILED = "handshake_failed"
    LOCKED = "locked"


class ConnectionBootstrap:

    def __init__(
        self,
        bridge: Bridge,
        view: ViewModel,
        servers: Optional[ServerRegistry] = None,
        strings: Optional[dict] = None,
    ):
        self.bridge = bridge
        self.view = view
        self.servers = servers or ServerRegistry(bridge)

        # UI strings, possibly supplied by the host before any connection exists
        self.strings = strings

        self.status = BootstrapState.IDLE

    @property
    def state(self):
        return self.bridge.state

    def _transition(self, status: BootstrapState):
        logger.debug(f"Bootstrap: {self.status.value} -> {status.value}")
        self.status = status

    async def get_default_server(self) -> Optional[ServerRecord]:
        """
        Return the remembered default server, or None if there is none or
        its row no longer exists.
        """
        try:
            return await self.servers.get_default()
        except NoDefaultServer:
            return None

    @logger.instrument("Connecting to {host}:{port}...")
    async def connect_to_server(self, host: str, port: int) -> bool:
        """
        Two-phase handshake.

        The request transport must answer before the stream is attempted; a
        server whose API is unreachable would only make the stream time out.
        The stream lives on port + 1.

        Returns:
            True if both transports are established afterwards
        """
        if not host:
            raise ValidationError("Host is required")
        if not port:
            raise ValidationError("Port is required")
        port = int(port)

        try:
            await self.bridge.init(TRANSPORT_HTTP, {
                "host": host,
                "port": port,
                "scheme": self.bridge.settings.http_scheme,
            })
        except TransportUnreachable as e:
            logger.warning(f"  HTTP connection cannot be established ({e}), not attempting stream")
            return False

        try:
            await self.bridge.init(TRANSPORT_WS, {
                "host": host,
                "port": port + STREAM_PORT_OFFSET,
                "scheme": self.bridge.settings.ws_scheme,
            })
        except StreamUpgradeFailed as e:
            logger.warning(f"  Stream connection failed: {e}")

        connected = self.bridge.http_connection_established and self.bridge.ws_connection_established
        if connected:
            self.state.active_server = ServerRecord(id="", host=host, http_port=port)
        return connected

    def show_connection_lock_screen(self, reason: Optional[str] = None):
        """
        Show the lock screen overlay. Never stacks a second one.

        When the overlay is already showing only its message is replaced, so a
        failed manual connection reports its own reason.
        """
        if self.is_connection_lock_screen_showing():
            self.view.overlays[LOCK_SCREEN_OVERLAY] = {"message": reason}
            return
        self.view.prepend_overlay(LOCK_SCREEN_OVERLAY, message=reason)

    def is_connection_lock_screen_showing(self) -> bool:
        return self.view.has_overlay(LOCK_SCREEN_OVERLAY)

    def _lock(self, reason: Optional[str] = None):
        self._transition(BootstrapState.LOCKED)
        self.show_connection_lock_screen(reason)

    async def auto_connect_or_lock(self) -> bool:
        """
        Connect to the default server, or lock.

        Returns:
            True if the bridge already was, or now is, connected
        """
        if self.state.usable:
            logger.info("AutoConnect: bridge is already connected")
            return True

        self._transition(BootstrapState.CHECKING_DEFAULT)
        default_server = await self.get_default_server()

        if default_server is None:
            logger.info("AutoConnect: no default server set, showing connection screen")
            self._transition(BootstrapState.NO_DEFAULT)
            self._lock()
            return False

        self._transition(BootstrapState.HANDSHAKING)
        if await self.connect_to_server(default_server.host, default_server.http_port):
            logger.info(f"AutoConnect: connected to server at {default_server.address}")
            self.state.active_server = default_server
            self._transition(BootstrapState.CONNECTED)
            await self.maybe_set_i18n_via_http()
            return True

        logger.info(f"AutoConnect: could not connect to server at {default_server.address}")
        self._transition(BootstrapState.HANDSHAKE_FAILED)
        self._lock(REASON_AUTOCONNECT_FAILED)
        return False

    async def connect_from_lock_screen(self, host: str, port: int, remember: bool = False) -> bool:
        """
        Manual connection entered on the lock screen.

        On success the overlay is dismissed and, with `remember`, the server is
        stored and becomes the default for the next start.
        """
        self._transition(BootstrapState.HANDSHAKING)
        if not await self.connect_to_server(host, port):
            self._transition(BootstrapState.HANDSHAKE_FAILED)
            self._lock(REASON_CONNECT_FAILED)
            return False

        if remember:
            record = await self.servers.add(host, int(port))
            await self.servers.set_default(record)
            self.state.active_server = record

        self.view.remove_overlay(LOCK_SCREEN_OVERLAY)
        self._transition(BootstrapState.CONNECTED)
        await self.maybe_set_i18n_via_http()
        return True

    async def maybe_set_i18n_via_http(self):
        """Fetch UI strings over HTTP unless the host already supplied them."""
        if self.strings:
            return

        try:
            response = await self.bridge.http_api("/i18n")
        except Exception as e:
            logger.error(f"Failed to fetch i18n strings: {e}")
            return

        if response.ok:
            self.strings = response.response
        else:
            logger.error(f"i18n strings route answered {response.status}, expected 200")
