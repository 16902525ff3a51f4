"""
Connection state shared by the bridge and the connection bootstrap.

One instance per Bridge. Passed around by reference, never stored globally.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from cadence.servers import ServerRecord


@dataclass
class ConnectionState:
    """Flags for both transports plus the server they point at."""

    http_connected: bool = False
    ws_connected: bool = False
    active_server: Optional[ServerRecord] = None

    @property
    def usable(self) -> bool:
        """The UI may render only when both transports are up."""
        return self.http_connected and self.ws_connected

    def mark_http(self, connected: bool):
        self.http_connected = connected
        if not connected:
            # the stream is never up without the request transport
            self.ws_connected = False

    def mark_ws(self, connected: bool):
        if connected and not self.http_connected:
            raise ValueError("Stream transport cannot be connected before the request transport")
        self.ws_connected = connected

    def reset(self):
        self.http_connected = False
        self.ws_connected = False
        self.active_server = None

    def to_dict(self) -> dict:
        return {
            "http_connected": self.http_connected,
            "ws_connected": self.ws_connected,
            "active_server": self.active_server.to_dict() if self.active_server else None,
        }
