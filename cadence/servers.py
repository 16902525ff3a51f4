"""
Known media servers.

Server rows live in the host process (`servers` table); the default server id
is the `default_server` option. This module only reads them through the
bridge and converts rows into ServerRecord objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from cadence.config import STREAM_PORT_OFFSET
from cadence.errors import NoDefaultServer
from cadence.obs import logger

if TYPE_CHECKING:
    from cadence.bridge import Bridge


DEFAULT_SERVER_OPTION = "default_server"
SERVERS_TABLE = "servers"


@dataclass(frozen=True)
class ServerRecord:
    """Identity of a known server."""

    id: str
    host: str
    http_port: int

    @property
    def ws_port(self) -> int:
        return self.http_port + STREAM_PORT_OFFSET

    @property
    def address(self) -> str:
        return f"{self.host}:{self.http_port}"

    def to_row(self) -> dict:
        return {
            "id": self.id,
            "server_host": self.host,
            "server_port_http": self.http_port,
        }

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "host": self.host,
            "http_port": self.http_port,
            "ws_port": self.ws_port,
        }

    @classmethod
    def from_row(cls, row: dict) -> ServerRecord:
        return cls(
            id=str(row["id"]),
            host=row["server_host"],
            http_port=int(row["server_port_http"]),
        )


class ServerRegistry:
    """
    Read access to the host's server table.

    Server lifecycle belongs to the host; the bootstrap only reads records
    and, after a manual connection, may ask the host to remember one.
    """

    def __init__(self, bridge: Bridge):
        self.bridge = bridge

    async def get_default_server_id(self) -> Optional[str]:
        server_id = await self.bridge.ask("get-option", DEFAULT_SERVER_OPTION)
        return str(server_id) if server_id else None

    async def get(self, server_id: str) -> Optional[ServerRecord]:
        row = await self.bridge.ask("db-api", {
            "fn": "getRow",
            "args": [SERVERS_TABLE, server_id],
        })
        if not row:
            return None
        try:
            return ServerRecord.from_row(row)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring malformed server row {row!r}: {e}")
            return None

    async def get_default(self) -> ServerRecord:
        """
        The remembered default server.

        Raises:
            NoDefaultServer: no default is set, or its row is gone
        """
        server_id = await self.get_default_server_id()
        record = await self.get(server_id) if server_id else None
        if record is None:
            raise NoDefaultServer("No default server")
        return record

    async def add(self, host: str, port: int) -> ServerRecord:
        row = await self.bridge.ask("db-api", {
            "fn": "insertRow",
            "args": [SERVERS_TABLE, {"server_host": host, "server_port_http": int(port)}],
        })
        return ServerRecord.from_row(row)

    async def set_default(self, record: ServerRecord):
        await self.bridge.ask("set-option", {
            "option": DEFAULT_SERVER_OPTION,
            "value": record.id,
        })
        logger.info(f"Default server is now {record.address} ({record.id})")
