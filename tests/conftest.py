"""Shared fakes for the Cadence tests: spy transports and a wired bridge."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import pytest

from cadence.bridge import Bridge, HttpResponse
from cadence.config import HostEnvironment, Settings
from cadence.errors import StreamUpgradeFailed, TransportUnreachable
from cadence.host import HostProcess, HostStore


class TransportSpy:
    """Records every transport the bridge creates, and what it was asked."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, int]] = []
        self.unreachable: set[tuple[str, int]] = set()
        self.no_stream: set[tuple[str, int]] = set()
        self.routes: dict[str, HttpResponse] = {}
        self.streams: list[FakeStream] = []

    def count(self, kind: str) -> int:
        return sum(1 for call in self.calls if call[0] == kind)

    def http(self, host: str, port: int, **kwargs) -> FakeHttp:
        return FakeHttp(self, host, port)

    def stream(self, host: str, port: int, **kwargs) -> FakeStream:
        stream = FakeStream(self, host, port, kwargs.get("on_message"), kwargs.get("on_close"))
        self.streams.append(stream)
        return stream


class FakeHttp:

    def __init__(self, spy: TransportSpy, host: str, port: int) -> None:
        self.spy = spy
        self.host = host
        self.port = port

    async def check(self) -> None:
        self.spy.calls.append(("http", self.host, self.port))
        if (self.host, self.port) in self.spy.unreachable:
            raise TransportUnreachable(f"{self.host}:{self.port} unreachable")

    async def request(self, method: str, path: str, **kwargs) -> HttpResponse:
        return self.spy.routes.get(path, HttpResponse(status=404, response="not found"))

    async def close(self) -> None:
        pass


class FakeStream:

    def __init__(self, spy: TransportSpy, host: str, port: int, on_message, on_close) -> None:
        self.spy = spy
        self.host = host
        self.port = port
        self.on_message = on_message
        self.on_close = on_close
        self.sent: list[tuple[str, Any]] = []

    async def open(self) -> None:
        self.spy.calls.append(("ws", self.host, self.port))
        if (self.host, self.port) in self.spy.no_stream:
            raise StreamUpgradeFailed(f"{self.host}:{self.port} refused upgrade")

    async def send(self, channel: str, payload: Any = None) -> None:
        self.sent.append((channel, payload))

    def push(self, message: dict) -> None:
        self.on_message(message)

    async def close(self) -> None:
        if self.on_close:
            self.on_close()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(config_dir=tmp_path, environment=HostEnvironment.DESKTOP, update_check_delay=0.0)


@pytest.fixture
def spy() -> TransportSpy:
    return TransportSpy()


@pytest.fixture
def bridge(settings: Settings, spy: TransportSpy) -> Bridge:
    return Bridge(settings, http_factory=spy.http, stream_factory=spy.stream)


@pytest.fixture
def host_store(tmp_path: Path) -> HostStore:
    store = HostStore(tmp_path / "host_state.json")
    store.load()
    return store


@pytest.fixture
def host(bridge: Bridge, host_store: HostStore) -> HostProcess:
    process = HostProcess(host_store)
    process.attach(bridge)
    return process


def remember_server(store: HostStore, host: str, port: int, make_default: bool = True) -> Optional[str]:
    row = store.insert_row("servers", {"server_host": host, "server_port_http": port})
    if make_default:
        store.set_option("default_server", row["id"])
    return row["id"]
