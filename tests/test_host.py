"""Host process store and the bridge channels it answers."""

from __future__ import annotations

import asyncio
import json

import pytest

from cadence.errors import BridgeError, NoDefaultServer
from cadence.host import HostStore
from cadence.servers import ServerRegistry


def test_state_survives_reload(tmp_path):
    store = HostStore(tmp_path / "host_state.json")
    store.load()
    store.set_option("confirm_electron_quit", 1)
    row = store.insert_row("servers", {"server_host": "media.local", "server_port_http": 3000})

    reloaded = HostStore(tmp_path / "host_state.json")
    reloaded.load()

    assert reloaded.get_option("confirm_electron_quit") == 1
    assert reloaded.get_row("servers", row["id"]) == row


def test_corrupt_state_falls_back_to_defaults(tmp_path):
    path = tmp_path / "host_state.json"
    path.write_text("{not json", encoding="utf-8")

    state = HostStore(path).load()

    assert state.options == {}
    assert state.tables == {"servers": {}}


def test_option_channels(bridge, host, host_store):
    async def _exercise():
        assert await bridge.ask("get-option", "lang") is None
        await bridge.ask("set-option", {"option": "lang", "value": "de"})
        return await bridge.ask("get-option", "lang")

    assert asyncio.run(_exercise()) == "de"
    assert json.loads(host_store.state_file.read_text())["options"] == {"lang": "de"}


def test_malformed_requests_are_rejected(bridge, host):
    with pytest.raises(BridgeError):
        asyncio.run(bridge.ask("set-option", "lang"))
    with pytest.raises(BridgeError):
        asyncio.run(bridge.ask("db-api", {"fn": "dropTable", "args": ["servers"]}))
    with pytest.raises(BridgeError):
        asyncio.run(bridge.ask("no-such-channel"))


def test_server_registry_round_trip(bridge, host, host_store):
    servers = ServerRegistry(bridge)

    async def _exercise():
        record = await servers.add("media.local", 3000)
        await servers.set_default(record)
        default_id = await servers.get_default_server_id()
        return record, await servers.get(default_id)

    record, fetched = asyncio.run(_exercise())

    assert fetched == record
    assert fetched.ws_port == 3001
    assert host_store.get_rows("servers") == [record.to_row()]


def test_malformed_server_row_reads_as_missing(bridge, host, host_store):
    host_store.insert_row("servers", {"id": "broken", "server_host": "media.local"})

    assert asyncio.run(ServerRegistry(bridge).get("broken")) is None


def test_factory_reset_wipes_state(bridge, host, host_store):
    host_store.set_option("default_server", "abc")

    async def _exercise():
        bridge.say("factory-reset")
        await bridge.close()

    asyncio.run(_exercise())

    assert host_store.state.options == {}


def test_missing_default_server_is_signalled(bridge, host, host_store):
    servers = ServerRegistry(bridge)

    with pytest.raises(NoDefaultServer):
        asyncio.run(servers.get_default())

    host_store.set_option("default_server", "gone")
    with pytest.raises(NoDefaultServer):
        asyncio.run(servers.get_default())
