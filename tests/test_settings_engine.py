"""Settings engine: load, write-through, remote fire-and-forget and fan-out."""

from __future__ import annotations

import asyncio

import pytest

from cadence.errors import UnknownEventName
from cadence.settings import (
    BackendKind,
    ControlKind,
    EventKind,
    LocalBackend,
    LocalStore,
    RemoteBackend,
    SettingEntry,
    SettingsBackend,
    SettingsSync,
    UNSET,
    build_form,
)
from cadence.settings.registry import ACCENT_SWATCHES, DEFAULT_SETTINGS


def make_sync(tmp_path, bridge, entries=DEFAULT_SETTINGS):
    local = LocalStore(tmp_path / "local_storage.json")
    form = build_form(entries)
    sync = SettingsSync(
        form,
        {BackendKind.LOCAL: LocalBackend(local), BackendKind.REMOTE: RemoteBackend(bridge)},
        entries,
    )
    return sync, local


class FailingBackend(SettingsBackend):
    kind = BackendKind.REMOTE
    fire_and_forget = True

    async def get(self, name):
        return UNSET

    async def set(self, name, value):
        await asyncio.sleep(0)
        raise ConnectionError("host went away")


def test_missing_backend_is_rejected(tmp_path):
    with pytest.raises(ValueError):
        SettingsSync(build_form(), {BackendKind.LOCAL: LocalBackend(LocalStore(tmp_path / "x.json"))})


def test_unset_values_keep_defaults_and_are_not_written(tmp_path, bridge, host, host_store):
    sync, local = make_sync(tmp_path, bridge)

    asyncio.run(sync.load_all())

    assert sync.loaded
    assert sync.form.get("lang").value == "en"
    assert sync.form.get("start_page").value == "/explore-music"
    assert local.get_item("lang") is None
    assert host_store.state.options == {}


def test_load_applies_stored_values(tmp_path, bridge, host, host_store):
    sync, local = make_sync(tmp_path, bridge)
    local.set_item("lang", "de")
    local.set_item("developer_mode", 1)
    local.set_item("accent_color", ACCENT_SWATCHES[3])
    host_store.set_option("always_load_whole_song", 1)

    asyncio.run(sync.load_all())

    assert sync.form.get("lang").value == "de"
    assert sync.form.get("developer_mode").checked is True
    assert sync.form.get("always_load_whole_song").checked is True
    checked = [c.value for c in sync.form.named("accent_color") if c.checked]
    assert checked == [ACCENT_SWATCHES[3]]


@pytest.mark.parametrize("value", [True, 7, 2.5, "hello", None])
def test_local_round_trip(tmp_path, bridge, value):
    entries = (SettingEntry("volume", BackendKind.LOCAL, ControlKind.TEXT),)
    sync, local = make_sync(tmp_path, bridge, entries)

    async def _exercise():
        sync.watch_all()
        await sync.form.set_value("volume", value)
        reloaded, _ = make_sync(tmp_path, bridge, entries)
        await reloaded.load_all()
        return reloaded.form.get("volume").value

    assert asyncio.run(_exercise()) == value


def test_checkbox_writes_one_and_zero(tmp_path, bridge, host, host_store):
    sync, local = make_sync(tmp_path, bridge)

    async def _exercise():
        sync.watch_all()
        await sync.form.set_checked("developer_mode", True)
        assert local.get_item("developer_mode") == "1"
        await sync.form.set_checked("developer_mode", False)
        assert local.get_item("developer_mode") == "0"
        await sync.form.set_checked("notification_on_song_change", True)
        await sync.drain()

    asyncio.run(_exercise())

    assert host_store.get_option("notification_on_song_change") == 1


def test_radio_reads_checked_sibling(tmp_path, bridge):
    sync, local = make_sync(tmp_path, bridge)
    seen = []
    sync.register_callback("onSettingChange", lambda name, value, event: seen.append((name, value)))

    async def _exercise():
        sync.watch_all()
        await sync.form.select("accent_color", ACCENT_SWATCHES[1])
        await sync.form.select("accent_color", ACCENT_SWATCHES[4])

    asyncio.run(_exercise())

    assert seen == [("accent_color", ACCENT_SWATCHES[1]), ("accent_color", ACCENT_SWATCHES[4])]
    assert [c.value for c in sync.form.named("accent_color") if c.checked] == [ACCENT_SWATCHES[4]]
    assert local.get_item("accent_color") == ACCENT_SWATCHES[4]


def test_subscribers_run_once_in_registration_order(tmp_path, bridge):
    sync, _ = make_sync(tmp_path, bridge)
    calls = []
    for tag in ("first", "second", "third"):
        sync.register_callback(EventKind.ON_SETTING_CHANGE, lambda name, value, event, tag=tag: calls.append((tag, name, value)))

    async def _exercise():
        sync.watch_all()
        sync.watch_all()
        await sync.form.set_value("lang", "fr")

    asyncio.run(_exercise())

    assert calls == [("first", "lang", "fr"), ("second", "lang", "fr"), ("third", "lang", "fr")]


def test_failing_subscriber_does_not_stop_the_others(tmp_path, bridge):
    sync, _ = make_sync(tmp_path, bridge)
    calls = []

    def broken(name, value, event):
        raise RuntimeError("boom")

    sync.register_callback("onSettingChange", broken)
    sync.register_callback("onSettingChange", lambda name, value, event: calls.append(name))

    async def _exercise():
        sync.watch_all()
        await sync.form.set_value("start_page", "/albums")

    asyncio.run(_exercise())

    assert calls == ["start_page"]


def test_local_write_is_durable_before_subscribers(tmp_path, bridge):
    sync, local = make_sync(tmp_path, bridge)
    observed = []
    sync.register_callback("onSettingChange", lambda name, value, event: observed.append(local.get_item(name)))

    async def _exercise():
        sync.watch_all()
        await sync.form.set_value("color_theme", "light")

    asyncio.run(_exercise())

    assert observed == ["light"]


def test_unknown_event_name_fails_fast(tmp_path, bridge):
    sync, _ = make_sync(tmp_path, bridge)

    with pytest.raises(UnknownEventName):
        sync.register_callback("onSettingsChanged", lambda *args: None)


def test_remote_write_failure_is_recorded_not_raised(tmp_path, bridge):
    sync, _ = make_sync(tmp_path, bridge)
    sync.backends[BackendKind.REMOTE] = FailingBackend()
    seen = []
    sync.register_callback("onSettingChange", lambda name, value, event: seen.append(name))

    async def _exercise():
        sync.watch_all()
        await sync.form.set_checked("confirm_electron_quit", True)
        assert sync.pending_writes == 1
        await sync.drain()

    asyncio.run(_exercise())

    assert seen == ["confirm_electron_quit"]
    assert sync.pending_writes == 0
    assert [name for name, error in sync.write_errors] == ["confirm_electron_quit"]
    assert isinstance(sync.write_errors[0][1], ConnectionError)


REMOTE_TEXT = (SettingEntry("queue_mode", BackendKind.REMOTE, ControlKind.TEXT, default="append"),)


@pytest.mark.parametrize("value", [True, 7, 2.5, "replace"])
def test_remote_round_trip(tmp_path, bridge, host, value):
    sync, _ = make_sync(tmp_path, bridge, REMOTE_TEXT)

    async def _exercise():
        sync.watch_all()
        await sync.form.set_value("queue_mode", value)
        await sync.drain()
        reloaded, _ = make_sync(tmp_path, bridge, REMOTE_TEXT)
        await reloaded.load_all()
        return reloaded.form.get("queue_mode").value

    assert asyncio.run(_exercise()) == value
    assert sync.write_errors == []


def test_remote_null_reads_back_as_default(tmp_path, bridge, host, host_store):
    sync, _ = make_sync(tmp_path, bridge, REMOTE_TEXT)

    async def _exercise():
        sync.watch_all()
        await sync.form.set_value("queue_mode", None)
        await sync.drain()
        reloaded, _ = make_sync(tmp_path, bridge, REMOTE_TEXT)
        await reloaded.load_all()
        return reloaded.form.get("queue_mode").value

    assert asyncio.run(_exercise()) == "append"
    assert host_store.state.options == {"queue_mode": None}


def test_set_value_refuses_radio_groups(tmp_path, bridge):
    sync, _ = make_sync(tmp_path, bridge)

    with pytest.raises(KeyError):
        asyncio.run(sync.form.set_value("accent_color", "#000000"))

    assert [c.value for c in sync.form.named("accent_color")] == list(ACCENT_SWATCHES)
