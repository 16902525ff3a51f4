"""Settings panel open/close and onClose fan-out."""

from __future__ import annotations

from cadence.settings import EventBus, EventKind, SettingsPanel
from cadence.settings.panel import SETTINGS_OPEN_CLASS
from cadence.ui.view import ViewModel


def test_open_remembers_last_tab():
    panel = SettingsPanel(ViewModel(), EventBus())

    panel.open()
    assert panel.is_open
    assert panel.current_tab == "general"
    panel.close()

    panel.open("theme")
    panel.close()
    panel.open("no-such-tab")

    assert panel.current_tab == "theme"


def test_open_twice_is_a_noop():
    panel = SettingsPanel(ViewModel(), EventBus())

    panel.open("advanced")
    panel.open("playback")

    assert panel.current_tab == "advanced"


def test_close_fires_on_close_in_order():
    view = ViewModel()
    bus = EventBus()
    calls = []
    bus.register("onClose", lambda: calls.append("first"))
    bus.register(EventKind.ON_CLOSE, lambda: calls.append("second"))
    panel = SettingsPanel(view, bus)

    panel.open()
    panel.close()

    assert not view.has_class(SETTINGS_OPEN_CLASS)
    assert calls == ["first", "second"]
