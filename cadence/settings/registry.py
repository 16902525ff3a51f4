"""
Declared settings.

Each entry binds one setting name to its backend and control kind. The
table is configuration: adding a key needs no engine change.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from cadence.settings.backends import BackendKind
from cadence.settings.controls import Control, ControlKind, SettingsForm


@dataclass(frozen=True)
class SettingEntry:
    name: str
    backend: BackendKind
    kind: ControlKind
    panel: str = "general"
    default: Any = ""
    options: tuple = ()  # radio values


ACCENT_SWATCHES = (
    "#a174dd",
    "#e9219c",
    "#4da3bd",
    "#3793cf",
    "#57b983",
    "#379c3f",
    "#ccb118",
    "#d45912",
    "#cc4c43",
    "#575757",
)

LOCAL = BackendKind.LOCAL
REMOTE = BackendKind.REMOTE

DEFAULT_SETTINGS: tuple[SettingEntry, ...] = (
    # General
    SettingEntry("lang", LOCAL, ControlKind.TEXT, "general", default="en"),
    SettingEntry("start_page", LOCAL, ControlKind.TEXT, "general", default="/explore-music"),
    SettingEntry("notification_on_song_change", REMOTE, ControlKind.CHECKBOX, "general"),
    SettingEntry("auto_check_for_updates", LOCAL, ControlKind.CHECKBOX, "general"),
    SettingEntry("confirm_electron_quit", REMOTE, ControlKind.CHECKBOX, "general"),

    # Playback
    SettingEntry("always_load_whole_song", REMOTE, ControlKind.CHECKBOX, "playback"),

    # Theme
    SettingEntry("color_theme", LOCAL, ControlKind.TEXT, "theme", default="dark"),
    SettingEntry("accent_color", LOCAL, ControlKind.RADIO, "theme", options=ACCENT_SWATCHES),
    SettingEntry("custom_css", LOCAL, ControlKind.TEXT, "theme"),

    # Advanced
    SettingEntry("developer_mode", LOCAL, ControlKind.CHECKBOX, "advanced"),
)


def build_form(entries: Iterable[SettingEntry] = DEFAULT_SETTINGS) -> SettingsForm:
    """Create the controls for the declared settings, with their built-in defaults."""
    form = SettingsForm()
    for entry in entries:
        if entry.kind == ControlKind.RADIO:
            for option in entry.options:
                form.add(Control(entry.name, entry.kind, entry.panel, value=option, checked=option == entry.default))
        elif entry.kind == ControlKind.CHECKBOX:
            form.add(Control(entry.name, entry.kind, entry.panel, checked=bool(entry.default)))
        else:
            form.add(Control(entry.name, entry.kind, entry.panel, value=entry.default))
    return form
