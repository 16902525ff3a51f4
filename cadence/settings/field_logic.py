"""
Reactions to individual settings.

Each handler has the subscriber signature (name, new_value, event), ignores
every other setting name and can run any number of times with the same
value. Persisting the value is the engine's job, not theirs.
"""

from __future__ import annotations

from typing import Any

from cadence.obs import logger
from cadence.settings.controls import ChangeEvent
from cadence.settings.engine import SettingsSync
from cadence.settings.panel import SETTINGS_OPEN_CLASS
from cadence.ui.appearance import Appearance


class FieldLogic:

    def __init__(self, appearance: Appearance):
        self.appearance = appearance
        self.view = appearance.view

    def on_lang_change(self, name: str, value: Any, event: ChangeEvent):
        """The whole app is stale after a language change and is re-rendered."""
        if name != "lang":
            return
        logger.info(f"Re-rendering app for language {value!r}")
        self.view.locale = str(value)
        self.view.remove_class(SETTINGS_OPEN_CLASS)
        self.view.render()

    def on_accent_color_change(self, name: str, value: Any, event: ChangeEvent):
        if name != "accent_color" or not value:
            return
        self.appearance.set_accent_color(str(value))

    def on_custom_css_change(self, name: str, value: Any, event: ChangeEvent):
        if name != "custom_css":
            return
        self.appearance.inject_custom_css(value or "")

    def on_color_theme_change(self, name: str, value: Any, event: ChangeEvent):
        if name != "color_theme":
            return
        self.appearance.set_color_theme(str(value))

    def on_developer_mode_change(self, name: str, value: Any, event: ChangeEvent):
        if name != "developer_mode":
            return
        self.appearance.enable_developer_mode(bool(value))

    def subscribe(self, engine: SettingsSync):
        for handler in (
            self.on_lang_change,
            self.on_accent_color_change,
            self.on_custom_css_change,
            self.on_color_theme_change,
            self.on_developer_mode_change,
        ):
            engine.register_callback("onSettingChange", handler)
