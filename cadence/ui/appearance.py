"""
Appearance derived from the local settings store: developer mode flag,
color theme, accent color and the user's custom stylesheet.
"""

from __future__ import annotations

from typing import Any, Optional

from cadence.settings.backends import LocalStore
from cadence.settings.codec import decode
from cadence.ui.view import ViewModel


DEVELOPER_MODE_CLASS = "developer-mode"
CUSTOM_CSS_BLOCK = "user-custom-css"
ACCENT_COLOR_PROPERTY = "--accent-color"
COLOR_THEME_ATTR = "color-theme"
DEFAULT_COLOR_THEME = "dark"


class Appearance:

    def __init__(self, view: ViewModel, local: LocalStore):
        self.view = view
        self.local = local

    def enable_developer_mode(self, enabled: bool = True):
        """Toggle the flag only; the stored setting is not touched."""
        self.view.toggle_class(DEVELOPER_MODE_CLASS, enabled)

    def maybe_enable_developer_mode(self):
        self.enable_developer_mode(bool(decode(self.local.get_item("developer_mode"))))

    def set_colors(self):
        """Apply the stored color theme (dark by default) and accent color."""
        self.set_color_theme(self.local.get_item("color_theme") or DEFAULT_COLOR_THEME)
        accent = self.local.get_item("accent_color")
        if accent:
            self.set_accent_color(accent)

    def set_color_theme(self, theme: str):
        self.view.set_attr(COLOR_THEME_ATTR, theme)

    def set_accent_color(self, color: str):
        self.view.set_style_property(ACCENT_COLOR_PROPERTY, color)

    def inject_custom_css(self, css: Optional[Any] = None):
        """
        Replace the custom style block with `css`, or with the stored value
        when no css is given. An empty stylesheet leaves no block behind.
        """
        if css is None:
            css = self.local.get_item("custom_css")
        self.view.remove_style(CUSTOM_CSS_BLOCK)
        if css:
            self.view.inject_style(CUSTOM_CSS_BLOCK, str(css))

    def disable_custom_css(self):
        self.view.remove_style(CUSTOM_CSS_BLOCK)
        self.local.remove_item("custom_css")
