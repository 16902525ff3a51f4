"""
The settings panel: open/close and tab memory.
"""

from __future__ import annotations

from typing import Optional

from cadence.settings.events import EventBus, EventKind
from cadence.ui.view import ViewModel


SETTINGS_OPEN_CLASS = "settings-open"

TABS = ("general", "playback", "theme", "advanced")


class SettingsPanel:

    def __init__(self, view: ViewModel, bus: EventBus, tabs: tuple[str, ...] = TABS):
        self.view = view
        self.bus = bus
        self.tabs = tabs
        self.current_tab: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.view.has_class(SETTINGS_OPEN_CLASS)

    def open(self, tab: Optional[str] = None):
        """Show the panel on `tab`, else the last used tab, else the first."""
        if self.is_open:
            return
        if tab not in self.tabs:
            tab = self.current_tab or self.tabs[0]
        self.current_tab = tab
        self.view.add_class(SETTINGS_OPEN_CLASS)

    def close(self):
        self.view.remove_class(SETTINGS_OPEN_CLASS)
        self.bus.fire(EventKind.ON_CLOSE)
