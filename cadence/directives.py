"""
Host directives.

The host process pushes announcements such as {"action": "play"} or
{"action": "swipe", "direction": "left"} on the `announcements` channel.
Each action maps to one call on the view, the settings panel, the router
or the player. Unknown actions are logged and ignored.
"""

from __future__ import annotations

from typing import Callable, Optional

from cadence.config import Settings
from cadence.obs import logger
from cadence.settings.panel import SettingsPanel
from cadence.ui.navigation import Player, Router
from cadence.ui.view import ViewModel


ANNOUNCEMENTS_CHANNEL = "announcements"

QUEUE_OPEN_CLASS = "queue-open"
ZOOM_STEP = 0.5


class DirectiveDispatcher:

    def __init__(
        self,
        view: ViewModel,
        panel: SettingsPanel,
        router: Router,
        player: Player,
        settings: Optional[Settings] = None,
    ):
        self.view = view
        self.panel = panel
        self.router = router
        self.player = player
        self.settings = settings or Settings()

        self._actions: dict[str, Callable[[dict], None]] = {
            "maximized": self.on_maximized,
            "openSettings": lambda announcement: self.panel.open(),
            "swipe": self.on_swipe,
            "back": lambda announcement: self.router.back(),
            "forward": lambda announcement: self.router.forward(),
            "play": lambda announcement: self.player.play(),
            "pause": lambda announcement: self.player.pause(),
            "playpause": lambda announcement: self.player.play_pause(),
            "stop": lambda announcement: self.player.stop(),
            "next": lambda announcement: self.player.next(),
            "previous": lambda announcement: self.player.previous(),
            "togglequeue": lambda announcement: self.view.toggle_class(QUEUE_OPEN_CLASS),
            "alert": lambda announcement: self.view.alert(str(announcement.get("message", ""))),
            "show-welcome": lambda announcement: self.view.show_panel("welcome"),
            "show-open-source": lambda announcement: self.view.show_panel("open-source"),
            "show-about": lambda announcement: self.view.show_panel("about"),
            "zoom-in": lambda announcement: self.zoom(ZOOM_STEP),
            "zoom-out": lambda announcement: self.zoom(-ZOOM_STEP),
            "reset-zoom": lambda announcement: self.zoom(None),
        }

    @property
    def actions(self) -> tuple[str, ...]:
        return tuple(self._actions)

    def handle(self, announcement: dict):
        """Listener for the announcements channel."""
        if not isinstance(announcement, dict):
            logger.warning(f"Ignoring malformed announcement: {announcement!r}")
            return
        action = announcement.get("action")
        handler = self._actions.get(action)
        if handler is None:
            logger.warning(f"Ignoring unknown directive: {action!r}")
            return
        logger.debug(f"Directive: {action}")
        handler(announcement)

    def on_maximized(self, announcement: dict):
        self.view.add_class("maximized")
        self.view.remove_class("minimized")

    def on_swipe(self, announcement: dict):
        direction = announcement.get("direction")
        if direction == "left":
            self.router.back()
        elif direction == "right":
            self.router.forward()

    def zoom(self, step: Optional[float]):
        """Adjust the render scale; None resets it. Desktop hosts only."""
        if not self.settings.is_desktop:
            return
        if step is None:
            self.view.set_zoom(0.0)
        else:
            self.view.set_zoom(self.view.zoom_level + step)
