"""
Cadence Application Shell

Wires the bridge, the host process, the connection bootstrap and the
settings engine together and runs the startup sequence:

    appearance -> directives -> autoconnect -> settings sync -> update check

Nothing past autoconnect runs while the app is locked; a manual connection
from the lock screen (`connect`) finishes the sequence instead.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Optional

from cadence.bridge import Bridge
from cadence.config import Settings
from cadence.connection import ConnectionBootstrap
from cadence.directives import ANNOUNCEMENTS_CHANNEL, DirectiveDispatcher
from cadence.host import HostProcess, HostStore
from cadence.obs import logger
from cadence.paths import Paths
from cadence.settings.backends import BackendKind, LocalBackend, LocalStore, RemoteBackend
from cadence.settings.codec import decode
from cadence.settings.engine import SettingsSync
from cadence.settings.events import EventBus
from cadence.settings.field_logic import FieldLogic
from cadence.settings.panel import SettingsPanel
from cadence.settings.registry import DEFAULT_SETTINGS, build_form
from cadence.ui.appearance import Appearance
from cadence.ui.navigation import Player, Router
from cadence.ui.view import ViewModel
from cadence.version import __version__


class MediaApp:

    def __init__(
        self,
        settings: Optional[Settings] = None,
        bridge: Optional[Bridge] = None,
        view: Optional[ViewModel] = None,
        player: Optional[Player] = None,
    ):
        self.settings = settings or Settings()
        self.bridge = bridge or Bridge(self.settings)
        self.view = view or ViewModel()

        logger.setLevel(self.settings.log_level)

        self.paths = Paths(self.settings.config_dir)
        self.host = HostProcess(HostStore(self.paths.host_state))
        self.local = LocalStore(self.paths.local_storage)

        self.bootstrap = ConnectionBootstrap(self.bridge, self.view)
        self.appearance = Appearance(self.view, self.local)

        self.bus = EventBus()
        self.form = build_form(DEFAULT_SETTINGS)
        self.sync = SettingsSync(
            self.form,
            {
                BackendKind.LOCAL: LocalBackend(self.local),
                BackendKind.REMOTE: RemoteBackend(self.bridge),
            },
            DEFAULT_SETTINGS,
            bus=self.bus,
        )
        self.panel = SettingsPanel(self.view, self.bus)
        self.field_logic = FieldLogic(self.appearance)

        self.router = Router(self.local.get_item("start_page") or "/explore-music")
        self.player = player or Player()
        self.directives = DirectiveDispatcher(self.view, self.panel, self.router, self.player, self.settings)

        self._subscribed = False
        self._update_check: Optional[asyncio.Task] = None

    @property
    def connected(self) -> bool:
        return self.bridge.state.usable

    async def start(self) -> bool:
        """
        Run the startup sequence.

        Returns:
            True if the app ended up connected, False if it is locked
        """
        logger.info(f"Starting Cadence v{__version__} ({self.settings.environment.value})")
        self.host.store.load()
        self.host.attach(self.bridge)

        self.appearance.maybe_enable_developer_mode()
        self.appearance.set_colors()
        self.appearance.inject_custom_css()

        self.bridge.listen(ANNOUNCEMENTS_CHANNEL, self.directives.handle)

        if not await self.bootstrap.auto_connect_or_lock():
            return False

        await self._after_connect()
        return True

    async def connect(self, host: str, port: int, remember: bool = False) -> bool:
        """Manual connection from the lock screen."""
        if not await self.bootstrap.connect_from_lock_screen(host, port, remember=remember):
            return False
        await self._after_connect()
        return True

    async def _after_connect(self):
        await self.sync.load_all()
        self.sync.watch_all()
        if not self._subscribed:
            self.field_logic.subscribe(self.sync)
            self._subscribed = True
        self.schedule_update_check()

    # --- Updates ---

    def schedule_update_check(self):
        if not self.settings.is_desktop or self._update_check is not None:
            return
        self._update_check = asyncio.get_running_loop().create_task(self._delayed_update_check())

    async def _delayed_update_check(self):
        await asyncio.sleep(self.settings.update_check_delay)
        if decode(self.local.get_item("auto_check_for_updates")):
            self.check_for_updates()

    def check_for_updates(self) -> bool:
        if not self.settings.is_desktop:
            logger.warning("Updates are only available in the desktop host")
            return False
        self.bridge.say("check-for-updates-silently")
        return True

    # --- Window chrome ---

    def minimize(self):
        self.bridge.say("minimize-player")

    def maximize(self):
        self.bridge.say("maximize-player")

    def restore(self):
        self.bridge.say("restore-player")

    def close(self):
        self.bridge.say("close-player")

    def open_url(self, href: str):
        self.bridge.say("open-url", href)

    def on_window_resize(self, x: int, y: int):
        """A window moved away from the origin is no longer maximized."""
        if x != 0 or y != 0:
            self.view.remove_class("maximized")

    # --- Settings actions ---

    async def choose_accent_color(self, color: str):
        """Select a swatch as if the user had clicked it."""
        await self.form.select("accent_color", color)

    def disable_custom_css(self):
        self.appearance.disable_custom_css()
        self.form.apply_value("custom_css", "")

    def factory_reset(self, confirm: Callable[[str], bool]) -> bool:
        """
        Wipe the host state after two confirmations.

        Args:
            confirm: asks the user a question, returns their answer
        """
        if not confirm("settings.factory-reset.confirm"):
            return False
        if not confirm("danger-confirm"):
            return False
        self.bridge.say("factory-reset")
        return True

    async def stop(self):
        if self._update_check is not None:
            self._update_check.cancel()
            await asyncio.gather(self._update_check, return_exceptions=True)
            self._update_check = None
        self.bridge.remove_listener(ANNOUNCEMENTS_CHANNEL, self.directives.handle)
        await self.sync.drain()
        await self.bridge.close()
        logger.info("Cadence stopped")
