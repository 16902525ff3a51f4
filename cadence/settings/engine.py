"""
Cadence Settings Synchronization

Loads persisted values into the settings form, writes control mutations
through to the bound backend, and fans changes out to subscribers.

Local writes complete before subscribers run. Remote writes are spawned as
tasks and not awaited; their failures are logged and collected in
`write_errors`, never raised to the UI. Rapid writes to the same key race
at the host and the last one wins.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Iterable, Union

from cadence.obs import logger
from cadence.settings.backends import BackendKind, SettingsBackend
from cadence.settings.codec import UNSET, decode
from cadence.settings.controls import ChangeEvent, SettingsForm
from cadence.settings.events import EventBus, EventKind
from cadence.settings.registry import DEFAULT_SETTINGS, SettingEntry


class SettingsSync:

    def __init__(
        self,
        form: SettingsForm,
        backends: dict[BackendKind, SettingsBackend],
        entries: Iterable[SettingEntry] = DEFAULT_SETTINGS,
        bus: EventBus | None = None,
    ):
        self.form = form
        self.backends = backends
        self.entries: dict[str, SettingEntry] = {entry.name: entry for entry in entries}
        self.bus = bus or EventBus()

        self.loaded = False
        self.watching = False

        self._pending: set[asyncio.Task] = set()
        self.write_errors: list[tuple[str, Exception]] = []

        missing = {entry.backend for entry in self.entries.values()} - set(backends)
        if missing:
            raise ValueError(f"No backend for: {', '.join(sorted(kind.value for kind in missing))}")

    def backend_for(self, name: str) -> SettingsBackend:
        return self.backends[self.entries[name].backend]

    @logger.instrument("Loading settings into the form...")
    async def load_all(self):
        """Apply every stored value; unset keys keep the control default."""
        applied = 0
        for name in self.entries:
            raw = await self.backend_for(name).get(name)
            if raw is UNSET:
                continue
            self.form.apply_value(name, decode(raw))
            applied += 1
        self.loaded = True
        logger.info(f"  Applied {applied} of {len(self.entries)} settings")

    def watch_all(self):
        """Attach the single change handler to the form. Safe to call twice."""
        if self.watching:
            return
        self.form.on_change(self.on_control_change)
        self.watching = True

    async def on_control_change(self, event: ChangeEvent):
        name = event.target.name
        if name not in self.entries:
            return

        value = self.form.read_value(event.target)
        backend = self.backend_for(name)

        if backend.fire_and_forget:
            self._spawn_write(backend, name, value)
        else:
            try:
                await backend.set(name, value)
            except Exception as e:
                logger.error(f"Failed to store setting {name}: {e}")
                self.write_errors.append((name, e))

        self.bus.fire(EventKind.ON_SETTING_CHANGE, name, value, event)

    def _spawn_write(self, backend: SettingsBackend, name: str, value: Any):
        task = asyncio.get_running_loop().create_task(backend.set(name, value))
        task.set_name(f"write-{name}")
        self._pending.add(task)
        task.add_done_callback(self._write_done)

    def _write_done(self, task: asyncio.Task):
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            name = task.get_name().removeprefix("write-")
            logger.error(f"Remote write of {name} failed: {error}")
            self.write_errors.append((name, error))

    @property
    def pending_writes(self) -> int:
        return len(self._pending)

    async def drain(self):
        """Wait until every spawned remote write has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def register_callback(self, event: Union[str, EventKind], handler: Callable):
        """
        Subscribe to a settings event.

        Args:
            event: "onSettingChange", "onClose" or the matching EventKind

        Raises:
            UnknownEventName: for any other event name
        """
        self.bus.register(event, handler)
