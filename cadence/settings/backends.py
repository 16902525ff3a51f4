"""
Where setting values live.

LocalBackend  - on-device key/value store (local_storage.json)
RemoteBackend - the host process option table, reached through the bridge

Each declared setting is bound to exactly one backend kind.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from cadence.obs import logger
from cadence.settings.codec import UNSET, encode

if TYPE_CHECKING:
    from cadence.bridge import Bridge


class BackendKind(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"


class LocalStore:
    """
    String key/value store persisted as JSON.

    Values are always strings; callers decode them.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = path
        self._items: dict[str, str] = {}
        self.load()

    def load(self):
        if self.path is None or not self.path.exists():
            self._items = {}
            return
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            self._items = {str(k): str(v) for k, v in data.items()}
            logger.debug(f'Loaded {len(self._items)} local settings from {self.path}')
        except Exception as e:
            logger.error(f'Failed to load local settings: {e}')
            self._items = {}

    def save(self):
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(self._items, f, indent=2)

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: Any):
        self._items[key] = encode(value)
        self.save()

    def remove_item(self, key: str):
        if self._items.pop(key, None) is not None:
            self.save()

    def clear(self):
        self._items = {}
        self.save()


class SettingsBackend(ABC):
    """A store that setting values are read from and written through to."""

    kind: BackendKind

    # Writes are spawned and not awaited by the caller
    fire_and_forget: bool = False

    @abstractmethod
    async def get(self, name: str) -> Any:
        """Return the stored value, or UNSET if it was never written."""

    @abstractmethod
    async def set(self, name: str, value: Any) -> None:
        """Persist a value."""


class LocalBackend(SettingsBackend):

    kind = BackendKind.LOCAL

    def __init__(self, store: LocalStore):
        self.store = store

    async def get(self, name: str) -> Any:
        raw = self.store.get_item(name)
        return UNSET if raw is None else raw

    async def set(self, name: str, value: Any) -> None:
        self.store.set_item(name, value)


class RemoteBackend(SettingsBackend):

    kind = BackendKind.REMOTE
    fire_and_forget = True

    def __init__(self, bridge: Bridge):
        self.bridge = bridge

    async def get(self, name: str) -> Any:
        """
        The host answers None both for a missing option and for a stored
        null, so a remote null reads back as UNSET and the control keeps its
        default.
        """
        value = await self.bridge.ask("get-option", name)
        return UNSET if value is None else value

    async def set(self, name: str, value: Any) -> None:
        await self.bridge.ask("set-option", {"option": name, "value": value})
