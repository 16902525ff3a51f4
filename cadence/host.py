"""
Cadence Host Process

The privileged side of the bridge. Owns the authoritative option store and
the servers table, persisted to host_state.json in the config directory,
and answers the query-style channels:

- get-option   -> value or None
- set-option   -> {"option", "value"}
- db-api       -> {"fn": "getRow"|"getRows"|"insertRow"|"deleteRow", "args": [...]}
- factory-reset (signal) -> wipes everything
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from cadence.errors import BridgeError
from cadence.obs import logger

if TYPE_CHECKING:
    from cadence.bridge import Bridge


@dataclass
class HostState:
    """
    Complete persisted state of the host process.
    Saved to <config_dir>/host_state.json
    """

    options: dict[str, Any] = field(default_factory=dict)
    tables: dict[str, dict[str, dict]] = field(default_factory=lambda: {"servers": {}})

    # Version for future migrations
    version: int = 1

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "options": self.options,
            "tables": self.tables,
        }

    @classmethod
    def from_dict(cls, data: dict) -> HostState:
        state = cls()
        state.version = data.get("version", 1)
        state.options = dict(data.get("options", {}))
        for name, rows in data.get("tables", {}).items():
            state.tables[name] = dict(rows)
        return state


class HostStore:
    """
    Manages loading and saving of host state.
    """

    def __init__(self, state_file: Path):
        self.state_file = state_file
        self.state: HostState = HostState()

    @logger.instrument("Loading host state from {self.state_file}...")
    def load(self) -> HostState:
        """Load state from disk, or create default if not exists."""
        if not self.state_file.exists():
            logger.info("  No existing host state, using defaults")
            self.state = HostState()
            return self.state

        try:
            data = json.loads(self.state_file.read_text(encoding="utf-8"))
            self.state = HostState.from_dict(data)
            logger.info(f"  Loaded {len(self.state.options)} options, {len(self.state.tables['servers'])} servers")
        except Exception as e:
            logger.error(f"  Failed to load host state: {e}")
            self.state = HostState()

        return self.state

    def save(self):
        """Persist state to disk."""
        try:
            self.state_file.parent.mkdir(parents=True, exist_ok=True)
            self.state_file.write_text(json.dumps(self.state.to_dict(), indent=2), encoding="utf-8")
            logger.debug(f"  Saved host state to {self.state_file}")
        except Exception as e:
            logger.error(f"  Failed to save host state: {e}")
            raise

    # --- Options ---

    def get_option(self, name: str) -> Any:
        return self.state.options.get(name)

    def set_option(self, name: str, value: Any):
        self.state.options[name] = value
        self.save()

    # --- Tables ---

    def _table(self, name: str) -> dict[str, dict]:
        return self.state.tables.setdefault(name, {})

    def get_row(self, table: str, row_id: str) -> Optional[dict]:
        row = self._table(table).get(str(row_id))
        return dict(row) if row else None

    def get_rows(self, table: str) -> list[dict]:
        return [dict(row) for row in self._table(table).values()]

    def insert_row(self, table: str, row: dict) -> dict:
        row = dict(row)
        row_id = str(row.get("id") or uuid.uuid4().hex[:12])
        row["id"] = row_id
        self._table(table)[row_id] = row
        self.save()
        return dict(row)

    def delete_row(self, table: str, row_id: str) -> bool:
        removed = self._table(table).pop(str(row_id), None) is not None
        if removed:
            self.save()
        return removed

    def reset(self):
        self.state = HostState()
        self.save()


class HostProcess:
    """
    Answers bridge requests on behalf of the host.

    Call `attach(bridge)` once; afterwards `bridge.ask("get-option", ...)` and
    friends are served from the HostStore.
    """

    DB_FUNCTIONS = ("getRow", "getRows", "insertRow", "deleteRow")

    def __init__(self, store: HostStore):
        self.store = store

    def attach(self, bridge: Bridge):
        bridge.handle("get-option", self.get_option)
        bridge.handle("set-option", self.set_option)
        bridge.handle("db-api", self.db_api)
        bridge.handle("factory-reset", self.factory_reset)

    async def get_option(self, name: str) -> Any:
        return self.store.get_option(name)

    async def set_option(self, payload: dict) -> Any:
        if not isinstance(payload, dict) or "option" not in payload:
            raise BridgeError(f"set-option expects {{'option', 'value'}}, got {payload!r}")
        self.store.set_option(payload["option"], payload.get("value"))
        return payload.get("value")

    async def db_api(self, payload: dict) -> Any:
        fn = payload.get("fn")
        args = payload.get("args", [])
        if fn not in self.DB_FUNCTIONS:
            raise BridgeError(f"Unknown db-api function: {fn!r}")

        if fn == "getRow":
            return self.store.get_row(*args)
        if fn == "getRows":
            return self.store.get_rows(*args)
        if fn == "insertRow":
            return self.store.insert_row(*args)
        return self.store.delete_row(*args)

    @logger.instrument("Factory reset requested, wiping host state...")
    async def factory_reset(self, payload: Any = None):
        self.store.reset()
