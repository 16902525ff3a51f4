"""
Settings event bus.

A fixed set of event kinds, each with an ordered list of handlers. Handlers
run one after another in registration order.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Union

from cadence.errors import UnknownEventName
from cadence.obs import logger


class EventKind(str, Enum):
    ON_SETTING_CHANGE = "onSettingChange"
    ON_CLOSE = "onClose"

    @classmethod
    def parse(cls, name: Union[str, EventKind]) -> EventKind:
        try:
            return cls(name)
        except ValueError:
            raise UnknownEventName(f"Unknown settings event: {name!r}") from None


class EventBus:

    def __init__(self):
        self._handlers: dict[EventKind, list[Callable]] = {kind: [] for kind in EventKind}

    def register(self, event: Union[str, EventKind], handler: Callable):
        self._handlers[EventKind.parse(event)].append(handler)

    def handlers(self, event: Union[str, EventKind]) -> tuple[Callable, ...]:
        return tuple(self._handlers[EventKind.parse(event)])

    def fire(self, event: EventKind, *args):
        for handler in self.handlers(event):
            try:
                handler(*args)
            except Exception as e:
                logger.error(f"{event.value} handler {getattr(handler, '__name__', handler)!r} failed: {e}")
