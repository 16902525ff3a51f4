"""
Form controls the settings engine reads from and writes to.

A control's kind is fixed when the setting is declared; the engine never
re-inspects controls at mutation time.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Optional


class ControlKind(str, Enum):
    CHECKBOX = "checkbox"
    RADIO = "radio"
    TEXT = "text"  # inputs, selects, textareas


@dataclass
class Control:
    name: str
    kind: ControlKind
    panel: str = "general"
    value: Any = ""
    checked: bool = False


@dataclass
class ChangeEvent:
    """The origin event handed to setting-change subscribers."""
    target: Control
    form: SettingsForm


class SettingsForm:
    """
    The settings form as a flat list of controls.

    Radio controls share a name; siblings are the same-named radios within
    the same panel.
    """

    def __init__(self, controls: Iterable[Control] = ()):
        self.controls: list[Control] = list(controls)
        self._listeners: list[Callable] = []

    def add(self, control: Control) -> Control:
        self.controls.append(control)
        return control

    def named(self, name: str) -> list[Control]:
        return [c for c in self.controls if c.name == name]

    def get(self, name: str) -> Optional[Control]:
        """First control with this name; the checked one for radio groups."""
        matches = self.named(name)
        for control in matches:
            if control.kind == ControlKind.RADIO and control.checked:
                return control
        return matches[0] if matches else None

    def siblings(self, control: Control) -> list[Control]:
        return [
            c for c in self.controls
            if c.name == control.name and c.panel == control.panel and c.kind == ControlKind.RADIO
        ]

    # --- Reading and applying ---

    def read_value(self, control: Control) -> Any:
        if control.kind == ControlKind.CHECKBOX:
            return 1 if control.checked else 0
        if control.kind == ControlKind.RADIO:
            for sibling in self.siblings(control):
                if sibling.checked:
                    return sibling.value
            return None
        return control.value

    def apply_value(self, name: str, value: Any):
        """Set controls from a stored value without raising change events."""
        for control in self.named(name):
            if control.kind == ControlKind.CHECKBOX:
                control.checked = bool(value)
            elif control.kind == ControlKind.RADIO:
                control.checked = control.value == value
            else:
                control.value = value

    # --- User mutations ---

    def on_change(self, handler: Callable):
        self._listeners.append(handler)

    async def _dispatch(self, control: Control):
        event = ChangeEvent(target=control, form=self)
        for handler in list(self._listeners):
            result = handler(event)
            if inspect.isawaitable(result):
                await result

    async def set_value(self, name: str, value: Any):
        """Set a text control. Radio groups change through `select()`."""
        control = self.get(name)
        if control is None:
            raise KeyError(name)
        if control.kind == ControlKind.RADIO:
            raise KeyError(f"{name} is a radio group, use select()")
        control.value = value
        await self._dispatch(control)

    async def set_checked(self, name: str, checked: bool):
        control = self.get(name)
        if control is None or control.kind != ControlKind.CHECKBOX:
            raise KeyError(name)
        control.checked = bool(checked)
        await self._dispatch(control)

    async def select(self, name: str, value: Any, panel: Optional[str] = None):
        """Check the radio with this value and uncheck its siblings."""
        target = None
        for control in self.named(name):
            if control.kind == ControlKind.RADIO and control.value == value and (panel is None or control.panel == panel):
                target = control
                break
        if target is None:
            raise KeyError(f"{name}={value!r}")
        for sibling in self.siblings(target):
            sibling.checked = sibling is target
        await self._dispatch(target)
