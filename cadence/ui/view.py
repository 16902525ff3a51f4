"""
In-memory model of the application root as the core sees it.

Rendering is done elsewhere; the core only flips classes and attributes,
sets style properties, manages injected style blocks and overlays, and asks
for re-renders. Keeping those effects here makes them observable in tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ViewModel:

    classes: set[str] = field(default_factory=set)
    attributes: dict[str, str] = field(default_factory=dict)
    style_properties: dict[str, str] = field(default_factory=dict)

    # id -> css text, at most one block per id
    style_blocks: dict[str, str] = field(default_factory=dict)

    # id -> attributes, insertion order is stacking order
    overlays: dict[str, dict[str, Any]] = field(default_factory=dict)

    locale: str = "en"
    render_count: int = 0
    zoom_level: float = 0.0

    panels_shown: list[str] = field(default_factory=list)
    alerts: list[str] = field(default_factory=list)

    # --- Classes ---

    def add_class(self, name: str):
        self.classes.add(name)

    def remove_class(self, name: str):
        self.classes.discard(name)

    def toggle_class(self, name: str, on: Optional[bool] = None):
        if on is None:
            on = name not in self.classes
        if on:
            self.classes.add(name)
        else:
            self.classes.discard(name)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    # --- Attributes and style ---

    def set_attr(self, name: str, value: str):
        self.attributes[name] = value

    def get_attr(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def set_style_property(self, name: str, value: str):
        self.style_properties[name] = value

    def inject_style(self, block_id: str, css: str):
        """Replace any existing block with the same id."""
        self.remove_style(block_id)
        self.style_blocks[block_id] = css

    def remove_style(self, block_id: str) -> bool:
        return self.style_blocks.pop(block_id, None) is not None

    # --- Overlays ---

    def prepend_overlay(self, overlay_id: str, **attrs):
        self.overlays = {overlay_id: attrs, **self.overlays}

    def has_overlay(self, overlay_id: str) -> bool:
        return overlay_id in self.overlays

    def remove_overlay(self, overlay_id: str) -> bool:
        return self.overlays.pop(overlay_id, None) is not None

    # --- Rendering ---

    def render(self):
        self.render_count += 1

    def set_zoom(self, level: float):
        self.zoom_level = level

    def show_panel(self, name: str):
        self.panels_shown.append(name)

    def alert(self, message: str):
        self.alerts.append(message)
