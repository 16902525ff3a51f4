"""
Cadence Settings Module

Declared settings, their backends, the form they are edited in, and the
engine that keeps the two in sync.
"""

from cadence.settings.backends import BackendKind, LocalBackend, LocalStore, RemoteBackend, SettingsBackend
from cadence.settings.codec import UNSET, decode, encode
from cadence.settings.controls import ChangeEvent, Control, ControlKind, SettingsForm
from cadence.settings.engine import SettingsSync
from cadence.settings.events import EventBus, EventKind
from cadence.settings.panel import SettingsPanel
from cadence.settings.registry import DEFAULT_SETTINGS, SettingEntry, build_form

__all__ = [
    "BackendKind",
    "LocalBackend",
    "LocalStore",
    "RemoteBackend",
    "SettingsBackend",
    "UNSET",
    "decode",
    "encode",
    "ChangeEvent",
    "Control",
    "ControlKind",
    "SettingsForm",
    "SettingsSync",
    "EventBus",
    "EventKind",
    "SettingsPanel",
    "DEFAULT_SETTINGS",
    "SettingEntry",
    "build_form",
]
