"""
Filesystem locations for Cadence.

The config directory holds the host-process state and the local settings
store. It follows the platform convention unless CADENCE_CONFIG_DIR is set.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional


def get_config_dir() -> Path:
    """Get the per-user config directory, honouring CADENCE_CONFIG_DIR."""
    override = os.environ.get('CADENCE_CONFIG_DIR')
    if override:
        return Path(override)

    if os.name == 'nt':
        base = Path(os.environ.get('APPDATA', Path.home() / 'AppData' / 'Roaming'))
    elif sys.platform == 'darwin':
        base = Path.home() / 'Library' / 'Application Support'
    else:
        base = Path(os.environ.get('XDG_CONFIG_HOME', Path.home() / '.config'))
    return base / 'Cadence'


class Paths:
    """Well-known names and files, resolved lazily against the config dir."""

    name_ns = 'cadence'

    HOST_STATE_FILE = 'host_state.json'
    LOCAL_STORAGE_FILE = 'local_storage.json'

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = config_dir

    @property
    def config_dir(self) -> Path:
        return self._config_dir or get_config_dir()

    @property
    def host_state(self) -> Path:
        return self.config_dir / self.HOST_STATE_FILE

    @property
    def local_storage(self) -> Path:
        return self.config_dir / self.LOCAL_STORAGE_FILE


paths = Paths()
