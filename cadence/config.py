"""
Runtime configuration for the Cadence client.

Values come from the environment (CADENCE_*) with sensible defaults, so the
client runs without a config file on first start.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cadence.paths import get_config_dir


# The streaming transport always listens on the request port plus this offset.
STREAM_PORT_OFFSET = 1


class HostEnvironment(str, Enum):
    """Where the UI is hosted."""
    DESKTOP = "desktop"  # privileged host process, zoom and updates available
    BROWSER = "browser"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='CADENCE_', extra='ignore')

    config_dir: Path = Field(default_factory=get_config_dir)
    environment: HostEnvironment = HostEnvironment.DESKTOP

    http_scheme: str = "http://"
    ws_scheme: str = "ws://"

    # Transport-level timeout, owned by the transports
    request_timeout: float = 5.0

    # Header a media server must send on its root route, empty to skip the check
    server_header: str = ""

    # Delay before the silent update check on desktop hosts
    update_check_delay: float = 4.0

    # Applied to the cadence logger by the app shell
    log_level: str = "INFO"

    @field_validator('log_level')
    @classmethod
    def check_log_level(cls, value: str) -> str:
        value = value.upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"Unknown log level: {value}")
        return value

    @model_validator(mode='after')
    def normalise_schemes(self):
        """Accept "http" as well as "http://"."""
        if not self.http_scheme.endswith("://"):
            self.http_scheme = f"{self.http_scheme}://"
        if not self.ws_scheme.endswith("://"):
            self.ws_scheme = f"{self.ws_scheme}://"
        return self

    @property
    def is_desktop(self) -> bool:
        return self.environment == HostEnvironment.DESKTOP
