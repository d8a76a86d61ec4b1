"""
Configuration settings for the certificate reload manager.
"""

from __future__ import annotations

import logging
import os

from watchdog.events import (
    EVENT_TYPE_CLOSED,
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
)


class Config:
    """Central configuration class for all system settings."""

    def __init__(self) -> None:
        # Reload settings
        self.DEBOUNCE_SECONDS: float = float(
            os.getenv("HOTCERT_DEBOUNCE_SECONDS", "1.0")
        )  # Long enough to span the cert and key writes of one update
        self.STOP_TIMEOUT: float = 10.0  # Seconds to wait for the watch to shut down
        self.HEALTH_CHECK_INTERVAL: float = 5.0  # Loop wake-up to notice a dead observer

        # Kubernetes secret volumes swap a hidden "..data" symlink instead of
        # rewriting the projected files
        self.INDIRECT_MOUNT_MARKERS: tuple[str, ...] = ("/..data",)

        # Open and read-only close events are produced by our own reads
        self.RELOAD_EVENT_TYPES: frozenset[str] = frozenset(
            {
                EVENT_TYPE_CREATED,
                EVENT_TYPE_MODIFIED,
                EVENT_TYPE_MOVED,
                EVENT_TYPE_DELETED,
                EVENT_TYPE_CLOSED,
            }
        )

        # Demo server settings
        self.SERVER_HOST: str = os.getenv("HOTCERT_SERVER_HOST", "127.0.0.1")
        self.SERVER_PORT: int = int(os.getenv("HOTCERT_SERVER_PORT", "8443"))

        # Self-signed generation defaults
        self.SELFSIGN_DAYS: int = 365
        self.SELFSIGN_KEY_TYPE: str = "ec"

        # Logging
        self.LOG_LEVEL: int = logging.getLevelName(
            os.getenv("HOTCERT_LOG_LEVEL", "INFO").upper()
        )
        self.LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
