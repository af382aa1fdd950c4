"""Process-wide holder for the current GlobalSettings.

Settings are loaded once at startup and replaced whole when an administrator
changes them. Readers take a snapshot, an immutable GlobalSettings, and use it
for the duration of one dispatch, so they never observe a partial update.
"""

import threading
from typing import Optional

from snsnotify.logging import get_logger
from snsnotify.utils.redaction import register_secret

from .loader import merge_settings
from .models import GlobalSettings

logger = get_logger(__name__, component="settings")


class SettingsStore:
    """Thread-safe container that swaps GlobalSettings snapshots atomically."""

    def __init__(self, settings: Optional[GlobalSettings] = None):
        self._lock = threading.Lock()
        self._settings = settings or GlobalSettings()
        register_secret(self._settings.secret_key_value())

    def snapshot(self) -> GlobalSettings:
        """Return the current settings object."""
        return self._settings

    def replace(self, settings: GlobalSettings) -> GlobalSettings:
        """Swap in a new settings object and return the previous one."""
        register_secret(settings.secret_key_value())
        with self._lock:
            previous = self._settings
            self._settings = settings
        logger.info(
            "Global settings replaced",
            extra={"event": "settings.replaced"},
        )
        return previous

    def update(self, **changes) -> GlobalSettings:
        """Apply an administrative change and return the new settings.

        The new object is validated before it becomes visible; on a
        validation error the current settings stay in place.

        Raises:
            pydantic.ValidationError: If the changes produce invalid settings
        """
        with self._lock:
            updated = merge_settings(self._settings, **changes)
            register_secret(updated.secret_key_value())
            self._settings = updated

        logger.info(
            "Global settings updated",
            extra={"event": "settings.updated", "fields": sorted(changes)},
        )
        return updated
