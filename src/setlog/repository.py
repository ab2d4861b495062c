"""
Repository for Setlog.

The single service object through which every view and form reads and
writes the settings and logs collections. Subscribers are notified
synchronously after each write so they can recompute their projections.
"""

import logging
from dataclasses import dataclass
from typing import Callable

from setlog.db import COLLECTIONS, LOGS, SETTINGS, Database
from setlog.models import ProgressLog, RecordDecodeError, Setting, decode_log, decode_setting

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    """A record under key was written or deleted."""

    collection: str
    key: str
    deleted: bool = False


Listener = Callable[[ChangeEvent], None]


class Repository:
    """Typed access to the settings and logs collections."""

    def __init__(self, db: Database | None = None) -> None:
        self.db = db or Database()
        self._listeners: dict[str, list[Listener]] = {name: [] for name in COLLECTIONS}

    # Change notification

    def subscribe(self, collection: str, listener: Listener) -> Callable[[], None]:
        """
        Call listener after every change to collection.

        Returns a function that removes the subscription.
        """
        if collection not in self._listeners:
            raise ValueError(f"Unknown collection: {collection}")
        self._listeners[collection].append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners[collection]:
                self._listeners[collection].remove(listener)

        return unsubscribe

    def _notify(self, event: ChangeEvent) -> None:
        # Copy so a listener may unsubscribe while being notified
        for listener in list(self._listeners[event.collection]):
            listener(event)

    # Settings

    def all_settings(self) -> list[Setting]:
        """Every readable setting; malformed records are skipped."""
        settings = []
        for key, raw in self.db.items(SETTINGS):
            try:
                settings.append(decode_setting(raw))
            except RecordDecodeError as e:
                logger.warning(f"Skipping malformed setting {key}: {e}")
        return settings

    def get_setting(self, setting_id: str) -> Setting | None:
        raw = self.db.get(SETTINGS, setting_id)
        if raw is None:
            return None
        try:
            return decode_setting(raw)
        except RecordDecodeError as e:
            logger.warning(f"Malformed setting {setting_id}: {e}")
            return None

    def put_setting(self, setting: Setting) -> Setting:
        """Insert or fully replace a setting under its id."""
        self.db.put(SETTINGS, setting.id, setting.to_record())
        logger.info(f"Saved setting {setting.id}")
        self._notify(ChangeEvent(SETTINGS, setting.id))
        return setting

    def delete_setting(self, setting_id: str) -> bool:
        """
        Delete a setting. Returns True if it existed.

        Logs referencing the setting are kept; they resolve to the
        deleted-item placeholder from then on.
        """
        removed = self.db.delete(SETTINGS, setting_id)
        if removed:
            logger.info(f"Deleted setting {setting_id}")
            self._notify(ChangeEvent(SETTINGS, setting_id, deleted=True))
        return removed

    # Logs

    def all_logs(self) -> list[ProgressLog]:
        """Every readable log; malformed records are skipped."""
        logs = []
        for key, raw in self.db.items(LOGS):
            try:
                logs.append(decode_log(raw))
            except RecordDecodeError as e:
                logger.warning(f"Skipping malformed log {key}: {e}")
        return logs

    def get_log(self, log_id: str) -> ProgressLog | None:
        raw = self.db.get(LOGS, log_id)
        if raw is None:
            return None
        try:
            return decode_log(raw)
        except RecordDecodeError as e:
            logger.warning(f"Malformed log {log_id}: {e}")
            return None

    def put_log(self, log: ProgressLog) -> ProgressLog:
        """Insert or fully replace a log under its id."""
        self.db.put(LOGS, log.id, log.to_record())
        logger.info(f"Saved log {log.id} for setting {log.setting_id}")
        self._notify(ChangeEvent(LOGS, log.id))
        return log
