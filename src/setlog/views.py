"""
View-models for Setlog.

Each view derives its projection from the full current collections and
recomputes it from scratch whenever the repository reports a change.
"""

from dataclasses import dataclass
from typing import Iterable

from setlog.db import LOGS, SETTINGS
from setlog.models import (
    ALL,
    DELETED_TITLE,
    ProgressLog,
    Setting,
    normalize_status,
)
from setlog.repository import ChangeEvent, Repository


def matches_query(setting: Setting, query: str) -> bool:
    """Case-insensitive substring match on title, content or tags."""
    q = query.strip().lower()
    if not q:
        return True
    return (
        q in setting.title.lower()
        or q in setting.content.lower()
        or q in ",".join(setting.tags).lower()
    )


def filter_settings(
    settings: Iterable[Setting],
    query: str = "",
    category: str = ALL,
    status: str = ALL,
) -> list[Setting]:
    """Keep settings passing the category, status and text filters."""
    filtered = list(settings)
    if category != ALL:
        filtered = [s for s in filtered if s.category == category]
    if status != ALL:
        filtered = [s for s in filtered if s.status == status]
    if query.strip():
        filtered = [s for s in filtered if matches_query(s, query)]
    return filtered


def setting_sort_key(setting: Setting) -> tuple[int, int, int]:
    # Status order first, then higher priority, then most recently updated
    return (setting.status_index, -setting.priority_index, -setting.updated_at)


def sort_settings(settings: Iterable[Setting]) -> list[Setting]:
    return sorted(settings, key=setting_sort_key)


def sort_logs(logs: Iterable[ProgressLog]) -> list[ProgressLog]:
    """Newest date first; equal dates keep their input order."""
    return sorted(logs, key=lambda log: log.date, reverse=True)


def distinct_categories(settings: Iterable[Setting]) -> list[str]:
    """The category filter choices: ALL, then each observed category."""
    return [ALL] + sorted({s.category for s in settings})


class SettingListView:
    """The filtered, ordered list of settings."""

    def __init__(
        self,
        repository: Repository,
        query: str = "",
        category: str = ALL,
        status: str = ALL,
    ) -> None:
        self.repository = repository
        self.query = query
        self.category = category
        self.status = status if status == ALL else normalize_status(status)
        self.rows: list[Setting] = []
        self.categories: list[str] = [ALL]
        self._unsubscribe = repository.subscribe(SETTINGS, self._on_change)
        self.refresh()

    def _on_change(self, event: ChangeEvent) -> None:
        self.refresh()

    def refresh(self) -> None:
        settings = self.repository.all_settings()
        self.categories = distinct_categories(settings)
        self.rows = sort_settings(
            filter_settings(settings, self.query, self.category, self.status)
        )

    def set_query(self, query: str) -> None:
        self.query = query
        self.refresh()

    def set_category(self, category: str) -> None:
        self.category = category or ALL
        self.refresh()

    def set_status(self, status: str) -> None:
        self.status = ALL if not status or status == ALL else normalize_status(status)
        self.refresh()

    def close(self) -> None:
        self._unsubscribe()


class SettingDetailView:
    """
    One setting and its progress logs.

    Shows the latest stored version of the setting. Once the setting is
    deleted the snapshot it was opened with is kept and `deleted` is set.
    """

    def __init__(self, repository: Repository, setting: Setting) -> None:
        self.repository = repository
        self.setting_id = setting.id
        self._snapshot = setting
        self.setting = setting
        self.deleted = False
        self.logs: list[ProgressLog] = []
        self._unsubscribers = [
            repository.subscribe(SETTINGS, self._on_change),
            repository.subscribe(LOGS, self._on_change),
        ]
        self.refresh()

    def _on_change(self, event: ChangeEvent) -> None:
        self.refresh()

    def refresh(self) -> None:
        latest = self.repository.get_setting(self.setting_id)
        self.deleted = latest is None
        if latest is not None:
            self._snapshot = latest
        self.setting = self._snapshot
        self.logs = sort_logs(
            log for log in self.repository.all_logs()
            if log.setting_id == self.setting_id
        )

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()


@dataclass(frozen=True)
class LogRow:
    """A log joined to the title of the setting it references."""

    log: ProgressLog
    title: str
    orphaned: bool = False


def join_log_titles(logs: Iterable[ProgressLog], settings: Iterable[Setting]) -> list[LogRow]:
    """Sort logs newest first and resolve each setting title."""
    titles = {s.id: s.title for s in settings}
    rows = []
    for log in sort_logs(logs):
        title = titles.get(log.setting_id)
        if title is None:
            rows.append(LogRow(log, DELETED_TITLE, orphaned=True))
        else:
            rows.append(LogRow(log, title))
    return rows


class LogListView:
    """Every progress log, newest first, with its setting title."""

    def __init__(self, repository: Repository) -> None:
        self.repository = repository
        self.rows: list[LogRow] = []
        self._unsubscribers = [
            repository.subscribe(LOGS, self._on_change),
            repository.subscribe(SETTINGS, self._on_change),
        ]
        self.refresh()

    def _on_change(self, event: ChangeEvent) -> None:
        self.refresh()

    def refresh(self) -> None:
        self.rows = join_log_titles(
            self.repository.all_logs(), self.repository.all_settings()
        )

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
