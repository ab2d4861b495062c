"""
Edit forms for Setlog.

A form is opened either empty (create, fresh id) or with an existing
record (edit, same id). Saving always writes the complete record.
"""

from datetime import date, datetime
from typing import Any

from setlog.models import (
    DEFAULT_CATEGORY,
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    UNTITLED,
    ProgressLog,
    Setting,
    date_only,
    from_millis,
    new_id,
    normalize_priority,
    normalize_status,
    now_millis,
    parse_tags,
    tags_to_string,
)
from setlog.repository import Repository


class SettingForm:
    """Create or edit a setting item."""

    def __init__(
        self,
        repository: Repository,
        initial: Setting | None = None,
        default_category: str = "인물",
    ) -> None:
        self.repository = repository
        self.initial = initial
        self.id = initial.id if initial else new_id()
        self.default_category = default_category

    @property
    def is_edit(self) -> bool:
        return self.initial is not None

    @property
    def fields(self) -> dict[str, str]:
        """Prefilled form values."""
        init = self.initial
        if init is None:
            return {
                "category": self.default_category,
                "title": "",
                "content": "",
                "status": DEFAULT_STATUS,
                "priority": DEFAULT_PRIORITY,
                "tags": "",
            }
        return {
            "category": init.category,
            "title": init.title,
            "content": init.content,
            "status": init.status,
            "priority": init.priority,
            "tags": tags_to_string(init.tags),
        }

    def build(
        self,
        category: str,
        title: str,
        content: str,
        status: str,
        priority: str,
        tags: str,
    ) -> Setting:
        """
        Build the record a save would write.

        Category and title are trimmed and replaced by placeholders when
        empty; content is kept verbatim. updatedAt is always refreshed.
        """
        return Setting(
            id=self.id,
            category=category.strip() or DEFAULT_CATEGORY,
            title=title.strip() or UNTITLED,
            content=content,
            status=normalize_status(status),
            priority=normalize_priority(priority),
            tags=parse_tags(tags),
            updated_at=now_millis(),
        )

    def save(
        self,
        category: str,
        title: str,
        content: str,
        status: str,
        priority: str,
        tags: str,
    ) -> Setting:
        setting = self.build(category, title, content, status, priority, tags)
        self.repository.put_setting(setting)
        self.initial = setting
        return setting

    def delete(self) -> bool:
        """Delete the edited setting. Its logs are left in place."""
        if self.initial is None:
            return False
        return self.repository.delete_setting(self.id)


class LogForm:
    """Create or edit a progress log for one setting."""

    def __init__(
        self,
        repository: Repository,
        setting_id: str,
        initial: ProgressLog | None = None,
    ) -> None:
        self.repository = repository
        self.initial = initial
        self.id = initial.id if initial else new_id()
        # Editing never moves a log to another setting
        self.setting_id = initial.setting_id if initial else setting_id

    @property
    def is_edit(self) -> bool:
        return self.initial is not None

    @property
    def fields(self) -> dict[str, Any]:
        init = self.initial
        if init is None:
            return {"date": date_only(datetime.now()), "did": "", "next": ""}
        return {"date": from_millis(init.date), "did": init.did, "next": init.next}

    def save(self, day: datetime | date, did: str, next: str) -> ProgressLog:
        log = ProgressLog(
            id=self.id,
            date=date_only(day),
            setting_id=self.setting_id,
            did=did.strip(),
            next=next.strip(),
        )
        self.repository.put_log(log)
        self.initial = log
        return log
