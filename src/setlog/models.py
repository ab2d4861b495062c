"""
Record types for Setlog.

Two collections are stored:
- settings: {id, category, title, content, status, priority, tags, updatedAt}
- logs: {id, date, settingId, did, next}

Timestamps are integer milliseconds since the epoch. Log dates are always
local midnight. Defaults for absent fields are applied here, once, when a
record is read, so nothing downstream has to check for missing values.
"""

import json
import time
import uuid
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# Display and sort order. FROZEN: stored records use these exact values.
STATUS_ORDER = ["아이디어", "초안", "사용중", "완료", "수정필요"]
PRIORITY_ORDER = ["낮음", "보통", "높음"]

STATUS_ALIASES = {
    "idea": "아이디어",
    "draft": "초안",
    "in-use": "사용중",
    "done": "완료",
    "needs-revision": "수정필요",
}
PRIORITY_ALIASES = {
    "low": "낮음",
    "medium": "보통",
    "high": "높음",
}

DEFAULT_STATUS = STATUS_ORDER[0]
DEFAULT_PRIORITY = PRIORITY_ORDER[1]
DEFAULT_CATEGORY = "기타"
UNTITLED = "(제목 없음)"
DELETED_TITLE = "(삭제된 자료)"
ALL = "전체"


class RecordDecodeError(ValueError):
    """A stored value could not be read as a record."""


def normalize_status(value: str) -> str:
    """Return the stored form of a status, accepting English aliases."""
    text = value.strip()
    if text in STATUS_ORDER:
        return text
    if alias := STATUS_ALIASES.get(text.lower()):
        return alias
    raise ValueError(f"Invalid status: {value}")


def normalize_priority(value: str) -> str:
    """Return the stored form of a priority, accepting English aliases."""
    text = value.strip()
    if text in PRIORITY_ORDER:
        return text
    if alias := PRIORITY_ALIASES.get(text.lower()):
        return alias
    raise ValueError(f"Invalid priority: {value}")


def parse_tags(text: str) -> list[str]:
    """Split a comma-separated tag string into unique, non-empty tags."""
    pieces = (piece.strip() for piece in text.split(","))
    return list(dict.fromkeys(piece for piece in pieces if piece))


def tags_to_string(tags: list[str]) -> str:
    return ", ".join(tags)


def new_id() -> str:
    """Generate a globally unique record ID."""
    return str(uuid.uuid4())


def now_millis() -> int:
    return time.time_ns() // 1_000_000


def date_only(dt: datetime | date) -> datetime:
    """Local midnight of the calendar date of dt."""
    return datetime(dt.year, dt.month, dt.day)


def to_millis(dt: datetime) -> int:
    """Milliseconds since the epoch. Naive datetimes are local time."""
    return int(dt.timestamp() * 1000)


def from_millis(ms: int) -> datetime:
    """Local naive datetime for a millisecond timestamp."""
    try:
        return datetime.fromtimestamp(ms / 1000)
    except (OverflowError, OSError, ValueError) as e:
        raise ValueError(f"Timestamp out of range: {ms}") from e


def normalize_date_millis(ms: int) -> int:
    """Truncate a millisecond timestamp to local midnight."""
    return to_millis(date_only(from_millis(ms)))


def fmt_date(value: datetime | int) -> str:
    if isinstance(value, int):
        value = from_millis(value)
    return value.strftime("%Y-%m-%d")


def _or_default(value: Any, default: Any) -> Any:
    return default if value is None else value


class Setting(BaseModel):
    """A setting item: a note with category, status and priority."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    category: str = DEFAULT_CATEGORY
    title: str = UNTITLED
    content: str = ""
    status: str = DEFAULT_STATUS
    priority: str = DEFAULT_PRIORITY
    tags: list[str] = Field(default_factory=list)
    updated_at: int = Field(default=0, alias="updatedAt")

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("category", mode="before")
    @classmethod
    def _default_category(cls, v: Any) -> Any:
        return str(_or_default(v, DEFAULT_CATEGORY))

    @field_validator("title", mode="before")
    @classmethod
    def _default_title(cls, v: Any) -> Any:
        return str(_or_default(v, UNTITLED))

    @field_validator("content", mode="before")
    @classmethod
    def _default_content(cls, v: Any) -> Any:
        return str(_or_default(v, ""))

    @field_validator("status", mode="before")
    @classmethod
    def _known_status(cls, v: Any) -> Any:
        return normalize_status(str(_or_default(v, DEFAULT_STATUS)))

    @field_validator("priority", mode="before")
    @classmethod
    def _known_priority(cls, v: Any) -> Any:
        return normalize_priority(str(_or_default(v, DEFAULT_PRIORITY)))

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_list(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return []
        return [str(tag) for tag in v if tag is not None]

    @field_validator("updated_at", mode="before")
    @classmethod
    def _default_updated_at(cls, v: Any) -> Any:
        return _or_default(v, 0)

    @field_validator("updated_at")
    @classmethod
    def _representable(cls, v: int) -> int:
        from_millis(v)
        return v

    @property
    def status_index(self) -> int:
        return STATUS_ORDER.index(self.status)

    @property
    def priority_index(self) -> int:
        return PRIORITY_ORDER.index(self.priority)

    def to_record(self) -> dict[str, Any]:
        """The mapping written to the settings collection."""
        return self.model_dump(by_alias=True)


class ProgressLog(BaseModel):
    """A dated progress entry recorded against one setting."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    date: int
    setting_id: str = Field(default="", alias="settingId")
    did: str = ""
    next: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("date", mode="before")
    @classmethod
    def _date_from_calendar(cls, v: Any) -> Any:
        if isinstance(v, (datetime, date)):
            return to_millis(date_only(v))
        return v

    @field_validator("date")
    @classmethod
    def _midnight(cls, v: int) -> int:
        return normalize_date_millis(v)

    @field_validator("setting_id", "did", "next", mode="before")
    @classmethod
    def _default_text(cls, v: Any) -> Any:
        return str(_or_default(v, ""))

    def to_record(self) -> dict[str, Any]:
        """The mapping written to the logs collection."""
        return self.model_dump(by_alias=True)


def _load_mapping(raw: Any) -> dict[str, Any]:
    """Accept a mapping or its JSON text (possibly wrapped in a JSON string)."""
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")

    # A record may be stored as JSON text whose value is itself JSON text.
    for _ in range(2):
        if not isinstance(raw, str):
            break
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise RecordDecodeError(f"Invalid JSON: {e}") from e

    if not isinstance(raw, Mapping):
        raise RecordDecodeError(f"Expected a mapping, got {type(raw).__name__}")
    return dict(raw)


def decode_setting(raw: Any) -> Setting:
    """Read a stored value as a Setting."""
    try:
        return Setting.model_validate(_load_mapping(raw))
    except ValidationError as e:
        raise RecordDecodeError(f"Malformed setting: {e}") from e


def decode_log(raw: Any) -> ProgressLog:
    """Read a stored value as a ProgressLog."""
    try:
        return ProgressLog.model_validate(_load_mapping(raw))
    except ValidationError as e:
        raise RecordDecodeError(f"Malformed log: {e}") from e
