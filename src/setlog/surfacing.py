"""
Surfacing module for Setlog.

Renders the view-models as colored terminal text.
"""

import os
from collections import Counter
from functools import lru_cache

from setlog.config import load_config
from setlog.db import LOGS, SETTINGS
from setlog.models import ALL, PRIORITY_ALIASES, STATUS_ALIASES, STATUS_ORDER, Setting, fmt_date
from setlog.repository import Repository
from setlog.views import LogListView, LogRow, SettingDetailView, SettingListView


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    # Foreground colors
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    WHITE = "\033[37m"

    @classmethod
    def enabled(cls) -> bool:
        """Check if colors should be enabled."""
        if os.environ.get("NO_COLOR"):
            return False
        return color_configured()


@lru_cache(maxsize=1)
def color_configured() -> bool:
    """The [display] color flag, read from config.toml once per process."""
    return bool(load_config().get("display", {}).get("color", True))


def c(text: str, *codes: str) -> str:
    """Apply color codes to text if colors are enabled."""
    if not Colors.enabled():
        return text
    return "".join(codes) + text + Colors.RESET


STATUS_COLORS = {
    "수정필요": Colors.RED,
    "사용중": Colors.GREEN,
    "초안": Colors.YELLOW,
    "완료": Colors.BLUE,
    "아이디어": Colors.DIM,
}

PRIORITY_MARKERS = {
    "높음": "🔴",
    "보통": "🟡",
    "낮음": "⚪",
}

STATUS_NAMES = {value: name for name, value in STATUS_ALIASES.items()}
PRIORITY_NAMES = {value: name for name, value in PRIORITY_ALIASES.items()}


def short_id(record_id: str) -> str:
    """First block of a UUID, enough to address a record from the CLI."""
    return record_id.split("-", 1)[0]


def format_status(status: str) -> str:
    return c(status, STATUS_COLORS.get(status, ""))


def format_setting_row(setting: Setting) -> str:
    marker = PRIORITY_MARKERS.get(setting.priority, "⚪")
    tags = " ".join(f"#{tag}" for tag in setting.tags[:4])
    parts = [
        c(f"{short_id(setting.id):8}", Colors.DIM),
        marker,
        setting.title[:40],
        c(f"[{setting.category}]", Colors.DIM),
        format_status(setting.status),
    ]
    if tags:
        parts.append(c(tags, Colors.DIM))
    parts.append(c(f"수정: {fmt_date(setting.updated_at)}", Colors.DIM))
    return "  ".join(parts)


def format_setting_list(view: SettingListView) -> str:
    """Settings list with the active filters in the header."""
    if not view.rows:
        return c("No settings yet. Add one with: setlog add --title ...", Colors.DIM)

    header = "SETTINGS"
    filters = []
    if view.category != ALL:
        filters.append(f"category={view.category}")
    if view.status != ALL:
        filters.append(f"status={view.status}")
    if view.query.strip():
        filters.append(f"query={view.query.strip()}")
    if filters:
        header += f" ({', '.join(filters)})"

    lines = [c(f"━━━ {header} ━━━", Colors.BOLD, Colors.BLUE), ""]
    lines.extend(format_setting_row(s) for s in view.rows)
    lines.append("")
    lines.append(c(f"{len(view.rows)} shown · categories: {', '.join(view.categories[1:])}", Colors.DIM))
    return "\n".join(lines)


def format_log_lines(did: str, next: str) -> list[str]:
    lines = []
    if did:
        lines.append(f"    한 일: {did}")
    if next:
        lines.append(f"    다음: {next}")
    return lines


def format_setting_detail(view: SettingDetailView) -> str:
    """One setting with its content and progress logs."""
    s = view.setting
    marker = PRIORITY_MARKERS.get(s.priority, "⚪")
    lines = [c(f"{marker} {s.title}", Colors.BOLD)]
    if view.deleted:
        lines.append(c("(deleted)", Colors.RED))
    lines.append(c(f"id: {s.id}", Colors.DIM))
    meta = [s.category, format_status(s.status), s.priority, f"수정: {fmt_date(s.updated_at)}"]
    lines.append("  ".join(meta))
    if s.tags:
        lines.append(" ".join(f"#{tag}" for tag in s.tags))
    lines.append("")
    lines.append(c("내용", Colors.BOLD))
    lines.append(s.content if s.content else "(내용 없음)")
    lines.append("")
    lines.append(c("━━━ 진행 로그 ━━━", Colors.BOLD, Colors.BLUE))

    if not view.logs:
        lines.append(c(f"No logs yet. Add one with: setlog log {short_id(s.id)}", Colors.DIM))
        return "\n".join(lines)

    for log in view.logs:
        lines.append(f"{fmt_date(log.date)}  {c(short_id(log.id), Colors.DIM)}")
        lines.extend(format_log_lines(log.did, log.next))
    return "\n".join(lines)


def format_log_row(row: LogRow) -> list[str]:
    title = c(row.title, Colors.RED) if row.orphaned else row.title
    lines = [f"{fmt_date(row.log.date)} · {title}  {c(short_id(row.log.id), Colors.DIM)}"]
    lines.extend(format_log_lines(row.log.did, row.log.next))
    return lines


def format_log_list(view: LogListView) -> str:
    """All logs, newest first."""
    if not view.rows:
        return c("No logs yet. Add one with: setlog log <setting-id>", Colors.DIM)

    lines = [c("━━━ PROGRESS LOGS ━━━", Colors.BOLD, Colors.BLUE), ""]
    for row in view.rows:
        lines.extend(format_log_row(row))
    return "\n".join(lines)


def format_legend() -> str:
    """Status colors and priority markers."""
    lines = [c("Status colors", Colors.BOLD)]
    for status in STATUS_ORDER:
        swatch = c("■", STATUS_COLORS[status])
        lines.append(f"  {swatch} {status} ({STATUS_NAMES[status]})")
    lines.append("")
    lines.append(c("Priority", Colors.BOLD))
    for priority, marker in PRIORITY_MARKERS.items():
        lines.append(f"  {marker} {priority} ({PRIORITY_NAMES[priority]})")
    lines.append("")
    lines.append(c("Tips", Colors.BOLD))
    lines.append("  • setlog list --category <c> --status <s> to filter")
    lines.append("  • setlog log <id> records dated progress on an item")
    return "\n".join(lines)


def get_stats(repository: Repository) -> dict:
    """Counts by status and category, plus log totals."""
    settings = repository.all_settings()
    logs = repository.all_logs()
    ids = {s.id for s in settings}
    by_status = Counter(s.status for s in settings)
    return {
        "stored_settings": repository.db.count(SETTINGS),
        "stored_logs": repository.db.count(LOGS),
        "total_settings": len(settings),
        "total_logs": len(logs),
        "by_status": {status: by_status[status] for status in STATUS_ORDER},
        "by_category": dict(sorted(Counter(s.category for s in settings).items())),
        "orphaned_logs": sum(1 for log in logs if log.setting_id not in ids),
    }


def format_stats(stats: dict) -> str:
    lines = ["Setlog Statistics", "-" * 30]
    lines.append(f"Settings: {stats['total_settings']}")
    lines.append(f"Logs: {stats['total_logs']}")
    skipped = (stats["stored_settings"] - stats["total_settings"]) + (
        stats["stored_logs"] - stats["total_logs"]
    )
    if skipped:
        lines.append(f"Unreadable records: {skipped}")
    lines.append("\nBy status:")
    for status, count in stats["by_status"].items():
        lines.append(f"  {status}: {count}")
    lines.append("\nBy category:")
    for category, count in stats["by_category"].items():
        lines.append(f"  {category}: {count}")
    lines.append(f"\nLogs for deleted settings: {stats['orphaned_logs']}")
    return "\n".join(lines)
