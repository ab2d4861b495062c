"""
CLI for Setlog.

Minimal CLI using stdlib argument handling for fast startup.
Subcommands are imported lazily to avoid startup overhead.

Usage:
    setlog list                      # Settings, ordered by status and priority
    setlog add --title "..."         # New setting
    setlog log <id> --did "..."      # Record progress
    setlog --help                    # Show help
"""

import logging
import sys
from typing import Callable

logger = logging.getLogger("setlog")

SETTING_OPTIONS = {
    "--category": "category", "-c": "category",
    "--title": "title", "-t": "title",
    "--content": "content",
    "--status": "status", "-s": "status",
    "--priority": "priority", "-p": "priority",
    "--tags": "tags",
}
LIST_OPTIONS = {
    "--query": "query", "-q": "query",
    "--category": "category", "-c": "category",
    "--status": "status", "-s": "status",
}
LOG_OPTIONS = {
    "--date": "date", "-d": "date",
    "--did": "did",
    "--next": "next",
}


def print_help() -> None:
    """Print help message."""
    print("""setlog - setting notes and progress logs

Commands:
    setlog list [options]         List settings (--query, --category, --status)
    setlog show <id>              Show a setting and its logs
    setlog add [fields]           Add a setting
    setlog edit <id> [fields]     Edit a setting (omitted fields are kept)
    setlog delete <id>            Delete a setting (its logs are kept)
    setlog log <id> [options]     Add a progress log (--date, --did, --next)
    setlog log-edit <log-id>      Edit a progress log (--date, --did, --next)
    setlog logs                   List all progress logs
    setlog legend                 Show status colors and priority markers
    setlog stats                  Show store statistics

Fields:
    --category, -c    Category (default: 인물 for new settings)
    --title, -t       Title
    --content         Content text
    --status, -s      아이디어|초안|사용중|완료|수정필요
                      (or idea|draft|in-use|done|needs-revision)
    --priority, -p    낮음|보통|높음 (or low|medium|high)
    --tags            Comma-separated tags

Options:
    setlog --help, -h             Show this help
    setlog --version, -v          Show version

Examples:
    setlog add -c 인물 -t "Main character" --tags "hero, lead"
    setlog list --status draft -q hero
    setlog log 3f2a --did "Wrote backstory" --next "Sketch design"

IDs may be shortened to any unique prefix.""")


def print_version() -> None:
    """Print version."""
    from setlog import __version__
    print(f"setlog {__version__}")


def setup_logging() -> None:
    """Configure logging from SETLOG_LOG_LEVEL or config.toml."""
    from setlog.config import get_log_level

    level = getattr(logging, get_log_level(), logging.WARNING)
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=level,
    )


def parse_options(args: list[str], names: dict[str, str]) -> tuple[list[str], dict[str, str]]:
    """Split args into positional arguments and named option values."""
    positional: list[str] = []
    options: dict[str, str] = {}

    i = 0
    while i < len(args):
        arg = args[i]
        if arg in names:
            if i + 1 >= len(args):
                raise ValueError(f"Missing value for {arg}")
            options[names[arg]] = args[i + 1]
            i += 2
        elif arg.startswith("-") and len(arg) > 1:
            raise ValueError(f"Unknown option: {arg}")
        else:
            positional.append(arg)
            i += 1

    return positional, options


def resolve_id(prefix: str, ids: list[str], kind: str = "setting") -> str:
    """Expand a unique id prefix to the full id."""
    if prefix in ids:
        return prefix
    matches = [record_id for record_id in ids if record_id.startswith(prefix)]
    if not matches:
        raise ValueError(f"No {kind} matching: {prefix}")
    if len(matches) > 1:
        raise ValueError(f"Ambiguous {kind} id {prefix}: {len(matches)} matches")
    return matches[0]


def parse_date(value: str):
    """Parse a YYYY-MM-DD calendar date."""
    from datetime import datetime

    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d")
    except ValueError:
        raise ValueError(f"Invalid date (expected YYYY-MM-DD): {value}") from None


def get_repository():
    """Open the store at the configured location."""
    from setlog.config import ensure_dirs
    from setlog.db import Database
    from setlog.repository import Repository

    ensure_dirs()
    return Repository(Database())


def _single_id(positional: list[str], usage: str) -> str:
    if len(positional) != 1:
        raise ValueError(f"Usage: {usage}")
    return positional[0]


def _find_setting(repository, prefix: str):
    from setlog.db import SETTINGS

    setting_id = resolve_id(prefix, repository.db.keys(SETTINGS))
    setting = repository.get_setting(setting_id)
    if setting is None:
        raise ValueError(f"Setting is unreadable: {setting_id}")
    return setting


def cmd_list(args: list[str]) -> int:
    """List settings with optional filters."""
    from setlog.surfacing import format_setting_list
    from setlog.views import SettingListView

    positional, options = parse_options(args, LIST_OPTIONS)
    if positional:
        options.setdefault("query", " ".join(positional))

    view = SettingListView(
        get_repository(),
        query=options.get("query", ""),
        category=options.get("category", "전체"),
        status=options.get("status", "전체"),
    )
    print(format_setting_list(view))
    view.close()
    return 0


def cmd_show(args: list[str]) -> int:
    """Show one setting with its logs."""
    from setlog.surfacing import format_setting_detail
    from setlog.views import SettingDetailView

    prefix = _single_id(args, "setlog show <id>")
    repository = get_repository()
    view = SettingDetailView(repository, _find_setting(repository, prefix))
    print(format_setting_detail(view))
    view.close()
    return 0


def cmd_add(args: list[str]) -> int:
    """Add a new setting."""
    from setlog.config import load_config
    from setlog.forms import SettingForm

    positional, options = parse_options(args, SETTING_OPTIONS)
    if positional:
        options.setdefault("title", " ".join(positional))

    default_category = load_config()["form"]["default_category"]
    form = SettingForm(get_repository(), default_category=default_category)
    values = form.fields
    values.update(options)
    setting = form.save(**values)
    print(setting.id)
    return 0


def cmd_edit(args: list[str]) -> int:
    """Edit a setting; options not given keep their stored values."""
    from setlog.forms import SettingForm

    positional, options = parse_options(args, SETTING_OPTIONS)
    prefix = _single_id(positional, "setlog edit <id> [fields]")
    repository = get_repository()

    form = SettingForm(repository, initial=_find_setting(repository, prefix))
    values = form.fields
    values.update(options)
    setting = form.save(**values)
    print(f"Updated: {setting.id}")
    return 0


def cmd_delete(args: list[str]) -> int:
    """Delete a setting, leaving its logs in place."""
    from setlog.db import SETTINGS

    prefix = _single_id(args, "setlog delete <id>")
    repository = get_repository()
    setting_id = resolve_id(prefix, repository.db.keys(SETTINGS))

    kept = sum(1 for log in repository.all_logs() if log.setting_id == setting_id)
    repository.delete_setting(setting_id)
    print(f"Deleted: {setting_id} ({kept} logs kept)")
    return 0


def cmd_log(args: list[str]) -> int:
    """Add a progress log to a setting."""
    from setlog.forms import LogForm

    positional, options = parse_options(args, LOG_OPTIONS)
    prefix = _single_id(positional, "setlog log <setting-id> [--date] [--did] [--next]")
    repository = get_repository()
    setting = _find_setting(repository, prefix)

    form = LogForm(repository, setting.id)
    values = form.fields
    if "date" in options:
        values["date"] = parse_date(options["date"])
    values["did"] = options.get("did", values["did"])
    values["next"] = options.get("next", values["next"])

    log = form.save(values["date"], values["did"], values["next"])
    print(log.id)
    return 0


def cmd_log_edit(args: list[str]) -> int:
    """Edit an existing progress log."""
    from setlog.db import LOGS
    from setlog.forms import LogForm

    positional, options = parse_options(args, LOG_OPTIONS)
    prefix = _single_id(positional, "setlog log-edit <log-id> [--date] [--did] [--next]")
    repository = get_repository()
    log_id = resolve_id(prefix, repository.db.keys(LOGS), kind="log")
    initial = repository.get_log(log_id)
    if initial is None:
        raise ValueError(f"Log is unreadable: {log_id}")

    form = LogForm(repository, initial.setting_id, initial=initial)
    values = form.fields
    if "date" in options:
        values["date"] = parse_date(options["date"])
    values["did"] = options.get("did", values["did"])
    values["next"] = options.get("next", values["next"])

    log = form.save(values["date"], values["did"], values["next"])
    print(f"Updated: {log.id}")
    return 0


def cmd_logs(args: list[str]) -> int:
    """List all progress logs."""
    from setlog.surfacing import format_log_list
    from setlog.views import LogListView

    view = LogListView(get_repository())
    print(format_log_list(view))
    view.close()
    return 0


def cmd_legend(args: list[str]) -> int:
    """Show status colors and priority markers."""
    from setlog.surfacing import format_legend

    print(format_legend())
    return 0


def cmd_stats(args: list[str]) -> int:
    """Show store statistics."""
    from setlog.surfacing import format_stats, get_stats

    print(format_stats(get_stats(get_repository())))
    return 0


COMMANDS: dict[str, Callable[[list[str]], int]] = {
    "list": cmd_list,
    "show": cmd_show,
    "add": cmd_add,
    "edit": cmd_edit,
    "delete": cmd_delete,
    "log": cmd_log,
    "log-edit": cmd_log_edit,
    "logs": cmd_logs,
    "legend": cmd_legend,
    "stats": cmd_stats,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = sys.argv[1:] if argv is None else argv

    if not args:
        print_help()
        return 0

    first_arg = args[0]

    if first_arg in ("--help", "-h", "help"):
        print_help()
        return 0

    if first_arg in ("--version", "-v", "version"):
        print_version()
        return 0

    command = COMMANDS.get(first_arg)
    if command is None:
        print(f"Unknown command: {first_arg}. See setlog --help", file=sys.stderr)
        return 1

    setup_logging()
    try:
        return command(args[1:])
    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
