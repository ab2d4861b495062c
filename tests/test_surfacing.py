"""Tests for terminal formatting and statistics."""

from datetime import datetime

from setlog.db import SETTINGS
from setlog.models import ProgressLog, Setting
from setlog.repository import Repository
from setlog.surfacing import (
    Colors,
    c,
    format_legend,
    format_setting_detail,
    format_setting_list,
    format_stats,
    get_stats,
    short_id,
)
from setlog.views import SettingDetailView, SettingListView


def test_short_id():
    assert short_id("3f2a9c1e-aaaa-bbbb") == "3f2a9c1e"
    assert short_id("plain") == "plain"


def test_no_color_env_disables_codes():
    assert Colors.enabled() is False
    assert c("x", Colors.RED) == "x"


def test_colors_enabled(monkeypatch):
    monkeypatch.delenv("NO_COLOR")
    assert c("x", Colors.RED) == f"{Colors.RED}x{Colors.RESET}"


def test_setting_list_shows_markers_and_filters(repo: Repository):
    repo.put_setting(Setting(id="a", title="Hero", priority="높음", tags=["lead"]))
    view = SettingListView(repo, query="hero")
    text = format_setting_list(view)
    assert "🔴" in text
    assert "query=hero" in text
    assert "#lead" in text


def test_detail_without_logs(repo: Repository):
    setting = repo.put_setting(Setting(id="a", title="Hero"))
    text = format_setting_detail(SettingDetailView(repo, setting))
    assert "(내용 없음)" in text
    assert "No logs yet" in text


def test_detail_with_logs(repo: Repository):
    setting = repo.put_setting(Setting(id="a", title="Hero", content="body"))
    repo.put_log(ProgressLog(id="l", date=datetime(2024, 2, 1), setting_id="a", next="more"))
    text = format_setting_detail(SettingDetailView(repo, setting))
    assert "2024-02-01" in text
    assert "다음: more" in text
    assert "한 일" not in text


def test_legend_lists_every_status():
    text = format_legend()
    for status in ["아이디어", "초안", "사용중", "완료", "수정필요"]:
        assert status in text


def test_stats(repo: Repository):
    repo.put_setting(Setting(id="a", category="인물", status="완료"))
    repo.put_log(ProgressLog(id="l1", date=datetime(2024, 1, 1), setting_id="a"))
    repo.put_log(ProgressLog(id="l2", date=datetime(2024, 1, 1), setting_id="gone"))
    repo.db.put(SETTINGS, "bad", "{oops")

    stats = get_stats(repo)

    assert stats["total_settings"] == 1
    assert stats["stored_settings"] == 2
    assert stats["by_status"]["완료"] == 1
    assert stats["by_category"] == {"인물": 1}
    assert stats["orphaned_logs"] == 1
    assert "Unreadable records: 1" in format_stats(stats)


def test_color_flag_read_once(monkeypatch):
    """The config file is parsed once, not for every colored string."""
    import setlog.surfacing as surfacing

    calls = []

    def fake_load_config():
        calls.append(1)
        return {"display": {"color": False}}

    monkeypatch.delenv("NO_COLOR")
    monkeypatch.setattr(surfacing, "load_config", fake_load_config)

    for _ in range(5):
        assert c("x", Colors.RED) == "x"
    assert len(calls) == 1
