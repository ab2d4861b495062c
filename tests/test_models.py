"""Tests for record types and helpers."""

import json
from datetime import date, datetime

import pytest

from setlog.models import (
    DEFAULT_CATEGORY,
    UNTITLED,
    ProgressLog,
    RecordDecodeError,
    Setting,
    date_only,
    decode_log,
    decode_setting,
    fmt_date,
    from_millis,
    new_id,
    normalize_date_millis,
    normalize_priority,
    normalize_status,
    parse_tags,
    tags_to_string,
    to_millis,
)


class TestParseTags:
    """Tests for tag parsing."""

    def test_dedupes_and_trims(self):
        """Duplicates and surrounding spaces are dropped."""
        assert sorted(parse_tags("x, y, x")) == ["x", "y"]

    def test_discards_empty_pieces(self):
        """Empty and blank pieces never become tags."""
        assert parse_tags(" , a,,  ,b ,") == ["a", "b"]

    def test_empty_string(self):
        assert parse_tags("") == []

    @pytest.mark.parametrize("raw", ["a, b, a", " ,x,, y ", "one", "k,k,k", "", "한글, 태그 , 한글"])
    def test_parse_is_idempotent(self, raw: str):
        """Parsing the joined result gives the same set back."""
        once = parse_tags(raw)
        twice = parse_tags(tags_to_string(once))
        assert set(twice) == set(once)
        assert len(twice) == len(set(twice))
        assert all(tag for tag in twice)

    def test_tags_to_string(self):
        assert tags_to_string(["a", "b"]) == "a, b"


class TestDates:
    """Tests for date normalization."""

    def test_date_only_zeroes_time(self):
        dt = date_only(datetime(2024, 5, 17, 13, 45, 12, 500))
        assert (dt.hour, dt.minute, dt.second, dt.microsecond) == (0, 0, 0, 0)
        assert dt.date() == date(2024, 5, 17)

    def test_date_only_accepts_date(self):
        assert date_only(date(2023, 1, 2)) == datetime(2023, 1, 2)

    def test_normalize_is_idempotent(self):
        ms = to_millis(datetime(2024, 5, 17, 22, 10))
        once = normalize_date_millis(ms)
        assert normalize_date_millis(once) == once
        dt = from_millis(once)
        assert (dt.hour, dt.minute, dt.second, dt.microsecond) == (0, 0, 0, 0)

    def test_fmt_date(self):
        assert fmt_date(datetime(2024, 2, 9, 8, 0)) == "2024-02-09"
        assert fmt_date(to_millis(datetime(2024, 2, 9))) == "2024-02-09"


class TestEnums:
    """Tests for status and priority normalization."""

    def test_status_native_value(self):
        assert normalize_status("완료") == "완료"

    def test_status_alias(self):
        assert normalize_status("needs-revision") == "수정필요"
        assert normalize_status(" In-Use ") == "사용중"

    def test_status_unknown(self):
        with pytest.raises(ValueError, match="Invalid status"):
            normalize_status("archived")

    def test_priority_alias(self):
        assert normalize_priority("high") == "높음"

    def test_priority_unknown(self):
        with pytest.raises(ValueError, match="Invalid priority"):
            normalize_priority("urgent")


class TestSetting:
    """Tests for the Setting record."""

    def test_defaults_for_absent_fields(self):
        """A record with only an id gets every documented default."""
        setting = decode_setting({"id": "a"})
        assert setting.category == DEFAULT_CATEGORY
        assert setting.title == UNTITLED
        assert setting.content == ""
        assert setting.status == "아이디어"
        assert setting.priority == "보통"
        assert setting.tags == []
        assert setting.updated_at == 0

    def test_none_values_are_defaulted(self):
        setting = decode_setting({"id": "a", "category": None, "status": None, "tags": None})
        assert setting.category == DEFAULT_CATEGORY
        assert setting.status == "아이디어"
        assert setting.tags == []

    def test_non_list_tags_become_empty(self):
        assert decode_setting({"id": "a", "tags": "x,y"}).tags == []

    def test_record_uses_camel_case(self):
        setting = Setting(id="a", title="T", updated_at=5)
        record = setting.to_record()
        assert record["updatedAt"] == 5
        assert "updated_at" not in record
        assert decode_setting(record) == setting

    def test_english_status_is_stored_normalized(self):
        assert Setting(id="a", status="draft", priority="low").to_record()["status"] == "초안"

    def test_missing_id_is_malformed(self):
        with pytest.raises(RecordDecodeError):
            decode_setting({"title": "no id"})

    def test_unknown_status_is_malformed(self):
        with pytest.raises(RecordDecodeError):
            decode_setting({"id": "a", "status": "archived"})

    def test_numeric_id_is_read_as_text(self):
        assert decode_setting({"id": 42}).id == "42"


class TestDecoding:
    """Tests for reading either encoding of a stored record."""

    def test_decodes_json_text(self):
        raw = json.dumps({"id": "a", "title": "From text"})
        assert decode_setting(raw).title == "From text"

    def test_decodes_json_string_of_json(self):
        raw = json.dumps(json.dumps({"id": "a", "title": "Wrapped"}))
        assert decode_setting(raw).title == "Wrapped"

    def test_decodes_bytes(self):
        assert decode_setting(b'{"id": "a"}').id == "a"

    def test_invalid_json(self):
        with pytest.raises(RecordDecodeError, match="Invalid JSON"):
            decode_setting("{not json")

    def test_wrong_shape(self):
        with pytest.raises(RecordDecodeError, match="Expected a mapping"):
            decode_setting("[1, 2, 3]")


class TestProgressLog:
    """Tests for the ProgressLog record."""

    def test_date_is_normalized_on_construction(self):
        ms = to_millis(datetime(2024, 5, 17, 18, 30))
        log = ProgressLog(id="l", date=ms, setting_id="s")
        assert log.date == to_millis(datetime(2024, 5, 17))

    def test_accepts_calendar_date(self):
        log = ProgressLog(id="l", date=datetime(2024, 5, 17, 9, 1), setting_id="s")
        assert log.date == to_millis(datetime(2024, 5, 17))

    def test_defaults(self):
        log = decode_log({"id": "l", "date": to_millis(datetime(2024, 1, 1))})
        assert log.setting_id == ""
        assert log.did == ""
        assert log.next == ""

    def test_record_uses_camel_case(self):
        log = ProgressLog(id="l", date=datetime(2024, 1, 1), setting_id="s", did="d", next="n")
        record = log.to_record()
        assert record["settingId"] == "s"
        assert decode_log(record) == log

    def test_missing_date_is_malformed(self):
        with pytest.raises(RecordDecodeError):
            decode_log({"id": "l", "settingId": "s"})


def test_new_id_is_unique():
    assert len({new_id() for _ in range(100)}) == 100


class TestTimestampRange:
    """Tests for timestamps outside the representable range."""

    @pytest.mark.parametrize("ms", [10**17, 10**22])
    def test_from_millis_raises_value_error(self, ms: int):
        with pytest.raises(ValueError, match="out of range"):
            from_millis(ms)

    @pytest.mark.parametrize("ms", [10**17, 10**22])
    def test_log_date_out_of_range_is_malformed(self, ms: int):
        with pytest.raises(RecordDecodeError):
            decode_log({"id": "l", "date": ms})

    @pytest.mark.parametrize("ms", [10**17, 10**22])
    def test_updated_at_out_of_range_is_malformed(self, ms: int):
        with pytest.raises(RecordDecodeError):
            decode_setting({"id": "a", "updatedAt": ms})
