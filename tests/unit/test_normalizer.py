"""
Unit Tests - Row Normalizer
"""
import pytest

from conftest import make_row
from game_balance.ingestion import (
    IngestionError,
    PropertiesParseError,
    UnknownActionError,
    parse_events,
    parse_properties,
)
from game_balance.ingestion.normalizer import EventColumns, normalize_row, parse_action
from game_balance.models.events import EventAction


class TestParseProperties:
    """Tests for the custom properties decoder"""

    def test_full_payload(self):
        props = parse_properties('{"last_level": 7, "exit_type": "voluntary_exit", "is_repeat_play": true}')

        assert props.last_level == 7
        assert props.exit_type == "voluntary_exit"
        assert props.is_repeat_play is True

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_empty_blob_gives_empty_properties(self, raw):
        props = parse_properties(raw)

        assert props.last_level is None
        assert props.exit_type is None
        assert props.is_repeat_play is None

    def test_unknown_keys_are_ignored(self):
        props = parse_properties('{"last_level": 2, "deck": "fire"}')

        assert props.last_level == 2

    def test_string_level_is_coerced(self):
        assert parse_properties('{"last_level": "12"}').last_level == 12

    def test_integral_float_level_is_coerced(self):
        assert parse_properties('{"last_level": 4.0}').last_level == 4

    def test_string_flag_is_coerced(self):
        assert parse_properties('{"is_repeat_play": "false"}').is_repeat_play is False

    def test_malformed_json_raises(self):
        with pytest.raises(PropertiesParseError) as exc_info:
            parse_properties("{last_level: 3", row_index=4)

        assert exc_info.value.row_index == 4
        assert exc_info.value.raw == "{last_level: 3"
        assert str(exc_info.value).startswith("Row 4:")

    def test_non_object_raises(self):
        with pytest.raises(PropertiesParseError):
            parse_properties("[1, 2]")

    def test_bad_level_type_raises(self):
        with pytest.raises(PropertiesParseError):
            parse_properties('{"last_level": "high"}')

    @pytest.mark.parametrize("level", ["--5", "²", "4.5", ""])
    def test_unparseable_level_string_raises(self, level):
        raw = '{"last_level": "%s"}' % level

        with pytest.raises(PropertiesParseError) as exc_info:
            parse_properties(raw, row_index=2)

        assert exc_info.value.row_index == 2
        assert exc_info.value.raw == raw

    def test_negative_level_string_is_coerced(self):
        assert parse_properties('{"last_level": " -3 "}').last_level == -3

    def test_parse_error_is_ingestion_error(self):
        with pytest.raises(IngestionError):
            parse_properties("not json")


class TestNormalizeRow:
    """Tests for row to Event conversion"""

    def test_full_row(self):
        row = make_row(
            "failIsFirst",
            "2015",
            user_id="u1",
            properties={"last_level": 9},
            country_code="KR",
            country_name="South Korea",
        )

        event = normalize_row(row)

        assert event.action == EventAction.FAIL_IS_FIRST
        assert event.label == "2015"
        assert event.user_id == "u1"
        assert event.properties.last_level == 9
        assert event.country_code == "KR"
        assert event.country_name == "South Korea"

    def test_blank_optional_fields_become_none(self):
        row = make_row("try", user_id="  ")

        event = normalize_row(row)

        assert event.user_id is None
        assert event.value is None
        assert event.country_code is None

    def test_missing_properties_column(self):
        row = make_row("clear")
        del row["Custom Event Properties"]

        assert normalize_row(row).properties.last_level is None

    def test_label_is_trimmed(self):
        assert normalize_row(make_row("try", " 2001 ")).label == "2001"

    def test_custom_columns(self):
        columns = EventColumns(action="action", label="stage", category="cat")
        row = {"cat": "stage", "action": "clear", "stage": "3001"}

        event = normalize_row(row, columns=columns)

        assert event.label == "3001"
        assert event.action == EventAction.CLEAR


class TestParseAction:
    """Tests for action mapping"""

    def test_known_actions(self):
        assert parse_action("clearIsFirst") == EventAction.CLEAR_IS_FIRST
        assert parse_action(" try ") == EventAction.TRY

    @pytest.mark.parametrize("raw", ["retry", "Clear", "", None])
    def test_unknown_action_raises(self, raw):
        with pytest.raises(UnknownActionError):
            parse_action(raw)


class TestParseEvents:
    """Tests for batch normalization"""

    def test_preserves_order(self):
        rows = [make_row("try", "2002"), make_row("clear", "2001"), make_row("fail", "2003")]

        events = parse_events(rows)

        assert [e.label for e in events] == ["2002", "2001", "2003"]

    def test_bad_row_fails_whole_call(self):
        rows = [make_row("try"), make_row("jump"), make_row("clear")]

        with pytest.raises(UnknownActionError) as exc_info:
            parse_events(rows)

        assert exc_info.value.row_index == 1

    def test_empty_input(self):
        assert parse_events([]) == []
