"""Unit tests for the EventRecord model."""

import json

import pytest
from pydantic import ValidationError as PydanticValidationError

from schemas.models.event import UNKNOWN, EventRecord, is_blank


class TestEventRecordParsing:
    def test_camel_case_keys(self):
        record = EventRecord.model_validate_json(
            json.dumps(
                {
                    "linkId": "promo",
                    "timestamp": "2024-01-01T00:00:00Z",
                    "ipAddress": "1.1.1.1",
                    "countryCode": "FR",
                    "userAgent": "UA",
                    "screenResolution": "1920x1080",
                    "language": "fr-FR",
                    "referrer": "https://example.com",
                }
            )
        )
        assert record.link_id == "promo"
        assert record.ip_address == "1.1.1.1"
        assert record.country_code == "FR"
        assert record.user_agent == "UA"
        assert record.screen_resolution == "1920x1080"

    def test_empty_object(self):
        record = EventRecord.model_validate_json("{}")
        assert record.link_id == ""
        assert record.timestamp == ""
        assert record.country is None

    def test_unknown_keys_ignored(self):
        record = EventRecord.model_validate_json('{"linkId": "a", "extra": 1}')
        assert record.link_id == "a"
        assert not hasattr(record, "extra")

    def test_null_link_id_becomes_empty(self):
        assert EventRecord.model_validate_json('{"linkId": null}').link_id == ""

    @pytest.mark.parametrize(
        "raw",
        ["not json", "", "[]", "null", '"string"', '{"linkId": 5}', '{"city": ["x"]}'],
        ids=["text", "empty", "array", "null", "string", "int_field", "list_field"],
    )
    def test_rejects_invalid_payloads(self, raw):
        with pytest.raises(PydanticValidationError):
            EventRecord.model_validate_json(raw)


class TestEventRecordSerialization:
    def test_log_line_is_compact_single_line(self):
        record = EventRecord(link_id="a", timestamp="t", city="Paris")
        line = record.to_log_line()
        assert "\n" not in line
        assert line == '{"linkId":"a","timestamp":"t","city":"Paris"}'

    def test_always_writes_link_id_and_timestamp(self):
        assert EventRecord().to_log_dict() == {"linkId": "", "timestamp": ""}

    def test_drops_empty_optional_fields(self):
        data = EventRecord(link_id="a", timestamp="t", country="", region=None).to_log_dict()
        assert "country" not in data
        assert "region" not in data

    def test_keeps_unknown_marker(self):
        data = EventRecord(country=UNKNOWN).to_log_dict()
        assert data["country"] == "unknown"

    def test_non_ascii_not_escaped(self):
        assert "München" in EventRecord(city="München").to_log_line()

    def test_newline_in_value_escaped(self):
        line = EventRecord(user_agent="a\nb").to_log_line()
        assert "\n" not in line
        assert json.loads(line)["userAgent"] == "a\nb"


@pytest.mark.parametrize(
    "value, expected",
    [(None, True), ("", True), ("unknown", True), ("Unknown", False), ("FR", False)],
)
def test_is_blank(value, expected):
    assert is_blank(value) is expected
