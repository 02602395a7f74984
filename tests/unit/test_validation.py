"""
Unit tests for settings loading and parse-output validation.
Tests: load_parser_settings, decode_json_settings, validate_settings_payload,
       validate_parse_output.
"""
import json

import pytest

from slackpaste.models.settings import ParserSettings, SettingsError
from slackpaste.parsing.validation import (
    decode_json_settings,
    load_parser_settings,
    validate_parse_output,
    validate_settings_payload,
)


def _valid_output():
    return {
        "messages": [
            {
                "author": "Alice Johnson",
                "timestamp": "9:00 AM",
                "date_label": None,
                "body_lines": ["Morning all"],
                "reactions": [{"name": "+1", "count": 2}],
                "thread_info": None,
                "is_thread_reply": False,
                "is_thread_start": False,
                "is_edited": False,
            },
        ],
        "boundaries": [{"start": 0, "end": 1, "confidence": 0.9}],
        "statistics": {
            "total_lines": 2,
            "non_empty_lines": 2,
            "candidate_count": 1,
            "boundary_count": 1,
            "message_count": 1,
            "format": "standard",
            "confidence": 0.8,
            "cache_hit": False,
        },
    }


class TestLoadParserSettings:
    """Fail-fast settings validation."""

    def test_none_gives_empty_maps(self):
        settings = load_parser_settings(None)
        assert settings.user_map == {}
        assert settings.emoji_map == {}
        assert settings.channel_map == {}

    def test_instance_passes_through(self, empty_settings):
        assert load_parser_settings(empty_settings) is empty_settings

    def test_plain_dict(self):
        settings = load_parser_settings({
            "user_map": {"U1": "Alice"},
            "emoji_map": {},
            "channel_map": {"C1": "general"},
            "debug": True,
        })
        assert isinstance(settings, ParserSettings)
        assert settings.user_map == {"U1": "Alice"}
        assert settings.debug is True

    def test_thresholds_override(self):
        settings = load_parser_settings({
            "user_map": {}, "emoji_map": {}, "channel_map": {},
            "thresholds": {"short_line_threshold": 30},
        })
        assert settings.thresholds.short_line_threshold == 30

    def test_json_string_form(self):
        settings = load_parser_settings({
            "userMapJson": json.dumps({"U1": "Alice"}),
            "emojiMapJson": "{}",
            "channelMapJson": "{}",
            "enableMentions": False,
        })
        assert settings.user_map == {"U1": "Alice"}
        assert settings.enable_mentions is False

    def test_missing_map_rejected(self):
        with pytest.raises(SettingsError):
            load_parser_settings({"user_map": {}, "emoji_map": {}})

    def test_missing_json_key_rejected(self):
        with pytest.raises(SettingsError, match="channelMapJson"):
            load_parser_settings({"userMapJson": "{}", "emojiMapJson": "{}"})

    def test_bad_json_rejected(self):
        with pytest.raises(SettingsError, match="not valid JSON"):
            decode_json_settings({"userMapJson": "{oops", "emojiMapJson": "{}", "channelMapJson": "{}"})

    def test_wrong_value_type_rejected(self):
        with pytest.raises(SettingsError):
            load_parser_settings({"user_map": [], "emoji_map": {}, "channel_map": {}})

    def test_unknown_threshold_rejected(self):
        with pytest.raises(SettingsError):
            load_parser_settings({
                "user_map": {}, "emoji_map": {}, "channel_map": {},
                "thresholds": {"no_such_threshold": 1},
            })

    def test_non_mapping_rejected(self):
        with pytest.raises(SettingsError):
            load_parser_settings("settings")

    def test_settings_error_is_value_error(self):
        assert issubclass(SettingsError, ValueError)

    def test_payload_validation_result(self):
        result = validate_settings_payload({"user_map": {}})
        assert result.valid is False
        assert any("Schema violation" in e for e in result.errors)


class TestValidateParseOutput:
    def test_valid_output_passes(self):
        result = validate_parse_output(_valid_output())
        assert result.valid is True
        assert result.errors == []
        assert result.data is not None

    def test_schema_violation(self):
        output = _valid_output()
        output["messages"][0]["extra"] = 1
        result = validate_parse_output(output)
        assert result.valid is False
        assert any("Schema violation" in e for e in result.errors)

    def test_empty_body_rejected_by_schema(self):
        output = _valid_output()
        output["messages"][0]["body_lines"] = []
        assert validate_parse_output(output).valid is False

    def test_whitespace_body_rejected(self):
        output = _valid_output()
        output["messages"][0]["body_lines"] = ["  "]
        result = validate_parse_output(output)
        assert result.valid is False
        assert any("empty body" in e for e in result.errors)

    def test_overlapping_boundaries(self):
        output = _valid_output()
        output["boundaries"] = [
            {"start": 0, "end": 3, "confidence": 0.9},
            {"start": 2, "end": 4, "confidence": 0.9},
        ]
        output["statistics"]["boundary_count"] = 2
        result = validate_parse_output(output)
        assert result.valid is False
        assert any("overlaps" in e for e in result.errors)

    def test_message_count_mismatch(self):
        output = _valid_output()
        output["statistics"]["message_count"] = 3
        assert validate_parse_output(output).valid is False

    def test_boundary_count_mismatch_is_warning(self):
        output = _valid_output()
        output["statistics"]["boundary_count"] = 5
        result = validate_parse_output(output)
        assert result.valid is True
        assert result.warnings
