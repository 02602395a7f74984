"""
Validation — settings payloads and parse output.

Implements:
- JSON-string settings decoding (host application form)
- Schema conformance (jsonschema) for settings and parse output
- Fail-fast settings loading for MessageParser construction
- Output invariants (non-empty bodies, increasing non-overlapping boundaries)
"""
import json
import logging
from typing import List, Mapping, Optional, Union

from jsonschema import ValidationError, validate
from pydantic import ValidationError as ModelValidationError

from slackpaste.config.schemas import PARSE_OUTPUT_SCHEMA, PARSER_SETTINGS_SCHEMA
from slackpaste.models.settings import ParserSettings, SettingsError
from slackpaste.models.validation import ValidationResult

logger = logging.getLogger(__name__)

# Host-side JSON-string keys and the settings fields they populate.
JSON_MAP_KEYS: dict = {
    "userMapJson": "user_map",
    "emojiMapJson": "emoji_map",
    "channelMapJson": "channel_map",
}

JSON_FLAG_KEYS: dict = {
    "enableMentions": "enable_mentions",
    "enableEmoji": "enable_emoji",
    "enableTimestampParsing": "enable_timestamp_parsing",
    "debug": "debug",
}


def validate_settings_payload(payload: Mapping) -> ValidationResult:
    """Schema validation of a settings dict (already decoded)."""
    errors: List[str] = []
    try:
        validate(instance=dict(payload), schema=PARSER_SETTINGS_SCHEMA)
    except ValidationError as e:
        errors.append(f"Schema violation: {e.message}")
        return ValidationResult(valid=False, errors=errors)
    return ValidationResult(valid=True, data=dict(payload))


def decode_json_settings(payload: Mapping) -> dict:
    """
    Convert the host's JSON-string settings into a settings dict.

    Raises:
        SettingsError: A map key is missing or does not decode to an object.
    """
    decoded: dict = {}
    for json_key, field_name in JSON_MAP_KEYS.items():
        if json_key not in payload:
            raise SettingsError(f"Missing required setting '{json_key}'")
        raw = payload[json_key]
        try:
            value = json.loads(raw) if isinstance(raw, str) else raw
        except json.JSONDecodeError as e:
            raise SettingsError(f"Setting '{json_key}' is not valid JSON: {e}") from e
        decoded[field_name] = value
    for json_key, field_name in JSON_FLAG_KEYS.items():
        if json_key in payload:
            decoded[field_name] = payload[json_key]
    return decoded


def load_parser_settings(settings: Union[ParserSettings, Mapping, None]) -> ParserSettings:
    """
    Build validated ParserSettings, failing fast on malformed input.

    Accepts a ParserSettings instance, a settings dict with ``user_map`` /
    ``emoji_map`` / ``channel_map``, or the host's JSON-string form
    (``userMapJson`` ...). ``None`` yields empty maps.

    Raises:
        SettingsError: The payload is not a mapping, misses a required map,
            or violates the settings schema.
    """
    if settings is None:
        return ParserSettings.empty()
    if isinstance(settings, ParserSettings):
        return settings
    if not isinstance(settings, Mapping):
        raise SettingsError(f"Settings must be a mapping, got {type(settings).__name__}")

    payload = dict(settings)
    if any(key in payload for key in JSON_MAP_KEYS):
        payload = decode_json_settings(payload)

    validate_settings_payload(payload).raise_on_error()

    try:
        return ParserSettings(**payload)
    except ModelValidationError as e:
        raise SettingsError(f"Invalid parser settings: {e}") from e


def validate_parse_output(output: dict) -> ValidationResult:
    """
    Validate a parse output dict.

    Stages:
        1. Schema conformance
        2. Boundaries strictly increasing and non-overlapping
        3. Statistics consistent with the message list
    """
    errors: List[str] = []
    warnings: List[str] = []

    # ------------------------------------------------------------------
    # Stage 1: Schema validation
    # ------------------------------------------------------------------
    try:
        validate(instance=output, schema=PARSE_OUTPUT_SCHEMA)
    except ValidationError as e:
        errors.append(f"Schema violation: {e.message}")
        return ValidationResult(valid=False, errors=errors, warnings=warnings)

    # ------------------------------------------------------------------
    # Stage 2: Boundary ordering
    # ------------------------------------------------------------------
    previous_end: Optional[int] = None
    for boundary in output["boundaries"]:
        if boundary["end"] < boundary["start"]:
            errors.append(f"Boundary [{boundary['start']},{boundary['end']}] ends before it starts")
        if previous_end is not None and boundary["start"] <= previous_end:
            errors.append(f"Boundary starting at {boundary['start']} overlaps the previous one")
        previous_end = boundary["end"]

    # ------------------------------------------------------------------
    # Stage 3: Statistics
    # ------------------------------------------------------------------
    stats = output["statistics"]
    if stats["message_count"] != len(output["messages"]):
        errors.append(
            f"message_count={stats['message_count']} but {len(output['messages'])} messages present"
        )
    if stats["boundary_count"] != len(output["boundaries"]):
        warnings.append("boundary_count does not match boundaries list")

    for msg in output["messages"]:
        if not "".join(msg["body_lines"]).strip():
            errors.append(f"Message by {msg['author']!r} has an empty body")

    valid = not errors
    if not valid:
        logger.warning("Parse output failed validation: %s", errors)
    return ValidationResult(valid=valid, errors=errors, warnings=warnings, data=output if valid else None)
