"""
JSON Schemas for parser settings and parse output.

Two schemas:
1. PARSER_SETTINGS_SCHEMA — settings object supplied by the host application
2. PARSE_OUTPUT_SCHEMA    — messages + diagnostics produced by a parse
"""
from slackpaste.config.constants import FORMATS

_STRING_MAP: dict = {
    "type": "object",
    "additionalProperties": {"type": "string"},
}

# =============================================================================
# 1. Parser Settings Schema
# =============================================================================
PARSER_SETTINGS_SCHEMA: dict = {
    "type": "object",
    "required": ["user_map", "emoji_map", "channel_map"],
    "properties": {
        "user_map": _STRING_MAP,
        "emoji_map": _STRING_MAP,
        "channel_map": _STRING_MAP,
        "enable_mentions": {"type": "boolean"},
        "enable_emoji": {"type": "boolean"},
        "enable_timestamp_parsing": {"type": "boolean"},
        "debug": {"type": "boolean"},
        "thresholds": {
            "type": "object",
            "additionalProperties": {"type": "number"},
        },
    },
}

# =============================================================================
# 2. Parse Output Schema
# =============================================================================
REACTION_SCHEMA: dict = {
    "type": "object",
    "additionalProperties": False,
    "required": ["name", "count"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "count": {"type": "integer", "minimum": 0},
    },
}

MESSAGE_SCHEMA: dict = {
    "type": "object",
    "additionalProperties": False,
    "required": [
        "author", "timestamp", "date_label", "body_lines", "reactions",
        "thread_info", "is_thread_reply", "is_thread_start", "is_edited",
    ],
    "properties": {
        "author": {"type": "string", "minLength": 1},
        "timestamp": {"type": ["string", "null"]},
        "date_label": {"type": ["string", "null"]},
        "body_lines": {
            "type": "array",
            "minItems": 1,
            "items": {"type": "string"},
        },
        "reactions": {"type": "array", "items": REACTION_SCHEMA},
        "thread_info": {"type": ["string", "null"]},
        "is_thread_reply": {"type": "boolean"},
        "is_thread_start": {"type": "boolean"},
        "is_edited": {"type": "boolean"},
    },
}

BOUNDARY_SCHEMA: dict = {
    "type": "object",
    "additionalProperties": False,
    "required": ["start", "end", "confidence"],
    "properties": {
        "start": {"type": "integer", "minimum": 0},
        "end": {"type": "integer", "minimum": 0},
        "confidence": {"type": "number", "minimum": 0, "maximum": 1},
    },
}

PARSE_OUTPUT_SCHEMA: dict = {
    "type": "object",
    "additionalProperties": False,
    "required": ["messages", "boundaries", "statistics"],
    "properties": {
        "messages": {"type": "array", "items": MESSAGE_SCHEMA},
        "boundaries": {"type": "array", "items": BOUNDARY_SCHEMA},
        "statistics": {
            "type": "object",
            "required": [
                "total_lines", "non_empty_lines", "candidate_count",
                "boundary_count", "message_count",
                "format", "confidence", "cache_hit",
            ],
            "properties": {
                "total_lines": {"type": "integer", "minimum": 0},
                "non_empty_lines": {"type": "integer", "minimum": 0},
                "candidate_count": {"type": "integer", "minimum": 0},
                "boundary_count": {"type": "integer", "minimum": 0},
                "message_count": {"type": "integer", "minimum": 0},
                "format": {"type": "string", "enum": FORMATS},
                "confidence": {"type": "number", "minimum": 0, "maximum": 1},
                "cache_hit": {"type": "boolean"},
            },
        },
    },
}
