"""
Parser settings — the settings object the host application hands over,
plus the per-instance tuning thresholds.

The user/emoji/channel maps are consumed by the rendering side; the parser
only requires that they are present (they may be empty).
"""
from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field

from slackpaste.config import constants as C


class SettingsError(ValueError):
    """Raised when a settings payload is missing or malformed."""


class ParserThresholds(BaseModel):
    """Every heuristic cutoff the parser uses, overridable per instance."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    short_line_threshold: int = Field(C.SHORT_LINE_THRESHOLD, ge=1)
    long_line_threshold: int = Field(C.LONG_LINE_THRESHOLD, ge=1)
    all_caps_min_length: int = Field(C.ALL_CAPS_MIN_LENGTH, ge=0)
    max_timestamp_line_length: int = Field(C.MAX_TIMESTAMP_LINE_LENGTH, ge=1)
    min_username_length: int = Field(C.MIN_USERNAME_LENGTH, ge=1)
    max_username_length: int = Field(C.MAX_USERNAME_LENGTH, ge=1)
    max_username_words: int = Field(C.MAX_USERNAME_WORDS, ge=1)
    timestamp_search_window: int = Field(C.TIMESTAMP_SEARCH_WINDOW, ge=0)
    metadata_scan_window: int = Field(C.METADATA_SCAN_WINDOW, ge=1)
    grouping_lookahead: int = Field(C.GROUPING_LOOKAHEAD, ge=0)
    grouping_max_distance: int = Field(C.GROUPING_MAX_DISTANCE, ge=0)
    duplicate_username_window: int = Field(C.DUPLICATE_USERNAME_WINDOW, ge=0)
    continuation_lookahead: int = Field(C.CONTINUATION_LOOKAHEAD, ge=0)
    continuation_blank_gap: int = Field(C.CONTINUATION_BLANK_GAP, ge=0)
    merge_tail_window: int = Field(C.MERGE_TAIL_WINDOW, ge=0)
    format_sample_size: int = Field(C.FORMAT_SAMPLE_SIZE, ge=0)
    format_dominance_threshold: float = Field(C.FORMAT_DOMINANCE_THRESHOLD, ge=0.0, le=1.0)
    min_boundary_confidence: float = Field(C.MIN_BOUNDARY_CONFIDENCE, ge=0.0, le=1.0)
    min_candidate_score: int = C.MIN_CANDIDATE_SCORE
    default_average_message_length: int = Field(C.DEFAULT_AVERAGE_MESSAGE_LENGTH, ge=1)
    min_unknown_author_body_length: int = Field(C.MIN_UNKNOWN_AUTHOR_BODY_LENGTH, ge=0)
    thread_info_max_length: int = Field(C.THREAD_INFO_MAX_LENGTH, ge=1)


DEFAULT_THRESHOLDS = ParserThresholds()


class ParserSettings(BaseModel):
    """Settings object supplied by the host application."""

    model_config = ConfigDict(frozen=True)

    user_map: Dict[str, str]
    emoji_map: Dict[str, str]
    channel_map: Dict[str, str]
    enable_mentions: bool = True
    enable_emoji: bool = True
    enable_timestamp_parsing: bool = True
    debug: bool = False
    thresholds: ParserThresholds = Field(default_factory=ParserThresholds)

    @classmethod
    def empty(cls) -> "ParserSettings":
        return cls(user_map={}, emoji_map={}, channel_map={})
