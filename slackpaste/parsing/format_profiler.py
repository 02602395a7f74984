"""
Format Profiler — layout dialect and whole-document confidence.

Formats:
    standard — inline time with AM/PM, or markdown-linked timestamps
    bracket  — timestamps wrapped in literal brackets
    mixed    — neither family dominates

The confidence is informational; downstream stages do not gate on it.
"""
import logging
from typing import List, Sequence, Tuple

import numpy as np

from slackpaste.config.constants import FORMAT_BRACKET, FORMAT_MIXED, FORMAT_STANDARD
from slackpaste.models.line_record import LineRecord
from slackpaste.models.settings import DEFAULT_THRESHOLDS, ParserThresholds
from slackpaste.models.structure import ConversationPatterns
from slackpaste.parsing.patterns import BASIC_TIME
from slackpaste.parsing.safe_regex import safe_test

logger = logging.getLogger(__name__)

FACTOR_WEIGHT: float = 0.2


def _count_indicators(
    patterns: ConversationPatterns,
    records: Sequence[LineRecord],
    thresholds: ParserThresholds,
) -> Tuple[int, int]:
    standard = bracket = 0
    for form in patterns.timestamp_formats:
        if "](" in form:
            standard += 1
        elif "[" in form and "]" in form:
            bracket += 1
        elif safe_test(BASIC_TIME, form):
            standard += 1

    for index in patterns.message_starts[: thresholds.format_sample_size]:
        neighbours = [n for n in (index - 1, index + 1) if 0 <= n < len(records)]
        if any(records[n].characteristics.has_timestamp for n in neighbours):
            standard += 1
    return standard, bracket


def classify_format(
    patterns: ConversationPatterns,
    records: Sequence[LineRecord],
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> str:
    if not patterns.message_starts and not patterns.timestamp_formats:
        return FORMAT_STANDARD
    standard, bracket = _count_indicators(patterns, records, thresholds)
    total = standard + bracket
    if total == 0:
        return FORMAT_MIXED
    if standard / total > thresholds.format_dominance_threshold:
        return FORMAT_STANDARD
    if bracket / total > thresholds.format_dominance_threshold:
        return FORMAT_BRACKET
    return FORMAT_MIXED


def _alignment(patterns: ConversationPatterns, window: int) -> float:
    """Share of start candidates with a timestamp line within *window* lines."""
    if not patterns.message_starts:
        return 0.0
    timestamps = np.asarray(patterns.timestamps, dtype=int)
    if timestamps.size == 0:
        return 0.0
    aligned = [
        bool(np.any(np.abs(timestamps - start) <= window))
        for start in patterns.message_starts
    ]
    return float(np.mean(aligned))


def compute_confidence(
    patterns: ConversationPatterns,
    format_tag: str,
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> float:
    """Weighted blend of structural signals, normalized into [0, 1]."""
    factors: List[float] = []

    if patterns.timestamps:
        ratio = len(patterns.message_starts) / len(patterns.timestamps)
        if 0.5 <= ratio <= 2.0:
            factors.append(FACTOR_WEIGHT)
        elif 0.1 <= ratio <= 3.0:
            factors.append(FACTOR_WEIGHT / 2)
        else:
            factors.append(0.0)

    if patterns.timestamp_formats:
        factors.append(FACTOR_WEIGHT * min(1.0, 3 / len(patterns.timestamp_formats)))

    if patterns.common_usernames:
        factors.append(FACTOR_WEIGHT)

    factors.append(FACTOR_WEIGHT if format_tag != FORMAT_MIXED else FACTOR_WEIGHT / 2)

    if patterns.message_starts:
        factors.append(FACTOR_WEIGHT * _alignment(patterns, thresholds.timestamp_search_window))

    raw = float(np.sum(factors)) / max(len(factors) * FACTOR_WEIGHT, 1.0)
    return float(np.clip(raw, 0.0, 1.0))


def determine_format(
    patterns: ConversationPatterns,
    records: Sequence[LineRecord],
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> Tuple[str, float]:
    """
    Classify the document layout.

    Returns:
        (format tag, confidence in [0, 1])
    """
    format_tag = classify_format(patterns, records, thresholds)
    confidence = compute_confidence(patterns, format_tag, thresholds)
    logger.debug("Format: %s (confidence %.2f)", format_tag, confidence)
    return format_tag, confidence
