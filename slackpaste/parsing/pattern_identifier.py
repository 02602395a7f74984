"""
Pattern Identifier — single whole-document pass over classified lines.

Collects candidate index lists (message starts, timestamps, usernames,
metadata, date separators) and the aggregate statistics later stages use:
average message length, recurring usernames, timestamp surface forms.
"""
import logging
import re
from collections import Counter
from typing import List, Sequence

import numpy as np

from slackpaste.models.line_record import LineRecord
from slackpaste.models.settings import DEFAULT_THRESHOLDS, ParserThresholds
from slackpaste.models.structure import ConversationPatterns
from slackpaste.parsing import patterns as P
from slackpaste.parsing.header_extractors import extract_user_and_time
from slackpaste.parsing.heuristics import (
    clean_username,
    could_be_message_start,
    date_header_label,
    is_obvious_metadata,
    is_username_candidate,
    is_valid_username,
    looks_like_username,
)
from slackpaste.parsing.safe_regex import safe_search, safe_sub

logger = logging.getLogger(__name__)

_DIGIT = re.compile(r"\d")
_LINK_TARGET = re.compile(r"\(https?://[^)]+\)")
_SPACES = re.compile(r"\s+")


def identify_patterns(
    records: Sequence[LineRecord],
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> ConversationPatterns:
    """
    Scan every non-empty line once.

    Args:
        records: Classified lines of the document.
        thresholds: Heuristic cutoffs.

    Returns:
        ConversationPatterns with index lists and statistics.
    """
    starts: List[int] = []
    timestamps: List[int] = []
    usernames: List[int] = []
    metadata: List[int] = []
    date_headers: List[int] = []

    for record in records:
        if record.is_empty:
            continue
        if date_header_label(record.text) is not None:
            date_headers.append(record.index)
            continue
        if could_be_message_start(records, record.index, thresholds):
            starts.append(record.index)
        if record.characteristics.has_timestamp:
            timestamps.append(record.index)
        if is_username_candidate(record.text, thresholds):
            usernames.append(record.index)
        if is_obvious_metadata(record.text):
            metadata.append(record.index)

    patterns = ConversationPatterns(
        message_starts=tuple(starts),
        timestamps=tuple(timestamps),
        usernames=tuple(usernames),
        metadata=tuple(metadata),
        date_headers=tuple(date_headers),
        average_message_length=average_message_length(records, starts),
        common_usernames=tuple(common_usernames(records, starts, thresholds)),
        timestamp_formats=tuple(timestamp_formats(records, timestamps)),
    )
    logger.debug(
        "Patterns: %d starts, %d timestamps, %d usernames, %d metadata, %d date headers",
        len(starts), len(timestamps), len(usernames), len(metadata), len(date_headers),
    )
    return patterns


def average_message_length(records: Sequence[LineRecord], starts: Sequence[int]) -> int:
    """Mean count of non-empty lines between consecutive start candidates."""
    if not starts:
        return 0
    bounds = list(starts) + [len(records)]
    counts = [
        sum(1 for j in range(bounds[k], bounds[k + 1]) if not records[j].is_empty)
        for k in range(len(starts))
    ]
    return int(round(float(np.mean(counts))))


def common_usernames(
    records: Sequence[LineRecord],
    starts: Sequence[int],
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> List[str]:
    """Usernames heading at least two start candidates, most frequent first."""
    counts: Counter = Counter()
    for index in starts:
        text = records[index].text
        match = extract_user_and_time(text, thresholds)
        name = match.username if match else None
        if name is None and looks_like_username(text, thresholds):
            name = clean_username(text)
        if name and is_valid_username(name, thresholds):
            counts[name] += 1
    return [name for name, count in counts.most_common() if count >= 2]


def _surface_form(value: str) -> str:
    value = safe_sub(_LINK_TARGET, "(url)", value)
    value = safe_sub(_DIGIT, "0", value)
    return _SPACES.sub(" ", value).strip()


def timestamp_formats(records: Sequence[LineRecord], timestamps: Sequence[int]) -> List[str]:
    """
    Distinct timestamp shapes, digits masked (``[0:00 PM](url)``, ``00:00 AM``).
    The most specific form found on a line wins.
    """
    forms: List[str] = []
    for index in timestamps:
        for pattern in P.TIMESTAMP_FORM_PATTERNS:
            m = safe_search(pattern, records[index].text)
            if m:
                form = _surface_form(m.group(0))
                if form not in forms:
                    forms.append(form)
                break
    return forms
