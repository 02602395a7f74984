"""
Shared line heuristics — predicates reused by every parser stage.

The predicates work on trimmed line text; the ones that need a neighbourhood
(continuation and message-start tests) take the full list of LineRecords and
an index. None of them raise: all pattern execution goes through safe_regex.
"""
import logging
import re
from typing import Optional, Sequence

from slackpaste.config.constants import (
    CONTENT_WORDS,
    MONTH_ABBREVIATIONS,
    MONTH_NAMES,
    ROLE_TAGS,
    WEEKDAY_NAMES,
)
from slackpaste.models.line_record import LineRecord
from slackpaste.models.settings import DEFAULT_THRESHOLDS, ParserThresholds
from slackpaste.parsing import patterns as P
from slackpaste.parsing.safe_regex import any_match, safe_match, safe_search, safe_sub, safe_test

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_LEADING_TIME = re.compile(r"^\d{1,2}:\d{2}")
_CALENDAR_WORDS = set(MONTH_NAMES) | set(MONTH_ABBREVIATIONS) | set(WEEKDAY_NAMES)


# =============================================================================
# Neighbourhood helpers
# =============================================================================

def next_non_empty(records: Sequence[LineRecord], index: int) -> Optional[int]:
    for j in range(index + 1, len(records)):
        if not records[j].is_empty:
            return j
    return None


def previous_non_empty(records: Sequence[LineRecord], index: int) -> Optional[int]:
    for j in range(index - 1, -1, -1):
        if not records[j].is_empty:
            return j
    return None


def first_non_empty(records: Sequence[LineRecord], start: int, end: int) -> Optional[int]:
    """First non-blank index in the inclusive range [start, end]."""
    for j in range(start, min(end, len(records) - 1) + 1):
        if not records[j].is_empty:
            return j
    return None


# =============================================================================
# Single-line predicates
# =============================================================================

def has_timestamp(text: str, thresholds: ParserThresholds = DEFAULT_THRESHOLDS) -> bool:
    """
    True if *text* carries a timestamp.

    Specific forms are accepted outright. A bare ``h:mm`` is accepted only
    when the line does not read like prose (indicator words, wiki links,
    or a long line).
    """
    text = text.strip()
    if not text:
        return False
    if any_match(P.TIMESTAMP_PATTERNS, text):
        return True
    if safe_test(P.BASIC_TIME, text):
        if safe_test(P.PROSE_INDICATOR, text) or safe_test(P.WIKI_LINK, text):
            return False
        return len(text) < thresholds.long_line_threshold
    return False


def looks_like_timestamp_line(text: str, thresholds: ParserThresholds = DEFAULT_THRESHOLDS) -> bool:
    """A timestamp on a line short enough to be header material."""
    return len(text) <= thresholds.max_timestamp_line_length and has_timestamp(text, thresholds)


def is_obvious_metadata(text: str) -> bool:
    return bool(text) and any_match(P.OBVIOUS_METADATA, text.strip())


def is_section_header(text: str) -> bool:
    return any_match(P.SECTION_HEADERS, text.strip())


def is_app_message(text: str) -> bool:
    return safe_test(P.APP_MESSAGE, text)


def is_role_tag(text: str) -> bool:
    return _WHITESPACE.sub(" ", text.strip()).lower() in ROLE_TAGS


def date_header_label(text: str) -> Optional[str]:
    """Label of a date separator line, or None."""
    text = text.strip()
    for pattern in P.DATE_HEADERS:
        m = safe_match(pattern, text)
        if m:
            return m.group("label").strip()
    return None


def is_time_only_line(text: str) -> bool:
    return any_match(P.TIME_ONLY_LINES, text.strip())


def clean_username(text: str) -> str:
    """Strip emoji images and trailing punctuation, collapse a doubled name."""
    name = safe_sub(P.EMOJI_IMAGE, "", text)
    name = _WHITESPACE.sub(" ", name).strip()
    name = safe_sub(P.TRAILING_PUNCTUATION, "", name)
    m = safe_match(P.DOUBLED_NAME, name)
    if m:
        name = m.group(1).strip()
    return name


def is_valid_username(name: str, thresholds: ParserThresholds = DEFAULT_THRESHOLDS) -> bool:
    if not (thresholds.min_username_length <= len(name) <= thresholds.max_username_length):
        return False
    if name.isdigit() or _LEADING_TIME.match(name):
        return False
    return name.lower() not in _CALENDAR_WORDS


def looks_like_username(text: str, thresholds: ParserThresholds = DEFAULT_THRESHOLDS) -> bool:
    """
    Whether a whole line reads like a display name.

    App-message lines count as names. Section headers, role badges,
    continuation phrases, metadata and anything with date/time vocabulary
    do not. Every word, including a lone one, must start with a capital
    letter or a digit.
    """
    text = text.strip()
    if not text:
        return False
    if is_app_message(text):
        return True
    if is_section_header(text) or is_role_tag(text):
        return False
    if any_match(P.CONTINUATION_PATTERNS, text):
        return False
    if not safe_match(P.USERNAME_FORMAT, text):
        return False
    if is_obvious_metadata(text) or safe_test(P.TIMESTAMP_WORDS, text):
        return False

    words = text.split()
    if len(words) > thresholds.max_username_words:
        return False
    if not all(safe_match(P.NAME_WORD_CAPITALIZED, w) for w in words):
        return False
    if {w.lower() for w in words} & CONTENT_WORDS and not safe_match(P.NAME_PATTERN, text):
        return False
    return True


def is_username_candidate(text: str, thresholds: ParserThresholds = DEFAULT_THRESHOLDS) -> bool:
    """Loose username membership used for whole-document statistics."""
    text = text.strip()
    if not text or not safe_test(P.CAPITAL_START, text) or safe_test(P.URL, text):
        return False
    words = text.split()
    if len(words) > thresholds.max_username_words:
        return False
    if not all(safe_match(P.NAME_TOKEN, w) for w in words):
        return False
    return not is_obvious_metadata(text)


def is_duplicated_username(text: str, thresholds: ParserThresholds = DEFAULT_THRESHOLDS) -> bool:
    """``Alex MittellAlex Mittell`` style artifacts."""
    name = _WHITESPACE.sub(" ", safe_sub(P.EMOJI_IMAGE, "", text)).strip()
    m = safe_match(P.DOUBLED_NAME, name)
    return bool(m) and looks_like_username(m.group(1).strip(), thresholds)


def has_user_timestamp_combination(text: str, thresholds: ParserThresholds = DEFAULT_THRESHOLDS) -> bool:
    """A name (or role badge) followed on the same line by a timestamp."""
    m = safe_match(P.USER_TIME_SPLIT, text.strip())
    if not m:
        return False
    prefix = clean_username(m.group("prefix"))
    if not prefix:
        return False
    return looks_like_username(prefix, thresholds) or is_role_tag(prefix)


def is_standalone_timestamp(text: str, thresholds: ParserThresholds = DEFAULT_THRESHOLDS) -> bool:
    """A timestamp line not already led by a display name."""
    if not has_timestamp(text, thresholds) or is_inline_time_mention(text, thresholds):
        return False
    m = safe_match(P.USER_TIME_SPLIT, text.strip())
    if not m:
        return True
    prefix = clean_username(m.group("prefix"))
    return not (prefix and looks_like_username(prefix, thresholds))


def is_inline_time_mention(text: str, thresholds: ParserThresholds = DEFAULT_THRESHOLDS) -> bool:
    """
    A bare ``h:mm`` inside a sentence, as in ``The deploy finished at 3:30 today``.

    The line carries no specific timestamp form and is not a name+time header.
    """
    text = text.strip()
    if not has_timestamp(text, thresholds) or is_time_only_line(text):
        return False
    if any_match(P.TIMESTAMP_PATTERNS, text):
        return False
    return not has_user_timestamp_combination(text, thresholds)


# =============================================================================
# Context predicates
# =============================================================================

def looks_like_continuation(
    records: Sequence[LineRecord],
    index: int,
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> bool:
    """
    True if the line at *index* continues the message before it.

    Bracketed timestamps, truncation phrases and connective openers always
    continue. A bare unlinked time continues unless the previous non-blank
    line is a username, in which case the pair is a two-line header.
    """
    text = records[index].text
    if not text:
        return False
    if any_match(P.CONTINUATION_PATTERNS, text):
        return True
    if is_time_only_line(text):
        prev = previous_non_empty(records, index)
        if prev is None:
            return False
        return not looks_like_username(records[prev].text, thresholds)
    return False


def could_be_message_start(
    records: Sequence[LineRecord],
    index: int,
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> bool:
    """Message-start candidacy, shared by pattern identification and boundary extension."""
    record = records[index]
    text = record.text
    if record.is_empty or date_header_label(text) is not None:
        return False
    if is_app_message(text):
        return True
    if is_inline_time_mention(text, thresholds):
        return False

    chars = record.characteristics
    timestamp = chars.has_timestamp and len(text) <= thresholds.max_timestamp_line_length
    combo = has_user_timestamp_combination(text, thresholds)
    username = looks_like_username(text, thresholds)

    two_line_header = False
    if username and not chars.has_timestamp and index + 1 < len(records):
        following = records[index + 1]
        two_line_header = not following.is_empty and is_standalone_timestamp(following.text, thresholds)

    if timestamp or chars.has_avatar or combo or two_line_header:
        return True
    if username:
        window_end = min(len(records), index + 1 + thresholds.timestamp_search_window)
        return any(is_standalone_timestamp(records[j].text, thresholds) for j in range(index + 1, window_end))
    return False


def has_strong_start_signal(
    records: Sequence[LineRecord],
    index: int,
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> bool:
    """
    Whether the first non-blank line at or after *index* opens a message on
    its own: name+time on one line, a doubled name, an app header, or a name
    with a timestamp on the next line.
    """
    j = first_non_empty(records, index, len(records) - 1)
    if j is None:
        return False
    text = records[j].text
    if is_app_message(text) or has_user_timestamp_combination(text, thresholds):
        return True
    if is_duplicated_username(text, thresholds):
        return True
    if looks_like_username(text, thresholds):
        k = next_non_empty(records, j)
        if k is not None and k - j <= thresholds.timestamp_search_window:
            return is_standalone_timestamp(records[k].text, thresholds)
    return False


def extract_timestamp_from_line(text: str) -> Optional[str]:
    """Most specific timestamp substring in *text*, or None."""
    m = safe_search(P.LINKED_TIMESTAMP, text)
    if m:
        return m.group(1).strip()
    for pattern in (P.MONTH_DAY_AT_TIME, P.RELATIVE_AT_TIME, P.ISO_DATE_TIME, P.TIME_WITH_AMPM, P.MONTH_DAY):
        m = safe_search(pattern, text)
        if m:
            return m.group(0).strip()
    return None
