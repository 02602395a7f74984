"""
Header Extractors — author/timestamp extraction in strict priority order.

Each extractor is a pure function ``(text, thresholds) -> HeaderMatch | None``.
HEADER_EXTRACTORS lists them in priority order; extract_user_and_time tries
them in sequence and returns the first hit. An extractor that raises is
logged and skipped so the rest of the chain still runs.

Priority:
    1. App message         (https://...)AppName rest
    2. Role tag            New hire  6:10 PM
    3. Linked timestamp    UserUser [2:45 PM](url) / User [2:45 PM](url)
    4. Name + bare time    Jane Smith  9:15 AM
    5. Doubled name + separate timestamp, APP marker, bare name
    6. Last resort         word(s) + remainder carrying a timestamp
"""
import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from slackpaste.config.constants import CONTENT_WORDS, MAX_HEADER_NAME_LENGTH, ROLE_TAGS
from slackpaste.models.line_record import LineRecord
from slackpaste.models.settings import DEFAULT_THRESHOLDS, ParserThresholds
from slackpaste.models.structure import MessageBoundary
from slackpaste.parsing import patterns as P
from slackpaste.parsing.heuristics import (
    clean_username,
    date_header_label,
    extract_timestamp_from_line,
    first_non_empty,
    has_timestamp,
    is_obvious_metadata,
    is_role_tag,
    is_section_header,
    is_valid_username,
    looks_like_timestamp_line,
    looks_like_username,
)
from slackpaste.parsing.metrics import record_extractor_failure
from slackpaste.parsing.safe_regex import safe_match, safe_test

logger = logging.getLogger(__name__)

_ROLES = "|".join(re.escape(r) for r in sorted(ROLE_TAGS, key=len, reverse=True))
_LINKED_TAIL = r"(?:!\[:[^\]]+:\]\([^)]*\))*\s*\[(?P<time>[^\]]+)\](?:\(https?://[^)]+\))?\s*(?P<rest>.*)$"

APP_HEADER = re.compile(r"^\s*\(https?://[^)]+\)(?P<name>[A-Za-z][A-Za-z0-9\-_.]*)(?:\s+(?P<rest>.*))?$")
ROLE_TAG_TIME = re.compile(
    rf"^(?:(?P<name>.+?)\s+)?(?P<role>{_ROLES})\s+(?P<time>{P.TIME}{P.AMPM}?)\b\s*(?P<rest>.*)$",
    re.IGNORECASE,
)
DOUBLED_LINKED = re.compile(rf"^(?P<name>[A-Za-z][A-Za-z0-9\s\-_.']*?)(?P=name){_LINKED_TAIL}")
SINGLE_LINKED = re.compile(rf"^(?P<name>[A-Za-z][A-Za-z0-9\s\-_.']*?){_LINKED_TAIL}")
NAME_BARE_TIME = re.compile(
    rf"^(?P<name>[A-Za-z0-9\s\-_.']+?)\s+(?P<time>{P.TIME}{P.AMPM}?)\b\s*(?P<rest>.*)$",
    re.IGNORECASE,
)
DOUBLED_THEN_TIMESTAMP = re.compile(r"^(?P<name>[A-Za-z][A-Za-z0-9\s\-_.]{2,30}?)\s*(?P=name)\s+(?P<rest>.+)$")
NAME_APP_MARKER = re.compile(r"^(?P<name>[A-Za-z][A-Za-z0-9\s\-_.]*?)\s+APP(?:\s+(?P<rest>.+))?$")
LAST_RESORT = re.compile(r"^(?P<name>[A-Za-z][A-Za-z0-9\s\-_.]{1,25})\s+(?P<rest>.*)$")
TIME_LIKE = re.compile(rf"{P.TIME}|\b(?:Today|Yesterday)\b|\b{P.MONTH}\s+\d", re.IGNORECASE)


@dataclass(frozen=True)
class HeaderMatch:
    """What one header line yielded."""

    username: Optional[str] = None
    timestamp: Optional[str] = None
    remainder: str = ""
    role_tag: bool = False
    extractor: str = ""


@dataclass(frozen=True)
class HeaderScan:
    """Header of a boundary: author, timestamp and where the body begins."""

    username: Optional[str] = None
    timestamp: Optional[str] = None
    content_start: int = 0
    remainder: str = ""
    role_tag: bool = False
    section_header: bool = False


def _clean_timestamp(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    value = value.strip().strip("[]").strip()
    return value or None


def _timestamp_from_rest(rest: Optional[str]) -> Tuple[Optional[str], str]:
    """Split a header tail into (timestamp, leftover text)."""
    rest = (rest or "").strip()
    if rest and has_timestamp(rest):
        return _clean_timestamp(extract_timestamp_from_line(rest)), ""
    return None, rest


def _name_ok(name: str, thresholds: ParserThresholds) -> bool:
    return bool(name) and looks_like_username(name, thresholds) and is_valid_username(name, thresholds)


# =============================================================================
# Extractors (priority order)
# =============================================================================

def extract_app_header(text: str, thresholds: ParserThresholds) -> Optional[HeaderMatch]:
    m = safe_match(APP_HEADER, text)
    if not m:
        return None
    timestamp, rest = _timestamp_from_rest(m.group("rest"))
    return HeaderMatch(username=m.group("name"), timestamp=timestamp, remainder=rest, extractor="app")


def extract_role_tag(text: str, thresholds: ParserThresholds) -> Optional[HeaderMatch]:
    """Role badge plus time. The badge is never an author."""
    m = safe_match(ROLE_TAG_TIME, text)
    if not m:
        return None
    username = None
    name = m.group("name")
    if name and not is_role_tag(f"{name} {m.group('role')}"):
        cleaned = clean_username(name)
        if _name_ok(cleaned, thresholds):
            username = cleaned
    return HeaderMatch(
        username=username,
        timestamp=_clean_timestamp(m.group("time")),
        remainder=m.group("rest").strip(),
        role_tag=True,
        extractor="role_tag",
    )


def extract_linked_timestamp(text: str, thresholds: ParserThresholds) -> Optional[HeaderMatch]:
    for pattern in (DOUBLED_LINKED, SINGLE_LINKED):
        m = safe_match(pattern, text)
        if not m or not safe_test(TIME_LIKE, m.group("time")):
            continue
        name = clean_username(m.group("name"))
        if not _name_ok(name, thresholds):
            continue
        return HeaderMatch(
            username=name,
            timestamp=_clean_timestamp(m.group("time")),
            remainder=m.group("rest").strip(),
            extractor="linked_timestamp",
        )
    return None


def extract_name_bare_time(text: str, thresholds: ParserThresholds) -> Optional[HeaderMatch]:
    m = safe_match(NAME_BARE_TIME, text)
    if not m:
        return None
    name = clean_username(m.group("name"))
    if len(name) > MAX_HEADER_NAME_LENGTH or safe_test(P.DATE_TIME_VOCABULARY, name):
        return None
    if is_role_tag(name) or not _name_ok(name, thresholds):
        return None
    return HeaderMatch(
        username=name,
        timestamp=_clean_timestamp(m.group("time")),
        remainder=m.group("rest").strip(),
        extractor="name_bare_time",
    )


def extract_doubled_then_timestamp(text: str, thresholds: ParserThresholds) -> Optional[HeaderMatch]:
    m = safe_match(DOUBLED_THEN_TIMESTAMP, text)
    if not m:
        return None
    name = m.group("name").strip()
    timestamp, rest = _timestamp_from_rest(m.group("rest"))
    if timestamp is None or not _name_ok(name, thresholds):
        return None
    return HeaderMatch(username=name, timestamp=timestamp, remainder=rest, extractor="doubled_then_timestamp")


def extract_app_marker(text: str, thresholds: ParserThresholds) -> Optional[HeaderMatch]:
    m = safe_match(NAME_APP_MARKER, text)
    if not m:
        return None
    name = clean_username(m.group("name"))
    if not _name_ok(name, thresholds):
        return None
    timestamp, rest = _timestamp_from_rest(m.group("rest"))
    return HeaderMatch(username=name, timestamp=timestamp, remainder=rest, extractor="app_marker")


def extract_bare_username(text: str, thresholds: ParserThresholds) -> Optional[HeaderMatch]:
    if has_timestamp(text, thresholds):
        return None
    name = clean_username(text)
    if not looks_like_username(text, thresholds) or not is_valid_username(name, thresholds):
        return None
    return HeaderMatch(username=name, extractor="bare_username")


def extract_last_resort(text: str, thresholds: ParserThresholds) -> Optional[HeaderMatch]:
    m = safe_match(LAST_RESORT, text)
    if not m:
        return None
    timestamp, rest = _timestamp_from_rest(m.group("rest"))
    name = clean_username(m.group("name"))
    if timestamp is None or safe_test(P.DATE_TIME_VOCABULARY, name):
        return None
    if is_role_tag(name) or not _name_ok(name, thresholds):
        return None
    if all(w.lower() in CONTENT_WORDS for w in name.split()):
        return None
    return HeaderMatch(username=name, timestamp=timestamp, remainder=rest, extractor="last_resort")


HEADER_EXTRACTORS: List[Tuple[str, Callable[[str, ParserThresholds], Optional[HeaderMatch]]]] = [
    ("app", extract_app_header),
    ("role_tag", extract_role_tag),
    ("linked_timestamp", extract_linked_timestamp),
    ("name_bare_time", extract_name_bare_time),
    ("doubled_then_timestamp", extract_doubled_then_timestamp),
    ("app_marker", extract_app_marker),
    ("bare_username", extract_bare_username),
    ("last_resort", extract_last_resort),
]


def _run_extractor(name: str, extractor: Callable, text: str, thresholds: ParserThresholds) -> Optional[HeaderMatch]:
    try:
        return extractor(text, thresholds)
    except Exception as e:
        logger.warning("Header extractor '%s' failed on %r: %s", name, text[:80], e)
        record_extractor_failure(name)
        return None


def extract_user_and_time(
    text: str,
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> Optional[HeaderMatch]:
    """First successful extractor result for one line, or None."""
    text = text.strip()
    if not text:
        return None
    for name, extractor in HEADER_EXTRACTORS:
        result = _run_extractor(name, extractor, text, thresholds)
        if result is not None and (result.username or result.timestamp):
            return result
    return None


# =============================================================================
# Boundary header scan
# =============================================================================

def scan_header(
    records: Sequence[LineRecord],
    boundary: MessageBoundary,
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> HeaderScan:
    """
    Read the header lines at the top of *boundary*.

    The header is the contiguous run of header-ish lines (name, time,
    name+time, role badge, avatar placeholder) within the first
    ``metadata_scan_window`` non-empty lines. The body starts right after it.
    A section-header sentinel as first line means there is no header at all.
    """
    first = first_non_empty(records, boundary.start, boundary.end)
    if first is None:
        return HeaderScan(content_start=boundary.end + 1)
    if is_section_header(records[first].text):
        return HeaderScan(content_start=first, section_header=True)

    username: Optional[str] = None
    timestamp: Optional[str] = None
    remainder = ""
    role_tag = False
    last_header: Optional[int] = None
    scanned = 0

    j = first
    while j <= boundary.end and scanned < thresholds.metadata_scan_window:
        record = records[j]
        text = record.text
        if record.is_empty:
            j += 1
            continue
        if date_header_label(text) is not None or (
            record.characteristics.has_avatar and is_obvious_metadata(text)
        ):
            last_header = j
            j += 1
            continue

        scanned += 1
        match = None
        if username is None and (timestamp is None or role_tag):
            match = extract_user_and_time(text, thresholds)
        if match is not None and (match.username or timestamp is None):
            username = username or match.username
            timestamp = timestamp or match.timestamp
            role_tag = role_tag or match.role_tag
            remainder = match.remainder
            last_header = j
        elif timestamp is None and looks_like_timestamp_line(text, thresholds):
            timestamp = _clean_timestamp(extract_timestamp_from_line(text)) or text
            remainder = ""
            last_header = j
        else:
            break

        if username and timestamp:
            break
        j += 1

    content_start = last_header + 1 if last_header is not None else first
    return HeaderScan(
        username=username,
        timestamp=timestamp,
        content_start=content_start,
        remainder=remainder,
        role_tag=role_tag,
    )


def infer_author(
    records: Sequence[LineRecord],
    boundary: MessageBoundary,
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> Optional[str]:
    """Author named in the boundary's own header, if any."""
    return scan_header(records, boundary, thresholds).username
