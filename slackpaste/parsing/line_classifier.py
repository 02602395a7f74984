"""
Line Classifier — per-line characteristics with neighbour context.

Each characteristic is an independent pattern test; a failed or absent
match yields False and never raises.
"""
from typing import List, Sequence, Tuple

from slackpaste.models.line_record import LineCharacteristics, LineContext, LineRecord
from slackpaste.models.settings import DEFAULT_THRESHOLDS, ParserThresholds
from slackpaste.parsing import patterns as P
from slackpaste.parsing.heuristics import has_timestamp
from slackpaste.parsing.safe_regex import safe_test


def compute_characteristics(
    text: str,
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> LineCharacteristics:
    """Characteristics of one trimmed line."""
    if not text:
        return LineCharacteristics()
    return LineCharacteristics(
        has_timestamp=has_timestamp(text, thresholds),
        has_url=safe_test(P.URL, text),
        has_user_mention=safe_test(P.USER_MENTION, text),
        has_emoji=safe_test(P.EMOJI_MARKER, text),
        has_avatar=safe_test(P.AVATAR, text),
        has_reactions=safe_test(P.REACTION_LINE, text),
        is_short=len(text) < thresholds.short_line_threshold,
        is_long=len(text) > thresholds.long_line_threshold,
        capital_start=safe_test(P.CAPITAL_START, text),
        has_numbers=safe_test(P.HAS_NUMBERS, text),
        is_all_caps=text == text.upper() and len(text) > thresholds.all_caps_min_length,
        has_special_chars=safe_test(P.SPECIAL_CHARS, text),
    )


def classify_line(
    line: str,
    index: int,
    all_lines: Sequence[str],
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> LineRecord:
    """
    Classify one line of *all_lines*.

    Args:
        line: The raw line.
        index: Position of the line in *all_lines*.
        all_lines: Every raw line of the document, read for neighbour context.
        thresholds: Length cutoffs.

    Returns:
        An immutable LineRecord.
    """
    text = line.strip()
    prev_line = all_lines[index - 1].strip() if index > 0 else ""
    next_line = all_lines[index + 1].strip() if index + 1 < len(all_lines) else ""
    return LineRecord(
        index=index,
        raw=line,
        text=text,
        is_empty=not text,
        characteristics=compute_characteristics(text, thresholds),
        context=LineContext(
            prev_line=prev_line,
            next_line=next_line,
            is_after_empty=not prev_line,
            is_before_empty=not next_line,
        ),
    )


def split_lines(text: str) -> List[str]:
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def classify_lines(
    lines: Sequence[str],
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> Tuple[LineRecord, ...]:
    return tuple(classify_line(line, i, lines, thresholds) for i, line in enumerate(lines))
