"""
Content Extractor — splits a boundary's body into text, reactions and
thread metadata.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from slackpaste.models.line_record import LineRecord
from slackpaste.models.message import Reaction
from slackpaste.models.settings import DEFAULT_THRESHOLDS, ParserThresholds
from slackpaste.parsing import patterns as P
from slackpaste.parsing.heuristics import (
    clean_username,
    date_header_label,
    is_duplicated_username,
    is_obvious_metadata,
    looks_like_username,
)
from slackpaste.parsing.safe_regex import safe_findall, safe_match, safe_search, safe_sub

logger = logging.getLogger(__name__)


@dataclass
class ExtractedContent:
    body_lines: List[str] = field(default_factory=list)
    reactions: List[Reaction] = field(default_factory=list)
    thread_info: Optional[str] = None
    is_thread_reply: bool = False
    is_thread_start: bool = False
    is_edited: bool = False


def _reaction(name: str, count: str) -> Reaction:
    return Reaction(name=name.strip(":") or name, count=int(count))


def parse_reactions(text: str) -> List[Reaction]:
    """Reactions on one line (``:+1: 3``, ``👍3🎉2``); empty if the line is not purely reactions."""
    if safe_match(P.REACTION_LINE, text) or safe_match(P.MULTI_REACTION_LINE, text):
        return [_reaction(name, count) for name, count in safe_findall(P.REACTION_PAIR, text)]
    return []


def is_username_artifact(text: str, author: Optional[str], thresholds: ParserThresholds = DEFAULT_THRESHOLDS) -> bool:
    """A leftover copy of the author's name at the top of the body."""
    if is_duplicated_username(text, thresholds):
        return True
    return bool(author) and looks_like_username(text, thresholds) and clean_username(text) == author


def normalize_body(lines: List[str], author: Optional[str], thresholds: ParserThresholds = DEFAULT_THRESHOLDS) -> List[str]:
    """Strip leading blanks/name remnants and trailing blanks; collapse blank runs."""
    start = 0
    while start < len(lines) and (not lines[start] or is_username_artifact(lines[start], author, thresholds)):
        start += 1
    text = "\n".join(lines[start:]).strip()
    if not text:
        return []
    return safe_sub(P.BLANK_RUN, "\n\n", text).split("\n")


def extract_content(
    records: Sequence[LineRecord],
    start: int,
    end: int,
    author: Optional[str] = None,
    remainder: str = "",
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> ExtractedContent:
    """
    Walk lines [start, end] and classify each one.

    Args:
        records: Classified lines of the document.
        start: First body line (right after the header).
        end: Last line of the boundary.
        author: Author already extracted, used to drop name remnants.
        remainder: Text that followed the header on the header line itself.
        thresholds: Heuristic cutoffs.

    Returns:
        ExtractedContent with body lines (blank lines kept), reactions,
        thread info and flags.
    """
    lines: List[str] = [remainder] if remainder else []
    lines.extend(records[i].text for i in range(start, min(end, len(records) - 1) + 1))

    content = ExtractedContent()
    body: List[str] = []
    seen_text = False
    i = 0
    while i < len(lines):
        text = lines[i]
        i += 1
        if not text:
            body.append("")
            continue

        first_line = not seen_text
        seen_text = True
        if first_line and is_username_artifact(text, author, thresholds):
            continue
        if date_header_label(text) is not None:
            continue
        if safe_match(P.THREAD_REPLY_MARKER, text):
            content.is_thread_reply = True
            content.thread_info = content.thread_info or text
            continue

        reactions = parse_reactions(text)
        if reactions:
            content.reactions.extend(reactions)
            continue
        if safe_match(P.SINGLE_EMOJI, text) and i < len(lines) and safe_match(P.BARE_COUNT, lines[i]):
            content.reactions.append(_reaction(text, lines[i]))
            i += 1
            continue

        if len(text) < thresholds.thread_info_max_length and safe_match(P.THREAD_INFO, text):
            content.thread_info = text
            if text[0].isdigit():
                content.is_thread_start = True
            continue
        if is_obvious_metadata(text):
            continue

        if safe_search(P.EDITED_MARKER, text):
            content.is_edited = True
            text = safe_sub(P.EDITED_MARKER, "", text)
            if not text:
                continue
        body.append(text)

    content.body_lines = normalize_body(body, author, thresholds)
    return content
