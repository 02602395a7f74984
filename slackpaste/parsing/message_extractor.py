"""
Message Extractor — one StructuredMessage per finalized boundary.

Reads the header (author, timestamp), walks the body, applies author
inheritance for section headers and role-badge-only headers, and drops
messages that carry no real content.
"""
import logging
from typing import Optional, Sequence

from slackpaste.config.constants import UNKNOWN_AUTHOR
from slackpaste.models.message import StructuredMessage
from slackpaste.models.settings import DEFAULT_THRESHOLDS, ParserThresholds
from slackpaste.models.structure import ConversationStructure, MessageBoundary
from slackpaste.parsing.content_extractor import extract_content
from slackpaste.parsing.header_extractors import scan_header
from slackpaste.parsing.patterns import METADATA_SHAPED_BODY
from slackpaste.parsing.safe_regex import any_match

logger = logging.getLogger(__name__)


def previous_known_author(previous_messages: Sequence[StructuredMessage]) -> Optional[str]:
    for message in reversed(previous_messages):
        if message.has_known_author:
            return message.author
    return None


def is_valid_message(
    message: StructuredMessage,
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> bool:
    """
    Unknown-author messages need a body longer than the minimum that is not
    metadata-shaped; everything else only needs a non-empty body.
    """
    text = message.text.strip()
    if not text:
        return False
    if message.has_known_author:
        return True
    if any_match(METADATA_SHAPED_BODY, text):
        return False
    return len(text) > thresholds.min_unknown_author_body_length


def extract_message(
    structure: ConversationStructure,
    boundary: MessageBoundary,
    previous_messages: Sequence[StructuredMessage] = (),
    date_label: Optional[str] = None,
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> Optional[StructuredMessage]:
    """
    Build the message held by *boundary*.

    Args:
        structure: The analysed document.
        boundary: Line range of the message.
        previous_messages: Messages already extracted, for author inheritance.
        date_label: Most recent date separator before the message.
        thresholds: Heuristic cutoffs.

    Returns:
        The message, or None when it is empty or pure metadata.
    """
    records = structure.lines
    header = scan_header(records, boundary, thresholds)

    author = header.username
    if author is None and (header.section_header or header.role_tag):
        author = previous_known_author(previous_messages)

    content = extract_content(
        records,
        header.content_start,
        boundary.end,
        author=author,
        remainder=header.remainder,
        thresholds=thresholds,
    )
    message = StructuredMessage(
        author=author or UNKNOWN_AUTHOR,
        timestamp=header.timestamp,
        date_label=date_label,
        body_lines=tuple(content.body_lines),
        reactions=tuple(content.reactions),
        thread_info=content.thread_info,
        is_thread_reply=content.is_thread_reply,
        is_thread_start=content.is_thread_start,
        is_edited=content.is_edited,
    )
    if not is_valid_message(message, thresholds):
        logger.debug("Discarding boundary %r: no usable body", boundary)
        return None
    return message
