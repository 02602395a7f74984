"""
Output Normalization — parse result to a JSON-ready dict.

Produces the PARSE_OUTPUT_SCHEMA shape consumed by renderers and by the
command-line runner.
"""
from typing import List

from slackpaste.models.message import StructuredMessage
from slackpaste.models.structure import ParseResult


def message_to_dict(message: StructuredMessage) -> dict:
    """JSON-ready message (tuples become lists)."""
    return message.model_dump(mode="json")


def build_messages_output(messages: List[StructuredMessage]) -> List[dict]:
    return [message_to_dict(m) for m in messages]


def build_parse_output(result: ParseResult) -> dict:
    """
    Build the full parse output.

    Args:
        result: ParseResult from MessageParser.parse_with_statistics.

    Returns:
        Dict with messages, boundaries and statistics.
    """
    return {
        "messages": build_messages_output(result.messages),
        "boundaries": [b.to_dict() for b in result.boundaries],
        "statistics": result.statistics.to_dict(),
    }
