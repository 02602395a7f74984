"""
Safe regex — pattern execution that never raises.

Every heuristic in the parser runs through these wrappers. A pattern that
fails on unexpected input is logged and reported as "no match", so one bad
line cannot abort the whole parse.
"""
import logging
from re import Match, Pattern
from typing import List, Optional

from slackpaste.parsing.metrics import record_regex_failure

logger = logging.getLogger(__name__)


def _report(operation: str, pattern: Pattern, exc: Exception) -> None:
    logger.warning("Regex %s failed for /%s/: %s", operation, pattern.pattern, exc)
    record_regex_failure(operation)


def safe_search(pattern: Pattern, text: str) -> Optional[Match]:
    try:
        return pattern.search(text)
    except Exception as exc:
        _report("search", pattern, exc)
        return None


def safe_match(pattern: Pattern, text: str) -> Optional[Match]:
    try:
        return pattern.match(text)
    except Exception as exc:
        _report("match", pattern, exc)
        return None


def safe_test(pattern: Pattern, text: str) -> bool:
    """True if *pattern* is found anywhere in *text*."""
    return safe_search(pattern, text) is not None


def safe_findall(pattern: Pattern, text: str) -> List:
    try:
        return pattern.findall(text)
    except Exception as exc:
        _report("findall", pattern, exc)
        return []


def safe_sub(pattern: Pattern, repl: str, text: str) -> str:
    """Substitute, returning *text* unchanged on failure."""
    try:
        return pattern.sub(repl, text)
    except Exception as exc:
        _report("sub", pattern, exc)
        return text


def any_match(patterns: List[Pattern], text: str) -> bool:
    return any(safe_test(p, text) for p in patterns)
