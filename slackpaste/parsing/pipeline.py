"""
Pipeline Orchestrator — main entry point for parsing pasted chat text.

Executes the 5-stage pipeline:
    1. Line Classification
    2. Pattern Identification
    3. Format Profiling
    4. Boundary Detection
    5. Metadata & Content Extraction

MessageParser adds settings validation and a small LRU cache keyed by a
content hash. Cached messages are frozen models, so a hit returns the same
objects without risk of cross-call mutation.
"""
import hashlib
import logging
import time
from collections import OrderedDict
from dataclasses import replace
from typing import List, Mapping, Optional, Sequence, Union

from slackpaste.config.settings import PARSE_CACHE_SIZE
from slackpaste.models.line_record import LineRecord
from slackpaste.models.message import StructuredMessage
from slackpaste.models.settings import DEFAULT_THRESHOLDS, ParserSettings, ParserThresholds, SettingsError
from slackpaste.models.structure import (
    ConversationStructure,
    MessageBoundary,
    ParseResult,
    ParseStatistics,
)
from slackpaste.parsing.boundary_detector import find_boundaries
from slackpaste.parsing.format_profiler import determine_format
from slackpaste.parsing.heuristics import date_header_label, first_non_empty
from slackpaste.parsing.line_classifier import classify_lines, split_lines
from slackpaste.parsing.message_extractor import extract_message
from slackpaste.parsing.metrics import record_cache_hit, record_parse, timed_stage
from slackpaste.parsing.pattern_identifier import identify_patterns
from slackpaste.parsing.validation import load_parser_settings

logger = logging.getLogger(__name__)


def analyze_structure(
    text: str,
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> ConversationStructure:
    """Stages 1-3: classified lines, patterns and layout format."""
    # ------------------------------------------------------------------
    # Stage 1: Line Classification
    # ------------------------------------------------------------------
    with timed_stage("line_classification"):
        records = classify_lines(split_lines(text), thresholds)

    # ------------------------------------------------------------------
    # Stage 2: Pattern Identification
    # ------------------------------------------------------------------
    with timed_stage("pattern_identification"):
        patterns = identify_patterns(records, thresholds)

    # ------------------------------------------------------------------
    # Stage 3: Format Profiling
    # ------------------------------------------------------------------
    with timed_stage("format_profiling"):
        format_tag, confidence = determine_format(patterns, records, thresholds)

    return ConversationStructure(
        lines=records,
        patterns=patterns,
        format=format_tag,
        confidence=confidence,
    )


def date_label_for(
    records: Sequence[LineRecord],
    date_headers: Sequence[int],
    boundary: MessageBoundary,
) -> Optional[str]:
    """Label of the last date separator before the boundary's first real line."""
    limit = boundary.start
    j = first_non_empty(records, boundary.start, boundary.end)
    while j is not None and j <= boundary.end and date_header_label(records[j].text) is not None:
        j = first_non_empty(records, j + 1, boundary.end)
    if j is not None:
        limit = j
    label = None
    for index in date_headers:
        if index >= limit:
            break
        label = date_header_label(records[index].text)
    return label


def run_pipeline(
    text: str,
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
    debug: bool = False,
) -> ParseResult:
    """
    Parse *text* into structured messages.

    Args:
        text: Pasted chat text.
        thresholds: Heuristic cutoffs.
        debug: Trace boundary detection steps at INFO.

    Returns:
        ParseResult with messages, boundaries and statistics. Empty or blank
        input yields an empty result.
    """
    t_start = time.time()
    if not text.strip():
        return ParseResult(statistics=ParseStatistics(total_lines=len(split_lines(text)) if text else 0))

    structure = analyze_structure(text, thresholds)

    # ------------------------------------------------------------------
    # Stage 4: Boundary Detection
    # ------------------------------------------------------------------
    with timed_stage("boundary_detection"):
        boundaries = find_boundaries(structure, thresholds, debug=debug)

    # ------------------------------------------------------------------
    # Stage 5: Metadata & Content Extraction
    # ------------------------------------------------------------------
    messages: List[StructuredMessage] = []
    with timed_stage("extraction"):
        for boundary in boundaries:
            label = date_label_for(structure.lines, structure.patterns.date_headers, boundary)
            message = extract_message(structure, boundary, messages, date_label=label, thresholds=thresholds)
            if message is not None:
                messages.append(message)

    records = structure.lines
    stats = ParseStatistics(
        total_lines=len(records),
        non_empty_lines=sum(1 for r in records if not r.is_empty),
        candidate_count=len(structure.patterns.message_starts),
        boundary_count=len(boundaries),
        message_count=len(messages),
        format=structure.format,
        confidence=structure.confidence,
    )
    record_parse(len(messages))
    logger.info(
        "Parsed %d lines into %d messages (%d candidates, format=%s, confidence=%.2f) in %.1fms",
        stats.total_lines, stats.message_count, stats.candidate_count,
        stats.format, stats.confidence, (time.time() - t_start) * 1000,
    )
    return ParseResult(messages=messages, boundaries=boundaries, statistics=stats)


class MessageParser:
    """
    Stateless-per-call parser with validated settings and an optional cache.

    Raises:
        SettingsError: At construction or update when settings are malformed.
    """

    def __init__(
        self,
        settings: Union[ParserSettings, Mapping, None] = None,
        cache_size: int = PARSE_CACHE_SIZE,
    ):
        self.settings = load_parser_settings(settings)
        self.cache_size = max(0, cache_size)
        self._cache: "OrderedDict[str, ParseResult]" = OrderedDict()

    @property
    def thresholds(self) -> ParserThresholds:
        return self.settings.thresholds

    def update_settings(self, settings: Union[ParserSettings, Mapping]) -> None:
        """Replace settings; the cache is cleared since thresholds may change."""
        if settings is None:
            raise SettingsError("update_settings requires a settings object")
        self.settings = load_parser_settings(settings)
        self.clear_cache()

    def clear_cache(self) -> None:
        self._cache.clear()

    @staticmethod
    def _cache_key(text: str) -> str:
        return hashlib.sha1(text.encode("utf-8")).hexdigest()

    def parse_with_statistics(self, text: str) -> ParseResult:
        if not isinstance(text, str):
            raise TypeError(f"text must be str, got {type(text).__name__}")

        key = self._cache_key(text)
        cached = self._cache.get(key) if self.cache_size else None
        if cached is not None:
            self._cache.move_to_end(key)
            record_cache_hit()
            return ParseResult(
                messages=list(cached.messages),
                boundaries=list(cached.boundaries),
                statistics=replace(cached.statistics, cache_hit=True),
            )

        result = run_pipeline(text, self.thresholds, debug=self.settings.debug)
        if self.cache_size:
            self._cache[key] = result
            while len(self._cache) > self.cache_size:
                self._cache.popitem(last=False)
            result = ParseResult(
                messages=list(result.messages),
                boundaries=list(result.boundaries),
                statistics=replace(result.statistics),
            )
        return result

    def parse(self, text: str) -> List[StructuredMessage]:
        """Ordered messages recovered from *text* (possibly empty)."""
        return self.parse_with_statistics(text).messages


def parse_conversation(
    text: str,
    settings: Union[ParserSettings, Mapping, None] = None,
) -> List[StructuredMessage]:
    """One-shot convenience wrapper without caching."""
    return MessageParser(settings, cache_size=0).parse(text)
