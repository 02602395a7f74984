"""
Boundary Detector — turns start candidates into non-overlapping line ranges.

Steps:
    A. Candidate scoring
    B. Continuation filtering
    C. Duplicate-username collapse
    D. Header component grouping
    E. Boundary materialization + confidence
    F. Continuation absorption
    G. Cross-boundary merge (repeated until stable)
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from slackpaste.config.constants import BOUNDARY_CONFIDENCE_WEIGHTS, CANDIDATE_SCORE_WEIGHTS
from slackpaste.config.settings import DEBUG_BOUNDARY_DETECTION
from slackpaste.models.line_record import LineRecord
from slackpaste.models.settings import DEFAULT_THRESHOLDS, ParserThresholds
from slackpaste.models.structure import ConversationStructure, MessageBoundary
from slackpaste.parsing.header_extractors import infer_author
from slackpaste.parsing.heuristics import (
    clean_username,
    could_be_message_start,
    first_non_empty,
    has_strong_start_signal,
    has_user_timestamp_combination,
    is_app_message,
    is_inline_time_mention,
    is_obvious_metadata,
    is_section_header,
    is_standalone_timestamp,
    looks_like_continuation,
    looks_like_username,
    next_non_empty,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoredCandidate:
    index: int
    score: int


def _trace(enabled: bool, step: str, values) -> None:
    if enabled:
        logger.info("[boundaries] %s: %s", step, values)
    else:
        logger.debug("[boundaries] %s: %s", step, values)


# ======================================================================
# Step A: candidate scoring
# ======================================================================

def score_candidates(
    structure: ConversationStructure,
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
    weights: Optional[dict] = None,
) -> List[ScoredCandidate]:
    """
    Score every message-start candidate.

    Candidates scoring below ``min_candidate_score`` are dropped; the
    survivors are returned in document order.
    """
    weights = weights if weights is not None else CANDIDATE_SCORE_WEIGHTS
    records = structure.lines
    patterns = structure.patterns
    average = patterns.average_message_length or thresholds.default_average_message_length
    window = thresholds.timestamp_search_window

    scored: List[ScoredCandidate] = []
    previous: Optional[int] = None
    for index in patterns.message_starts:
        record = records[index]
        chars = record.characteristics
        score = 0
        nearby = range(max(0, index - window), min(len(records), index + window + 1))
        if any(records[j].characteristics.has_timestamp for j in nearby):
            score += weights["timestamp_nearby"]
        if record.context.is_after_empty:
            score += weights["after_empty"]
        if any(name in record.text for name in patterns.common_usernames):
            score += weights["common_username"]
        if chars.capital_start:
            score += weights["capital_start"]
        if chars.is_short:
            score += weights["short_line"]
        if is_obvious_metadata(record.text):
            score += weights["metadata"]
        if previous is not None and 0.5 * average <= index - previous <= 2 * average:
            score += weights["plausible_distance"]
        previous = index
        scored.append(ScoredCandidate(index=index, score=score))

    ranked = sorted(scored, key=lambda c: (-c.score, c.index))
    survivors = [c for c in ranked if c.score >= thresholds.min_candidate_score]
    return sorted(survivors, key=lambda c: c.index)


# ======================================================================
# Step B: continuation filtering
# ======================================================================

def filter_continuations(
    records: Sequence[LineRecord],
    candidates: Sequence[int],
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> List[int]:
    return [i for i in candidates if not looks_like_continuation(records, i, thresholds)]


# ======================================================================
# Step C: duplicate-username collapse
# ======================================================================

def _same_username(first: str, second: str, thresholds: ParserThresholds) -> bool:
    for text in (first, second):
        if is_section_header(text) or is_app_message(text):
            return False
        if not looks_like_username(text, thresholds):
            return False
    return clean_username(first) == clean_username(second)


def collapse_duplicate_usernames(
    records: Sequence[LineRecord],
    candidates: Sequence[int],
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> List[int]:
    result: List[int] = []
    for index in candidates:
        if result:
            last = result[-1]
            if index - last <= thresholds.duplicate_username_window and _same_username(
                records[last].text, records[index].text, thresholds
            ):
                continue
        result.append(index)
    return result


# ======================================================================
# Step D: header component grouping
# ======================================================================

def are_part_of_same_message(
    records: Sequence[LineRecord],
    first: int,
    second: int,
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> bool:
    """Whether two nearby candidates are pieces of one header."""
    if second - first > thresholds.grouping_max_distance:
        return False
    text1, text2 = records[first].text, records[second].text
    ts1 = records[first].characteristics.has_timestamp
    ts2 = records[second].characteristics.has_timestamp
    user1 = looks_like_username(text1, thresholds)
    user2 = looks_like_username(text2, thresholds)
    prose2 = (not ts2 or is_inline_time_mention(text2, thresholds)) and not user2 and not is_obvious_metadata(text2)

    if user1 and not ts1 and is_standalone_timestamp(text2, thresholds):
        return True
    if user1 and not ts1 and not ts2 and not user2:
        return True
    if ts1 and prose2:
        return True
    return has_user_timestamp_combination(text1, thresholds) and prose2


def group_header_components(
    records: Sequence[LineRecord],
    candidates: Sequence[int],
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> List[int]:
    """Keep only the first line of each multi-line header group."""
    starts: List[int] = []
    i = 0
    while i < len(candidates):
        current = candidates[i]
        j = i + 1
        while (
            j < len(candidates)
            and j <= i + thresholds.grouping_lookahead
            and candidates[j] - current <= thresholds.grouping_lookahead
            and are_part_of_same_message(records, current, candidates[j], thresholds)
        ):
            j += 1
        starts.append(current)
        i = j
    return starts


# ======================================================================
# Step E: materialization + confidence
# ======================================================================

def boundary_confidence(
    structure: ConversationStructure,
    boundary: MessageBoundary,
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> float:
    w = BOUNDARY_CONFIDENCE_WEIGHTS
    records = structure.lines
    average = structure.patterns.average_message_length or thresholds.default_average_message_length
    length = boundary.end - boundary.start + 1

    confidence = 0.0
    if 0.2 * average <= length <= 3 * average:
        confidence += w["typical_length"]
    elif 0.1 * average <= length <= 5 * average:
        confidence += w["plausible_length"]

    head = range(boundary.start, min(boundary.start + 2, boundary.end) + 1)
    usernames = set(structure.patterns.usernames)
    if any(
        j in usernames
        or looks_like_username(records[j].text, thresholds)
        or has_user_timestamp_combination(records[j].text, thresholds)
        for j in head
    ):
        confidence += w["username"]
    if any(records[j].characteristics.has_timestamp for j in head):
        confidence += w["timestamp"]
    if any(
        not records[j].is_empty and not is_obvious_metadata(records[j].text)
        for j in range(boundary.start, boundary.end + 1)
    ):
        confidence += w["content"]
    return min(1.0, confidence)


def materialize_boundaries(
    structure: ConversationStructure,
    starts: Sequence[int],
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> List[MessageBoundary]:
    last_line = len(structure.lines) - 1
    if last_line < 0:
        return []

    ranges = []
    current = 0
    for start in starts:
        if start > current:
            ranges.append((current, start - 1))
            current = start
    ranges.append((current, last_line))

    boundaries = []
    for start, end in ranges:
        boundary = MessageBoundary(start=start, end=end)
        confidence = boundary_confidence(structure, boundary, thresholds)
        if confidence > thresholds.min_boundary_confidence:
            boundaries.append(MessageBoundary(start=start, end=end, confidence=confidence))
        else:
            logger.debug("Dropping low-confidence boundary [%d,%d] (%.2f)", start, end, confidence)
    return boundaries


# ======================================================================
# Step F: continuation absorption
# ======================================================================

def find_continuation_end(
    records: Sequence[LineRecord],
    start: int,
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> int:
    """Last line belonging to the continuation that begins at *start*."""
    end = start
    i = start + 1
    while i < len(records):
        record = records[i]
        if record.is_empty:
            following = next_non_empty(records, i)
            if following is None:
                break
            if following - start > thresholds.continuation_blank_gap and could_be_message_start(
                records, following, thresholds
            ):
                break
            i += 1
            continue
        if is_obvious_metadata(record.text):
            break
        if i - start <= thresholds.continuation_lookahead:
            if has_strong_start_signal(records, i, thresholds):
                break
        elif could_be_message_start(records, i, thresholds):
            break
        end = i
        i += 1
    return end


def extend_boundaries(
    records: Sequence[LineRecord],
    boundaries: Sequence[MessageBoundary],
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> List[MessageBoundary]:
    extended: List[MessageBoundary] = []
    for boundary in boundaries:
        end = boundary.end
        for j in range(boundary.start + 1, boundary.end + 1):
            if looks_like_continuation(records, j, thresholds):
                end = max(end, find_continuation_end(records, j, thresholds))
        while True:
            following = next_non_empty(records, end)
            if following is None or not looks_like_continuation(records, following, thresholds):
                break
            new_end = find_continuation_end(records, following, thresholds)
            if new_end <= end:
                break
            end = new_end
        extended.append(boundary.with_end(end))
    return extended


# ======================================================================
# Step G: cross-boundary merge
# ======================================================================

def authors_compatible(previous_author: Optional[str], next_author: Optional[str]) -> bool:
    """
    Whether a headless continuation block may join the previous message.

    Equal known authors merge. A block without its own author joins a
    previous message that has one. Everything else stays separate.
    """
    if previous_author and next_author:
        return previous_author == next_author
    return bool(previous_author) and not next_author


def should_merge(
    records: Sequence[LineRecord],
    previous: MessageBoundary,
    following: MessageBoundary,
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> bool:
    # Continuation near the tail of the previous boundary running into the next.
    if not has_strong_start_signal(records, following.start, thresholds):
        tail_start = max(previous.start, previous.end - thresholds.merge_tail_window)
        for j in range(tail_start, min(previous.end, len(records) - 1) + 1):
            if records[j].is_empty or not looks_like_continuation(records, j, thresholds):
                continue
            if find_continuation_end(records, j, thresholds) >= following.start - 1:
                return True

    # Continuation marker at the head of the next boundary.
    head = first_non_empty(records, following.start, following.end)
    if head is not None and looks_like_continuation(records, head, thresholds):
        return authors_compatible(
            infer_author(records, previous, thresholds),
            infer_author(records, following, thresholds),
        )
    return False


def merge_boundaries(
    records: Sequence[LineRecord],
    boundaries: Sequence[MessageBoundary],
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> List[MessageBoundary]:
    """
    Merge wrongly split neighbours until nothing changes. Overlaps left by
    extension are clamped so the next boundary keeps its start.
    """
    current = list(boundaries)
    changed = True
    while changed:
        changed = False
        result: List[MessageBoundary] = []
        for boundary in current:
            if result and should_merge(records, result[-1], boundary, thresholds):
                result[-1] = result[-1].merged_with(boundary)
                changed = True
            elif result and result[-1].end >= boundary.start:
                result[-1] = result[-1].with_end(boundary.start - 1)
                result.append(boundary)
            else:
                result.append(boundary)
        current = result
    return current


# ======================================================================
# Orchestration
# ======================================================================

def find_boundaries(
    structure: ConversationStructure,
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
    debug: bool = False,
) -> List[MessageBoundary]:
    """
    Run steps A to G.

    Args:
        structure: Classified lines, patterns and format of the document.
        thresholds: Heuristic cutoffs.
        debug: Log each step's survivors at INFO.

    Returns:
        Strictly increasing, non-overlapping boundaries.
    """
    trace = debug or DEBUG_BOUNDARY_DETECTION
    records = structure.lines
    if not records:
        return []

    # Stage A
    scored = score_candidates(structure, thresholds)
    candidates = [c.index for c in scored]
    _trace(trace, "A scored", [(c.index, c.score) for c in scored])

    # Stage B
    candidates = filter_continuations(records, candidates, thresholds)
    _trace(trace, "B without continuations", candidates)

    # Stage C
    candidates = collapse_duplicate_usernames(records, candidates, thresholds)
    _trace(trace, "C deduplicated", candidates)

    # Stage D
    starts = group_header_components(records, candidates, thresholds)
    _trace(trace, "D starts", starts)

    # Stage E
    boundaries = materialize_boundaries(structure, starts, thresholds)
    _trace(trace, "E boundaries", boundaries)

    # Stage F
    boundaries = extend_boundaries(records, boundaries, thresholds)
    _trace(trace, "F extended", boundaries)

    # Stage G
    boundaries = merge_boundaries(records, boundaries, thresholds)
    _trace(trace, "G merged", boundaries)
    return boundaries
