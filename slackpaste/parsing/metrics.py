"""
Prometheus Metrics — parser observability.

Exposes counters and histograms for:
- Parse calls and produced messages
- Regex / extractor failures swallowed by the degrade-to-no-match policy
- Cache hits
- Stage processing latency

Usage
-----
    from slackpaste.parsing.metrics import timed_stage, record_regex_failure

    with timed_stage("boundary_detection"):
        boundaries = find_boundaries(structure)
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram

from slackpaste.config.settings import METRICS_ENABLED

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

PARSES: Counter = Counter(
    "slackpaste_parses_total",
    "Total parse calls",
)

MESSAGES: Counter = Counter(
    "slackpaste_messages_total",
    "Total structured messages produced",
)

REGEX_FAILURES: Counter = Counter(
    "slackpaste_regex_failures_total",
    "Pattern executions that raised and were treated as no match",
    ["operation"],
)

EXTRACTOR_FAILURES: Counter = Counter(
    "slackpaste_extractor_failures_total",
    "Header extractors that raised and were skipped",
    ["extractor"],
)

CACHE_HITS: Counter = Counter(
    "slackpaste_cache_hits_total",
    "Parse calls served from the memoization cache",
)

STAGE_LATENCY: Histogram = Histogram(
    "slackpaste_stage_processing_seconds",
    "Processing time per parser stage in seconds",
    ["stage"],
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0),
)


# ---------------------------------------------------------------------------
# Convenience helpers
# ---------------------------------------------------------------------------

def record_parse(message_count: int) -> None:
    """Count one parse call and the messages it produced."""
    if not METRICS_ENABLED:
        return
    PARSES.inc()
    MESSAGES.inc(message_count)


def record_regex_failure(operation: str) -> None:
    if METRICS_ENABLED:
        REGEX_FAILURES.labels(operation=operation).inc()


def record_extractor_failure(extractor: str) -> None:
    if METRICS_ENABLED:
        EXTRACTOR_FAILURES.labels(extractor=extractor).inc()


def record_cache_hit() -> None:
    if METRICS_ENABLED:
        CACHE_HITS.inc()


@contextmanager
def timed_stage(stage: str) -> Generator[None, None, None]:
    """
    Context manager that records the duration of a parser stage.

    Example::

        with timed_stage("pattern_identification"):
            patterns = identify_patterns(records)
    """
    if not METRICS_ENABLED:
        yield
        return
    with STAGE_LATENCY.labels(stage=stage).time():
        yield
