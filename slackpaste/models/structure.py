"""
Conversation structure — whole-document aggregates and message boundaries.
"""
from dataclasses import dataclass, field, replace
from typing import List, Tuple

from slackpaste.config.constants import FORMAT_MIXED
from slackpaste.models.line_record import LineRecord


@dataclass(frozen=True)
class ConversationPatterns:
    """Candidate index lists plus aggregate statistics of one document."""

    message_starts: Tuple[int, ...] = ()
    timestamps: Tuple[int, ...] = ()
    usernames: Tuple[int, ...] = ()
    metadata: Tuple[int, ...] = ()
    date_headers: Tuple[int, ...] = ()
    average_message_length: int = 0
    common_usernames: Tuple[str, ...] = ()
    timestamp_formats: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "message_starts": list(self.message_starts),
            "timestamps": list(self.timestamps),
            "usernames": list(self.usernames),
            "metadata": list(self.metadata),
            "date_headers": list(self.date_headers),
            "average_message_length": self.average_message_length,
            "common_usernames": list(self.common_usernames),
            "timestamp_formats": list(self.timestamp_formats),
        }


@dataclass(frozen=True)
class ConversationStructure:
    """Classified lines + patterns + inferred layout format."""

    lines: Tuple[LineRecord, ...]
    patterns: ConversationPatterns
    format: str = FORMAT_MIXED
    confidence: float = 0.0


@dataclass(frozen=True)
class MessageBoundary:
    """Inclusive line range [start, end] believed to hold one message."""

    start: int
    end: int
    confidence: float = 0.0

    def with_end(self, end: int) -> "MessageBoundary":
        return replace(self, end=end)

    def merged_with(self, other: "MessageBoundary") -> "MessageBoundary":
        """Union of two adjacent or overlapping boundaries."""
        return MessageBoundary(
            start=min(self.start, other.start),
            end=max(self.end, other.end),
            confidence=max(self.confidence, other.confidence),
        )

    def overlaps(self, other: "MessageBoundary") -> bool:
        return not (self.end < other.start or other.end < self.start)

    def contains(self, index: int) -> bool:
        return self.start <= index <= self.end

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end, "confidence": round(self.confidence, 4)}

    def __repr__(self) -> str:
        return f"MessageBoundary([{self.start},{self.end}], conf={self.confidence:.2f})"


@dataclass
class ParseStatistics:
    """Diagnostics of one parse call."""

    total_lines: int = 0
    non_empty_lines: int = 0
    candidate_count: int = 0
    boundary_count: int = 0
    message_count: int = 0
    format: str = FORMAT_MIXED
    confidence: float = 0.0
    cache_hit: bool = False

    def to_dict(self) -> dict:
        return {
            "total_lines": self.total_lines,
            "non_empty_lines": self.non_empty_lines,
            "candidate_count": self.candidate_count,
            "boundary_count": self.boundary_count,
            "message_count": self.message_count,
            "format": self.format,
            "confidence": round(self.confidence, 4),
            "cache_hit": self.cache_hit,
        }


@dataclass
class ParseResult:
    """Messages plus the boundaries and statistics that produced them."""

    messages: list = field(default_factory=list)
    boundaries: List[MessageBoundary] = field(default_factory=list)
    statistics: ParseStatistics = field(default_factory=ParseStatistics)
