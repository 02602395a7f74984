"""
Constants used across the parser.
Tuning knobs are grouped here so that every cutoff stays a named value.
"""
from typing import List, Set

# =============================================================================
# Line length thresholds
# =============================================================================
SHORT_LINE_THRESHOLD: int = 25
LONG_LINE_THRESHOLD: int = 100
ALL_CAPS_MIN_LENGTH: int = 3
MAX_TIMESTAMP_LINE_LENGTH: int = 50

# =============================================================================
# Username limits
# =============================================================================
MIN_USERNAME_LENGTH: int = 2
MAX_USERNAME_LENGTH: int = 50
MAX_USERNAME_WORDS: int = 4
MAX_HEADER_NAME_LENGTH: int = 30

UNKNOWN_AUTHOR: str = "Unknown User"

# =============================================================================
# Windows (in lines)
# =============================================================================
TIMESTAMP_SEARCH_WINDOW: int = 2
METADATA_SCAN_WINDOW: int = 3
GROUPING_LOOKAHEAD: int = 3
GROUPING_MAX_DISTANCE: int = 2
DUPLICATE_USERNAME_WINDOW: int = 2
CONTINUATION_LOOKAHEAD: int = 4
CONTINUATION_BLANK_GAP: int = 3
MERGE_TAIL_WINDOW: int = 5
FORMAT_SAMPLE_SIZE: int = 5

# =============================================================================
# Confidence / scoring
# =============================================================================
FORMAT_DOMINANCE_THRESHOLD: float = 0.7
MIN_BOUNDARY_CONFIDENCE: float = 0.1
MIN_CANDIDATE_SCORE: int = 0
DEFAULT_AVERAGE_MESSAGE_LENGTH: int = 5

CANDIDATE_SCORE_WEIGHTS: dict = {
    "timestamp_nearby": 3,
    "after_empty": 2,
    "common_username": 2,
    "capital_start": 1,
    "short_line": 1,
    "metadata": -3,
    "plausible_distance": 1,
}

BOUNDARY_CONFIDENCE_WEIGHTS: dict = {
    "typical_length": 0.2,
    "plausible_length": 0.15,
    "username": 0.25,
    "timestamp": 0.25,
    "content": 0.2,
}

# =============================================================================
# Content extraction
# =============================================================================
MIN_UNKNOWN_AUTHOR_BODY_LENGTH: int = 20
THREAD_INFO_MAX_LENGTH: int = 20

# =============================================================================
# Vocabulary
# =============================================================================
MONTH_NAMES: List[str] = [
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
]

MONTH_ABBREVIATIONS: List[str] = [
    "jan", "feb", "mar", "apr", "may", "jun",
    "jul", "aug", "sep", "oct", "nov", "dec",
]

WEEKDAY_NAMES: List[str] = [
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
]

# Workspace role badges printed next to the timestamp; never authors.
ROLE_TAGS: Set[str] = {
    "new hire",
    "guest",
    "single-channel guest",
    "multi-channel guest",
    "admin",
    "workspace admin",
    "workspace owner",
    "primary owner",
    "owner",
    "external",
    "contractor",
    "bot",
}

# Sentence openers that continue the previous speaker's message.
CONNECTIVE_OPENERS: List[str] = [
    "also", "additionally", "furthermore", "moreover", "and", "but",
    "however", "though", "actually", "by the way", "btw", "plus", "anyway",
]

TRUNCATION_PHRASES: List[str] = [
    "see more", "show less", "show more", "continue reading",
    "read more", "view more", "load more",
]

CONTENT_MARKERS: List[str] = [
    "[truncated]", "[content continues]", "[message continues]", "[attached]",
]

# Words that rarely appear inside a display name.
CONTENT_WORDS: Set[str] = {
    "the", "and", "but", "for", "with", "this", "that", "from", "have",
    "will", "would", "could", "should", "about", "into", "just", "some",
    "what", "when", "where", "which", "there", "their", "your", "our",
    "is", "are", "was", "were", "been", "of", "to", "in", "it", "if",
}

# Prose indicators that disqualify a loose "h:mm" hit from being a timestamp.
PROSE_INDICATOR_WORDS: List[str] = [
    "wanted", "needed", "mention", "tracking", "happens", "related",
    "finding", "should", "fixed", "errors", "after", "switching",
]

# =============================================================================
# Output
# =============================================================================
FORMAT_STANDARD: str = "standard"
FORMAT_BRACKET: str = "bracket"
FORMAT_MIXED: str = "mixed"
FORMATS: List[str] = [FORMAT_STANDARD, FORMAT_BRACKET, FORMAT_MIXED]
