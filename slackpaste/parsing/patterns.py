"""
Compiled pattern tables shared by every parser stage.

Patterns are compiled once at import time and executed only through
slackpaste.parsing.safe_regex.
"""
import re
from re import Pattern
from typing import List

from slackpaste.config.constants import (
    CONNECTIVE_OPENERS,
    MONTH_ABBREVIATIONS,
    MONTH_NAMES,
    PROSE_INDICATOR_WORDS,
    TRUNCATION_PHRASES,
    WEEKDAY_NAMES,
)

I = re.IGNORECASE

# =============================================================================
# Building blocks
# =============================================================================
EMOJI_CLASS: str = "[\U0001F300-\U0001FAFF\u2600-\u27BF]\uFE0F?"
EMOJI_CODE: str = r":[\w+\-]+:"
TIME: str = r"\d{1,2}:\d{2}"
AMPM: str = r"(?:\s*(?:AM|PM))"
ORDINAL: str = r"(?:st|nd|rd|th)"
MONTH: str = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?"
    r"|Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)
WEEKDAY: str = r"(?:Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday)"
URL_IN_PARENS: str = r"\(https?://[^)]+\)"


def _alternation(words: List[str]) -> str:
    return "|".join(re.escape(w) for w in words)


# =============================================================================
# Timestamps
# =============================================================================
TIMESTAMP_PATTERNS: List[Pattern] = [
    re.compile(rf"\[{TIME}{AMPM}?\]", I),
    re.compile(rf"^\s*{TIME}{AMPM}?\s*$", I),
    re.compile(rf"{TIME}\s*(?:AM|PM)\b", I),
    re.compile(rf"\b(?:Today|Yesterday)\s+at\s+{TIME}", I),
    re.compile(rf"\b{MONTH}\.?\s+\d{{1,2}}{ORDINAL}?,?\s+\d{{4}}", I),
    re.compile(rf"\b\d{{4}}-\d{{2}}-\d{{2}}[ T]{TIME}"),
    re.compile(rf"\b{WEEKDAY}\s+at\s+{TIME}", I),
    re.compile(rf"\bAPP\s+{MONTH}\s+\d{{1,2}}{ORDINAL}?\s+at\s+{TIME}", I),
    re.compile(rf"\[[^\]]*{TIME}[^\]]*\]\(https?://[^)]+\)"),
]

BASIC_TIME: Pattern = re.compile(TIME)
PROSE_INDICATOR: Pattern = re.compile(rf"\b(?:{_alternation(PROSE_INDICATOR_WORDS)})\b", I)
WIKI_LINK: Pattern = re.compile(r"\[\[.*?\]\]")

# Surface forms collected for format profiling.
TIMESTAMP_FORM_PATTERNS: List[Pattern] = [
    re.compile(rf"\[{TIME}{AMPM}?\]\(https?://[^)]+\)", I),
    re.compile(rf"\[{TIME}{AMPM}?\]", I),
    re.compile(rf"\b(?:Today|Yesterday)\s+at\s+{TIME}{AMPM}?", I),
    re.compile(rf"\b{MONTH}\s+\d{{1,2}}{ORDINAL}?(?:,?\s+\d{{4}})?(?:\s+at\s+{TIME}{AMPM}?)?", I),
    re.compile(rf"(?<![\[\d]){TIME}{AMPM}?", I),
]

# Extraction of a timestamp substring, in priority order.
LINKED_TIMESTAMP: Pattern = re.compile(r"\[([^\]]*\d{1,2}:\d{2}[^\]]*)\]\(https?://[^)]+\)")
MONTH_DAY_AT_TIME: Pattern = re.compile(
    rf"\b{MONTH}\s+\d{{1,2}}{ORDINAL}?(?:,?\s+\d{{4}})?\s+at\s+{TIME}{AMPM}?", I
)
MONTH_DAY: Pattern = re.compile(rf"\b{MONTH}\s+\d{{1,2}}{ORDINAL}?(?:,?\s+\d{{4}})?", I)
RELATIVE_AT_TIME: Pattern = re.compile(rf"\b(?:Today|Yesterday|{WEEKDAY})\s+at\s+{TIME}{AMPM}?", I)
ISO_DATE_TIME: Pattern = re.compile(rf"\b\d{{4}}-\d{{2}}-\d{{2}}[ T]{TIME}")
TIME_WITH_AMPM: Pattern = re.compile(rf"{TIME}{AMPM}?", I)

# =============================================================================
# Line characteristics
# =============================================================================
URL: Pattern = re.compile(r"https?://|www\.")
USER_MENTION: Pattern = re.compile(r"@\w+|<@[UW]\w+>|\[\[@\w+\]\]")
EMOJI_MARKER: Pattern = re.compile(rf"{EMOJI_CODE}|{EMOJI_CLASS}|!\[:[\w+\-]+:\]")
AVATAR: Pattern = re.compile(r"!\[\]\(https://[^)]*slack[^)]*\)")
REACTION_LINE: Pattern = re.compile(rf"^(?:{EMOJI_CLASS}|{EMOJI_CODE})\s*\d+$")
CAPITAL_START: Pattern = re.compile(r"^[A-Z]")
HAS_NUMBERS: Pattern = re.compile(r"\d")
SPECIAL_CHARS: Pattern = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")

# =============================================================================
# Metadata
# =============================================================================
OBVIOUS_METADATA: List[Pattern] = [
    re.compile(r"^\d+\s+(?:repl(?:y|ies)|files?|minutes?|hours?|days?)$", I),
    re.compile(r"^(?:View thread|Thread:|Last reply\b.*|Language|TypeScript|Last updated\b.*)$", I),
    re.compile(r"^Added by\s+"),
    re.compile(rf"^{EMOJI_CODE}\s*\d*$"),
    re.compile(rf"^{EMOJI_CLASS}\s*\d*$"),
    re.compile(r"^\d+$"),
    re.compile(r"^(?:-{3,}|={3,}|_{3,})$"),
    re.compile(r"^https?://\S+$"),
    re.compile(r"^(?:!\[\]\(https://[^)]*slack[^)]*\)\s*)+$"),
]

# Bodies that an unknown-author message must not consist of.
METADATA_SHAPED_BODY: List[Pattern] = [
    re.compile(r"^Added by\b", I),
    re.compile(r"^(?:Language|TypeScript|Last updated)\b", I),
    re.compile(r"^\d+\s+\w+\s+ago$", I),
    re.compile(r"^!\[[^\]]*\]\([^)]*\)$"),
    re.compile(r"^[\w.\-]+/[\w.\-]+$"),
    re.compile(r"^\d+\s+repl(?:y|ies)$", I),
    re.compile(r"^(?:View thread|Thread:|Last reply\b.*)$", I),
]

# =============================================================================
# Usernames and headers
# =============================================================================
SECTION_HEADERS: List[Pattern] = [
    re.compile(r"^#[A-Z][A-Z_\-]*#$"),
    re.compile(r"^##[A-Z][A-Z_]*##$"),
    re.compile(r"^\[[A-Z][A-Z_]{2,}\]$"),
    re.compile(r"^\[#[A-Z][A-Z_]*#\]$"),
]

APP_MESSAGE: Pattern = re.compile(rf"^\s*{URL_IN_PARENS}[A-Za-z]")
USERNAME_FORMAT: Pattern = re.compile(r"^[A-Za-z][A-Za-z0-9\s\-_.'()\[\]]{1,30}$")
NAME_PATTERN: Pattern = re.compile(r"^[A-Za-z]{2,}(?:\s[A-Za-z]{2,})?$")
NAME_TOKEN: Pattern = re.compile(r"^[A-Za-z0-9\-_.']+$")
NAME_WORD_CAPITALIZED: Pattern = re.compile(r"^[(\[]?[A-Z0-9]")
TIMESTAMP_WORDS: Pattern = re.compile(
    rf"\b(?:at|on|today|yesterday|am|pm|{_alternation(MONTH_ABBREVIATIONS)})\b", I
)
DATE_TIME_VOCABULARY: Pattern = re.compile(
    rf"\b(?:at|on|today|yesterday|am|pm|{_alternation(MONTH_NAMES + MONTH_ABBREVIATIONS + WEEKDAY_NAMES)})\b",
    I,
)
DOUBLED_NAME: Pattern = re.compile(r"^(.{3,30}?)\s*\1$")
EMOJI_IMAGE: Pattern = re.compile(r"!\[:[^\]]+:\]\([^)]*\)")
TRAILING_PUNCTUATION: Pattern = re.compile(r"[\s:,;!|\-]+$")

# =============================================================================
# Continuations
# =============================================================================
# Always continuations.
CONTINUATION_PATTERNS: List[Pattern] = [
    re.compile(rf"^\[{TIME}{AMPM}?\]{URL_IN_PARENS}$", I),
    re.compile(rf"^\[{TIME}{AMPM}?\]$", I),
    re.compile(rf"^(?:{_alternation(TRUNCATION_PHRASES)})$", I),
    re.compile(r"^(?:\.\.\.|…)$"),
    re.compile(r"^\[(?:truncated|content continues|message continues|attached)\]$", I),
    re.compile(rf"^(?:{_alternation(CONNECTIVE_OPENERS)})\b[,:]?(?:\s|$)", I),
]

# Continuations only when the previous non-blank line is not a username.
TIME_ONLY_LINES: List[Pattern] = [
    re.compile(rf"^{TIME}{AMPM}?$", I),
    re.compile(rf"^{TIME}{AMPM}?\s*{URL_IN_PARENS}$", I),
    re.compile(rf"^(?:Today|Yesterday)\s+at\s+{TIME}{AMPM}?$", I),
]

USER_TIME_SPLIT: Pattern = re.compile(
    rf"^(?P<prefix>.+?)\s*(?:\[(?P<linked>[^\]]*{TIME}[^\]]*)\]\(https?://[^)]+\)"
    rf"|\[(?P<bracket>{TIME}{AMPM}?)\]"
    rf"|(?P<bare>\b{TIME}{AMPM}?\b))",
    I,
)

# =============================================================================
# Dates, threads, reactions
# =============================================================================
DATE_HEADERS: List[Pattern] = [
    re.compile(r"^-{2,}\s*(?P<label>[^-\s][^\n]*?)\s*-{2,}$"),
    re.compile(rf"^(?P<label>{WEEKDAY},\s+{MONTH}\s+\d{{1,2}}{ORDINAL}?(?:,\s+\d{{4}})?)$", I),
    re.compile(r"^(?P<label>Today|Yesterday)$", I),
]

THREAD_INFO: Pattern = re.compile(r"^(?:\d+\s+repl(?:y|ies)\b.*|view\s+thread|thread)$", I)
THREAD_REPLY_MARKER: Pattern = re.compile(r"^replied to a thread:", I)
EDITED_MARKER: Pattern = re.compile(r"\s*\(edited\)\s*$", I)

REACTION_PAIR: Pattern = re.compile(rf"({EMOJI_CLASS}|{EMOJI_CODE})\s*(\d+)")
MULTI_REACTION_LINE: Pattern = re.compile(rf"^(?:(?:{EMOJI_CLASS}|{EMOJI_CODE})\s*\d+\s*){{2,}}$")
SINGLE_EMOJI: Pattern = re.compile(rf"^(?:{EMOJI_CLASS}|{EMOJI_CODE})$")
BARE_COUNT: Pattern = re.compile(r"^\d+$")

BLANK_RUN: Pattern = re.compile(r"\n{3,}")
