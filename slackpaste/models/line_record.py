"""
Line Record — one classified input line with its neighbourhood context.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class LineCharacteristics:
    """Boolean features computed for a single trimmed line."""

    has_timestamp: bool = False
    has_url: bool = False
    has_user_mention: bool = False
    has_emoji: bool = False
    has_avatar: bool = False
    has_reactions: bool = False
    is_short: bool = False
    is_long: bool = False
    capital_start: bool = False
    has_numbers: bool = False
    is_all_caps: bool = False
    has_special_chars: bool = False

    def to_dict(self) -> dict:
        return {
            "has_timestamp": self.has_timestamp,
            "has_url": self.has_url,
            "has_user_mention": self.has_user_mention,
            "has_emoji": self.has_emoji,
            "has_avatar": self.has_avatar,
            "has_reactions": self.has_reactions,
            "is_short": self.is_short,
            "is_long": self.is_long,
            "capital_start": self.capital_start,
            "has_numbers": self.has_numbers,
            "is_all_caps": self.is_all_caps,
            "has_special_chars": self.has_special_chars,
        }


@dataclass(frozen=True)
class LineContext:
    """Trimmed neighbours of a line and whether they are blank."""

    prev_line: str = ""
    next_line: str = ""
    is_after_empty: bool = True
    is_before_empty: bool = True


@dataclass(frozen=True)
class LineRecord:
    """A single input line. Never mutated after classification."""

    index: int
    raw: str
    text: str
    is_empty: bool
    characteristics: LineCharacteristics
    context: LineContext

    def __repr__(self) -> str:
        return f"LineRecord({self.index}, '{self.text[:40]}')"
