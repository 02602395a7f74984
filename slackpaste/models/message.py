"""
Typed Pydantic models for the parser's durable output.

A StructuredMessage is populated once by the extractor and frozen afterwards;
ownership then passes to whatever renders the note.
"""
from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from slackpaste.config.constants import UNKNOWN_AUTHOR


class Reaction(BaseModel):
    """An emoji reaction with its count, e.g. ``:+1: 3``."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Emoji name without colons, or the glyph itself.")
    count: int = Field(..., ge=0)


class StructuredMessage(BaseModel):
    """One message recovered from pasted chat text."""

    model_config = ConfigDict(frozen=True)

    author: str = Field(UNKNOWN_AUTHOR, min_length=1)
    timestamp: Optional[str] = Field(None, description="Surface form as pasted, lightly cleaned.")
    date_label: Optional[str] = None
    body_lines: Tuple[str, ...] = Field(default_factory=tuple)
    reactions: Tuple[Reaction, ...] = Field(default_factory=tuple)
    thread_info: Optional[str] = None
    is_thread_reply: bool = False
    is_thread_start: bool = False
    is_edited: bool = False

    @field_validator("author")
    @classmethod
    def strip_author(cls, v: str) -> str:
        v = v.strip()
        return v or UNKNOWN_AUTHOR

    @property
    def text(self) -> str:
        return "\n".join(self.body_lines)

    @property
    def has_known_author(self) -> bool:
        return self.author != UNKNOWN_AUTHOR

    def __repr__(self) -> str:
        preview = self.text[:30].replace("\n", " ")
        return f"StructuredMessage({self.author!r}, {self.timestamp!r}, '{preview}')"
