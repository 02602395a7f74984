"""
Unit tests for body extraction.
Tests: reactions (inline, multi, split), thread markers, edited marker,
name artifacts and body normalization.
"""
from slackpaste.parsing.content_extractor import (
    extract_content,
    is_username_artifact,
    normalize_body,
    parse_reactions,
)

THUMBS_UP = "\U0001F44D"
TADA = "\U0001F389"


def _extract(records_for, lines, **kwargs):
    records = records_for(lines)
    return extract_content(records, 0, len(records) - 1, **kwargs)


class TestParseReactions:
    def test_shortcode(self):
        reactions = parse_reactions(":+1: 3")
        assert [(r.name, r.count) for r in reactions] == [("+1", 3)]

    def test_multiple_on_one_line(self):
        reactions = parse_reactions(f"{THUMBS_UP} 3 {TADA} 2")
        assert [(r.name, r.count) for r in reactions] == [(THUMBS_UP, 3), (TADA, 2)]

    def test_text_is_not_reactions(self):
        assert parse_reactions("thanks :+1: 3 times") == []
        assert parse_reactions("hello") == []


class TestExtractContent:
    """Line-by-line walk of a boundary body."""

    def test_reaction_removed_from_body(self, records_for):
        content = _extract(records_for, ["Nice work", ":+1: 3"])
        assert content.body_lines == ["Nice work"]
        assert [(r.name, r.count) for r in content.reactions] == [("+1", 3)]

    def test_split_reaction(self, records_for):
        content = _extract(records_for, ["Ship it", TADA, "2"])
        assert content.body_lines == ["Ship it"]
        assert [(r.name, r.count) for r in content.reactions] == [(TADA, 2)]

    def test_thread_info(self, records_for):
        content = _extract(records_for, ["Can someone review my PR?", "3 replies"])
        assert content.thread_info == "3 replies"
        assert content.is_thread_start is True
        assert content.body_lines == ["Can someone review my PR?"]

    def test_view_thread_is_not_a_start(self, records_for):
        content = _extract(records_for, ["Question about deploys", "View thread"])
        assert content.thread_info == "View thread"
        assert content.is_thread_start is False

    def test_thread_reply_marker(self, records_for):
        content = _extract(records_for, ["replied to a thread: Can someone review?", "Looks good"])
        assert content.is_thread_reply is True
        assert content.body_lines == ["Looks good"]

    def test_edited_marker(self, records_for):
        content = _extract(records_for, ["Shipping it today (edited)"])
        assert content.is_edited is True
        assert content.body_lines == ["Shipping it today"]

    def test_metadata_and_date_lines_dropped(self, records_for):
        content = _extract(records_for, ["Hello", "--- Today ---", "View thread", "Added by Bob"])
        assert content.body_lines == ["Hello"]

    def test_remainder_becomes_first_line(self, records_for):
        records = records_for(["Alex MittellAlex Mittell [2:45 PM] hello", "second line"])
        content = extract_content(records, 1, 1, author="Alex Mittell", remainder="hello")
        assert content.body_lines == ["hello", "second line"]

    def test_leading_name_artifact_dropped(self, records_for):
        content = _extract(records_for, ["Alex Mittell", "hello"], author="Alex Mittell")
        assert content.body_lines == ["hello"]

    def test_blank_lines_kept_inside_body(self, records_for):
        content = _extract(records_for, ["", "first", "", "", "", "second", ""])
        assert content.body_lines == ["first", "", "second"]


class TestNormalizeBody:
    def test_strips_artifacts(self):
        assert normalize_body(["", "Alex MittellAlex Mittell", "hi"], None) == ["hi"]

    def test_empty(self):
        assert normalize_body(["", ""], None) == []

    def test_username_artifact(self):
        assert is_username_artifact("Alex MittellAlex Mittell", None) is True
        assert is_username_artifact("Alice", "Alice") is True
        assert is_username_artifact("Alice", "Bob") is False
        assert is_username_artifact("hello there", "Alice") is False
