"""
Unit tests for message extraction (Stage 5).
"""
from slackpaste.config.constants import UNKNOWN_AUTHOR
from slackpaste.models.message import StructuredMessage
from slackpaste.models.structure import MessageBoundary
from slackpaste.parsing.message_extractor import (
    extract_message,
    is_valid_message,
    previous_known_author,
)


class TestAuthorInheritance:
    """Section headers and role-badge headers take the previous author."""

    def test_section_header_inherits(self, structure_for):
        structure = structure_for("#CONTEXT#\nBackground for the release")
        previous = [StructuredMessage(author="Alice Johnson", body_lines=("hi",))]

        message = extract_message(structure, MessageBoundary(0, 1), previous)

        assert message.author == "Alice Johnson"
        assert message.body_lines == ("#CONTEXT#", "Background for the release")

    def test_section_header_without_previous_author(self, structure_for):
        structure = structure_for("#CONTEXT#\nBackground for the release notes")
        message = extract_message(structure, MessageBoundary(0, 1), [])
        assert message.author == UNKNOWN_AUTHOR

    def test_role_tag_inherits(self, structure_for):
        structure = structure_for("New hire  6:10 PM\nThanks for having me")
        previous = [
            StructuredMessage(author="Jane Doe", body_lines=("Welcome",)),
            StructuredMessage(body_lines=("orphan text without author",)),
        ]

        message = extract_message(structure, MessageBoundary(0, 1), previous)

        assert message.author == "Jane Doe"
        assert message.timestamp == "6:10 PM"

    def test_previous_known_author_skips_unknown(self):
        messages = [
            StructuredMessage(author="Jane Doe", body_lines=("a",)),
            StructuredMessage(body_lines=("b",)),
        ]
        assert previous_known_author(messages) == "Jane Doe"
        assert previous_known_author([]) is None


class TestValidity:
    def test_known_author_needs_body(self):
        assert is_valid_message(StructuredMessage(author="Bob", body_lines=("ok",))) is True
        assert is_valid_message(StructuredMessage(author="Bob")) is False

    def test_unknown_author_needs_longer_body(self):
        assert is_valid_message(StructuredMessage(body_lines=("short",))) is False
        assert is_valid_message(StructuredMessage(body_lines=("a message long enough to keep",))) is True

    def test_unknown_author_metadata_body_rejected(self):
        assert is_valid_message(StructuredMessage(body_lines=("Added by someone in the channel",))) is False

    def test_empty_boundary_yields_none(self, structure_for, dated_paste):
        structure = structure_for(dated_paste)
        assert extract_message(structure, MessageBoundary(0, 0)) is None

    def test_date_label_attached(self, structure_for, dated_paste):
        structure = structure_for(dated_paste)
        message = extract_message(structure, MessageBoundary(1, 2), date_label="Today")
        assert message.date_label == "Today"
        assert message.author == "Alice Johnson"
