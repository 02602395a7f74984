"""
Unit tests for header extraction.
Tests: each extractor in isolation, chain priority, failure isolation and
the boundary header scan.
"""
import pytest

from slackpaste.models.settings import DEFAULT_THRESHOLDS
from slackpaste.models.structure import MessageBoundary
from slackpaste.parsing import header_extractors as H
from slackpaste.parsing.header_extractors import (
    HEADER_EXTRACTORS,
    extract_app_header,
    extract_bare_username,
    extract_last_resort,
    extract_linked_timestamp,
    extract_name_bare_time,
    extract_role_tag,
    extract_user_and_time,
    infer_author,
    scan_header,
)

LINK = "https://acme.slack.com/archives/C1/p1700000000"


class TestExtractors:
    """Each extractor is a pure function of one line."""

    def test_app_header(self):
        match = extract_app_header("(https://acme.slack.com/services/B01)Clay APP  Jun 8th at 6:28 PM", DEFAULT_THRESHOLDS)
        assert match.username == "Clay"
        assert match.timestamp == "Jun 8th at 6:28 PM"

    def test_role_tag_has_no_author(self):
        match = extract_role_tag("New hire  6:10 PM", DEFAULT_THRESHOLDS)
        assert match.username is None
        assert match.timestamp == "6:10 PM"
        assert match.role_tag is True

    def test_role_tag_after_name(self):
        match = extract_role_tag("Jane Doe  Guest  6:10 PM", DEFAULT_THRESHOLDS)
        assert match.username == "Jane Doe"
        assert match.role_tag is True

    def test_doubled_linked(self):
        match = extract_linked_timestamp(f"Alex MittellAlex Mittell  [2:45 PM]({LINK}) hello", DEFAULT_THRESHOLDS)
        assert match.username == "Alex Mittell"
        assert match.timestamp == "2:45 PM"
        assert match.remainder == "hello"

    def test_single_linked(self):
        match = extract_linked_timestamp(f"Jane Smith  [9:15 AM]({LINK})", DEFAULT_THRESHOLDS)
        assert match.username == "Jane Smith"
        assert match.remainder == ""

    def test_name_bare_time(self):
        match = extract_name_bare_time("Jane Smith  9:15 AM", DEFAULT_THRESHOLDS)
        assert match.username == "Jane Smith"
        assert match.timestamp == "9:15 AM"

    def test_name_bare_time_rejects_date_words(self):
        assert extract_name_bare_time("Today at 9:15 AM", DEFAULT_THRESHOLDS) is None

    def test_bare_username(self):
        assert extract_bare_username("Alice Johnson", DEFAULT_THRESHOLDS).username == "Alice Johnson"
        assert extract_bare_username("10:30 AM", DEFAULT_THRESHOLDS) is None

    def test_last_resort(self):
        match = extract_last_resort("Deploybot 3:30 PM", DEFAULT_THRESHOLDS)
        assert match.username == "Deploybot"
        assert match.timestamp == "3:30 PM"

    def test_last_resort_rejects_sentence_opener(self):
        assert extract_last_resort("The deploy finished at 3:30 PM", DEFAULT_THRESHOLDS) is None
        assert extract_last_resort("thanks 3:30 PM", DEFAULT_THRESHOLDS) is None


class TestExtractionChain:
    def test_priority_order(self):
        assert [name for name, _ in HEADER_EXTRACTORS] == [
            "app", "role_tag", "linked_timestamp", "name_bare_time",
            "doubled_then_timestamp", "app_marker", "bare_username", "last_resort",
        ]

    @pytest.mark.parametrize("text,author,extractor", [
        ("(https://acme.slack.com/services/B01)Clay", "Clay", "app"),
        ("New hire  6:10 PM", None, "role_tag"),
        (f"Alex MittellAlex Mittell [2:45 PM]({LINK})", "Alex Mittell", "linked_timestamp"),
        ("Jane Smith  9:15 AM", "Jane Smith", "name_bare_time"),
        ("Alice Johnson", "Alice Johnson", "bare_username"),
    ])
    def test_first_hit_wins(self, text, author, extractor):
        match = extract_user_and_time(text)
        assert match.username == author
        assert match.extractor == extractor

    def test_no_header(self):
        assert extract_user_and_time("just chatting about lunch") is None
        assert extract_user_and_time("The deploy finished at 3:30 today") is None
        assert extract_user_and_time("") is None

    def test_failing_extractor_is_skipped(self, monkeypatch):
        def boom(text, thresholds):
            raise RuntimeError("boom")

        chain = [("broken", boom)] + list(H.HEADER_EXTRACTORS)
        monkeypatch.setattr(H, "HEADER_EXTRACTORS", chain)

        match = extract_user_and_time("Jane Smith  9:15 AM")
        assert match.username == "Jane Smith"


class TestScanHeader:
    """Header scan across the first lines of a boundary."""

    def test_two_line_header(self, records_for, dm_paste):
        records = records_for(dm_paste)
        header = scan_header(records, MessageBoundary(0, 3))

        assert header.username == "Alice Johnson"
        assert header.timestamp == "10:30 AM"
        assert header.content_start == 2

    def test_single_line_header_with_remainder(self, records_for):
        records = records_for(["Alex MittellAlex Mittell [2:45 PM] hello"])
        header = scan_header(records, MessageBoundary(0, 0))

        assert header.username == "Alex Mittell"
        assert header.remainder == "hello"
        assert header.content_start == 1

    def test_role_tag_followed_by_name(self, records_for):
        records = records_for(["New hire  6:10 PM", "Jane Doe", "hello everyone"])
        header = scan_header(records, MessageBoundary(0, 2))

        assert header.username == "Jane Doe"
        assert header.timestamp == "6:10 PM"
        assert header.content_start == 2

    def test_section_header_has_no_header(self, records_for):
        records = records_for(["#CONTEXT#", "Background for the release"])
        header = scan_header(records, MessageBoundary(0, 1))

        assert header.section_header is True
        assert header.username is None
        assert header.content_start == 0

    def test_skips_date_separator(self, records_for, dated_paste):
        records = records_for(dated_paste)
        header = scan_header(records, MessageBoundary(0, 2))

        assert header.username == "Alice Johnson"
        assert header.content_start == 2

    def test_headless_body(self, records_for):
        records = records_for(["just some text", "more text"])
        header = scan_header(records, MessageBoundary(0, 1))

        assert header.username is None
        assert header.content_start == 0

    def test_infer_author(self, records_for, continuation_paste):
        records = records_for(continuation_paste)
        assert infer_author(records, MessageBoundary(4, 5)) == "User Two"
