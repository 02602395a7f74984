"""
Unit tests for whole-document pattern identification (Stage 2).
"""
from slackpaste.parsing.pattern_identifier import (
    average_message_length,
    common_usernames,
    identify_patterns,
    timestamp_formats,
)


class TestIdentifyPatterns:
    """Candidate index lists."""

    def test_continuation_paste(self, records_for, continuation_paste):
        patterns = identify_patterns(records_for(continuation_paste))

        assert patterns.message_starts == (0, 2, 4)
        assert patterns.timestamps == (0, 2, 4)
        assert patterns.average_message_length == 2
        assert patterns.date_headers == ()

    def test_date_headers_are_not_starts(self, records_for, dated_paste):
        patterns = identify_patterns(records_for(dated_paste))

        assert patterns.date_headers == (0,)
        assert 0 not in patterns.message_starts
        assert 1 in patterns.message_starts

    def test_metadata_lines(self, records_for, thread_paste):
        patterns = identify_patterns(records_for(thread_paste))
        assert 2 in patterns.metadata

    def test_empty_document(self, records_for):
        patterns = identify_patterns(records_for(""))
        assert patterns.message_starts == ()
        assert patterns.average_message_length == 0


class TestStatistics:
    def test_average_message_length(self, records_for):
        records = records_for(["a", "b", "", "c", "d", "e"])
        assert average_message_length(records, [0, 3]) == 2
        assert average_message_length(records, []) == 0

    def test_common_usernames_need_two_occurrences(self, records_for):
        records = records_for([
            "Alice Johnson  9:00 AM",
            "Morning all",
            "Bob Lee  9:05 AM",
            "Hi Alice",
            "Alice Johnson  9:10 AM",
            "Standup in five",
        ])
        assert common_usernames(records, [0, 2, 4]) == ["Alice Johnson"]

    def test_timestamp_formats_mask_digits(self, records_for):
        records = records_for([
            "Alice [2:45 PM](https://acme.slack.com/archives/C1/p1)",
            "hi",
            "Bob  10:30 AM",
            "Carol  11:15 AM",
        ])
        assert timestamp_formats(records, [0, 2, 3]) == ["[0:00 PM](url)", "00:00 AM"]
