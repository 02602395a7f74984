"""
Shared test fixtures for the parser test suite.
"""
import pytest

from slackpaste.models.settings import DEFAULT_THRESHOLDS, ParserSettings
from slackpaste.parsing.line_classifier import classify_lines, split_lines
from slackpaste.parsing.pipeline import MessageParser, analyze_structure


# ==========================================================================
# Sample pastes
# ==========================================================================

CONTINUATION_PASTE = "\n".join([
    "User One  10:30 AM",
    "First message",
    "10:31 AM",
    "Continuation of first message",
    "User Two  10:35 AM",
    "Second message",
])

DM_PASTE = "\n".join([
    "Alice Johnson",
    "10:30 AM",
    "Hey, are you around?",
    "",
    "Bob Lee",
    "10:32 AM",
    "Yes, what's up?",
])

REACTION_PASTE = "\n".join([
    "User One  10:30 AM",
    "Nice work",
    ":+1: 3",
])

ROLE_TAG_PASTE = "\n".join([
    "Jane Doe  6:00 PM",
    "Welcome aboard",
    "New hire  6:10 PM",
    "Thanks for having me here everyone",
])

APP_PASTE = "\n".join([
    "(https://acme.slack.com/services/B01)Deploybot",
    "APP  Jun 8th at 6:28 PM",
    "Deployment finished for api-server",
])

DATED_PASTE = "\n".join([
    "--- Today ---",
    "Alice Johnson  9:00 AM",
    "Morning all",
])

THREAD_PASTE = "\n".join([
    "Alice Johnson  9:00 AM",
    "Can someone review my PR?",
    "3 replies",
    "Bob Lee  9:05 AM",
    "replied to a thread: Can someone review my PR?",
    "Looks good to me",
])

DOUBLED_NAME_PASTE = "Alex MittellAlex Mittell [2:45 PM] hello"

CHAIN_PASTE = "\n".join([
    "Alice  10:00 AM",
    "thanks",
    "10:05 AM",
    "ok",
    "10:06 AM",
    "sure",
    "10:07 AM",
    "done",
    "Bob  10:10 AM",
    "yo there",
])

INLINE_TIME_PASTE = "\n".join([
    "Bob Smith  9:00 AM",
    "The deploy finished at 3:30 today",
    "looks fine",
])


@pytest.fixture
def continuation_paste():
    return CONTINUATION_PASTE


@pytest.fixture
def dm_paste():
    return DM_PASTE


@pytest.fixture
def reaction_paste():
    return REACTION_PASTE


@pytest.fixture
def role_tag_paste():
    return ROLE_TAG_PASTE


@pytest.fixture
def app_paste():
    return APP_PASTE


@pytest.fixture
def dated_paste():
    return DATED_PASTE


@pytest.fixture
def thread_paste():
    return THREAD_PASTE


@pytest.fixture
def chain_paste():
    return CHAIN_PASTE


@pytest.fixture
def inline_time_paste():
    return INLINE_TIME_PASTE


@pytest.fixture
def all_pastes():
    return [
        CONTINUATION_PASTE,
        DM_PASTE,
        REACTION_PASTE,
        ROLE_TAG_PASTE,
        APP_PASTE,
        DATED_PASTE,
        THREAD_PASTE,
        DOUBLED_NAME_PASTE,
        CHAIN_PASTE,
        INLINE_TIME_PASTE,
    ]


# ==========================================================================
# Parser objects
# ==========================================================================

@pytest.fixture
def thresholds():
    return DEFAULT_THRESHOLDS


@pytest.fixture
def empty_settings():
    return ParserSettings.empty()


@pytest.fixture
def parser():
    return MessageParser(cache_size=0)


@pytest.fixture
def cached_parser():
    return MessageParser(cache_size=2)


@pytest.fixture
def records_for():
    """Classify a list of lines (or a text block) into LineRecords."""
    def _records(lines):
        if isinstance(lines, str):
            lines = split_lines(lines)
        return classify_lines(lines)
    return _records


@pytest.fixture
def structure_for():
    return analyze_structure
