"""
Unit tests for the blacklist/whitelist word filter.
"""

import pytest

from chatcal.processors.message_filter import DEFAULT_BLACKLIST, MessageFilter, should_process
from tests.fixtures.sample_data import SAMPLE_FILTERED_MESSAGES


class TestMessageFilter:
    """Test suite for MessageFilter"""

    def test_defaults(self):
        message_filter = MessageFilter()

        assert message_filter.blacklist == list(DEFAULT_BLACKLIST)
        assert message_filter.whitelist == []

    @pytest.mark.parametrize("text", SAMPLE_FILTERED_MESSAGES)
    def test_default_blacklist_skips(self, text):
        assert MessageFilter().should_process(text) is False

    def test_unlisted_message_passes(self):
        assert MessageFilter().should_process("Team meeting tmr 3pm") is True

    def test_whitelist_overrides_blacklist(self):
        message_filter = MessageFilter(blacklist=["now"], whitelist=["urgent"])

        assert message_filter.should_process("URGENT: call now 3pm") is True
        assert message_filter.should_process("call now 3pm") is False

    def test_words_are_normalized(self):
        message_filter = MessageFilter(blacklist=["  Lunch ", ""], whitelist=["VIP"])

        assert message_filter.blacklist == ["lunch"]
        assert message_filter.whitelist == ["vip"]

    def test_substring_match(self):
        """Test that list words match inside longer words"""
        assert MessageFilter(blacklist=["now"]).blacklisted_word("I know 3pm works") == "now"

    def test_toggle(self):
        message_filter = MessageFilter()

        assert message_filter.toggle("Lunch") is True
        assert "lunch" in message_filter.blacklist
        assert message_filter.toggle("lunch") is False
        assert "lunch" not in message_filter.blacklist

        assert message_filter.toggle("vip", "whitelist") is True
        assert message_filter.whitelist == ["vip"]

    def test_toggle_unknown_list(self):
        with pytest.raises(ValueError):
            MessageFilter().toggle("x", "greylist")


class TestShouldProcess:
    """Test suite for the module-level helper"""

    def test_default_blacklist(self):
        assert should_process("call now") is False

    def test_explicit_empty_blacklist(self):
        assert should_process("call now", blacklist=[]) is True

    def test_whitelist(self):
        assert should_process("call now re: standup", blacklist=["now"], whitelist=["standup"]) is True
