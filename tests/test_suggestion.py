"""Tests for parsing generator output."""

import json

import pytest

from suggestion import Outcome, normalize_strategy, parse_chat_envelope, parse_suggestion, strip_fences

PAYLOAD = {
    "cards": [
        {"name": "Knight", "isEvolved": True, "isHero": False, "level": 14},
        {"name": "Archers", "isEvolved": False, "isHero": False, "level": 13},
    ],
    "strategy": "Cycle",
    "tactic": "Defend and counter-push.",
}


def _envelope(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class TestParseSuggestion:
    def test_plain_json(self):
        result = parse_suggestion(json.dumps(PAYLOAD))
        assert result.outcome is Outcome.OK
        assert [p.name for p in result.suggestion.cards] == ["Knight", "Archers"]
        assert result.suggestion.cards[0].requested_evolved is True
        assert result.suggestion.cards[0].requested_level == 14
        assert result.suggestion.strategy == "Cycle"
        assert result.suggestion.tactic == "Defend and counter-push."

    def test_code_fences_stripped(self):
        content = "```json\n" + json.dumps(PAYLOAD) + "\n```"
        assert parse_suggestion(content).ok

    def test_text_around_json(self):
        content = "Here is your deck:\n" + json.dumps(PAYLOAD) + "\nGood luck!"
        assert parse_suggestion(content).ok

    def test_not_json(self):
        assert parse_suggestion("I can't help with that").outcome is Outcome.MALFORMED

    def test_missing_cards_key(self):
        content = json.dumps({"strategy": "Cycle", "tactic": "x"})
        assert parse_suggestion(content).outcome is Outcome.MALFORMED

    def test_empty_card_list(self):
        content = json.dumps({"cards": [], "strategy": "Cycle", "tactic": "x"})
        assert parse_suggestion(content).outcome is Outcome.EMPTY

    def test_blank_content(self):
        assert parse_suggestion("  ```  ").outcome is Outcome.EMPTY

    def test_entries_without_name_skipped(self):
        content = json.dumps({"cards": [{"isEvolved": True}, {"name": "Knight"}, "junk"],
                              "strategy": "Cycle", "tactic": "x"})
        result = parse_suggestion(content)
        assert [p.name for p in result.suggestion.cards] == ["Knight"]

    def test_evolution_must_be_boolean_true(self):
        content = json.dumps({"cards": [{"name": "Knight", "isEvolved": "yes"}],
                              "strategy": "Cycle", "tactic": "x"})
        assert parse_suggestion(content).suggestion.cards[0].requested_evolved is False


class TestStrategy:
    def test_case_insensitive(self):
        assert normalize_strategy("bridge spam") == "Bridge Spam"

    @pytest.mark.parametrize("raw", ["Turbo", "  Log Bait  "])
    def test_unknown_label_kept_verbatim(self, raw):
        assert normalize_strategy(raw) == raw

    @pytest.mark.parametrize("raw", [None, 3])
    def test_non_string_is_blank(self, raw):
        assert normalize_strategy(raw) == ""

    def test_unknown_label_reaches_suggestion(self):
        content = json.dumps({"cards": [{"name": "Knight"}], "strategy": "Turbo Hog", "tactic": "x"})
        assert parse_suggestion(content).suggestion.strategy == "Turbo Hog"


class TestChatEnvelope:
    def test_success(self):
        assert parse_chat_envelope(_envelope(json.dumps(PAYLOAD))).ok

    def test_top_level_error(self):
        body = {"error": {"code": 429, "message": "rate limited"}}
        assert parse_chat_envelope(body).outcome is Outcome.UPSTREAM_ERROR

    def test_choice_error(self):
        body = {"choices": [{"error": {"message": "provider down"},
                             "message": {"content": json.dumps(PAYLOAD)}}]}
        assert parse_chat_envelope(body).outcome is Outcome.UPSTREAM_ERROR

    def test_no_choices(self):
        assert parse_chat_envelope({"choices": []}).outcome is Outcome.MALFORMED

    def test_empty_content(self):
        body = {"choices": [{"message": {"content": "", "reasoning": "thinking..."}}]}
        assert parse_chat_envelope(body).outcome is Outcome.EMPTY

    def test_fenced_content(self):
        assert parse_chat_envelope(_envelope("```json" + json.dumps(PAYLOAD) + "```")).ok


def test_strip_fences():
    assert strip_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
