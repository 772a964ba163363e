"""Tests for the chatbot — fallback replies, OpenAI calls, sentiment scoring."""

import json
from unittest.mock import MagicMock

import pytest

from agency_hub.tests.conftest import make_completion


class TestSmartFallback:
    # Each message matches two neighbouring rules; the earlier rule must win.
    @pytest.mark.parametrize("message,rule_index", [
        ("how much is seo", 0),               # seo over price
        ("price of a google listing", 1),     # price over google
        ("google my website", 2),             # google over website
        ("google ads", 2),                    # google over ppc
        ("website and facebook page", 3),     # website over social
        ("instagram ads", 4),                 # social over ppc
        ("ads for my chatbot", 5),            # ppc over ai
        ("email me", 6),                      # "ai" inside "email" beats contact
        ("virtual receptionist phone", 6),    # ai over contact
        ("please call back", 7),              # contact over default
    ])
    def test_rule_order(self, message, rule_index):
        from agency_hub.services.chatbot import FALLBACK_RULES, generate_smart_fallback

        assert generate_smart_fallback(message) == FALLBACK_RULES[rule_index][1]

    def test_rule_sequence(self):
        from agency_hub.services.chatbot import FALLBACK_RULES

        assert [keywords[0] for keywords, _ in FALLBACK_RULES] == [
            "seo", "price", "google", "website", "social media", "ppc", "virtual assistant", "contact",
        ]

    def test_seo_wins_over_price(self):
        from agency_hub.services.chatbot import generate_smart_fallback

        reply = generate_smart_fallback("How much does SEO cost?")
        assert "SEO services start from $220/month" in reply

    def test_price_list(self):
        from agency_hub.services.chatbot import generate_smart_fallback

        reply = generate_smart_fallback("what are your prices")
        assert reply.startswith("Here are our service prices")

    def test_case_insensitive(self):
        from agency_hub.services.chatbot import generate_smart_fallback

        reply = generate_smart_fallback("I NEED INSTAGRAM HELP")
        assert "Social Media Campaign service" in reply

    def test_google_listing(self):
        from agency_hub.services.chatbot import generate_smart_fallback

        assert "Google My Business" in generate_smart_fallback("Can you fix my Google listing?")

    def test_website(self):
        from agency_hub.services.chatbot import generate_smart_fallback

        assert "custom websites" in generate_smart_fallback("I need a website built")

    def test_contact_details(self):
        from agency_hub.services.chatbot import generate_smart_fallback

        reply = generate_smart_fallback("what's your phone number")
        assert reply.startswith("You can reach")

    def test_default_reply(self):
        from agency_hub.services.chatbot import DEFAULT_FALLBACK, generate_smart_fallback

        assert generate_smart_fallback("hello there") == DEFAULT_FALLBACK

    def test_empty_message(self):
        from agency_hub.services.chatbot import DEFAULT_FALLBACK, generate_smart_fallback

        assert generate_smart_fallback("") == DEFAULT_FALLBACK


class TestGenerateResponse:
    def test_uses_completion(self):
        from agency_hub.services.chatbot import ChatResponder

        openai = MagicMock()
        openai.chat.completions.create.return_value = make_completion("Happy to help!")

        assert ChatResponder(openai).generate_response("hi") == "Happy to help!"

    def test_sampling_parameters(self):
        from agency_hub.services.chatbot import ChatResponder

        openai = MagicMock()
        openai.chat.completions.create.return_value = make_completion("ok")

        ChatResponder(openai, model="gpt-4o").generate_response("hi")

        kwargs = openai.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["temperature"] == 0.8
        assert kwargs["max_tokens"] == 800

    def test_history_between_system_and_message(self):
        from agency_hub.services.chatbot import SYSTEM_PROMPT, ChatResponder

        messages = ChatResponder().build_messages("and PPC?", [
            {"role": "user", "content": "Tell me about SEO"},
            {"role": "assistant", "content": "Sure"},
        ])

        assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert [m["content"] for m in messages[1:]] == ["Tell me about SEO", "Sure", "and PPC?"]

    def test_api_error_falls_back(self):
        from agency_hub.services.chatbot import ChatResponder, generate_smart_fallback

        openai = MagicMock()
        openai.chat.completions.create.side_effect = RuntimeError("quota exceeded")

        reply = ChatResponder(openai).generate_response("seo please")
        assert reply == generate_smart_fallback("seo please")

    def test_empty_completion_falls_back(self):
        from agency_hub.services.chatbot import ChatResponder, generate_smart_fallback

        openai = MagicMock()
        openai.chat.completions.create.return_value = make_completion(None)

        assert ChatResponder(openai).generate_response("ppc") == generate_smart_fallback("ppc")

    def test_no_client_falls_back(self):
        from agency_hub.services.chatbot import ChatResponder, generate_smart_fallback

        assert ChatResponder(None).generate_response("call me") == generate_smart_fallback("call me")


class TestAnalyzeSentiment:
    def _score(self, content):
        from agency_hub.services.chatbot import ChatResponder

        openai = MagicMock()
        openai.chat.completions.create.return_value = make_completion(content)
        return ChatResponder(openai).analyze_sentiment("Great service!")

    def test_requests_json_mode(self):
        from agency_hub.services.chatbot import ChatResponder

        openai = MagicMock()
        openai.chat.completions.create.return_value = make_completion('{"rating": 4, "confidence": 0.9}')

        ChatResponder(openai).analyze_sentiment("nice")

        kwargs = openai.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}

    def test_valid_result(self):
        assert self._score('{"rating": 4, "confidence": 0.9}') == {"rating": 4, "confidence": 0.9}

    def test_rounds_half_up(self):
        assert self._score('{"rating": 3.5, "confidence": 0.7}')["rating"] == 4
        assert self._score('{"rating": 2.4, "confidence": 0.7}')["rating"] == 2

    @pytest.mark.parametrize("rating,expected", [(9, 5), (0, 1), (-3, 1), (5.7, 5)])
    def test_clamps_rating(self, rating, expected):
        assert self._score(json.dumps({"rating": rating, "confidence": 0.5}))["rating"] == expected

    def test_clamps_confidence(self):
        assert self._score('{"rating": 3, "confidence": 1.8}')["confidence"] == 1.0
        assert self._score('{"rating": 3, "confidence": -0.2}')["confidence"] == 0.0

    def test_numeric_strings_accepted(self):
        assert self._score('{"rating": "5", "confidence": "0.8"}') == {"rating": 5, "confidence": 0.8}

    @pytest.mark.parametrize("content", [
        "not json",
        "[1, 2]",
        '{"rating": "great", "confidence": 0.9}',
        '{"confidence": 0.9}',
        '{"rating": true, "confidence": 0.9}',
        "",
    ])
    def test_malformed_returns_default(self, content):
        assert self._score(content) == {"rating": 3, "confidence": 0.5}

    def test_api_error_returns_default(self):
        from agency_hub.services.chatbot import ChatResponder

        openai = MagicMock()
        openai.chat.completions.create.side_effect = RuntimeError("timeout")

        assert ChatResponder(openai).analyze_sentiment("hmm") == {"rating": 3, "confidence": 0.5}

    def test_no_client_returns_default(self):
        from agency_hub.services.chatbot import ChatResponder

        assert ChatResponder(None).analyze_sentiment("hmm") == {"rating": 3, "confidence": 0.5}

    def test_default_not_shared(self):
        from agency_hub.services.chatbot import DEFAULT_SENTIMENT, ChatResponder

        ChatResponder(None).analyze_sentiment("x")["rating"] = 1
        assert DEFAULT_SENTIMENT["rating"] == 3


class TestCreateOpenAIClient:
    def test_none_without_key(self, monkeypatch):
        from agency_hub.services import chatbot

        monkeypatch.setattr(chatbot, "OPENAI_API_KEY", "")
        assert chatbot.create_openai_client() is None
