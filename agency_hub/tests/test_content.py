"""Tests for AI content generation and the Resend mailer."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from agency_hub.tests.conftest import make_completion


class TestGenerateContent:
    def test_text_defaults(self):
        from agency_hub.services.content import generate_content

        openai = MagicMock()
        openai.chat.completions.create.return_value = make_completion("Fresh copy")

        assert generate_content(openai, "Write a tagline") == "Fresh copy"
        kwargs = openai.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["max_tokens"] == 2000
        assert kwargs["temperature"] == 0.7

    def test_writer_prompt_uses_type_and_tone(self):
        from agency_hub.services.content import generate_content

        openai = MagicMock()
        openai.chat.completions.create.return_value = make_completion("ok")

        generate_content(openai, "Spring sale", content_type="blog_post", tone="playful")

        system = openai.chat.completions.create.call_args.kwargs["messages"][0]["content"]
        assert "professional blog post writer" in system
        assert "playful tone" in system

    def test_image_returns_url(self):
        from agency_hub.services.content import generate_content

        openai = MagicMock()
        openai.images.generate.return_value = SimpleNamespace(
            data=[SimpleNamespace(url="https://img.example/1.png")])

        assert generate_content(openai, "A logo", model="dall-e-3") == "https://img.example/1.png"
        openai.chat.completions.create.assert_not_called()

    def test_video_placeholder_without_api_call(self):
        from agency_hub.services.content import VIDEO_PLACEHOLDER, generate_content

        assert generate_content(None, "A clip", model="sora") == VIDEO_PLACEHOLDER

    def test_no_client_raises(self):
        from agency_hub.services.content import generate_content

        with pytest.raises(RuntimeError):
            generate_content(None, "Write something")

    @pytest.mark.parametrize("model,expected", [
        ("dall-e-3", "image"), ("sora", "video"), ("gpt-4o", "text"), (None, "text"),
    ])
    def test_generation_type(self, model, expected):
        from agency_hub.services.content import generation_type

        assert generation_type(model) == expected


class TestResendMailer:
    def test_sends_with_sender_name(self):
        from agency_hub.services.mailer import ResendMailer

        mailer = ResendMailer("re_key", "reports@agency.example", "Agency")
        with patch("resend.Emails.send", return_value={"id": "msg-1"}) as send:
            assert mailer.send("client@example.com", "Hello", "<p>hi</p>") == "msg-1"

        payload = send.call_args.args[0]
        assert payload["from"] == "Agency <reports@agency.example>"
        assert payload["to"] == ["client@example.com"]

    def test_missing_key_raises(self):
        from agency_hub.services.mailer import ResendMailer

        with pytest.raises(RuntimeError):
            ResendMailer("", "reports@agency.example").send("a@b.example", "s", "h")

    def test_sdk_error_propagates(self):
        from agency_hub.services.mailer import ResendMailer

        mailer = ResendMailer("re_key", "reports@agency.example")
        with patch("resend.Emails.send", side_effect=ValueError("rejected")):
            with pytest.raises(ValueError):
                mailer.send("a@b.example", "s", "h")
