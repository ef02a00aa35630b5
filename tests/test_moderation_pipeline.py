"""Tests for the first-message moderation rules."""

import pytest

from chatmod.configuration.moderation_settings import ModerationSettings
from chatmod.datatypes.action_datatypes import SanctionKind
from chatmod.datatypes.chat_datatypes import ParsedMessage
from chatmod.moderation.moderation_pipeline import ModerationPipeline, contains_link, contains_zalgo


def make_message(body: str, sender: str = "spammer", channel: str = "#foo") -> ParsedMessage:
    return ParsedMessage(sender=sender, channel=channel, command_kind="PRIVMSG", body=body)


class TestRules:
    """Tests for the individual rule predicates."""

    @pytest.mark.parametrize(
        "text",
        [
            "check this http://x.com",
            "https://example.org/path?q=1",
            "mixed case HTTPS://Example.com",
            "ftp://files.example.net/x",
            "(see http://x.com)",
        ],
    )
    def test_links_detected(self, text):
        assert contains_link(text)

    @pytest.mark.parametrize(
        "text",
        [
            "hello there",
            "example.com without scheme",
            "http:// nothing",
            "time is 10:30",
            "",
        ],
    )
    def test_non_links(self, text):
        assert not contains_link(text)

    def test_zalgo_detected(self):
        assert contains_zalgo("he\u0300llo")
        assert contains_zalgo("\u036f")

    def test_zalgo_range_is_inclusive_only(self):
        assert not contains_zalgo("\u02ff\u0370")
        assert not contains_zalgo("plain text \u00e4\u00f6")


class TestModerationPipeline:
    """Tests for sanction emission."""

    @pytest.mark.asyncio
    async def test_link_from_unknown_sender_is_sanctioned(self, send):
        pipeline = ModerationPipeline(send)

        moderated = await pipeline.moderate(make_message("check this http://x.com"), known=False)

        assert moderated is True
        send.assert_awaited_once_with("#foo", "/timeout spammer 10 ei linkkejä")

    @pytest.mark.asyncio
    async def test_zalgo_from_unknown_sender_is_sanctioned(self, send):
        pipeline = ModerationPipeline(send)

        moderated = await pipeline.moderate(make_message("z\u0300a\u0301l\u0302g\u0303o"), known=False)

        assert moderated is True
        send.assert_awaited_once_with("#foo", "/timeout spammer 10 ei zalgoa")

    @pytest.mark.asyncio
    async def test_link_and_zalgo_produce_one_link_sanction(self, send):
        pipeline = ModerationPipeline(send)

        moderated = await pipeline.moderate(make_message("z\u0300algo http://x.com"), known=False)

        assert moderated is True
        assert send.await_count == 1
        assert "ei linkkejä" in send.await_args.args[1]

    @pytest.mark.asyncio
    async def test_clean_message_is_not_sanctioned(self, send):
        pipeline = ModerationPipeline(send)

        assert await pipeline.moderate(make_message("hello everyone"), known=False) is False
        send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_known_sender_bypasses_rules(self, send):
        pipeline = ModerationPipeline(send)

        moderated = await pipeline.moderate(make_message("z\u0300 http://x.com"), known=True)

        assert moderated is False
        send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_settings_control_duration_and_reason(self, send):
        settings = ModerationSettings({"timeout_seconds": 60, "link_reason": "no links"})
        pipeline = ModerationPipeline(send, settings)

        await pipeline.moderate(make_message("http://x.com"), known=False)

        send.assert_awaited_once_with("#foo", "/timeout spammer 60 no links")

    @pytest.mark.asyncio
    async def test_send_failure_propagates(self, send):
        send.side_effect = ConnectionError("closed")
        pipeline = ModerationPipeline(send)

        with pytest.raises(ConnectionError):
            await pipeline.moderate(make_message("http://x.com"), known=False)

    def test_evaluate_returns_action_without_sending(self, send):
        action = ModerationPipeline(send).evaluate(make_message("http://x.com"))

        assert action.kind is SanctionKind.LINKS
        assert action.sender == "spammer"
        assert action.channel == "#foo"
        send.assert_not_called()


class TestModerationSettings:
    """Tests for the moderation settings helper."""

    def test_defaults(self):
        settings = ModerationSettings()

        assert settings.timeout_seconds == 10
        assert settings.reason_for(SanctionKind.LINKS) == "ei linkkejä"
        assert settings.reason_for(SanctionKind.ZALGO) == "ei zalgoa"

    @pytest.mark.parametrize("value", ["abc", None, -5, 0])
    def test_bad_timeout_falls_back(self, value):
        assert ModerationSettings({"timeout_seconds": value}).timeout_seconds == 10

    def test_unknown_keys_reachable(self):
        assert ModerationSettings({"extra": 1}).get("extra") == 1
