"""Property-based tests for the Telegram notifier."""

from unittest.mock import patch

from hypothesis import given
from hypothesis import strategies as st

from flash_news_bot.config import TelegramConfig
from flash_news_bot.models import NewsItem
from flash_news_bot.telegram import (
    ALERT_PREFIX,
    MARKDOWN_SPECIAL_CHARS,
    TelegramNotifier,
    escape_markdown,
)


def unescape(text: str) -> str:
    for char in MARKDOWN_SPECIAL_CHARS:
        text = text.replace("\\" + char, char)
    return text


class TestTelegramNotifierProperties:
    """Property-based tests for TelegramNotifier."""

    def setup_method(self):
        """Set up test configuration."""
        self.notifier = TelegramNotifier(
            TelegramConfig(bot_token="test_token", chat_id="test_chat_id")
        )

    def teardown_method(self):
        self.notifier.shutdown()

    @given(st.text(alphabet=st.characters(exclude_characters="\\")))
    def test_every_special_char_gets_one_backslash(self, text):
        """
        For any text, each Markdown special character is preceded by exactly
        one backslash and every other character is kept as is.
        """
        escaped = escape_markdown(text)

        special_count = sum(text.count(char) for char in MARKDOWN_SPECIAL_CHARS)
        assert len(escaped) == len(text) + special_count
        assert escaped.count("\\") == special_count
        assert unescape(escaped) == text

        for index, char in enumerate(escaped):
            if char in MARKDOWN_SPECIAL_CHARS:
                assert escaped[index - 1] == "\\"

    @given(st.text(min_size=1, max_size=200), st.one_of(st.none(), st.integers()))
    def test_message_is_bold_single_line(self, title, level):
        """For any item, the message is one bold line with an optional alert."""
        item = NewsItem(id=1, title=title, level=level)

        message = self.notifier.format_message(item)

        important = level is not None and level > 0
        body = message[len(ALERT_PREFIX):] if important else message
        assert message.startswith(ALERT_PREFIX) is important
        assert body.startswith("*") and body.endswith("*")
        assert "\n" not in message

    @given(st.text(min_size=1, max_size=50))
    def test_no_http_without_credentials(self, title):
        """With credentials unset, every send is a logged no-op."""
        notifier = TelegramNotifier(TelegramConfig(bot_token="", chat_id=""))
        try:
            with patch("urllib.request.urlopen") as mock_urlopen:
                result = notifier.send_message(f"*{title}*", title)

            assert result is False
            mock_urlopen.assert_not_called()
        finally:
            notifier.shutdown()
