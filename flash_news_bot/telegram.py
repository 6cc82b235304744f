"""Telegram notifier for Flash News Bot."""

import json
import threading
import urllib.error
import urllib.request
from concurrent.futures import Future

from .config import TelegramConfig
from .logging_config import create_execution_logger
from .models import NewsItem

ALERT_PREFIX = "🚨 "
MARKDOWN_SPECIAL_CHARS = ("*", "_", "[", "]", "`")


def escape_markdown(text: str | None) -> str:
    """
    Escape Telegram legacy Markdown characters.

    Args:
        text: Text to escape

    Returns:
        Text with every ``*``, ``_``, ``[``, ``]`` and backtick prefixed by a
        backslash
    """
    if not text:
        return ""

    for char in MARKDOWN_SPECIAL_CHARS:
        text = text.replace(char, "\\" + char)

    return text


def clean_title(text: str | None) -> str:
    """Flatten newlines and trim surrounding whitespace."""
    if not text:
        return ""
    return text.replace("\n", " ").strip()


class TelegramNotifier:
    """Formats news items and pushes them to a Telegram chat."""

    def __init__(self, config: TelegramConfig, execution_id: str | None = None):
        """Initialize Telegram notifier with configuration."""
        self.config = config
        self.logger = create_execution_logger("telegram_notifier", execution_id)
        self.base_url = f"https://api.telegram.org/bot{config.bot_token}"
        self._threads: list[threading.Thread] = []

        self.logger.info(
            "TelegramNotifier initialized",
            chat_id=config.chat_id,
            parse_mode=config.parse_mode,
            has_credentials=config.has_credentials,
        )

    def format_message(self, item: NewsItem) -> str:
        """
        Format a news item as a bold Markdown message.

        Args:
            item: The news item to format

        Returns:
            Formatted Markdown message
        """
        safe_title = escape_markdown(clean_title(item.display_text))
        prefix = ALERT_PREFIX if item.is_important else ""
        return f"{prefix}*{safe_title}*"

    def dispatch(self, item: NewsItem) -> Future:
        """
        Send a news item in the background.

        Each send runs on its own daemon thread, so every send of a cycle is
        in flight at once and none of them holds up process exit. The
        returned future is only observed for logging; callers are not
        expected to wait on it.

        Args:
            item: The news item to send

        Returns:
            Future resolving to the send result
        """
        message = self.format_message(item)
        title = clean_title(item.display_text)

        future: Future = Future()
        future.add_done_callback(self._log_unexpected_failure)
        thread = threading.Thread(
            target=self._run_send,
            args=(future, message, title),
            name="telegram-send",
            daemon=True,
        )
        self._threads = [t for t in self._threads if t.is_alive()]
        self._threads.append(thread)
        thread.start()
        return future

    @property
    def in_flight(self) -> int:
        return sum(1 for thread in self._threads if thread.is_alive())

    def send_message(self, message: str, title: str = "") -> bool:
        """
        Send a formatted message to Telegram.

        Args:
            message: Markdown text to send
            title: Plain title used in log lines

        Returns:
            True if message was sent successfully, False otherwise
        """
        if not self.config.has_credentials:
            self.logger.error(
                "Telegram credentials missing, message not sent", item_title=title
            )
            return False

        url = f"{self.base_url}/sendMessage"
        data = {
            "chat_id": self.config.chat_id,
            "text": message,
            "parse_mode": self.config.parse_mode,
            "disable_web_page_preview": self.config.disable_web_page_preview,
        }

        req = urllib.request.Request(
            url,
            data=json.dumps(data).encode("utf-8"),
            headers={
                "Content-Type": "application/json",
                "User-Agent": "Flash-News-Bot/1.0",
            },
        )

        try:
            with urllib.request.urlopen(req, timeout=self.config.timeout) as response:
                if 200 <= response.status < 300:
                    self.logger.debug(
                        "Message sent to Telegram",
                        item_title=title,
                        status_code=response.status,
                    )
                    return True
                self.logger.error(
                    f"Telegram API returned status {response.status} ({title})",
                    item_title=title,
                    status_code=response.status,
                )
                return False

        except urllib.error.HTTPError as e:
            payload = self._read_error_payload(e)
            self.logger.error(
                f"Telegram push failed ({title}): {payload}",
                item_title=title,
                http_code=e.code,
            )
            return False

        except urllib.error.URLError as e:
            self.logger.error(
                f"Telegram push failed ({title}): {e.reason}",
                item_title=title,
                error_reason=str(e.reason),
            )
            return False

        except Exception as e:
            self.logger.error(
                f"Unexpected error sending message ({title}): {e}",
                item_title=title,
                error=str(e),
            )
            return False

    def shutdown(self) -> None:
        """Log sends still in flight; they are abandoned when the process exits."""
        pending = self.in_flight
        if pending:
            self.logger.warning(
                f"Exiting with {pending} Telegram sends still in flight",
                pending=pending,
            )

    def _run_send(self, future: Future, message: str, title: str) -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            future.set_result(self.send_message(message, title))
        except Exception as e:
            future.set_exception(e)

    def _read_error_payload(self, error: urllib.error.HTTPError) -> str:
        try:
            body = error.read()
        except Exception:
            body = b""
        if body:
            return body.decode("utf-8", errors="replace")
        return f"{error.code} {error.reason}"

    def _log_unexpected_failure(self, future: Future) -> None:
        error = future.exception()
        if error is not None:
            self.logger.error(f"Telegram send raised: {error}", error=str(error))
