"""Unit tests for the flash news FeedFetcher."""

from unittest.mock import Mock, patch

import pytest
import requests

from flash_news_bot.config import FeedConfig
from flash_news_bot.feed import FeedFetcher, FeedFetchError, extract_news_list
from flash_news_bot.models import NewsItem

FEED_URL = "https://news.example.com/get-flash-list?pageSize=30"


def make_response(payload=None, status_code=200, json_error=None):
    response = Mock()
    response.status_code = status_code
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Server Error"
        )
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


def news_payload(entries):
    return {"code": 0, "data": {"data": {"news": entries}}}


class TestFeedFetcherUnit:
    """Unit tests for FeedFetcher."""

    def setup_method(self):
        self.fetcher = FeedFetcher(FeedConfig(url=FEED_URL))

    def test_request_has_timestamp_and_timeout(self):
        self.fetcher.session.get = Mock(return_value=make_response(news_payload([])))

        with patch("flash_news_bot.feed.time.time", return_value=1700000000.5):
            self.fetcher.fetch()

        self.fetcher.session.get.assert_called_once_with(
            FEED_URL, params={"_t": 1700000000500}, timeout=10.0
        )

    def test_entries_are_reversed(self):
        entries = [{"id": 1, "title": "A"}, {"id": 2, "title": "B"}]
        self.fetcher.session.get = Mock(return_value=make_response(news_payload(entries)))

        items = self.fetcher.fetch()

        assert [item.id for item in items] == [2, 1]
        assert [item.title for item in items] == ["B", "A"]
        assert all(isinstance(item, NewsItem) for item in items)

    def test_entries_without_id_are_skipped(self):
        entries = [{"title": "no id"}, {"id": "", "title": "empty"}, "junk", {"id": "x"}]
        self.fetcher.session.get = Mock(return_value=make_response(news_payload(entries)))

        items = self.fetcher.fetch()

        assert [item.id for item in items] == ["x"]

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            None,
            [],
            {"data": None},
            {"data": {"data": {}}},
            {"data": {"data": {"news": None}}},
            {"data": {"data": {"news": "not a list"}}},
            {"data": ["wrong"]},
        ],
    )
    def test_malformed_payload_yields_empty(self, payload):
        self.fetcher.session.get = Mock(return_value=make_response(payload))

        assert self.fetcher.fetch() == []

    def test_network_error_raises_fetch_error(self):
        self.fetcher.session.get = Mock(
            side_effect=requests.ConnectionError("connection refused")
        )

        with pytest.raises(FeedFetchError, match="connection refused"):
            self.fetcher.fetch()

    def test_timeout_raises_fetch_error(self):
        self.fetcher.session.get = Mock(side_effect=requests.Timeout("timed out"))

        with pytest.raises(FeedFetchError):
            self.fetcher.fetch()

    def test_non_2xx_raises_fetch_error(self):
        self.fetcher.session.get = Mock(return_value=make_response(status_code=503))

        with pytest.raises(FeedFetchError, match="503"):
            self.fetcher.fetch()

    def test_invalid_json_raises_fetch_error(self):
        self.fetcher.session.get = Mock(
            return_value=make_response(json_error=ValueError("Expecting value"))
        )

        with pytest.raises(FeedFetchError, match="Invalid JSON"):
            self.fetcher.fetch()

    def test_extract_news_list(self):
        entries = [{"id": 1}]

        assert extract_news_list(news_payload(entries)) is entries
        assert extract_news_list({"data": {"news": entries}}) == []
