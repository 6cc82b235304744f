"""Unit tests for NewsItem."""

import pytest

from flash_news_bot.models import NewsItem


class TestNewsItemUnit:
    """Unit tests for NewsItem."""

    def test_from_raw_full_entry(self):
        item = NewsItem.from_raw(
            {"id": "n1", "title": "Title", "content": "Body", "level": 1, "extra": 9}
        )

        assert item == NewsItem(id="n1", title="Title", content="Body", level=1)

    @pytest.mark.parametrize(
        "entry",
        [None, "x", 3, [], {}, {"id": None}, {"id": ""}, {"id": 0}, {"id": True},
         {"id": [1]}, {"id": {"a": 1}}],
    )
    def test_from_raw_rejects_unusable_entries(self, entry):
        assert NewsItem.from_raw(entry) is None

    def test_display_text_prefers_title(self):
        assert NewsItem(id=1, title="T", content="C").display_text == "T"

    def test_display_text_falls_back_to_content(self):
        assert NewsItem(id=1, title="", content="C").display_text == "C"
        assert NewsItem(id=1, content="C").display_text == "C"

    def test_display_text_empty(self):
        assert NewsItem(id=1).display_text == ""

    def test_non_string_text_fields_are_dropped(self):
        item = NewsItem.from_raw({"id": 1, "title": 5, "content": ["x"]})

        assert item.title is None
        assert item.content is None
        assert item.display_text == ""

    @pytest.mark.parametrize(
        "level,expected",
        [(1, True), (2.5, True), (0, False), (-1, False), (None, False),
         ("1", False), (True, False)],
    )
    def test_is_important(self, level, expected):
        assert NewsItem(id=1, level=level).is_important is expected
