"""Unit tests for mangascraper/extract.py field helpers."""

import asyncio
import math

import pytest

from mangascraper.errors import ExtractionFieldError
from mangascraper.extract import (
    RatingLayout,
    at,
    attribute_values,
    bucket_label,
    classify_buckets,
    extract_field,
    first,
    format_count,
    format_number,
    parse_rating,
    rating_percentage,
    to_number,
)


class TestParseRating:
    """Tests for parse_rating positional tokenization."""

    def test_compact_label(self):
        rating = parse_rating("4.3 / 5 (12,345 votes)", "MangaPark.net", RatingLayout(0, 2, 3))
        assert rating.rating_percentage == "86.00%"
        assert rating.rating_stars == "4.3 / 5"
        assert rating.vote_count == "12,345"
        assert rating.source_rating == "MangaPark.net"

    def test_default_layout(self):
        rating = parse_rating("Rating 4.5 / 5 out of 1024 total votes", "src")
        assert rating.rating_percentage == "90.00%"
        assert rating.rating_stars == "4.5 / 5"
        assert rating.vote_count == "1,024"

    def test_zero_denominator(self):
        rating = parse_rating("Rating 4 / 0 out of 3 total votes", "src")
        assert rating.rating_percentage == "NaN%"
        assert rating.rating_stars == "4 / 0"

    def test_non_numeric_denominator(self):
        rating = parse_rating("Rating 4 / ? out of 3 total votes", "src")
        assert rating.rating_percentage == "NaN%"
        assert rating.rating_stars == "4 / NaN"

    def test_empty_label(self):
        rating = parse_rating("", "src")
        assert rating.rating_percentage == "NaN%"
        assert rating.rating_stars == "NaN / NaN"
        assert rating.vote_count == "NaN"


class TestNumbers:
    """Tests for numeric token helpers."""

    def test_to_number(self):
        assert to_number("4.3") == 4.3
        assert to_number("(12,345") == 12345
        assert to_number("votes)") != to_number("votes)")  # NaN
        assert math.isnan(to_number(None))

    def test_format_number(self):
        assert format_number(5.0) == "5"
        assert format_number(4.3) == "4.3"
        assert format_number(math.nan) == "NaN"

    def test_format_count(self):
        assert format_count(12345.0) == "12,345"
        assert format_count(999.0) == "999"
        assert format_count(math.nan) == "NaN"

    def test_rating_percentage(self):
        assert rating_percentage(1, 3) == "33.33%"
        assert rating_percentage(5, 5) == "100.00%"
        assert rating_percentage(1, 0) == "NaN%"


class TestBuckets:
    """Tests for chapter bucket classification."""

    def test_bucket_label(self):
        assert bucket_label("Source: Duck", 8) == "duck"
        assert bucket_label("  Fox ") == "fox"
        assert bucket_label("", 8) == ""

    def test_classify_known_and_unknown(self):
        blocks = [("duck", ["c2", "c1"]), ("weird", ["x"]), ("fox", ["c1"])]
        result = classify_buckets(blocks, ("duck", "fox", "rock"))
        assert result == {"duck": ["c2", "c1"], "fox": ["c1"], "rock": []}

    def test_every_bucket_present(self):
        assert classify_buckets([], ("duck", "fox")) == {"duck": [], "fox": []}


class TestFieldGuards:
    """Tests for first, at and extract_field."""

    def test_first(self):
        assert first(["a", "b"], "title") == "a"
        with pytest.raises(ExtractionFieldError):
            first([], "title")

    def test_at(self):
        assert at(["a"], 0, "") == "a"
        assert at(["a"], 3, "") == ""

    def test_extract_field_success(self):
        assert extract_field("title", lambda: "Berserk", "") == "Berserk"

    def test_extract_field_degrades(self, capsys):
        assert extract_field("title", lambda: first([], "title"), "") == ""
        assert extract_field("type", lambda: "".split(" ")[1], "") == ""
        assert "degraded" in capsys.readouterr().out

    def test_extract_field_propagates_other_errors(self):
        def broken():
            raise RuntimeError("bug")

        with pytest.raises(RuntimeError):
            extract_field("title", broken, "")


class TestAttributeValues:
    """Tests for attribute_values against a live-page stand-in."""

    def test_passes_attribute_name(self):
        class Page:
            async def eval_on_selector_all(self, selector, expression, arg):
                self.call = (selector, arg)
                return ["1.jpg", "2.jpg"]

        page = Page()
        assert asyncio.run(attribute_values(page, "a.img-link > img", "src")) == ["1.jpg", "2.jpg"]
        assert page.call == ("a.img-link > img", "src")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
