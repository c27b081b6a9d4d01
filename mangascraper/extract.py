"""Field extraction helpers: ratings, chapter buckets and non-fatal field guards."""

import math
from typing import Callable, Iterable, NamedTuple, Sequence, TypeVar

from playwright.async_api import Page

from .errors import ExtractionFieldError
from .types import MangaRating

V = TypeVar("V")

# Errors that mean "this one field's markup was not what we expected"
FIELD_ERRORS = (ExtractionFieldError, ValueError, IndexError, KeyError, AttributeError)


class RatingLayout(NamedTuple):
    """Token positions inside a whitespace-split rating label."""
    numerator: int = 1
    denominator: int = 3
    votes: int = 6


def to_number(token: str | None) -> float:
    """Parse a numeric token, ignoring brackets and grouping commas. NaN on failure."""
    if token is None:
        return math.nan
    cleaned = token.strip().strip("()[]{}").replace(",", "")
    try:
        return float(cleaned)
    except ValueError:
        return math.nan


def format_number(value: float) -> str:
    """Render like a JS number: 5 not 5.0, NaN for NaN."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_count(value: float) -> str:
    """Group thousands the en-US way: 12345 -> 12,345."""
    if math.isnan(value) or math.isinf(value):
        return format_number(value)
    if value.is_integer():
        return f"{int(value):,}"
    return f"{value:,}"


def rating_percentage(numerator: float, denominator: float) -> str:
    if math.isnan(numerator) or math.isnan(denominator) or denominator == 0:
        return "NaN%"
    return f"{numerator / denominator * 100:.2f}%"


def parse_rating(label: str, source: str, layout: RatingLayout = RatingLayout()) -> MangaRating:
    """
    Parse a "<num> / <den> ... <count> votes" label by fixed token positions.

    Missing or non-numeric tokens produce NaN values rather than errors.

    Args:
        label: Raw label text, e.g. "Rating 4.3 / 5 out of 12,345 total votes"
        source: Name of the site the rating comes from
        layout: Which whitespace-split tokens hold numerator, denominator, votes
    """
    tokens = label.split()

    def token(i: int) -> str | None:
        return tokens[i] if 0 <= i < len(tokens) else None

    numerator = to_number(token(layout.numerator))
    denominator = to_number(token(layout.denominator))
    votes = to_number(token(layout.votes))
    return MangaRating(
        source_rating=source,
        vote_count=format_count(votes),
        rating_percentage=rating_percentage(numerator, denominator),
        rating_stars=f"{format_number(numerator)} / {format_number(denominator)}",
    )


def bucket_label(text: str, prefix_len: int = 0) -> str:
    """Normalize a bucket header, e.g. bucket_label("Source: Duck", 8) -> "duck"."""
    return text[prefix_len:].strip().lower()


def classify_buckets(
    blocks: Iterable[tuple[str, list[V]]],
    buckets: Sequence[str],
) -> dict[str, list[V]]:
    """Assign each (label, items) block to its named bucket.

    Every bucket is present in the result. Unknown labels are dropped.
    """
    result: dict[str, list[V]] = {name: [] for name in buckets}
    for label, items in blocks:
        if label in result:
            result[label] = items
        else:
            print(f"[extract] dropping unknown bucket '{label}' ({len(items)} items)")
    return result


def first(values: Sequence[V], name: str) -> V:
    """First value, or ExtractionFieldError if the extractor matched nothing."""
    if not values:
        raise ExtractionFieldError(f"No value found for field '{name}'")
    return values[0]


def at(values: Sequence[V], index: int, default: V) -> V:
    """Positional lookup used when zipping parallel extractor outputs."""
    return values[index] if index < len(values) else default


def extract_field(name: str, fn: Callable[[], V], default: V) -> V:
    """Run one field extractor; on failure log and fall back to `default`."""
    try:
        return fn()
    except FIELD_ERRORS as e:
        print(f"[extract] field '{name}' degraded: {e}")
        return default


async def attribute_values(page: Page, selector: str, attr_name: str) -> list[str]:
    """Read `attr_name` from every element matching `selector` in the live page."""
    return await page.eval_on_selector_all(
        selector,
        "(elements, name) => elements.map(e => e.getAttribute(name) || '')",
        attr_name,
    )
