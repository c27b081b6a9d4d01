"""Type definitions for scraping options and canonical records."""

from typing import Any, Awaitable, Callable, Literal, TypeVar

from pydantic import BaseModel, Field
from playwright.async_api import Page

T = TypeVar("T")

# Type aliases
PageScript = Callable[[Page], Awaitable[Any]]
MangaCallback = Callable[[Exception | None, Any], None]
WaitUntil = Literal["load", "domcontentloaded", "networkidle", "commit"]


class ProxyConfig(BaseModel):
    """Proxy server the browser and HTTP client route through."""
    host: str
    port: int

    @property
    def server(self) -> str:
        return f"{self.host}:{self.port}"


class ScrapingOptions(BaseModel):
    """Per-adapter options for browser and plain fetches."""
    proxy: ProxyConfig | None = None
    debug: bool = False  # headed browser
    timeout: int = 30000  # ms, whole page script
    navigation_timeout: int = 30000  # ms, goto and selector waits


# ---------------------------------------------------------------------------
# Canonical records
# ---------------------------------------------------------------------------


class MangaRating(BaseModel):
    """Rating parsed from a "<num> / <den> ... <count> votes" label."""
    source_rating: str
    vote_count: str
    rating_percentage: str | None = None
    rating_stars: str | None = None


class Manga(BaseModel):
    """One search result row."""
    title: str
    url: str
    cover_image: str = ""


class MangaTitle(BaseModel):
    main: str
    alt: list[str] = Field(default_factory=list)


class MangaChapter(BaseModel):
    name: str
    url: str


class MangaMeta(BaseModel):
    """Metadata from a manga's detail page."""
    title: MangaTitle
    cover_image: str = ""
    summary: str = ""
    authors: list[str] = Field(default_factory=list)
    genres: list[str] = Field(default_factory=list)


class LatestHotManga(BaseModel):
    """One entry of a latest-updates or hot listing."""
    title: str
    url: str
    cover_image: str = ""
