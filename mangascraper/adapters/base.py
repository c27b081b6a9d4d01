"""Base class every source adapter implements."""

from abc import ABC, abstractmethod
from typing import Callable, Generic, TypeVar

from ..browser import FetchState, FetchTracker
from ..config import get_default_options
from ..document import DocumentTree
from ..fetch import fetch_document, render_document
from ..intercept import InterceptionPolicy
from ..types import LatestHotManga, Manga, MangaCallback, MangaMeta, ScrapingOptions, WaitUntil

MangaT = TypeVar("MangaT", bound=Manga)
MetaT = TypeVar("MetaT", bound=MangaMeta)
LatestT = TypeVar("LatestT", bound=LatestHotManga)
R = TypeVar("R")


class SourceAdapter(ABC, Generic[MangaT, MetaT, LatestT]):
    """
    One manga site. Builds URLs, picks a fetch path and assembles records.

    Subclasses return their own record types; the engine never switches on
    which site it is talking to.
    """

    name: str = ""
    base_url: str = ""

    def __init__(self, options: ScrapingOptions | None = None):
        self.options = options or get_default_options()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r})"

    @abstractmethod
    async def search(self, query=None, filters=None, callback: MangaCallback | None = None) -> list[MangaT]:
        """Search the site's catalog."""

    @abstractmethod
    async def get_manga_meta(self, url: str, callback: MangaCallback | None = None) -> MetaT:
        """Metadata and chapter lists from a manga's page."""

    @abstractmethod
    async def get_latest_updates(self, page: int = 1, callback: MangaCallback | None = None) -> list[LatestT]:
        """Latest releases listing."""

    @abstractmethod
    async def get_pages(self, url: str, callback: MangaCallback | None = None) -> list[str]:
        """Image URLs of one chapter."""

    async def fetch(self, url: str) -> DocumentTree:
        """Plain HTTP path for pages that render without JavaScript."""
        return await fetch_document(url, self.options)

    async def render(
        self,
        url: str,
        policy: InterceptionPolicy | None = None,
        wait_for: str | None = None,
        wait_until: WaitUntil = "domcontentloaded",
        tracker: FetchTracker | None = None,
    ) -> DocumentTree:
        """Browser path for JavaScript-gated pages."""
        return await render_document(url, self.options, policy, wait_for, wait_until, tracker)

    async def render_record(
        self,
        url: str,
        parse: Callable[[DocumentTree], R],
        policy: InterceptionPolicy | None = None,
        wait_for: str | None = None,
        label: str | None = None,
    ) -> R:
        """Render `url`, parse it and finish the fetch as assembled or failed."""
        tracker = FetchTracker(label or url)
        doc = await self.render(url, policy, wait_for=wait_for, tracker=tracker)
        try:
            record = parse(doc)
        except Exception:
            tracker.fail()
            raise
        tracker.advance(FetchState.ASSEMBLED)
        return record
