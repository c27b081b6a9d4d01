"""MangaPark (v2) adapter."""

import re
from typing import Literal

import pydantic
from pydantic import BaseModel, Field

from ..browser import navigate, run_in_browser
from ..document import DocumentTree
from ..errors import ValidationError, validate
from ..extract import (
    at,
    attribute_values,
    bucket_label,
    classify_buckets,
    extract_field,
    first,
    parse_rating,
)
from ..intercept import InterceptionPolicy
from ..results import deliver
from ..types import LatestHotManga, Manga, MangaCallback, MangaChapter, MangaMeta, MangaRating, MangaTitle
from ..urls import absolute_url, build_query, clean_url
from .base import SourceAdapter

BASE_URL = "https://v2.mangapark.net"
SOURCE_NAME = "MangaPark.net"

ORDER_BY = {
    "A-Z": "a-z",
    "latest_updates": "update",
    "rating": "rating",
    "new_manga": "create",
    "most_views": "views_a",
}
CHAPTER_SOURCES = ("duck", "fox", "rock", "panda", "mini", "toon")
SOURCE_PREFIX_LEN = len("Source: ")

# Ads, trackers and page scripts the reader does not need to show images
BLOCKED_REQUESTS = [
    "https://v2.mangapark.net/cdn-cgi/scripts/5c5dd728/cloudflare-static/email-decode.min.js",
    "https://cdnjs.cloudflare.com/ajax/libs/jqueryui/",
    "https://cdnjs.cloudflare.com/ajax/libs/jquery_lazyload/",
    "https://cdnjs.cloudflare.com/ajax/libs/axios/",
    "https://static.mangapark.net/v2/js/global.js",
    "https://static.mangapark.net/v2/js/manga-global.js",
    "https://v2.mangapark.net/book-list/",
    "https://mangapark.net/misc/",
    "https://mangaparkcom.disqus.com/",
    "https://www.googletagmanager.com/",
    "https://hm.baidu.com/",
    "https://s7.addthis.com/",
    "https://tags.crwdcntrl.net/",
    "https://cdn.run-syndicate.com/",
    "https://go.bebi.com/",
    "https://st.bebi.com/",
    "https://run-syndicate.com/",
    "https://platform.bidgear.com/",
]

META_POLICY = InterceptionPolicy.from_config({"resource": {"method": "unblock", "type": ["document"]}})
LATEST_POLICY = InterceptionPolicy.from_config({"resource": {"method": "unblock", "type": ["document", "image"]}})
PAGES_POLICY = InterceptionPolicy.from_config({
    "domains": {"method": "block", "value": BLOCKED_REQUESTS},
    "resource": {"method": "unblock", "type": ["document", "script"]},
})

MangaParkStatus = Literal["ongoing", "completed"]
MangaParkType = Literal["manhua", "manga", "manhwa"]


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class MangaParkManga(Manga):
    authors: list[str] = Field(default_factory=list)
    genres: list[str] = Field(default_factory=list)
    rating: MangaRating | None = None


class MangaParkChapter(MangaChapter):
    upload_when: str = ""


class MangaParkChapters(BaseModel):
    """Chapter lists per mirror ("source") the site offers."""
    recently_updated: str | None = None
    duck: list[MangaParkChapter] = Field(default_factory=list)
    fox: list[MangaParkChapter] = Field(default_factory=list)
    rock: list[MangaParkChapter] = Field(default_factory=list)
    panda: list[MangaParkChapter] = Field(default_factory=list)
    mini: list[MangaParkChapter] = Field(default_factory=list)
    toon: list[MangaParkChapter] = Field(default_factory=list)


class MangaParkMeta(MangaMeta):
    artists: list[str] = Field(default_factory=list)
    type: str = ""
    status: str = ""
    rating: MangaRating
    popularity: str = "?"
    chapters: MangaParkChapters = Field(default_factory=MangaParkChapters)


class MangaParkLatestHotManga(LatestHotManga):
    genres: list[str] = Field(default_factory=list)
    updated_when: str = ""


class GenreFilter(BaseModel):
    include: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)


class MangaParkFilters(BaseModel):
    """Search filters. Unknown keys are rejected."""
    genres: GenreFilter | None = None
    status: MangaParkStatus | Literal["any"] = "any"
    rating: Literal["5☆", "4☆", "3☆", "2☆", "1☆", "0☆", "any"] = "any"
    type: MangaParkType | Literal["any"] = "any"
    year_released: str | None = None
    order_by: Literal["A-Z", "latest_updates", "rating", "new_manga", "most_views"] = "most_views"
    page: int = Field(default=1, ge=1, strict=True)

    class Config:
        extra = "forbid"


# ---------------------------------------------------------------------------
# URLs
# ---------------------------------------------------------------------------


def genre_slug(name: str) -> str:
    """'Slice of life' -> 'slice-of-life'."""
    return name.strip().lower().replace(" ", "-")


def parse_filters(filters: dict | MangaParkFilters | None) -> MangaParkFilters:
    if isinstance(filters, MangaParkFilters):
        return filters
    try:
        return MangaParkFilters(**(filters or {}))
    except pydantic.ValidationError as e:
        raise ValidationError("Invalid search filters", cause=e) from e


def search_url(query: str | dict | None, filters: MangaParkFilters) -> str:
    """Build the /search URL for a title string or {"title", "author"} query."""
    if query is None:
        query = ""
    if isinstance(query, str):
        title, author = query, None
    elif isinstance(query, dict):
        unknown = set(query) - {"title", "author"}
        validate(not unknown, f"Unknown query keys: {sorted(unknown)}")
        title, author = query.get("title"), query.get("author")
    else:
        raise ValidationError(f'"query" must be a string or dict, got {type(query).__name__}')

    genres = filters.genres or GenreFilter()
    params = [
        ("q", title),
        ("autart", author),
        ("genres", ",".join(genre_slug(g) for g in genres.include)),
        ("genres-exclude", ",".join(genre_slug(g) for g in genres.exclude)),
        ("rating", filters.rating[0] if filters.rating != "any" else None),
        ("status", filters.status if filters.status != "any" else None),
        ("types", filters.type if filters.type != "any" else None),
        ("years", filters.year_released),
        ("orderby", ORDER_BY[filters.order_by]),
        ("st-ss", 0),
        ("page", filters.page),
    ]
    return f"{BASE_URL}/search?{build_query(params)}"


# ---------------------------------------------------------------------------
# Parsers (pure reads over a DocumentTree)
# ---------------------------------------------------------------------------


def parse_search(doc: DocumentTree) -> list[MangaParkManga]:
    """Search result rows.

    Titles, authors, genres, ratings and covers are enumerated independently
    and zipped by position. A row missing one of them shifts every later row.
    """
    anchors = doc.select("h2 > a")
    authors = doc.group_by_sibling_marker(
        'div.field:-soup-contains("Authors/Artists")', "Authors/Artists:", marker_leads=True
    )
    genres = [[g for g in row.select_text(":scope > a") if g] for row in doc.select("div.field.last")]
    ratings = [parse_rating(label, SOURCE_NAME) for label in doc.select_attr("div.rate", "title")]
    covers = doc.select_attr("a.cover > img", "src")

    return [
        MangaParkManga(
            title=anchor.attr("title"),
            url=absolute_url(BASE_URL, anchor.attr("href")),
            authors=at(authors, i, []),
            cover_image=at(covers, i, ""),
            genres=at(genres, i, []),
            rating=at(ratings, i, None),
        )
        for i, anchor in enumerate(anchors)
    ]


def _labeled(doc: DocumentTree, label: str, children: bool = False) -> str | list[str]:
    """Value cell(s) next to a <th> whose text contains `label`."""
    selector = f'th:-soup-contains("{label}") ~ td'
    if children:
        return [t for t in doc.select_text(selector + " > *") if t]
    return " ".join(doc.select_text(selector)).strip()


def _main_title(doc: DocumentTree) -> str:
    # "<title> Manga": drop the trailing word
    words = first(doc.select_text("h2 > a"), "title").split(" ")
    return " ".join(words[:-1])


def _alt_titles(doc: DocumentTree) -> list[str]:
    titles = []
    for cell in doc.select_text('th:-soup-contains("Alternative") ~ td'):
        titles.extend(part.strip() for part in cell.split(";"))
    return [t for t in titles if t]


def _manga_type(doc: DocumentTree) -> str:
    manga_type = _labeled(doc, "Type").split(" ")[1]
    if manga_type == "Webtoon":
        manga_type = "manhwa"
    return manga_type.lower()


def _popularity(doc: DocumentTree) -> str:
    match = re.search(r"\d+\w{2}", _labeled(doc, "Popularity"))
    return match.group(0) if match else "?"


def _chapter_blocks(doc: DocumentTree):
    for block in doc.select("div.volumes"):
        header = "".join(
            text for sibling in block.siblings() for text in sibling.select_text("div > a > span")
        )
        anchors = block.select("a.visited.ch")
        times = block.select_text("span.time")
        chapters = [
            MangaParkChapter(
                name=anchor.text(),
                url=clean_url(absolute_url(BASE_URL, anchor.attr("href"))),
                upload_when=at(times, i, ""),
            )
            for i, anchor in enumerate(anchors)
        ]
        yield bucket_label(header, SOURCE_PREFIX_LEN), chapters


def _chapters(doc: DocumentTree) -> MangaParkChapters:
    buckets = classify_buckets(_chapter_blocks(doc), CHAPTER_SOURCES)
    recent = bucket_label(
        "".join(doc.select_text("div#list > div.stream:not(.collapsed) div > div > a > span")),
        SOURCE_PREFIX_LEN,
    )
    return MangaParkChapters(recently_updated=recent or None, **buckets)


def parse_meta(doc: DocumentTree) -> MangaParkMeta:
    """Detail page. Each field degrades on its own; none fails the record."""
    nan_rating = parse_rating("", SOURCE_NAME)
    return MangaParkMeta(
        title=MangaTitle(
            main=extract_field("title", lambda: _main_title(doc), ""),
            alt=extract_field("alt_titles", lambda: _alt_titles(doc), []),
        ),
        summary=extract_field("summary", lambda: first(doc.select("div.summary"), "summary").own_text(), ""),
        cover_image=extract_field("cover_image", lambda: first(doc.select_attr("img.w-100", "src"), "cover"), ""),
        authors=extract_field("authors", lambda: _labeled(doc, "Author(s)", children=True), []),
        artists=extract_field("artists", lambda: _labeled(doc, "Artist(s)", children=True), []),
        popularity=extract_field("popularity", lambda: _popularity(doc), "?"),
        genres=extract_field("genres", lambda: _labeled(doc, "Genre(s)", children=True), []),
        rating=extract_field("rating", lambda: parse_rating(_labeled(doc, "Rating"), SOURCE_NAME), nan_rating),
        type=extract_field("type", lambda: _manga_type(doc), ""),
        status=extract_field("status", lambda: _labeled(doc, "Status").lower(), ""),
        chapters=extract_field("chapters", lambda: _chapters(doc), MangaParkChapters()),
    )


def parse_latest(doc: DocumentTree) -> list[MangaParkLatestHotManga]:
    mangas = []
    for item in doc.select("div.d-flex.flex-row.item"):
        anchor = item.select_one(":scope > a")
        if anchor is None:
            continue
        img = anchor.select_one(":scope > img")
        genres = [
            genre
            for text in item.select_text("div.mb-2.gens")
            for genre in text.split(", ")
            if genre
        ]
        first_item = item.select_one(":scope > ul > li")
        updated_when = " ".join(first_item.select_text("span.time")) if first_item else ""
        mangas.append(MangaParkLatestHotManga(
            title=anchor.attr("title"),
            url=absolute_url(BASE_URL, anchor.attr("href")),
            cover_image=img.attr("src") if img else "",
            genres=genres,
            updated_when=updated_when,
        ))
    return mangas


# ---------------------------------------------------------------------------
# Adapter
# ---------------------------------------------------------------------------


class MangaPark(SourceAdapter[MangaParkManga, MangaParkMeta, MangaParkLatestHotManga]):
    """
    MangaPark v2.

    Example:
        mangapark = MangaPark()
        await mangapark.search("Berserk")
        await mangapark.search({"author": "Gotouge Koyoharu"})
        await mangapark.search(None, {"type": "manga", "genres": {"include": ["Horror"]}})
    """

    name = "mangapark"
    base_url = BASE_URL

    async def search(self, query=None, filters=None, callback: MangaCallback | None = None) -> list[MangaParkManga]:
        return await deliver(self._search(query, filters), callback)

    async def _search(self, query, filters) -> list[MangaParkManga]:
        url = search_url(query, parse_filters(filters))
        print(f"[mangapark.search] {url}")
        doc = await self.fetch(url)
        results = parse_search(doc)
        print(f"[mangapark.search] OK {len(results)} results")
        return results

    async def get_manga_meta(self, url: str, callback: MangaCallback | None = None) -> MangaParkMeta:
        return await deliver(self._get_manga_meta(url), callback)

    async def _get_manga_meta(self, url: str) -> MangaParkMeta:
        validate(bool(url), 'Missing argument "url" is required')
        return await self.render_record(url, parse_meta, META_POLICY, wait_for="h2", label="mangapark.get_manga_meta")

    async def get_latest_updates(
        self, page: int = 1, callback: MangaCallback | None = None
    ) -> list[MangaParkLatestHotManga]:
        return await deliver(self._get_latest_updates(page), callback)

    async def _get_latest_updates(self, page: int) -> list[MangaParkLatestHotManga]:
        validate(isinstance(page, int) and not isinstance(page, bool), '"page" must be a number')
        validate(page >= 1, 'Argument "page" must be greater than or equal to 1')
        return await self.render_record(
            f"{BASE_URL}/latest/{page}", parse_latest, LATEST_POLICY, label="mangapark.get_latest_updates"
        )

    async def get_pages(self, url: str, callback: MangaCallback | None = None) -> list[str]:
        """Image URLs of a chapter.

        The image host checks the referer: send `Referer: https://v2.mangapark.net/`
        when downloading them.
        """
        return await deliver(self._get_pages(url), callback)

    async def _get_pages(self, url: str) -> list[str]:
        validate(bool(url), 'Missing argument "url" is required')

        async def script(page) -> list[str]:
            await navigate(page, url, wait_for="a.img-link")
            return await attribute_values(page, "a.img-link > img", "src")

        return await run_in_browser(self.options, PAGES_POLICY, script)
