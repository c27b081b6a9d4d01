"""mangascraper - browser sessions, request interception and marker-delimited HTML extraction."""

from .types import ScrapingOptions, ProxyConfig, MangaRating, Manga, MangaTitle, MangaMeta, MangaChapter, LatestHotManga
from .errors import ScraperError, ValidationError, AutomationError, FetchError, ExtractionFieldError
from .intercept import InterceptionRule, InterceptionPolicy
from .browser import FetchState, FetchTracker, browser_session, run_in_browser, navigate, page_html
from .document import DocumentTree, ExtractionRun, text_marker
from .extract import RatingLayout, parse_rating, classify_buckets, bucket_label, extract_field
from .fetch import fetch_document, render_document
from .results import deliver
from .config import get_default_options

__all__ = [
    # Types
    "ScrapingOptions",
    "ProxyConfig",
    "MangaRating",
    "Manga",
    "MangaTitle",
    "MangaMeta",
    "MangaChapter",
    "LatestHotManga",
    # Errors
    "ScraperError",
    "ValidationError",
    "AutomationError",
    "FetchError",
    "ExtractionFieldError",
    # Interception
    "InterceptionRule",
    "InterceptionPolicy",
    # Browser
    "FetchState",
    "FetchTracker",
    "browser_session",
    "run_in_browser",
    "navigate",
    "page_html",
    # Extraction
    "DocumentTree",
    "ExtractionRun",
    "text_marker",
    "RatingLayout",
    "parse_rating",
    "classify_buckets",
    "bucket_label",
    "extract_field",
    # Fetch
    "fetch_document",
    "render_document",
    # Results
    "deliver",
    "get_default_options",
]
