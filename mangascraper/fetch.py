"""Document retrieval: plain HTTP for static pages, the browser for JS-gated ones."""

import httpx

from .browser import FetchTracker, navigate, page_html, run_in_browser
from .document import DocumentTree
from .errors import FetchError, validate
from .intercept import InterceptionPolicy
from .types import ScrapingOptions, WaitUntil
from .useragents import random_user_agent


def _client(options: ScrapingOptions) -> httpx.AsyncClient:
    kwargs = {
        "timeout": options.navigation_timeout / 1000,
        "follow_redirects": True,
        "headers": {"User-Agent": random_user_agent(), "Accept-Language": "en-US,en;q=0.9"},
    }
    if options.proxy is not None:
        kwargs["proxy"] = f"http://{options.proxy.server}"
    return httpx.AsyncClient(**kwargs)


async def fetch_html(
    url: str,
    options: ScrapingOptions | None = None,
    client: httpx.AsyncClient | None = None,
) -> str:
    """GET `url` and return the response body.

    Raises:
        ValidationError: If url is empty
        FetchError: On transport errors or non-2xx responses
    """
    validate(bool(url), 'Missing argument "url" is required')
    options = options or ScrapingOptions()
    owns_client = client is None
    client = client or _client(options)
    try:
        resp = await client.get(url)
        resp.raise_for_status()
        return resp.text
    except httpx.HTTPStatusError as e:
        raise FetchError(f"HTTP {e.response.status_code} for {url}", cause=e) from e
    except httpx.HTTPError as e:
        raise FetchError(f"Request failed for {url}", cause=e) from e
    finally:
        if owns_client:
            await client.aclose()


async def fetch_document(
    url: str,
    options: ScrapingOptions | None = None,
    client: httpx.AsyncClient | None = None,
) -> DocumentTree:
    """Plain (non-JS) fetch path."""
    return DocumentTree.from_html(await fetch_html(url, options, client))


async def render_document(
    url: str,
    options: ScrapingOptions,
    policy: InterceptionPolicy | None = None,
    wait_for: str | None = None,
    wait_until: WaitUntil = "domcontentloaded",
    tracker: FetchTracker | None = None,
) -> DocumentTree:
    """Browser fetch path: render `url`, then parse the serialized DOM.

    Only the HTML string leaves the session; parsing happens after teardown.
    The tracker is left in the extracting state for the caller to finish.
    """
    validate(bool(url), 'Missing argument "url" is required')
    tracker = tracker or FetchTracker(url)

    async def script(page) -> str:
        await navigate(page, url, wait_for=wait_for, wait_until=wait_until, tracker=tracker)
        return await page_html(page)

    try:
        html = await run_in_browser(options, policy, script)
    except Exception:
        tracker.fail()
        raise
    return DocumentTree.from_html(html)
