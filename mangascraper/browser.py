"""Browser sessions: one Chromium process per operation, always torn down."""

import asyncio
from contextlib import asynccontextmanager
from enum import Enum
from typing import AsyncIterator

from playwright.async_api import Page, async_playwright

from .errors import AutomationError, ValidationError
from .intercept import InterceptionPolicy, make_route_handler
from .types import PageScript, ScrapingOptions, T, WaitUntil
from .useragents import random_user_agent

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-accelerated-2d-canvas",
    "--no-zygote",
    "--renderer-process-limit=1",
    "--no-first-run",
    "--ignore-certificate-errors",
    "--ignore-certificate-errors-spki-list",
    "--disable-dev-shm-usage",
    "--disable-infobars",
    "--lang=en-US,en",
    "--window-size=1920,1080",
    "--disable-extensions",
    "--disable-gpu",
]
VIEWPORT = {"width": 1920, "height": 1080}

# Runs before any page script on every document
PRELOAD_SCRIPT = """
(() => {
    Object.defineProperty(navigator, 'webdriver', { get: () => undefined });
    Object.defineProperty(navigator, 'languages', { get: () => ['en-US', 'en'] });
    Object.defineProperty(navigator, 'plugins', { get: () => [1, 2, 3, 4, 5] });
    window.chrome = window.chrome || { runtime: {} };
    const originalQuery = window.navigator.permissions && window.navigator.permissions.query;
    if (originalQuery) {
        window.navigator.permissions.query = (parameters) =>
            parameters.name === 'notifications'
                ? Promise.resolve({ state: Notification.permission })
                : originalQuery(parameters);
    }
})();
"""


class FetchState(str, Enum):
    NOT_STARTED = "not_started"
    NAVIGATING = "navigating"
    WAITING_FOR_SELECTOR = "waiting_for_selector"
    EXTRACTING = "extracting"
    ASSEMBLED = "assembled"
    FAILED = "failed"


_TRANSITIONS = {
    FetchState.NOT_STARTED: {FetchState.NAVIGATING, FetchState.FAILED},
    FetchState.NAVIGATING: {FetchState.WAITING_FOR_SELECTOR, FetchState.EXTRACTING, FetchState.FAILED},
    FetchState.WAITING_FOR_SELECTOR: {FetchState.EXTRACTING, FetchState.FAILED},
    FetchState.EXTRACTING: {FetchState.ASSEMBLED, FetchState.FAILED},
    FetchState.ASSEMBLED: set(),
    FetchState.FAILED: set(),
}


class FetchTracker:
    """Tracks one fetch through navigate -> wait -> extract -> assembled/failed."""

    def __init__(self, label: str = "fetch"):
        self.label = label
        self.state = FetchState.NOT_STARTED
        self.history: list[FetchState] = [self.state]

    def advance(self, state: FetchState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"[{self.label}] illegal transition {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def fail(self) -> None:
        if self.state not in (FetchState.ASSEMBLED, FetchState.FAILED):
            self.advance(FetchState.FAILED)


def _launch_kwargs(options: ScrapingOptions) -> dict:
    kwargs = {"headless": not options.debug, "args": list(LAUNCH_ARGS)}
    if options.proxy is not None:
        kwargs["proxy"] = {"server": f"http://{options.proxy.server}"}
    return kwargs


@asynccontextmanager
async def browser_session(
    options: ScrapingOptions,
    policy: InterceptionPolicy | None = None,
) -> AsyncIterator[Page]:
    """Launch one browser and yield its single page. Closes it on every exit path."""
    async with async_playwright() as p:
        try:
            browser = await p.chromium.launch(**_launch_kwargs(options))
        except Exception as e:
            raise AutomationError("Failed to launch browser", cause=e) from e

        try:
            context = await browser.new_context(
                user_agent=random_user_agent(),
                viewport=VIEWPORT,
                ignore_https_errors=True,
            )
            context.set_default_timeout(options.navigation_timeout)
            if policy is not None and policy.rules:
                await context.route("**/*", make_route_handler(policy))
            await context.add_init_script(script=PRELOAD_SCRIPT)
            page = await context.new_page()
            yield page
        finally:
            await browser.close()
            if options.debug:
                print("[browser_session] browser closed")


async def run_in_browser(
    options: ScrapingOptions,
    policy: InterceptionPolicy | None,
    page_script: PageScript,
) -> T:
    """
    Run `page_script` against a fresh page and return its plain-data result.

    Args:
        options: Proxy, debug and timeout settings
        policy: Request interception rules, installed before navigation
        page_script: Async function receiving the live page

    Raises:
        AutomationError: Launch, navigation, wait or timeout failure
        ValidationError: Raised by the page script itself, passed through
    """
    try:
        async with browser_session(options, policy) as page:
            return await asyncio.wait_for(page_script(page), timeout=options.timeout / 1000)
    except (AutomationError, ValidationError):
        raise
    except asyncio.TimeoutError as e:
        raise AutomationError(f"Page script timed out after {options.timeout}ms", cause=e) from e
    except Exception as e:
        print(f"[run_in_browser] FAIL {str(e)[:200]}")
        raise AutomationError("Browser automation failed", cause=e) from e


async def navigate(
    page: Page,
    url: str,
    wait_for: str | None = None,
    wait_until: WaitUntil = "domcontentloaded",
    tracker: FetchTracker | None = None,
) -> None:
    """Go to `url` and optionally wait until `wait_for` is attached."""
    tracker = tracker or FetchTracker()
    try:
        tracker.advance(FetchState.NAVIGATING)
        await page.goto(url, wait_until=wait_until)
        if wait_for:
            tracker.advance(FetchState.WAITING_FOR_SELECTOR)
            await page.wait_for_selector(wait_for, state="attached")
        tracker.advance(FetchState.EXTRACTING)
    except Exception:
        tracker.fail()
        raise


async def page_html(page: Page) -> str:
    """Serialized DOM of the current page."""
    return await page.content()
