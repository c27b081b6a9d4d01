"""In-memory stand-ins for the Playwright objects a browser session touches."""

from types import SimpleNamespace

import pytest

import mangascraper.browser as browser_module


class FakePage:
    def __init__(self, html: str = "<html><body><h2>Title</h2></body></html>"):
        self.html = html
        self.visited: list[str] = []
        self.waited_for: list[str] = []
        self.eval_results: list[str] = []
        self.goto_error: Exception | None = None

    async def goto(self, url, wait_until=None):
        if self.goto_error is not None:
            raise self.goto_error
        self.visited.append(url)

    async def wait_for_selector(self, selector, state=None):
        self.waited_for.append(selector)

    async def content(self):
        return self.html

    async def eval_on_selector_all(self, selector, expression, arg=None):
        return list(self.eval_results)


class FakeContext:
    def __init__(self, page: FakePage, events: list[str]):
        self.page = page
        self.events = events
        self.routes = []
        self.init_scripts = []
        self.default_timeout = None

    def set_default_timeout(self, timeout):
        self.default_timeout = timeout

    async def route(self, pattern, handler):
        self.events.append("route")
        self.routes.append((pattern, handler))

    async def add_init_script(self, script=None):
        self.events.append("init_script")
        self.init_scripts.append(script)

    async def new_page(self):
        self.events.append("new_page")
        return self.page


class FakeBrowser:
    def __init__(self, context: FakeContext, events: list[str]):
        self.context = context
        self.events = events
        self.context_kwargs = None
        self.close_count = 0

    async def new_context(self, **kwargs):
        self.context_kwargs = kwargs
        return self.context

    async def close(self):
        self.events.append("close")
        self.close_count += 1


class FakeChromium:
    def __init__(self, browser: FakeBrowser):
        self.browser = browser
        self.launch_kwargs = None
        self.launch_error: Exception | None = None
        self.launch_count = 0

    async def launch(self, **kwargs):
        self.launch_kwargs = kwargs
        self.launch_count += 1
        if self.launch_error is not None:
            raise self.launch_error
        return self.browser


class FakePlaywright:
    def __init__(self, chromium: FakeChromium):
        self.chromium = chromium

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


@pytest.fixture
def fake_browser(monkeypatch):
    """Patch async_playwright so sessions run against fakes. Returns the fakes."""
    events: list[str] = []
    page = FakePage()
    context = FakeContext(page, events)
    browser = FakeBrowser(context, events)
    chromium = FakeChromium(browser)
    monkeypatch.setattr(browser_module, "async_playwright", lambda: FakePlaywright(chromium))
    return SimpleNamespace(page=page, context=context, browser=browser, chromium=chromium, events=events)
