"""URL utilities for adapters."""

from urllib.parse import quote, urljoin


def clean_url(url: str) -> str:
    """Remove query params and fragments from URL."""
    return url.split("?")[0].split("#")[0].rstrip("/")


def absolute_url(base_url: str, href: str) -> str:
    """Resolve `href` against `base_url`; "" stays "" so positions survive."""
    href = (href or "").strip()
    if not href:
        return ""
    if href.startswith("//"):
        return "https:" + href
    return urljoin(base_url + "/", href)


def build_query(params: list[tuple[str, str | int | None]]) -> str:
    """Join key=value pairs with &, skipping empty values. Order is kept."""
    parts = []
    for key, value in params:
        if value is None or value == "":
            continue
        parts.append(f"{key}={quote(str(value), safe=',')}")
    return "&".join(parts)
