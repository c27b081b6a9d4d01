"""Central configuration for mangascraper.

Reads configuration from environment variables, with .env file support.

Environment variables:
- MANGASCRAPER_PROXY: Proxy for browser and HTTP traffic as host:port (optional)
- MANGASCRAPER_DEBUG: Launch a headed browser (optional, default: false)
- MANGASCRAPER_TIMEOUT_MS: Upper bound for one page script (default: 30000)
- MANGASCRAPER_NAVIGATION_TIMEOUT_MS: Navigation and selector waits (default: 30000)
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root if it exists
_env_path = Path(__file__).parent.parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)

# Configuration values
PROXY: str | None = os.environ.get("MANGASCRAPER_PROXY")
DEBUG = os.environ.get("MANGASCRAPER_DEBUG", "false").lower() in ("true", "1", "yes")
TIMEOUT_MS = int(os.environ.get("MANGASCRAPER_TIMEOUT_MS", "30000"))
NAVIGATION_TIMEOUT_MS = int(os.environ.get("MANGASCRAPER_NAVIGATION_TIMEOUT_MS", "30000"))


def parse_proxy(value: str | None) -> dict | None:
    """Split a host:port proxy string.

    Returns:
        dict | None: {"host": str, "port": int}, or None when no proxy is set

    Raises:
        ValueError: If the value is not host:port with a numeric port
    """
    if not value:
        return None
    host, sep, port = value.strip().rpartition(":")
    if not sep or not host or not port.isdigit():
        raise ValueError(f"Proxy must look like host:port, got '{value}'")
    return {"host": host, "port": int(port)}


def get_default_options():
    """Build ScrapingOptions from the environment.

    Returns:
        ScrapingOptions: Options with proxy, debug and timeouts filled in
    """
    from .types import ScrapingOptions

    return ScrapingOptions(
        proxy=parse_proxy(PROXY),
        debug=DEBUG,
        timeout=TIMEOUT_MS,
        navigation_timeout=NAVIGATION_TIMEOUT_MS,
    )
