"""Unit tests for mangascraper/config.py."""

import pytest

from mangascraper import config
from mangascraper.types import ScrapingOptions


class TestParseProxy:
    """Tests for parse_proxy function."""

    def test_host_port(self):
        assert config.parse_proxy("127.0.0.1:8080") == {"host": "127.0.0.1", "port": 8080}
        assert config.parse_proxy(" proxy.local:3128 ") == {"host": "proxy.local", "port": 3128}

    def test_unset(self):
        assert config.parse_proxy(None) is None
        assert config.parse_proxy("") is None

    def test_invalid(self):
        with pytest.raises(ValueError):
            config.parse_proxy("no-port")
        with pytest.raises(ValueError):
            config.parse_proxy("host:abc")
        with pytest.raises(ValueError):
            config.parse_proxy(":8080")


class TestDefaultOptions:
    """Tests for get_default_options."""

    def test_reads_module_settings(self, monkeypatch):
        monkeypatch.setattr(config, "PROXY", "10.0.0.2:3128")
        monkeypatch.setattr(config, "DEBUG", True)
        monkeypatch.setattr(config, "TIMEOUT_MS", 5000)
        monkeypatch.setattr(config, "NAVIGATION_TIMEOUT_MS", 4000)

        options = config.get_default_options()
        assert isinstance(options, ScrapingOptions)
        assert options.proxy.server == "10.0.0.2:3128"
        assert options.debug is True
        assert options.timeout == 5000
        assert options.navigation_timeout == 4000

    def test_no_proxy(self, monkeypatch):
        monkeypatch.setattr(config, "PROXY", None)
        assert config.get_default_options().proxy is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
