"""Tests for URL identity helpers."""

import pytest

from conference_iq.crawler.urls import (
    is_valid_conference_url,
    normalize_url,
    resolve_link,
    sanitize_hostname,
)


class TestNormalizeUrl:
    """Tests for URL normalization."""

    @pytest.mark.parametrize("raw,expected", [
        ("https://devconf.io/", "https://devconf.io/"),
        ("https://devconf.io", "https://devconf.io/"),
        ("https://devconf.io/2024/", "https://devconf.io/2024"),
        ("https://devconf.io/2024///", "https://devconf.io/2024"),
        ("https://devconf.io/2024#speakers", "https://devconf.io/2024"),
        ("HTTPS://DevConf.IO/Agenda", "https://devconf.io/Agenda"),
        ("https://devconf.io:443/", "https://devconf.io/"),
        ("http://devconf.io:80/x", "http://devconf.io/x"),
        ("http://devconf.io:8080/x", "http://devconf.io:8080/x"),
        ("  https://devconf.io/  ", "https://devconf.io/"),
    ])
    def test_normalization(self, raw: str, expected: str):
        """Fragment, trailing slash, case and default port are normalized."""
        assert normalize_url(raw) == expected

    def test_query_order_ignored(self):
        """Query parameter order does not change identity."""
        assert normalize_url("https://devconf.io/?b=2&a=1") == normalize_url("https://devconf.io/?a=1&b=2")

    def test_repeated_keys_keep_order(self):
        """Repeated keys keep their relative order."""
        assert normalize_url("https://devconf.io/?t=2&a=1&t=1") == "https://devconf.io/?a=1&t=2&t=1"

    @pytest.mark.parametrize("url", [
        "https://devconf.io/2024/?b=2&a=1#top",
        "HTTP://Example.COM:80",
        "https://example.com/search?q=hello+world&lang=en",
        "not a url",
        "",
    ])
    def test_idempotent(self, url: str):
        """Normalizing twice gives the same result as once."""
        once = normalize_url(url)
        assert normalize_url(once) == once

    @pytest.mark.parametrize("raw", ["not a url", "devconf.io/agenda", "/relative/path"])
    def test_unparseable_returned_unchanged(self, raw: str):
        """Scheme-less input comes back unchanged."""
        assert normalize_url(raw) == raw


class TestUrlHelpers:
    """Tests for validation, link resolution and hostname sanitizing."""

    @pytest.mark.parametrize("url,valid", [
        ("https://devconf.io", True),
        ("http://devconf.io/agenda", True),
        ("ftp://devconf.io", False),
        ("mailto:hello@devconf.io", False),
        ("devconf.io", False),
        ("", False),
    ])
    def test_is_valid_conference_url(self, url: str, valid: bool):
        """Only absolute http(s) URLs are valid."""
        assert is_valid_conference_url(url) is valid

    @pytest.mark.parametrize("href,expected", [
        ("/agenda", "https://devconf.io/agenda"),
        ("tickets.html", "https://devconf.io/2024/tickets.html"),
        ("https://tickets.example.com/devconf", "https://tickets.example.com/devconf"),
        ("#speakers", None),
        ("javascript:void(0)", None),
        ("mailto:hello@devconf.io", None),
        ("", None),
        (None, None),
    ])
    def test_resolve_link(self, href, expected):
        """Links resolve against the page URL, non-http targets are dropped."""
        assert resolve_link(href, "https://devconf.io/2024/index.html") == expected

    def test_resolve_link_without_base(self):
        """A relative link with no base URL cannot be resolved."""
        assert resolve_link("/agenda", "") is None

    def test_sanitize_hostname(self):
        """Non-alphanumeric hostname characters become underscores."""
        assert sanitize_hostname("https://www.dev-conf.io/agenda") == "www_dev_conf_io"
