"""Tests for address_resolver.resolve_input."""
from __future__ import annotations

import pytest

from address_resolver import DOMAIN_PATTERN, SEARCH_URL, resolve_input


# ─────────────────────────────────────────────────────────
# Explicit scheme
# ─────────────────────────────────────────────────────────


class TestExplicitScheme:
    @pytest.mark.parametrize("text", [
        "https://example.com",
        "http://example.com/path?q=1",
        "ftp://x",
        "file:///etc/hosts",
        "about:blank",
        "mailto:someone@example.com",
    ])
    def test_returned_unchanged(self, text):
        assert resolve_input(text) == text

    def test_surrounding_whitespace_is_stripped(self):
        assert resolve_input("  https://example.com  ") == "https://example.com"


# ─────────────────────────────────────────────────────────
# Loopback hosts
# ─────────────────────────────────────────────────────────


class TestLoopback:
    def test_localhost(self):
        assert resolve_input("localhost") == "http://localhost"

    def test_localhost_with_port(self):
        assert resolve_input("localhost:8080") == "http://localhost:8080"

    def test_localhost_with_port_and_path(self):
        assert resolve_input("localhost:3000/app") == "http://localhost:3000/app"

    def test_ipv4_loopback(self):
        assert resolve_input("127.0.0.1") == "http://127.0.0.1"

    def test_ipv4_loopback_with_port(self):
        assert resolve_input("127.0.0.1:5000/api") == "http://127.0.0.1:5000/api"

    def test_any_127_address(self):
        assert resolve_input("127.1.2.3:80") == "http://127.1.2.3:80"


# ─────────────────────────────────────────────────────────
# Absolute paths and other parseable input
# ─────────────────────────────────────────────────────────


class TestAbsolutePath:
    def test_unix_path(self):
        assert resolve_input("/etc/hosts") == "file:///etc/hosts"

    def test_directory(self):
        assert resolve_input("/home/user/") == "file:///home/user/"


class TestHostWithPort:
    def test_domain_with_port_uses_https(self):
        assert resolve_input("example.com:8443") == "https://example.com:8443"

    def test_lan_host_with_port(self):
        assert resolve_input("router:8080/admin") == "https://router:8080/admin"


# ─────────────────────────────────────────────────────────
# Bare domains
# ─────────────────────────────────────────────────────────


class TestDomain:
    @pytest.mark.parametrize("text", [
        "example.com",
        "sub.example.co.uk",
        "my-site.io",
        "a.bc",
        "123abc.org",
    ])
    def test_prefixed_with_https(self, text):
        assert resolve_input(text) == "https://" + text

    @pytest.mark.parametrize("text", [
        "-bad.com",
        "bad-.com",
        "example.c",
        "example.123",
        "nodots",
        "a" * 64 + ".com",
    ])
    def test_pattern_rejects(self, text):
        assert DOMAIN_PATTERN.match(text) is None

    def test_pattern_accepts_63_char_label(self):
        assert DOMAIN_PATTERN.match("a" * 63 + ".com") is not None


# ─────────────────────────────────────────────────────────
# Search fallback
# ─────────────────────────────────────────────────────────


class TestSearch:
    def test_words_become_query(self):
        assert resolve_input("how to code") == "https://duckduckgo.com/?q=how%20to%20code"

    def test_single_word(self):
        assert resolve_input("python") == SEARCH_URL + "python"

    def test_reserved_characters_are_encoded(self):
        assert resolve_input("c++ & rust?") == SEARCH_URL + "c%2B%2B%20%26%20rust%3F"

    def test_domain_with_path_is_searched(self):
        assert resolve_input("example.com/docs") == SEARCH_URL + "example.com%2Fdocs"

    def test_non_ascii_is_utf8_encoded(self):
        assert resolve_input("café") == SEARCH_URL + "caf%C3%A9"

    def test_empty_input(self):
        assert resolve_input("") == SEARCH_URL

    def test_bad_port_falls_back_to_search(self):
        assert resolve_input("example.com:abc") == SEARCH_URL + "example.com%3Aabc"

    @pytest.mark.parametrize("text, encoded", [
        ("www.google.com:search", "www.google.com%3Asearch"),
        ("python.org:80x", "python.org%3A80x"),
        ("localhost:abc", "localhost%3Aabc"),
    ])
    def test_malformed_host_port_is_searched(self, text, encoded):
        assert resolve_input(text) == SEARCH_URL + encoded

    def test_dotted_scheme_with_slashes_is_kept(self):
        assert resolve_input("web+app.v2://open") == "web+app.v2://open"
