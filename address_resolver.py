"""
address_resolver.py

Turns address-bar text into something the web view can load.

Classification is purely syntactic; no DNS lookups are made. In order:
    - explicit scheme ("https://x", "about:blank")  -> unchanged
    - loopback host ("localhost:3000", "127.0.0.1") -> http://
    - absolute path ("/etc/hosts")                  -> file://
    - other parseable authority ("host.lan:8080")   -> https://
    - bare domain ("example.com")                   -> https://
    - anything else                                 -> DuckDuckGo search
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import SplitResult, quote, urlsplit

SEARCH_URL = "https://duckduckgo.com/?q="

# RFC 3986 scheme followed by ':'. A digit after the colon means host:port.
_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):(?!\d)")

# One or more dot-terminated labels (1-63 chars, no edge hyphens), then a
# final label of at least two letters.
DOMAIN_PATTERN = re.compile(
    r"^(?:[A-Za-z0-9](?:[A-Za-z0-9\-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,}$"
)


def _is_loopback(host: Optional[str]) -> bool:
    return host is not None and (host == "localhost" or host.startswith("127."))


def _has_scheme(text: str) -> bool:
    """True if ``text`` starts with an explicit URL scheme.

    Dotted names and ``localhost`` before a colon are hosts with a bad port
    ("example.com:abc"), unless written as ``name://``.
    """
    match = _SCHEME_RE.match(text)
    if match is None:
        return False
    scheme = match.group(1)
    if "." in scheme or scheme.lower() == "localhost":
        return text.startswith("//", match.end())
    return True


def _parse_url(text: str) -> Optional[SplitResult]:
    """Parse ``text`` with the address-bar URL grammar.

    Returns None when the text is not a URL: it is empty, contains
    whitespace, or is a schemeless string that is neither an absolute path,
    a loopback host, nor a host with an explicit port.
    """
    if not text or any(ch.isspace() for ch in text):
        return None

    try:
        if _has_scheme(text) or text.startswith("/"):
            return urlsplit(text)

        # Schemeless authority form: host[:port][/path]
        parts = urlsplit("//" + text)
        port = parts.port
    except ValueError:
        return None

    if _is_loopback(parts.hostname) or port is not None:
        return parts
    return None


def resolve_input(text: str) -> str:
    """Resolve raw address-bar text into a navigable URL string.

    Args:
        text: Whatever the user typed.

    Returns:
        A URL to load. Never raises; unrecognised input becomes a search.
    """
    text = text.strip()
    parts = _parse_url(text)

    if parts is not None:
        if parts.scheme:
            return text
        if _is_loopback(parts.hostname):
            return "http://" + text
        if parts.path.startswith("/") and not parts.netloc:
            return "file://" + text
        return "https://" + text

    if DOMAIN_PATTERN.match(text):
        return "https://" + text

    return SEARCH_URL + quote(text, safe="")
