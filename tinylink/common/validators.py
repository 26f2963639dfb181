"""Validation utilities for the link registry."""

import re
from urllib.parse import quote, urlsplit, urlunsplit
from typing import Optional, Tuple

SHORT_CODE_PATTERN = re.compile(r"[A-Za-z0-9]{6,8}")

ALLOWED_SCHEMES = ("http", "https")
DEFAULT_PORTS = {"http": 80, "https": 443}

# Characters a browser refuses in a domain name
FORBIDDEN_HOST_CHARS = frozenset(" \t\r\n<>\"{}|\\^`%#/?@[]")

# quote() escapes everything outside these (plus letters, digits and "_.-~").
# "%" is kept so existing escapes are not encoded twice.
PATH_SAFE = "/:@!$&'()*+,;=%[]|\\^"
QUERY_SAFE = "/?:@!$&()*+,;=%[]|\\^`{}"
FRAGMENT_SAFE = "/?:@!$&'()*+,;=%[]|\\^{}#"


def _normalize_host(host: str) -> str:
    """Check a hostname and return its ASCII form.

    Raises:
        ValueError: If the host holds characters no domain name may contain
    """
    if host.startswith("[") or ":" in host:
        # IPv6 literal, already validated by urlsplit
        return host

    if any(ch in FORBIDDEN_HOST_CHARS or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in host):
        raise ValueError("URL must have a valid domain")

    if not host.isascii():
        try:
            host = host.encode("idna").decode("ascii")
        except UnicodeError as e:
            raise ValueError("URL must have a valid domain") from e

    return host


def normalize_url(url: str) -> str:
    """Parse a URL and reserialize it in canonical form.

    Scheme and host are lowercased, a non-ASCII host is converted to
    punycode, a default port is dropped and an empty path becomes "/".
    Spaces and other characters browsers escape are percent-encoded in the
    path, query and fragment; existing escapes are left alone.

    Args:
        url: The URL to normalize

    Returns:
        Normalized URL

    Raises:
        ValueError: If the URL is not an absolute http(s) URL
    """
    parsed = urlsplit(url.strip())

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise ValueError("URL must use http or https protocol")

    host = parsed.hostname
    if not host:
        raise ValueError("URL must have a valid domain")
    host = _normalize_host(host)

    # Raises ValueError for a non-numeric or out of range port
    port = parsed.port

    netloc = f"[{host}]" if ":" in host else host
    if port is not None and port != DEFAULT_PORTS[parsed.scheme]:
        netloc = f"{netloc}:{port}"

    if parsed.username is not None:
        userinfo = parsed.username
        if parsed.password is not None:
            userinfo = f"{userinfo}:{parsed.password}"
        netloc = f"{userinfo}@{netloc}"

    return urlunsplit((
        parsed.scheme,
        netloc,
        quote(parsed.path or "/", safe=PATH_SAFE),
        quote(parsed.query, safe=QUERY_SAFE),
        quote(parsed.fragment, safe=FRAGMENT_SAFE),
    ))


def is_valid_url(url: str, max_length: Optional[int] = None) -> Tuple[bool, str]:
    """Validate a target URL.

    Args:
        url: The URL to validate
        max_length: Optional maximum length in characters

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if max_length is not None and len(url) > max_length:
        return False, f"URL is too long (max {max_length} characters)"

    try:
        normalize_url(url)
    except ValueError as e:
        return False, str(e) or "Invalid URL format"

    return True, ""


def is_valid_short_code(short_code: str) -> Tuple[bool, str]:
    """Validate a short code: 6 to 8 ASCII letters or digits.

    Args:
        short_code: The short code to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not short_code or not isinstance(short_code, str):
        return False, "Short code is required"

    if not SHORT_CODE_PATTERN.fullmatch(short_code):
        return False, "Custom code must be 6-8 chars (letters and digits only)"

    return True, ""
