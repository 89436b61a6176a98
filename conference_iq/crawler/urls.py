"""URL identity helpers.

The normalized URL is the identity key of a conference record, independent of
its database id.
"""

from typing import Optional
from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_url(url: str) -> str:
    """Normalize a URL for identity comparison.

    Drops the fragment, sorts query parameters by key, strips trailing slashes
    from the path (except root), lower-cases scheme and host and drops the
    default port. Input that does not parse as an absolute URL is returned
    stripped but otherwise unchanged.
    """
    url = url.strip()
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        return url

    if not parts.scheme or not parts.netloc:
        return url

    scheme = parts.scheme.lower()

    # Lower-case the host only, userinfo is case sensitive
    userinfo, at, hostport = parts.netloc.rpartition("@")
    hostport = hostport.lower()
    if port is not None and port == DEFAULT_PORTS.get(scheme):
        hostport = hostport[: hostport.rfind(":")]
    netloc = f"{userinfo}{at}{hostport}"

    path = parts.path.rstrip("/") or "/"

    # Stable sort keeps repeated keys in their original order
    params = parse_qsl(parts.query, keep_blank_values=True)
    query = urlencode(sorted(params, key=lambda kv: kv[0]))

    return urlunsplit((scheme, netloc, path, query, ""))


def is_valid_conference_url(url: str) -> bool:
    """Check the URL is absolute http(s)."""
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def resolve_link(href: Optional[str], base_url: str) -> Optional[str]:
    """Resolve a link against the page URL, keeping only http(s) targets."""
    if not href:
        return None
    href = href.strip()
    if not href or href.startswith(("#", "javascript:", "mailto:", "tel:")):
        return None
    try:
        resolved = urljoin(base_url, href)
    except ValueError:
        return None
    if not is_valid_conference_url(resolved):
        return None
    return resolved


def sanitize_hostname(url: str) -> str:
    """Hostname with every non-alphanumeric character replaced by '_'."""
    host = urlsplit(url).hostname or "unknown"
    return "".join(c if c.isascii() and c.isalnum() else "_" for c in host)
