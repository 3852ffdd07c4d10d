"""Post-login redirect target handling."""

from urllib.parse import urlencode, urljoin


def validate_redirect(candidate: str | None) -> str | None:
    """Return ``candidate`` if it is a local path, else None.

    Only paths starting with a single ``/`` are local. ``//host`` is a
    protocol-relative URL and leaves the site, as does anything else.
    """
    if not isinstance(candidate, str) or not candidate:
        return None
    if not candidate.startswith("/") or candidate.startswith("//"):
        return None
    return candidate


def absolute_url(base_url: str, location: str) -> str:
    """Resolve a configured path against the request's base URL.

    Absolute URLs are returned unchanged.
    """
    if not base_url:
        return location
    return urljoin(base_url, location)


def with_error(url: str, code: str) -> str:
    """Append ``error=<code>`` to a URL's query string."""
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode({'error': code})}"
