"""URL building utilities for the shortener client."""

from urllib.parse import quote


def build_endpoint_url(base_url: str, path: str, **path_params: str) -> str:
    """Build a complete endpoint URL.

    Path parameters are URL-quoted before being substituted into ``path``.

    Args:
        base_url: Backend base URL (e.g., https://api.example.com/api/v1)
        path: Endpoint path, optionally with ``{name}`` placeholders
        **path_params: Values for the placeholders

    Returns:
        Complete endpoint URL
    """
    base = base_url.rstrip("/")
    if path_params:
        path = path.format(**{k: quote(str(v), safe="") for k, v in path_params.items()})
    path = path.strip("/")

    if path:
        return f"{base}/{path}"
    return base


def truncate_for_display(url: str, length: int = 30) -> str:
    """Shorten a long URL for list display (``https://example.com/ve...``).

    Args:
        url: The URL to shorten
        length: Number of characters kept before the ellipsis

    Returns:
        Display string
    """
    if not url:
        return ""
    if len(url) <= length:
        return url
    return f"{url[:length]}..."
