"""Validation utilities for the shortener client."""

from urllib.parse import urlparse
from typing import Tuple

MAX_URL_LENGTH = 2048


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate an absolute http(s) URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str) or not url.strip():
        return False, "URL can't be empty"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    try:
        result = urlparse(url.strip())
    except ValueError as e:
        return False, f"Invalid URL: {e}"

    if result.scheme not in ("http", "https"):
        return False, "Invalid URL: must use http or https protocol"

    if not result.netloc or not result.hostname:
        return False, "Invalid URL: must have a valid domain"

    return True, ""


def is_valid_link_id(link_id: str) -> Tuple[bool, str]:
    """Validate a link identifier before it is used in a request path.

    Args:
        link_id: Identifier assigned by the remote authority

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not link_id or not isinstance(link_id, str) or not link_id.strip():
        return False, "Link id is required"

    if "/" in link_id:
        return False, "Link id must not contain '/'"

    return True, ""
