"""Common utilities for the shortener client."""

from .validators import is_valid_url, is_valid_link_id
from .url_builder import build_endpoint_url, truncate_for_display
from .logging_config import setup_logging, get_logger

__all__ = [
    "is_valid_url",
    "is_valid_link_id",
    "build_endpoint_url",
    "truncate_for_display",
    "setup_logging",
    "get_logger",
]
