"""Client core for a URL-shortening service."""

from .store import LinkStore
from .progress import ProgressTracker, init_progress, get_progress
from .forms import ShortLinkForm, shape_link_input
from .gateway import HttpLinkGateway, Link, LinkGatewayBase, QrImage

__all__ = [
    "LinkStore",
    "ProgressTracker",
    "init_progress",
    "get_progress",
    "ShortLinkForm",
    "shape_link_input",
    "HttpLinkGateway",
    "Link",
    "LinkGatewayBase",
    "QrImage",
]

__version__ = "1.0.0"
