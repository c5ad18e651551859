"""Remote link gateway layer for the shortener client."""

from .base import LinkGatewayBase
from .http import HttpLinkGateway
from .models import Link, QrImage

__all__ = ["LinkGatewayBase", "HttpLinkGateway", "Link", "QrImage"]
