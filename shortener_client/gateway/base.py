"""Abstract base class for remote link gateways."""

from abc import ABC, abstractmethod
from typing import List, Optional
from datetime import datetime

from ..errors import ShortenerClientError
from .models import Link, QrImage


class LinkGatewayBase(ABC):
    """Contract for the remote authority that stores the user's links.

    Each operation is a single round trip: no caching, no retries and no
    ordering guarantees beyond one request, one response.
    """

    def __init__(self, base_url: str):
        """Initialize gateway.

        Args:
            base_url: Backend base URL
        """
        self.base_url = base_url

    @abstractmethod
    async def list_mine(self) -> List[Link]:
        """Fetch all links owned by the authenticated user.

        Returns:
            Links in the order the backend reports them (may be empty)

        Raises:
            TransportError: On network failure
            AuthError: If the session is missing or expired
        """
        pass

    @abstractmethod
    async def create(
        self,
        original_url: str,
        expired_in: Optional[datetime] = None,
    ) -> Link:
        """Create a new short link.

        Not idempotent: two calls with the same input create two links.

        Args:
            original_url: The original long URL
            expired_in: Optional expiration date

        Returns:
            The link as confirmed by the backend

        Raises:
            ValidationError: If the backend rejects the input
            TransportError: On network failure
        """
        pass

    @abstractmethod
    async def delete(self, link_id: str) -> None:
        """Delete a link by id.

        Args:
            link_id: The link to delete

        Raises:
            NotFoundError: If the backend has no such link for this user
            TransportError: On network failure
        """
        pass

    @abstractmethod
    async def request_qr_code(self, link_id: str) -> QrImage:
        """Request a QR code image for the link's shortened URL.

        Args:
            link_id: The link to encode

        Raises:
            NotFoundError: If the backend has no such link
            TransportError: On network failure
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release transport resources."""
        pass

    async def health_check(self) -> bool:
        """Check that the backend answers an authenticated listing.

        Returns:
            True if healthy, False otherwise
        """
        try:
            await self.list_mine()
        except ShortenerClientError:
            return False
        return True

    async def __aenter__(self) -> "LinkGatewayBase":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
