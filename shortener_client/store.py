"""Link store: the client's view of the user's links, kept in sync with the backend."""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Optional, Set, Tuple
from datetime import datetime

from .common.validators import is_valid_url
from .errors import (
    AlreadyInProgress,
    InvalidInput,
    NotFoundError,
    StoreClosedError,
)
from .gateway.base import LinkGatewayBase
from .gateway.models import Link, QrImage
from .progress import ProgressTracker, get_progress

DELETE_POLICIES = ("coalesce", "reject")


class LinkStore:
    """Owns the ordered collection of the current user's links.

    Every change to the collection is committed only after the backend has
    confirmed it, and each commit runs without an ``await`` in the middle, so
    commits are atomic on the event loop. Between a refresh and a per-link
    mutation the last one to commit wins.
    """

    def __init__(
        self,
        gateway: LinkGatewayBase,
        progress: Optional[ProgressTracker] = None,
        logger: Optional[logging.Logger] = None,
        duplicate_delete_policy: str = "coalesce",
    ):
        """Initialize link store.

        Args:
            gateway: Remote link gateway
            progress: Progress tracker (defaults to the process-wide one)
            logger: Optional logger
            duplicate_delete_policy: "coalesce" joins a second delete of the same
                id onto the running one, "reject" raises AlreadyInProgress
        """
        if duplicate_delete_policy not in DELETE_POLICIES:
            raise ValueError(f"Unknown duplicate delete policy: {duplicate_delete_policy}")

        self.gateway = gateway
        self.progress = progress or get_progress()
        self.logger = logger or logging.getLogger(__name__)
        self.duplicate_delete_policy = duplicate_delete_policy

        self._links: List[Link] = []
        self._qr_cache: Dict[str, QrImage] = {}
        self._pending_deletes: Dict[str, asyncio.Task] = {}
        self._pending_qr: Dict[str, asyncio.Task] = {}
        self._in_flight: Set[asyncio.Task] = set()
        # QR fetches whose link was removed while they were running
        self._stale_qr: Set[str] = set()
        self._closed = False

    @classmethod
    def from_config(cls, config, gateway: LinkGatewayBase, **kwargs) -> "LinkStore":
        """Build a store from a ``Config`` instance."""
        return cls(
            gateway=gateway,
            duplicate_delete_policy=config.duplicate_delete_policy,
            **kwargs,
        )

    # Snapshot reads

    def current_links(self) -> Tuple[Link, ...]:
        """Return an immutable snapshot of the collection in display order."""
        return tuple(self._links)

    def get_link(self, link_id: str) -> Optional[Link]:
        """Look up a held link by id.

        Args:
            link_id: Link id

        Returns:
            The link, or None if the collection does not hold it
        """
        for link in self._links:
            if link.id == link_id:
                return link
        return None

    def cached_qr_code(self, link_id: str) -> Optional[QrImage]:
        """Return the cached QR code for a link without fetching it."""
        return self._qr_cache.get(link_id)

    def __len__(self) -> int:
        """Number of links held."""
        return len(self._links)

    def __contains__(self, link_id: object) -> bool:
        """Check whether a link id is held."""
        return any(link.id == link_id for link in self._links)

    @property
    def closed(self) -> bool:
        """Whether close() has been called."""
        return self._closed

    # Operations

    async def refresh(self) -> List[Link]:
        """Replace the collection with the backend's current listing.

        Returns:
            The links now held, in backend order

        Raises:
            TransportError, AuthError: The collection is left unchanged
        """
        self._ensure_open()
        async with self.progress.track():
            links = await self._call_gateway(self.gateway.list_mine())

        if self._closed:
            self.logger.debug("Store closed while refreshing, discarding result")
            return list(links)

        seen = set()
        unique = []
        for link in links:
            if link.id in seen:
                self.logger.warning(f"Backend listed link {link.id} twice, keeping the first")
                continue
            seen.add(link.id)
            unique.append(link)

        self._links = unique
        for link_id in set(self._qr_cache) | set(self._pending_qr):
            if link_id not in seen:
                self._evict_qr_code(link_id)
        self.logger.info(f"Refreshed links: {len(unique)} held")
        return list(unique)

    async def create_link(
        self,
        original_url: str,
        expired_in: Optional[datetime] = None,
    ) -> Link:
        """Create a short link and append it once the backend confirms it.

        Args:
            original_url: The original long URL
            expired_in: Optional expiration date

        Returns:
            The created link

        Raises:
            InvalidInput: If the URL is missing or malformed (no request is made)
            ValidationError, TransportError, AuthError: Nothing is added
        """
        self._ensure_open()
        is_valid, error = is_valid_url(original_url)
        if not is_valid:
            raise InvalidInput(error)

        async with self.progress.track():
            link = await self._call_gateway(self.gateway.create(original_url.strip(), expired_in))

        if self._closed:
            self.logger.debug(f"Store closed while creating {link.id}, discarding result")
            return link

        for index, existing in enumerate(self._links):
            if existing.id == link.id:
                # A refresh that finished first already brought this link in
                self._links[index] = link
                break
        else:
            self._links.append(link)

        self.logger.info(f"Created link: {link.shortened_url} -> {link.original_url}")
        return link

    async def delete_link(self, link_id: str) -> None:
        """Delete a link and drop it from the collection.

        A link the backend no longer knows counts as deleted. Only one delete
        per id is sent at a time.

        Raises:
            AlreadyInProgress: With the "reject" policy, if this id is being deleted
            TransportError, AuthError: The entry stays in the collection
        """
        self._ensure_open()
        pending = self._pending_deletes.get(link_id)
        if pending is not None:
            if self.duplicate_delete_policy == "reject":
                raise AlreadyInProgress("delete", link_id)
            self.logger.debug(f"Joining in-flight delete of {link_id}")
            await asyncio.shield(pending)
            return

        await self._run_once(self._pending_deletes, link_id, self._delete_remote)

    async def get_qr_code(self, link_id: str) -> QrImage:
        """Return the QR code for a link, fetching it once per link.

        Concurrent callers for the same id share a single backend request.
        Failures are not cached.
        """
        self._ensure_open()
        cached = self._qr_cache.get(link_id)
        if cached is not None:
            self.logger.debug(f"QR cache hit for {link_id}")
            return cached

        pending = self._pending_qr.get(link_id)
        if pending is not None:
            self.logger.debug(f"Joining in-flight QR request for {link_id}")
            return await asyncio.shield(pending)

        return await self._run_once(self._pending_qr, link_id, self._fetch_qr_code)

    async def close(self) -> None:
        """Tear the store down.

        Requests already sent still run to completion before the gateway is
        closed, but their results are no longer applied to the collection.
        """
        if self._closed:
            return
        self._closed = True
        pending = (
            list(self._in_flight)
            + list(self._pending_deletes.values())
            + list(self._pending_qr.values())
        )
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        await self.gateway.close()
        self.logger.info("Link store closed")

    async def __aenter__(self) -> "LinkStore":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # Internals

    async def _run_once(
        self,
        registry: Dict[str, asyncio.Task],
        link_id: str,
        operation: Callable[[str], Awaitable],
    ):
        # Registered before the first await so a second caller always sees it
        task = asyncio.ensure_future(operation(link_id))
        registry[link_id] = task

        def unregister(done: asyncio.Task) -> None:
            if registry.get(link_id) is done:
                del registry[link_id]

        task.add_done_callback(unregister)
        return await asyncio.shield(task)

    async def _call_gateway(self, call: Awaitable):
        # Runs as its own task so close() can wait for it before closing the gateway
        task = asyncio.ensure_future(call)
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return await asyncio.shield(task)

    async def _delete_remote(self, link_id: str) -> None:
        async with self.progress.track():
            try:
                await self.gateway.delete(link_id)
            except NotFoundError:
                self.logger.info(f"Link {link_id} already gone on the backend", extra={"link_id": link_id})

        if self._closed:
            self.logger.debug(f"Store closed while deleting {link_id}, discarding result")
            return

        self._links = [link for link in self._links if link.id != link_id]
        self._evict_qr_code(link_id)
        self.logger.info(f"Deleted link {link_id}", extra={"link_id": link_id})

    async def _fetch_qr_code(self, link_id: str) -> QrImage:
        try:
            async with self.progress.track():
                image = await self.gateway.request_qr_code(link_id)
        finally:
            stale = link_id in self._stale_qr
            self._stale_qr.discard(link_id)

        if stale:
            self.logger.debug(f"Link {link_id} removed while fetching its QR code, not caching")
        elif not self._closed:
            self._qr_cache[link_id] = image
            self.logger.debug(f"Cached QR code for {link_id}", extra={"link_id": link_id})
        return image

    def _evict_qr_code(self, link_id: str) -> None:
        self._qr_cache.pop(link_id, None)
        if link_id in self._pending_qr:
            self._stale_qr.add(link_id)

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreClosedError("Link store is closed")
