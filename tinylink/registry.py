"""Short-code registry: validation, uniqueness and click accounting rules."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Callable, Iterator, List, Optional
from datetime import datetime, timezone

from .database.base import LinkStore, DuplicateCodeError
from .database.models import Link
from .common.validators import is_valid_url, is_valid_short_code, normalize_url
from .errors import (
    InvalidTargetError,
    InvalidCodeError,
    CodeAlreadyExistsError,
    NotFoundError,
    StoreUnavailableError,
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LinkListing:
    """Newest-first links, optionally filtered by a case-insensitive substring.

    Holds one snapshot fetched from the store. Each iteration filters it
    again, so a listing can be iterated any number of times.
    """

    def __init__(self, links: List[Link], filter_text: Optional[str] = None):
        self._links = links
        term = (filter_text or "").strip()
        self.filter_text = term.lower() or None

    def _matches(self, link: Link) -> bool:
        return (
            self.filter_text in link.code.lower()
            or self.filter_text in link.target.lower()
        )

    def __iter__(self) -> Iterator[Link]:
        if self.filter_text is None:
            return iter(self._links)
        return (link for link in self._links if self._matches(link))

    def __repr__(self) -> str:
        return f"LinkListing(filter={self.filter_text!r}, snapshot={len(self._links)})"


class LinkRegistry:
    """Rules layer over a link store.

    The registry keeps no state between calls; the store is injected and
    its lifecycle belongs to the caller.
    """

    def __init__(
        self,
        store: LinkStore,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], datetime] = utc_now,
        max_target_length: Optional[int] = None,
    ):
        """Initialize the registry.

        Args:
            store: Link store instance
            logger: Optional logger
            clock: Returns the current time for created_at and click stamps
            max_target_length: Optional upper bound on target URL length
        """
        self.store = store
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock
        self.max_target_length = max_target_length

    @asynccontextmanager
    async def _store_call(self, operation: str):
        """Translate transport failures escaping a store into StoreUnavailableError."""
        try:
            yield
        except StoreUnavailableError:
            self.logger.error(f"Store unavailable during {operation}")
            raise
        except (asyncio.TimeoutError, TimeoutError, ConnectionError, OSError) as e:
            self.logger.error(f"Store call failed during {operation}: {e}")
            raise StoreUnavailableError(f"Link store unavailable: {e}") from e

    async def create_link(self, target: str, code: str) -> Link:
        """Create a new link.

        Args:
            target: Absolute http(s) URL to redirect to
            code: Short code, 6-8 letters or digits

        Returns:
            The stored link including its assigned id

        Raises:
            InvalidTargetError: If the target is not an absolute http(s) URL
            InvalidCodeError: If the code does not match the pattern
            CodeAlreadyExistsError: If the code is taken
            StoreUnavailableError: If the store call fails
        """
        is_valid, error = is_valid_url(target, self.max_target_length)
        if not is_valid:
            raise InvalidTargetError(f"Invalid URL: {error}")
        normalized = normalize_url(target)

        is_valid, error = is_valid_short_code(code)
        if not is_valid:
            raise InvalidCodeError(error)

        async with self._store_call("create"):
            if await self.store.find(code) is not None:
                raise CodeAlreadyExistsError(f"Short code '{code}' already exists")

            try:
                link = await self.store.insert(Link(
                    code=code,
                    target=normalized,
                    created_at=self.clock(),
                ))
            except DuplicateCodeError as e:
                # Lost the race against a concurrent create
                self.logger.warning(f"Store rejected duplicate short code: {code}")
                raise CodeAlreadyExistsError(f"Short code '{code}' already exists") from e

        self.logger.info(f"Created link: {code} -> {normalized}")
        return link

    async def get_link(self, code: str) -> Link:
        """Get the link stored under a code.

        Raises:
            NotFoundError: If no link has this code
        """
        async with self._store_call("get"):
            link = await self.store.find(code)

        if link is None:
            self.logger.warning(f"Short code not found: {code}")
            raise NotFoundError(f"Short code '{code}' not found")

        self.logger.debug(f"Retrieved link: {code}")
        return link

    async def resolve_and_record_click(self, code: str) -> Link:
        """Count a visit and return the link to redirect to.

        The counter bump is a single atomic store update, confirmed before
        this returns. The redirect destination is the returned link's target.

        Raises:
            NotFoundError: If no link has this code; nothing is mutated
        """
        async with self._store_call("click"):
            link = await self.store.update_click_stats(code, clicked_at=self.clock())

        if link is None:
            self.logger.warning(f"Short code not found: {code}")
            raise NotFoundError(f"Short code '{code}' not found")

        self.logger.debug(f"Recorded click: {code} -> {link.target} ({link.clicks})")
        return link

    async def delete_link(self, code: str) -> None:
        """Delete the link stored under a code.

        Raises:
            NotFoundError: If no link has this code
        """
        async with self._store_call("delete"):
            deleted = await self.store.delete(code)

        if not deleted:
            self.logger.warning(f"Short code not found: {code}")
            raise NotFoundError(f"Short code '{code}' not found")

        self.logger.info(f"Deleted link: {code}")

    async def list_links(self, filter_text: Optional[str] = None) -> LinkListing:
        """List links newest first.

        Args:
            filter_text: Optional case-insensitive substring matched
                against code and target; blank means no filter

        Returns:
            A re-iterable listing over one store snapshot
        """
        async with self._store_call("list"):
            links = await self.store.list_all()

        return LinkListing(links, filter_text)
