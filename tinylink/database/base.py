"""Abstract base class for link store implementations."""

from abc import ABC, abstractmethod
from typing import Optional, List
from datetime import datetime

from .models import Link


class DuplicateCodeError(Exception):
    """Raised by a store when an insert violates code uniqueness."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Short code '{code}' already exists")


class LinkStore(ABC):
    """Abstract base class for link store operations.

    Implementations must enforce code uniqueness on insert and perform the
    click counter bump as a single atomic relative update. Driver failures
    and timeouts are raised as StoreUnavailableError.
    """

    @abstractmethod
    async def find(self, code: str) -> Optional[Link]:
        """Get the link stored under a code.

        Args:
            code: The short code to lookup

        Returns:
            The link if found, None otherwise
        """
        pass

    @abstractmethod
    async def insert(self, link: Link) -> Link:
        """Persist a new link.

        Args:
            link: The link to store (its id is ignored)

        Returns:
            The stored link including its assigned id

        Raises:
            DuplicateCodeError: If the code is already present
        """
        pass

    @abstractmethod
    async def update_click_stats(
        self,
        code: str,
        clicked_at: datetime,
        increment: int = 1,
    ) -> Optional[Link]:
        """Atomically add to the click counter and set the last click time.

        Args:
            code: The short code to update
            clicked_at: Timestamp of the click
            increment: Amount added to the current counter value

        Returns:
            The updated link, or None if the code is absent
        """
        pass

    @abstractmethod
    async def delete(self, code: str) -> bool:
        """Delete the link stored under a code.

        Args:
            code: The short code to delete

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[Link]:
        """List every link, most recently created first."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is reachable.

        Returns:
            True if healthy, False otherwise
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close store connections."""
        pass
