"""In-memory link store.

Suitable for tests and single-process deployments. All mutations run under
one asyncio.Lock, which gives the same uniqueness and atomic-increment
guarantees a database constraint would.
"""

import asyncio
import itertools
import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Optional, List, Dict, Tuple

from .base import LinkStore, DuplicateCodeError
from .models import Link


class InMemoryLinkStore(LinkStore):
    """Dictionary-backed link store."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        # code -> (insertion sequence, link)
        self._links: Dict[str, Tuple[int, Link]] = {}
        self._sequence = itertools.count()
        self._lock = asyncio.Lock()

    async def find(self, code: str) -> Optional[Link]:
        entry = self._links.get(code)
        if entry is None:
            return None
        return replace(entry[1])

    async def insert(self, link: Link) -> Link:
        async with self._lock:
            if link.code in self._links:
                self.logger.warning(f"Short code already exists: {link.code}")
                raise DuplicateCodeError(link.code)

            stored = replace(link, id=uuid.uuid4().hex)
            self._links[link.code] = (next(self._sequence), stored)

        self.logger.debug(f"Stored link: {stored.code} -> {stored.target}")
        return replace(stored)

    async def update_click_stats(
        self,
        code: str,
        clicked_at: datetime,
        increment: int = 1,
    ) -> Optional[Link]:
        async with self._lock:
            entry = self._links.get(code)
            if entry is None:
                return None

            sequence, link = entry
            updated = replace(
                link,
                clicks=link.clicks + increment,
                last_clicked_at=clicked_at,
            )
            self._links[code] = (sequence, updated)

        return replace(updated)

    async def delete(self, code: str) -> bool:
        async with self._lock:
            return self._links.pop(code, None) is not None

    async def list_all(self) -> List[Link]:
        entries = sorted(
            self._links.values(),
            key=lambda entry: (entry[1].created_at, entry[0]),
            reverse=True,
        )
        return [replace(link) for _, link in entries]

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        self.logger.debug(f"Closing in-memory store with {len(self._links)} links")
