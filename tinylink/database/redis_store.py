"""Redis implementation of the link store.

Each link is a hash at ``{prefix}:link:{code}``; a sorted set at
``{prefix}:links`` scored by creation time gives the newest-first listing.
Inserts, click bumps and deletes run as Lua scripts so each one is atomic
on the server.
"""

import logging
import uuid
from datetime import datetime
from typing import Optional, List, Dict

import redis.asyncio as redis
from redis.exceptions import RedisError

from ..errors import StoreUnavailableError
from .base import LinkStore, DuplicateCodeError
from .models import Link


# KEYS: link hash, index zset. ARGV: score, code, id, target, created_at
INSERT_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 1 then
    return 0
end
redis.call('HSET', KEYS[1], 'id', ARGV[3], 'code', ARGV[2], 'target', ARGV[4],
           'clicks', 0, 'created_at', ARGV[5])
redis.call('ZADD', KEYS[2], ARGV[1], ARGV[2])
return 1
"""

# KEYS: link hash. ARGV: increment, clicked_at
CLICK_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 0 then
    return false
end
redis.call('HINCRBY', KEYS[1], 'clicks', ARGV[1])
redis.call('HSET', KEYS[1], 'last_clicked', ARGV[2])
return redis.call('HGETALL', KEYS[1])
"""

# KEYS: link hash, index zset. ARGV: code
DELETE_SCRIPT = """
local removed = redis.call('DEL', KEYS[1])
redis.call('ZREM', KEYS[2], ARGV[1])
return removed
"""


def _pairs_to_dict(values: List[str]) -> Dict[str, str]:
    """Convert a flat HGETALL reply from a script into a dict."""
    return dict(zip(values[::2], values[1::2]))


class RedisLinkStore(LinkStore):
    """Redis link store."""

    def __init__(
        self,
        redis_url: str,
        key_prefix: str = "tinylink",
        socket_timeout_seconds: Optional[float] = 10,
        logger: Optional[logging.Logger] = None,
        client: Optional[redis.Redis] = None,
    ):
        """Initialize Redis store.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            key_prefix: Namespace for all keys written by this store
            socket_timeout_seconds: Socket timeout for every command
            logger: Optional logger instance
            client: Optional pre-built client (takes precedence over redis_url)
        """
        self.redis_url = redis_url
        self.key_prefix = key_prefix
        self.logger = logger or logging.getLogger(__name__)
        self.client = client or redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_timeout=socket_timeout_seconds,
            socket_connect_timeout=socket_timeout_seconds,
        )
        self._insert = self.client.register_script(INSERT_SCRIPT)
        self._click = self.client.register_script(CLICK_SCRIPT)
        self._delete = self.client.register_script(DELETE_SCRIPT)

    def get_link_key(self, code: str) -> str:
        """Key of the hash holding one link."""
        return f"{self.key_prefix}:link:{code}"

    def get_index_key(self) -> str:
        """Key of the creation-time sorted set."""
        return f"{self.key_prefix}:links"

    def _unavailable(self, operation: str, error: Exception) -> StoreUnavailableError:
        self.logger.error(f"Redis {operation} error: {error}")
        return StoreUnavailableError(f"Link store unavailable: {error}")

    async def find(self, code: str) -> Optional[Link]:
        try:
            data = await self.client.hgetall(self.get_link_key(code))
        except RedisError as e:
            raise self._unavailable("find", e) from e
        return Link.from_dict(data) if data else None

    async def insert(self, link: Link) -> Link:
        link_id = uuid.uuid4().hex
        try:
            created = await self._insert(
                keys=[self.get_link_key(link.code), self.get_index_key()],
                args=[
                    link.created_at.timestamp(),
                    link.code,
                    link_id,
                    link.target,
                    link.created_at.isoformat(),
                ],
            )
        except RedisError as e:
            raise self._unavailable("insert", e) from e

        if not created:
            self.logger.warning(f"Short code already exists: {link.code}")
            raise DuplicateCodeError(link.code)

        self.logger.debug(f"Stored link: {link.code} -> {link.target}")
        return Link(
            id=link_id,
            code=link.code,
            target=link.target,
            created_at=link.created_at,
        )

    async def update_click_stats(
        self,
        code: str,
        clicked_at: datetime,
        increment: int = 1,
    ) -> Optional[Link]:
        try:
            values = await self._click(
                keys=[self.get_link_key(code)],
                args=[increment, clicked_at.isoformat()],
            )
        except RedisError as e:
            raise self._unavailable("click", e) from e

        if not values:
            return None
        return Link.from_dict(_pairs_to_dict(values))

    async def delete(self, code: str) -> bool:
        try:
            removed = await self._delete(
                keys=[self.get_link_key(code), self.get_index_key()],
                args=[code],
            )
        except RedisError as e:
            raise self._unavailable("delete", e) from e
        return removed > 0

    async def list_all(self) -> List[Link]:
        try:
            codes = await self.client.zrevrange(self.get_index_key(), 0, -1)
            async with self.client.pipeline(transaction=False) as pipe:
                for code in codes:
                    pipe.hgetall(self.get_link_key(code))
                rows = await pipe.execute()
        except RedisError as e:
            raise self._unavailable("list", e) from e

        # A link deleted between the two calls comes back empty
        return [Link.from_dict(row) for row in rows if row]

    async def health_check(self) -> bool:
        try:
            await self.client.ping()
            return True
        except RedisError as e:
            self.logger.error(f"Health check failed: {e}")
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        await self.client.aclose()
        self.logger.info("Redis connection closed")
