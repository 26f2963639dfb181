"""Tests for the link registry."""

import asyncio
import pytest
from unittest.mock import AsyncMock

from tinylink.registry import LinkRegistry, LinkListing
from tinylink.database.base import DuplicateCodeError
from tinylink.database.memory import InMemoryLinkStore
from tinylink.errors import (
    InvalidTargetError,
    InvalidCodeError,
    CodeAlreadyExistsError,
    NotFoundError,
    StoreUnavailableError,
)


@pytest.mark.asyncio
class TestCreateLink:
    """Test link creation rules."""

    async def test_create_link(self, registry, sample_urls):
        link = await registry.create_link(sample_urls[0], "abc123")

        assert link.code == "abc123"
        assert link.target == sample_urls[0]
        assert link.clicks == 0
        assert link.last_clicked_at is None
        assert link.id is not None

    async def test_create_then_get(self, registry, clock):
        created = await registry.create_link("HTTPS://X.com", "abc123")
        fetched = await registry.get_link("abc123")

        assert fetched.target == "https://x.com/"
        assert fetched.clicks == 0
        assert fetched.id == created.id
        assert fetched.created_at == clock.calls[0]

    @pytest.mark.parametrize("code", ["abc", "abc12", "abcdefghi", "abc-12", "", None])
    async def test_invalid_code(self, registry, code):
        with pytest.raises(InvalidCodeError):
            await registry.create_link("https://x.com", code)

    @pytest.mark.parametrize("target", [
        "ftp://x.com", "x.com", "", None, "mailto:a@b.com", "https://",
        "http://exa mple.com", "http://a<b>.com/",
    ])
    async def test_invalid_target(self, registry, target):
        with pytest.raises(InvalidTargetError):
            await registry.create_link(target, "abc123")

    async def test_target_stored_percent_encoded(self, registry):
        link = await registry.create_link("http://x.com/a b?q=c d", "enc123")

        assert link.target == "http://x.com/a%20b?q=c%20d"
        assert (await registry.resolve_and_record_click("enc123")).target == link.target

    async def test_target_checked_before_code(self, registry):
        with pytest.raises(InvalidTargetError):
            await registry.create_link("ftp://x.com", "abc")

    async def test_max_target_length(self, store):
        registry = LinkRegistry(store=store, max_target_length=30)

        with pytest.raises(InvalidTargetError, match="too long"):
            await registry.create_link("https://example.com/" + "a" * 40, "abc123")

    async def test_duplicate_code(self, registry, sample_urls):
        await registry.create_link(sample_urls[0], "dup1234")

        with pytest.raises(CodeAlreadyExistsError):
            await registry.create_link(sample_urls[1], "dup1234")

        with pytest.raises(CodeAlreadyExistsError):
            await registry.create_link(sample_urls[0], "dup1234")

    async def test_codes_are_case_sensitive(self, registry):
        await registry.create_link("https://a.com", "AbCdEf")
        await registry.create_link("https://b.com", "abcdef")

        assert (await registry.get_link("AbCdEf")).target == "https://a.com/"
        assert (await registry.get_link("abcdef")).target == "https://b.com/"

    async def test_store_constraint_maps_to_code_exists(self, logger):
        store = AsyncMock()
        store.find.return_value = None
        store.insert.side_effect = DuplicateCodeError("race123")
        registry = LinkRegistry(store=store, logger=logger)

        with pytest.raises(CodeAlreadyExistsError):
            await registry.create_link("https://x.com", "race123")

    async def test_concurrent_creates_single_winner(self, registry):
        results = await asyncio.gather(
            *[registry.create_link(f"https://x.com/{i}", "same123") for i in range(20)],
            return_exceptions=True,
        )

        created = [r for r in results if not isinstance(r, Exception)]
        rejected = [r for r in results if isinstance(r, CodeAlreadyExistsError)]
        assert len(created) == 1
        assert len(rejected) == 19

    async def test_invalid_input_never_touches_store(self, logger):
        store = AsyncMock()
        registry = LinkRegistry(store=store, logger=logger)

        with pytest.raises(InvalidCodeError):
            await registry.create_link("https://x.com", "bad")

        store.find.assert_not_called()
        store.insert.assert_not_called()


@pytest.mark.asyncio
class TestLookupAndClicks:
    """Test lookup and click accounting."""

    async def test_get_missing(self, registry):
        with pytest.raises(NotFoundError):
            await registry.get_link("nothere")

    async def test_resolve_increments(self, registry, clock):
        await registry.create_link("https://x.com/a", "abc123")

        first = await registry.resolve_and_record_click("abc123")
        second = await registry.resolve_and_record_click("abc123")

        assert first.target == "https://x.com/a"
        assert first.clicks == 1
        assert second.clicks == 2
        assert second.last_clicked_at == clock.calls[-1]

    async def test_resolve_missing_does_not_mutate(self, registry, store):
        await registry.create_link("https://x.com", "abc123")
        before = await store.list_all()

        with pytest.raises(NotFoundError):
            await registry.resolve_and_record_click("zzz999")

        assert await store.list_all() == before

    async def test_concurrent_clicks_not_lost(self, registry):
        await registry.create_link("https://x.com", "hot1234")
        await registry.resolve_and_record_click("hot1234")

        await asyncio.gather(*[registry.resolve_and_record_click("hot1234") for _ in range(100)])

        assert (await registry.get_link("hot1234")).clicks == 101

    async def test_clicks_isolated_per_code(self, registry):
        await registry.create_link("https://a.com", "aaaaaa")
        await registry.create_link("https://b.com", "bbbbbb")

        await registry.resolve_and_record_click("aaaaaa")

        assert (await registry.get_link("aaaaaa")).clicks == 1
        assert (await registry.get_link("bbbbbb")).clicks == 0


@pytest.mark.asyncio
class TestDeleteLink:
    """Test deletion and code reuse."""

    async def test_delete(self, registry):
        await registry.create_link("https://x.com", "abc123")

        await registry.delete_link("abc123")

        with pytest.raises(NotFoundError):
            await registry.get_link("abc123")

    async def test_delete_twice(self, registry):
        await registry.create_link("https://x.com", "abc123")
        await registry.delete_link("abc123")

        with pytest.raises(NotFoundError):
            await registry.delete_link("abc123")

    async def test_code_reuse_starts_fresh(self, registry):
        await registry.create_link("https://old.com", "abc123")
        await registry.resolve_and_record_click("abc123")
        await registry.delete_link("abc123")

        link = await registry.create_link("https://new.com", "abc123")

        assert link.clicks == 0
        assert link.target == "https://new.com/"
        assert link.last_clicked_at is None


@pytest.mark.asyncio
class TestListLinks:
    """Test listing and filtering."""

    async def _seed(self, registry):
        await registry.create_link("https://example.com/one", "first1")
        await registry.create_link("https://other.org/two", "EXAMPLE1")
        await registry.create_link("https://other.org/three", "third3")

    async def test_newest_first(self, registry):
        await self._seed(registry)

        codes = [link.code for link in await registry.list_links()]

        assert codes == ["third3", "EXAMPLE1", "first1"]

    async def test_filter_case_insensitive(self, registry):
        await self._seed(registry)

        codes = [link.code for link in await registry.list_links("example")]

        assert codes == ["EXAMPLE1", "first1"]

    async def test_filter_matches_target(self, registry):
        await self._seed(registry)

        codes = [link.code for link in await registry.list_links("OTHER.org/T")]

        assert codes == ["third3", "EXAMPLE1"]

    async def test_blank_filter_returns_all(self, registry):
        await self._seed(registry)

        assert len(list(await registry.list_links("   "))) == 3

    async def test_listing_is_restartable(self, registry):
        await self._seed(registry)

        listing = await registry.list_links("other")

        assert [link.code for link in listing] == [link.code for link in listing]
        assert isinstance(listing, LinkListing)

    async def test_empty(self, registry):
        assert list(await registry.list_links()) == []


@pytest.mark.asyncio
class TestStoreFailures:
    """Test StoreUnavailableError propagation."""

    @pytest.mark.parametrize("error", [asyncio.TimeoutError(), ConnectionRefusedError(), OSError("down")])
    async def test_transport_errors_translated(self, logger, error):
        store = AsyncMock()
        store.find.side_effect = error
        registry = LinkRegistry(store=store, logger=logger)

        with pytest.raises(StoreUnavailableError):
            await registry.get_link("abc123")

    async def test_store_unavailable_passes_through(self, logger):
        store = AsyncMock()
        store.update_click_stats.side_effect = StoreUnavailableError("timeout")
        registry = LinkRegistry(store=store, logger=logger)

        with pytest.raises(StoreUnavailableError, match="timeout"):
            await registry.resolve_and_record_click("abc123")

    async def test_failed_insert_leaves_nothing(self, logger):
        store = InMemoryLinkStore(logger=logger)
        store.insert = AsyncMock(side_effect=StoreUnavailableError())
        registry = LinkRegistry(store=store, logger=logger)

        with pytest.raises(StoreUnavailableError):
            await registry.create_link("https://x.com", "abc123")

        assert await store.find("abc123") is None
