"""Tests for short URL creation."""

import pytest
from datetime import timedelta

from shortener.database import InMemoryURLStore
from shortener.exceptions import (
    ConflictError,
    InvalidInputError,
    ResourceExhaustedError,
    UnavailableError,
)
from shortener.services import ShortcodeService
from shortener.shortcode import ShortCodeGenerator


class SequenceGenerator(ShortCodeGenerator):
    """Hands out codes from a fixed list, repeating the last one."""

    def __init__(self, codes):
        super().__init__()
        self.codes = list(codes)
        self.calls = 0

    def generate_random(self, length=None):
        self.calls += 1
        if len(self.codes) > 1:
            return self.codes.pop(0)
        return self.codes[0]


class BrokenStore(InMemoryURLStore):
    async def insert(self, record):
        raise UnavailableError("connection refused")


@pytest.mark.asyncio
class TestCreateShortUrl:
    """Test ShortcodeService.create_short_url."""

    async def test_default_validity(self, shortcode_service, store, clock, sample_urls):
        result = await shortcode_service.create_short_url(sample_urls[0])

        assert result.shortlink == f"http://testserver/{result.short_code}"
        assert len(result.short_code) == 7
        assert result.expires_at == clock.now + timedelta(minutes=30)
        assert result.expiry == "2024-01-01T12:30:00.000Z"

        record = await store.get(result.short_code)
        assert record.long_url == sample_urls[0]
        assert record.created_at == clock.now
        assert record.clicks == []

    async def test_validity_as_string(self, shortcode_service, clock, sample_urls):
        result = await shortcode_service.create_short_url(sample_urls[0], validity="120")
        assert result.expires_at == clock.now + timedelta(minutes=120)

    async def test_custom_code(self, shortcode_service, store, sample_urls):
        result = await shortcode_service.create_short_url(sample_urls[1], custom_code="my-repo")

        assert result.short_code == "my-repo"
        assert result.shortlink == "http://testserver/my-repo"
        assert (await store.get("my-repo")).long_url == sample_urls[1]

    async def test_empty_custom_code_is_ignored(self, shortcode_service, sample_urls):
        result = await shortcode_service.create_short_url(sample_urls[0], custom_code="")
        assert len(result.short_code) == 7

    async def test_duplicate_custom_code(self, shortcode_service, store, sample_urls):
        await shortcode_service.create_short_url(sample_urls[0], custom_code="taken")

        with pytest.raises(ConflictError) as exc_info:
            await shortcode_service.create_short_url(sample_urls[1], custom_code="taken")

        assert exc_info.value.message == "Custom shortcode already in use."
        assert (await store.get("taken")).long_url == sample_urls[0]

    async def test_same_url_gets_distinct_codes(self, shortcode_service, sample_urls):
        first = await shortcode_service.create_short_url(sample_urls[0])
        second = await shortcode_service.create_short_url(sample_urls[0])
        assert first.short_code != second.short_code

    @pytest.mark.parametrize("url,message", [
        (None, "URL is required."),
        ("", "URL is required."),
        ("not-a-url", "Invalid URL format."),
        ("javascript:alert(1)", "Invalid URL format."),
    ])
    async def test_invalid_url(self, shortcode_service, url, message):
        with pytest.raises(InvalidInputError) as exc_info:
            await shortcode_service.create_short_url(url)
        assert exc_info.value.message == message

    @pytest.mark.parametrize("validity", [0, -1, 43201, "abc", "1.5", 2.5, True, "5\n", "\u0661\u0662"])
    async def test_invalid_validity(self, shortcode_service, store, validity, sample_urls):
        with pytest.raises(InvalidInputError) as exc_info:
            await shortcode_service.create_short_url(sample_urls[0], validity=validity)

        assert "Validity must be a positive integer" in exc_info.value.message
        assert await store.list_records(limit=10) == []

    @pytest.mark.parametrize("code", ["ab", "a" * 21, "has space", "bad!code", "abc\n"])
    async def test_invalid_custom_code(self, shortcode_service, code, sample_urls):
        with pytest.raises(InvalidInputError) as exc_info:
            await shortcode_service.create_short_url(sample_urls[0], custom_code=code)
        assert "3-20 characters" in exc_info.value.message

    async def test_url_is_checked_before_validity(self, shortcode_service):
        with pytest.raises(InvalidInputError) as exc_info:
            await shortcode_service.create_short_url("nope", validity=-1, custom_code="!")
        assert exc_info.value.message == "Invalid URL format."

    async def test_validity_is_checked_before_shortcode(self, shortcode_service, sample_urls):
        with pytest.raises(InvalidInputError) as exc_info:
            await shortcode_service.create_short_url(sample_urls[0], validity=0, custom_code="!")
        assert "Validity" in exc_info.value.message

    async def test_collision_retry(self, store, logger, clock, sample_urls):
        await ShortcodeService(store, "http://testserver", clock=clock).create_short_url(
            sample_urls[0], custom_code="taken"
        )
        generator = SequenceGenerator(["taken", "taken", "fresh"])
        service = ShortcodeService(
            store, "http://testserver", short_code_generator=generator, logger=logger, clock=clock
        )

        result = await service.create_short_url(sample_urls[1])

        assert result.short_code == "fresh"
        assert generator.calls == 3

    async def test_collision_exhaustion(self, store, logger, clock, sample_urls):
        await ShortcodeService(store, "http://testserver", clock=clock).create_short_url(
            sample_urls[0], custom_code="taken"
        )
        generator = SequenceGenerator(["taken"])
        service = ShortcodeService(
            store,
            "http://testserver",
            short_code_generator=generator,
            logger=logger,
            max_collision_retries=3,
            clock=clock,
        )

        with pytest.raises(ResourceExhaustedError) as exc_info:
            await service.create_short_url(sample_urls[1])

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Unable to generate unique shortcode. Please try again."
        assert generator.calls == 3

    async def test_store_failure_propagates(self, logger, clock, sample_urls):
        service = ShortcodeService(BrokenStore(), "http://testserver", logger=logger, clock=clock)

        with pytest.raises(UnavailableError) as exc_info:
            await service.create_short_url(sample_urls[0])

        assert exc_info.value.client_message == "Internal Server Error"
