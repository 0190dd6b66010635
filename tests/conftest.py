"""Pytest configuration and fixtures."""

import pytest
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

from httpx import ASGITransport, AsyncClient

from shortener.common.logging_config import setup_logging
from shortener.components import Components, build_components
from shortener.config import Config
from shortener.database import InMemoryURLStore
from shortener.remote_log import RemoteLogClient
from shortener.services import ShortcodeService, RedirectService, StatsService
from shortener.shortcode import ShortCodeGenerator
from shortener_web import create_app


class FakeClock:
    """Controllable replacement for utc_now."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(logger) -> InMemoryURLStore:
    return InMemoryURLStore(logger=logger.getChild("db"))


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=7)


@pytest.fixture
def shortcode_service(store, short_code_generator, logger, clock) -> ShortcodeService:
    return ShortcodeService(
        store=store,
        base_url="http://testserver",
        short_code_generator=short_code_generator,
        logger=logger.getChild("service"),
        clock=clock,
    )


@pytest.fixture
def redirect_service(store, logger, clock) -> RedirectService:
    return RedirectService(store=store, logger=logger.getChild("service"), clock=clock)


@pytest.fixture
def stats_service(store, logger, clock) -> StatsService:
    return StatsService(store=store, logger=logger.getChild("service"), clock=clock)


@pytest.fixture
def config() -> Config:
    return Config(
        database_url="memory://",
        base_url="http://testserver",
        remote_log_url=None,
    )


@pytest.fixture
async def components(config, store, clock) -> AsyncGenerator[Components, None]:
    components = build_components(
        config,
        store=store,
        log_client=RemoteLogClient(base_url=None, clock=clock),
        clock=clock,
    )
    yield components
    await components.close()


@pytest.fixture
def app(components, config):
    """Create test FastAPI app."""
    return create_app(components, config)


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
