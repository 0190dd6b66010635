"""Tests for configuration loading and component wiring."""

import logging

import httpx
import pytest
from pydantic import ValidationError

from shortener.common.logging_config import get_logger, request_logger
from shortener.components import build_components
from shortener.config import Config, load_config
from shortener.database import InMemoryURLStore
from shortener.remote_log import RemoteLogClient, RemoteLogHandler


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("DATABASE_URL", "BASE_URL", "APP_URL", "CORS_ORIGINS", "FRONTEND_URL", "REMOTE_LOG_URL"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestConfig:
    """Test Config."""

    def test_database_url_required(self, clean_env):
        with pytest.raises(ValidationError):
            load_config()

    def test_defaults(self, clean_env):
        clean_env.setenv("DATABASE_URL", "memory://")
        config = load_config()

        assert config.base_url == "http://localhost:8000"
        assert config.port == 8000
        assert config.default_validity_minutes == 30
        assert config.max_validity_minutes == 43200
        assert config.stats_max_limit == 1000
        assert config.remote_log_url is None

    def test_app_url_alias(self, clean_env):
        clean_env.setenv("DATABASE_URL", "memory://")
        clean_env.setenv("APP_URL", "https://sho.rt")

        assert load_config().base_url == "https://sho.rt"

    def test_allowed_origins(self, clean_env):
        config = Config(
            database_url="memory://",
            cors_origins="https://a.example, https://b.example,",
            frontend_url="https://app.example",
        )

        assert config.allowed_origins == ["https://a.example", "https://b.example", "https://app.example"]

    def test_remote_log_credentials(self, clean_env):
        clean_env.setenv("REMOTE_LOG_CLIENT_ID", "abc")
        clean_env.setenv("REMOTE_LOG_ROLL_NO", "17")
        config = Config(database_url="memory://")

        credentials = config.remote_log_credentials
        assert credentials["clientID"] == "abc"
        assert credentials["rollNo"] == "17"
        assert set(credentials) == {"email", "name", "rollNo", "accessCode", "clientID", "clientSecret"}


@pytest.mark.asyncio
class TestBuildComponents:
    """Test build_components."""

    async def test_builds_store_from_url(self, config):
        components = build_components(config)
        try:
            assert isinstance(components.store, InMemoryURLStore)
            assert not components.log_client.enabled
            assert components.log_handler is None
            assert components.shortcode_service.base_url == "http://testserver"
            assert components.stats_service.max_limit == config.stats_max_limit
        finally:
            await components.close()

    async def test_remote_logging_handler_lifecycle(self, config, clock):
        seen = []

        def collector(request):
            seen.append(request.url.path)
            if request.url.path == "/auth":
                return httpx.Response(200, json={"access_token": "t", "expires_in": 3600})
            return httpx.Response(200, json={})

        client = RemoteLogClient(
            "http://collector.test", transport=httpx.MockTransport(collector), clock=clock
        )
        components = build_components(config, log_client=client, clock=clock)

        assert isinstance(components.log_handler, RemoteLogHandler)
        assert components.log_handler in get_logger().handlers

        get_logger("service").setLevel(logging.INFO)
        try:
            get_logger("service").info("shipped line")
        finally:
            get_logger("service").setLevel(logging.NOTSET)
            await components.close()

        assert components.log_handler not in get_logger().handlers
        assert "/logs" in seen


class TestRequestLogger:
    """Test request id prefixes."""

    def test_prefix(self, caplog):
        log = request_logger(get_logger("service"), "abcd1234")

        with caplog.at_level(logging.INFO, logger="shortener"):
            log.info("hello")

        assert caplog.records[-1].getMessage() == "[abcd1234] hello"

    def test_no_request_id(self, caplog):
        log = request_logger(get_logger("service"), None)

        with caplog.at_level(logging.INFO, logger="shortener"):
            log.info("hello")

        assert caplog.records[-1].getMessage() == "hello"
