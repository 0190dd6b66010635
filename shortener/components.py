"""Wiring of store, services and remote logging from a Config."""

import logging
from dataclasses import dataclass
from typing import Optional

from .common.clock import Clock, utc_now
from .common.logging_config import get_logger
from .config import Config
from .database import URLStoreBase, create_store
from .remote_log import RemoteLogClient, RemoteLogHandler
from .services import ShortcodeService, RedirectService, StatsService
from .shortcode import ShortCodeGenerator


@dataclass
class Components:
    """Everything a request handler needs, built once per process."""

    store: URLStoreBase
    log_client: RemoteLogClient
    log_handler: Optional[RemoteLogHandler]
    shortcode_service: ShortcodeService
    redirect_service: RedirectService
    stats_service: StatsService

    async def close(self) -> None:
        """Flush pending log lines and close connections."""
        if self.log_handler is not None:
            await self.log_handler.drain()
            get_logger().removeHandler(self.log_handler)
        await self.log_client.close()
        await self.store.close()


def build_components(
    config: Config,
    store: Optional[URLStoreBase] = None,
    log_client: Optional[RemoteLogClient] = None,
    clock: Clock = utc_now,
) -> Components:
    """Create the store, services and remote log client for a config.

    Args:
        config: Application configuration
        store: Store to use instead of one built from config.database_url
        log_client: Remote log client to use instead of one built from config
        clock: Time source shared by services and the log client

    Returns:
        Wired components
    """
    service_logger = get_logger("service")

    if store is None:
        store = create_store(config.database_url, logger=get_logger("db"))

    if log_client is None:
        log_client = RemoteLogClient(
            base_url=config.remote_log_url,
            credentials=config.remote_log_credentials,
            stack=config.remote_log_stack,
            timeout_seconds=config.remote_log_timeout_seconds,
            max_failures=config.remote_log_max_failures,
            cooldown_minutes=config.remote_log_cooldown_minutes,
            clock=clock,
        )

    log_handler = None
    if log_client.enabled:
        log_handler = RemoteLogHandler(log_client)
        get_logger().addHandler(log_handler)
        get_logger("config").info(f"Remote logging enabled: {config.remote_log_url}")
    else:
        get_logger("config").info("Remote logging disabled, using local output only")

    shortcode_service = ShortcodeService(
        store=store,
        base_url=config.base_url,
        short_code_generator=ShortCodeGenerator(default_length=config.short_code_length),
        logger=service_logger,
        default_validity_minutes=config.default_validity_minutes,
        max_validity_minutes=config.max_validity_minutes,
        max_collision_retries=config.max_collision_retries,
        clock=clock,
    )
    redirect_service = RedirectService(store=store, logger=service_logger, clock=clock)
    stats_service = StatsService(
        store=store,
        logger=service_logger,
        default_limit=config.stats_default_limit,
        max_limit=config.stats_max_limit,
        clock=clock,
    )

    return Components(
        store=store,
        log_client=log_client,
        log_handler=log_handler,
        shortcode_service=shortcode_service,
        redirect_service=redirect_service,
        stats_service=stats_service,
    )
