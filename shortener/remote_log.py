"""Remote log shipping.

``RemoteLogClient`` posts structured log lines to a collector service. It
caches the bearer token issued by the collector's ``/auth`` endpoint and
stops calling out for a cooldown period after repeated failures. It never
raises to its caller: every failure just means the line stays local.

``RemoteLogHandler`` bridges the standard ``logging`` module to the client,
so application code keeps logging through ordinary loggers while records
are shipped in the background.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Dict, Optional, Set

import httpx

from .common.clock import Clock, utc_now


LEVELS = ("debug", "info", "warn", "error", "fatal")

PACKAGES = (
    "cache",
    "controller",
    "cron_job",
    "db",
    "domain",
    "handler",
    "repository",
    "route",
    "service",
    "auth",
    "config",
    "middleware",
    "utils",
)

MAX_MESSAGE_LENGTH = 1000

# Collector answers 400 with one of these when the token is the problem
TOKEN_ERROR_MARKERS = ("invalid token", "token expired", "unauthorized")


class RemoteLogClient:
    """Client for the remote log collector.

    Holds the cached token and the failure counters; create one per
    application and share it.
    """

    def __init__(
        self,
        base_url: Optional[str],
        credentials: Optional[Dict[str, Optional[str]]] = None,
        stack: str = "backend",
        timeout_seconds: float = 5.0,
        max_failures: int = 5,
        cooldown_minutes: float = 5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Clock = utc_now,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize remote log client.

        Args:
            base_url: Collector base URL; None disables remote logging
            credentials: Body sent to ``<base_url>/auth``
            stack: Stack name reported with every line
            timeout_seconds: Timeout for every collector call
            max_failures: Consecutive failures before the cooldown starts
            cooldown_minutes: How long calls are skipped after max_failures
            transport: Optional httpx transport (tests use MockTransport)
            clock: Returns the current UTC time
            logger: Logger for the client's own diagnostics
        """
        self.base_url = base_url.rstrip("/") if base_url else None
        self.credentials = credentials or {}
        self.stack = stack
        self.timeout_seconds = timeout_seconds
        self.max_failures = max_failures
        self.cooldown = timedelta(minutes=cooldown_minutes)
        self.transport = transport
        self.clock = clock
        self.logger = logger or logging.getLogger("shortener.remote_log")

        self._token: Optional[str] = None
        self._token_expiry: Optional[datetime] = None
        self.consecutive_failures = 0
        self.last_failure_time: Optional[datetime] = None
        self._http: Optional[httpx.AsyncClient] = None

    @property
    def enabled(self) -> bool:
        return self.base_url is not None

    @property
    def has_valid_token(self) -> bool:
        return (
            self._token is not None
            and self._token_expiry is not None
            and self.clock() < self._token_expiry
        )

    @property
    def in_cooldown(self) -> bool:
        """True while calls are skipped after too many failures.

        Once the cooldown has elapsed the failure counters are reset.
        """
        if self.consecutive_failures < self.max_failures or self.last_failure_time is None:
            return False
        if self.clock() < self.last_failure_time + self.cooldown:
            return True
        self.consecutive_failures = 0
        self.last_failure_time = None
        return False

    def invalidate_token(self) -> None:
        self._token = None
        self._token_expiry = None

    def _record_failure(self) -> None:
        self.consecutive_failures += 1
        self.last_failure_time = self.clock()

    def _get_http(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self.transport,
            )
        return self._http

    async def _get_token(self) -> Optional[str]:
        """Return the cached token, fetching a new one when needed."""
        if self.in_cooldown:
            return None

        if self.has_valid_token:
            return self._token

        try:
            response = await self._get_http().post(f"{self.base_url}/auth", json=self.credentials)
            response.raise_for_status()
            data = response.json()
            token = data["access_token"]
            expires_in = int(data["expires_in"])
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            self._record_failure()
            self.invalidate_token()
            self.logger.debug(f"Token fetch failed: {e}")
            return None

        # Refresh a minute before the collector would reject the token
        self._token = token
        self._token_expiry = self.clock() + timedelta(seconds=expires_in - 60)
        self.consecutive_failures = 0
        return self._token

    async def log(self, level: str, package: str, message: str) -> bool:
        """Ship one log line.

        Args:
            level: One of LEVELS
            package: One of PACKAGES
            message: Log message (truncated to 1000 characters)

        Returns:
            True if the collector accepted the line, False otherwise
        """
        if not self.enabled or self.in_cooldown:
            return False

        payload = {
            "stack": self.stack,
            "level": level,
            "package": package,
            "message": str(message)[:MAX_MESSAGE_LENGTH],
        }
        if level not in LEVELS or package not in PACKAGES or not payload["message"]:
            self.logger.debug(f"Dropping invalid log payload: {payload}")
            return False

        token = await self._get_token()
        if not token:
            return False

        try:
            response = await self._get_http().post(
                f"{self.base_url}/logs",
                json=payload,
                headers={"Authorization": f"Bearer {token}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            self._record_failure()
            if self._is_token_error(e.response):
                self.invalidate_token()
            self.logger.debug(f"Collector rejected log line: {e.response.status_code}")
            return False
        except httpx.HTTPError as e:
            self._record_failure()
            self.logger.debug(f"Log shipping failed: {e}")
            return False

        self.consecutive_failures = 0
        return True

    @staticmethod
    def _is_token_error(response: httpx.Response) -> bool:
        if response.status_code == 401:
            return True
        if response.status_code != 400:
            return False
        try:
            message = str(response.json().get("message", "")).lower()
        except (ValueError, AttributeError):
            message = response.text.lower()
        return any(marker in message for marker in TOKEN_ERROR_MARKERS)

    async def close(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None


class RemoteLogHandler(logging.Handler):
    """Logging handler that forwards records to a RemoteLogClient.

    The package reported for a record is the last part of its logger name
    (``shortener.db`` -> ``db``) when that is a known package. Records are
    shipped as background tasks on the running event loop; outside an event
    loop they are only written by the local handlers.
    """

    def __init__(
        self,
        client: RemoteLogClient,
        default_package: str = "service",
        level: int = logging.NOTSET,
    ):
        super().__init__(level)
        self.client = client
        self.default_package = default_package
        self._pending: Set[asyncio.Task] = set()

    @staticmethod
    def level_name(levelno: int) -> str:
        if levelno >= logging.CRITICAL:
            return "fatal"
        if levelno >= logging.ERROR:
            return "error"
        if levelno >= logging.WARNING:
            return "warn"
        if levelno >= logging.INFO:
            return "info"
        return "debug"

    def package_for(self, logger_name: str) -> str:
        package = logger_name.rsplit(".", 1)[-1]
        return package if package in PACKAGES else self.default_package

    def emit(self, record: logging.LogRecord) -> None:
        # The client's own diagnostics must not loop back into it
        if record.name.startswith(self.client.logger.name) or not self.client.enabled:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return

        try:
            task = loop.create_task(
                self.client.log(
                    self.level_name(record.levelno),
                    self.package_for(record.name),
                    self.format(record),
                )
            )
        except Exception:
            self.handleError(record)
            return

        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for log lines that are still being shipped."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
