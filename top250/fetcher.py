"""Page fetching over Playwright's API request context.

No browser is launched: listing pages are server-rendered, so a plain
HTTP request carrying a realistic browser User-Agent is enough. The
request context is owned by ``PageFetcher`` and released through its
async context manager, even when a fetch fails.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Protocol, Self

from playwright.async_api import (
    APIRequestContext,
    Error as PlaywrightError,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from config.settings import USER_AGENT, GlobalConfig, get_config
from top250.document import Document
from top250.exceptions import FetcherInitializationError, TransportError
from top250.logger import get_logger

log = get_logger(__name__)


class DocumentProvider(Protocol):
    """Anything that turns a request into a parsed document."""

    async def fetch(self, method: str, url: str, body: str | bytes | None = None) -> Document:
        ...


class PageFetcher:
    """Fetches listing pages and parses them into Documents.

    Attributes:
        config: GlobalConfig instance for runtime configuration.
        _playwright: Playwright instance (initialized on context entry).
        _request: API request context carrying the fixed headers.

    Example:
        async with PageFetcher.create() as fetcher:
            doc = await fetcher.fetch("GET", "https://movie.douban.com/top250")
    """

    def __init__(self, config: GlobalConfig) -> None:
        """Initialize PageFetcher with configuration.

        Note:
            Use the `create()` class method so resources are released.
        """
        self.config = config
        self._playwright: Playwright | None = None
        self._request: APIRequestContext | None = None

    @classmethod
    @asynccontextmanager
    async def create(
        cls, config: GlobalConfig | None = None
    ) -> AsyncGenerator[Self, None]:
        """Yield an initialized fetcher and dispose of it on exit.

        Args:
            config: Optional GlobalConfig. Uses singleton if not provided.

        Raises:
            FetcherInitializationError: If Playwright fails to start.
        """
        if config is None:
            config = get_config()

        instance = cls(config)
        try:
            await instance._initialize()
            yield instance
        finally:
            await instance._cleanup()

    async def _initialize(self) -> None:
        try:
            self._playwright = await async_playwright().start()
            self._request = await self._playwright.request.new_context(
                user_agent=USER_AGENT,
                extra_http_headers={"User-Agent": USER_AGENT},
                timeout=self.config.request_timeout_ms,
            )
            log.info("Page fetcher initialized", timeout_ms=self.config.request_timeout_ms)
        except Exception as exc:
            await self._cleanup()
            raise FetcherInitializationError(reason=str(exc)) from exc

    async def fetch(self, method: str, url: str, body: str | bytes | None = None) -> Document:
        """Issue one request and parse the response body.

        Args:
            method: HTTP method, e.g. ``"GET"``.
            url: Absolute URL to request.
            body: Optional request payload.

        Returns:
            Parsed Document of the response.

        Raises:
            TransportError: On connection failure, timeout or HTTP status >= 400.
            MarkupParseError: If the response body cannot be parsed.
        """
        if self._request is None:
            raise FetcherInitializationError(reason="request context not initialized")

        log.debug("Fetching page", method=method, url=url)

        try:
            response = await self._request.fetch(url, method=method, data=body)
        except PlaywrightTimeoutError as exc:
            raise TransportError(
                url=url,
                reason=f"timeout after {self.config.request_timeout_ms}ms",
            ) from exc
        except PlaywrightError as exc:
            raise TransportError(url=url, reason=exc.message) from exc

        try:
            if response.status >= 400:
                raise TransportError(
                    url=url,
                    reason=f"HTTP {response.status}",
                    status_code=response.status,
                )
            payload = await response.body()
        except PlaywrightError as exc:
            raise TransportError(url=url, reason=exc.message, status_code=response.status) from exc
        finally:
            await response.dispose()

        doc = Document.parse(payload, url=url)
        log.info("Fetch successful", url=url, status_code=response.status, size=len(payload))
        return doc

    async def _cleanup(self) -> None:
        """Release the request context and stop Playwright."""
        if self._request is not None:
            try:
                await self._request.dispose()
            except Exception as exc:
                log.warning("Error disposing request context", error=str(exc))
            self._request = None

        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as exc:
                log.warning("Error stopping playwright", error=str(exc))
            self._playwright = None

    @property
    def is_initialized(self) -> bool:
        return self._playwright is not None and self._request is not None
