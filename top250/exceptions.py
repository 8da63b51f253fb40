"""Custom exception hierarchy for the Top250 crawler.

Components never terminate the process themselves. They raise one of the
exceptions below and let the entry point decide how to exit. Each exception
carries context (URL, selector, offending text) to aid diagnosing a change
in the source site's markup.
"""

from datetime import UTC, datetime
from typing import Any


class Top250Error(Exception):
    """Base exception for all crawler errors.

    Attributes:
        message: Human-readable error description.
        context: Optional dictionary with additional debugging information.
        timestamp: UTC timestamp when the exception was raised.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = context or {}
        self.timestamp = datetime.now(UTC)
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format exception message with context for logging."""
        base = f"[{self.timestamp.isoformat()}] {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base} | Context: {context_str}"
        return base


class FetcherInitializationError(Top250Error):
    """Raised when the Playwright request context fails to start."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            message=f"Failed to initialize page fetcher: {reason}",
            context={"reason": reason},
        )


class TransportError(Top250Error):
    """Raised when a fetch could not complete.

    Covers connection failures, timeouts and HTTP error statuses.
    """

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        super().__init__(
            message=f"Request to '{url}' failed: {reason}",
            context={"url": url, "reason": reason, "status_code": status_code},
        )
        self.url = url
        self.status_code = status_code


class MarkupParseError(Top250Error):
    """Raised when a response body cannot be parsed into a document tree."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(
            message=f"Could not parse markup from '{url}': {reason}",
            context={"url": url, "reason": reason},
        )
        self.url = url


class UnexpectedFormatError(Top250Error):
    """Raised when the listing markup violates a structural assumption.

    A malformed page number, a page link without a target, or body text
    that does not split into description and facts lines all mean the
    source layout changed and no safe continuation exists.
    """

    def __init__(self, selector: str, reason: str, text: str | None = None) -> None:
        super().__init__(
            message=f"Unexpected format at '{selector}': {reason}",
            context={"selector": selector, "reason": reason, "text": text},
        )
        self.selector = selector
        self.text = text


class LoggingInitializationError(Top250Error):
    """Raised when the logging system fails to initialize.

    This is a startup-blocking error.
    """

    def __init__(self, log_dir: str, reason: str) -> None:
        super().__init__(
            message=f"Failed to initialize logging at '{log_dir}': {reason}",
            context={"log_dir": log_dir, "reason": reason},
        )
