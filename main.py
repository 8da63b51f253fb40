"""Top250 crawler entry point.

Bootstrap and process-boundary layer. It holds no parsing logic - all
functional code resides in /top250.

Responsibilities:
    1. Load configuration and initialize logging (fail-fast on error)
    2. Run the crawl and print one ranked line per record to stdout
    3. Turn every fatal failure into an ``Error:`` line and exit status

Usage:
    python main.py
"""

import asyncio
import sys
from typing import NoReturn

from loguru import logger

from config.settings import GlobalConfig, get_config
from top250.exceptions import Top250Error
from top250.logger import configure_logging
from top250.models import ItemRecord

_RED = "\033[31m"
_RESET = "\033[0m"


def print_record(rank: int, record: ItemRecord) -> None:
    """Write one ranked record to stdout as ``No.<rank> <field dump>``."""
    print(f"No.{rank} {record}", file=sys.stdout, flush=True)


def exit_with_error(exc: BaseException | None, *, log_failure: bool = True) -> NoReturn:
    """Terminate the process, reporting ``exc`` if there is one.

    Every fatal path converges here. ``None`` means nothing went wrong and
    exits with status 0.

    Args:
        exc: The exception that ended the run, or None.
        log_failure: False before logging is configured; only the stderr
            line is written then.
    """
    if exc is None:
        sys.exit(0)

    if isinstance(exc, Top250Error):
        message = exc.message
        if log_failure:
            logger.critical(
                "Fatal crawler error",
                error_type=type(exc).__name__,
                message=exc.message,
                context=exc.context,
            )
    else:
        message = str(exc) or type(exc).__name__
        if log_failure:
            logger.opt(exception=exc).critical("Unexpected fatal error", error=str(exc))

    prefix = f"{_RED}Error: {_RESET}" if sys.stderr.isatty() else "Error: "
    print(f"{prefix}{message}", file=sys.stderr)
    sys.exit(1)


async def _run_pipeline(config: GlobalConfig) -> int:
    """Crawl the listing and print every record.

    Args:
        config: The validated GlobalConfig instance.

    Returns:
        Exit code (0 for success).
    """
    from top250.crawler import Top250Crawler
    from top250.fetcher import PageFetcher

    logger.info(
        "Pipeline execution started",
        app_name=config.app_name,
        environment=config.environment,
    )

    async with PageFetcher.create(config) as fetcher:
        crawler = Top250Crawler(fetcher, consumer=print_record)
        records = await crawler.run()

    logger.info("Pipeline execution completed successfully", total_items=len(records))
    return 0


def main() -> int:
    """Application entry point.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    try:
        config = get_config()
        configure_logging(config)
    except Exception as exc:
        # Logging is not available yet
        exit_with_error(exc, log_failure=False)

    try:
        return asyncio.run(_run_pipeline(config))
    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user (Ctrl+C)")
        return 130
    except Exception as exc:
        exit_with_error(exc)


if __name__ == "__main__":
    sys.exit(main())
