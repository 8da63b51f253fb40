"""Structured logging configuration using loguru.

Two sinks are installed:
- stderr: colorized, human-readable, for the operator watching a run
- file: single-line JSON records with rotation and retention, only when
  ``log_dir`` is configured

Stdout is left untouched; it carries only the ranked record lines.

Records logged while a listing page is being processed carry
``page_number`` and ``url`` (see ``page_context``). Both sinks surface
them: the console appends ``[page N]`` and the JSON file promotes them to
top-level keys, so one page's fetch and extraction can be followed across
a run.
"""

import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from loguru import logger

from config.settings import GlobalConfig, get_config
from top250.exceptions import LoggingInitializationError

# Extras promoted out of "context" in the JSON file.
PAGE_FIELDS = ("page_number", "url")

_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def _console_format(record: dict[str, Any]) -> str:
    """Pick the console template for a record.

    Loguru calls this per record; a callable format must supply its own
    trailing newline and exception slot.
    """
    template = _CONSOLE_FORMAT
    if "page_number" in record["extra"]:
        template += " <magenta>[page {extra[page_number]}]</magenta>"
    return template + "\n{exception}"


def _json_serializer(record: dict[str, Any]) -> str:
    """Format a loguru record as one line of JSON.

    Args:
        record: Loguru record dictionary containing log metadata.

    Returns:
        JSON-formatted string terminated by a newline.
    """
    subset = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "module": record["name"],
        "function": record["function"],
        "line": record["line"],
    }

    extra = {k: v for k, v in record["extra"].items() if k != "serialized"}
    for field in PAGE_FIELDS:
        if field in extra:
            subset[field] = extra.pop(field)

    if record["exception"] is not None:
        subset["exception"] = {
            "type": record["exception"].type.__name__ if record["exception"].type else None,
            "value": str(record["exception"].value) if record["exception"].value else None,
            "traceback": record["exception"].traceback is not None,
        }

    if extra:
        subset["context"] = extra

    return json.dumps(subset, default=str, ensure_ascii=False) + "\n"


def _validate_log_directory(log_dir: Path) -> None:
    """Ensure the log directory exists and is writable.

    Raises:
        LoggingInitializationError: If directory creation or write test fails.
    """
    try:
        log_dir.mkdir(parents=True, exist_ok=True)

        test_file = log_dir / ".write_test"
        test_file.write_text("write_test")
        test_file.unlink()

    except PermissionError as exc:
        raise LoggingInitializationError(
            log_dir=str(log_dir),
            reason=f"Permission denied: {exc}",
        ) from exc
    except OSError as exc:
        raise LoggingInitializationError(
            log_dir=str(log_dir),
            reason=f"OS error during directory validation: {exc}",
        ) from exc


def configure_logging(config: GlobalConfig | None = None) -> None:
    """Initialize the logging infrastructure.

    Call once during bootstrap, before any other module logs. Without a
    ``log_dir`` nothing is written to disk.

    Args:
        config: Optional GlobalConfig instance. If None, uses singleton.

    Raises:
        LoggingInitializationError: If the configured log directory is not
            writable.
    """
    if config is None:
        config = get_config()

    logger.remove()

    if config.log_dir is not None:
        _validate_log_directory(config.log_dir)

    logger.add(
        sys.stderr,
        format=_console_format,
        level=config.log_level,
        colorize=True,
        backtrace=config.debug,
        diagnose=config.debug,
    )

    if config.log_dir is not None:
        logger.add(
            str(config.log_dir / "top250_{time:YYYY-MM-DD}.json"),
            format="{extra[serialized]}",
            level=config.log_level,
            rotation=config.log_rotation,
            retention=config.log_retention,
            compression="gz",
            serialize=False,
            filter=lambda record: record["extra"].update(serialized=_json_serializer(record))
            or True,
        )

    logger.info(
        "Logging infrastructure initialized",
        app_name=config.app_name,
        environment=config.environment,
        log_level=config.log_level,
        log_dir=str(config.log_dir) if config.log_dir is not None else None,
    )


def get_logger(name: str) -> "logger":
    """Get a logger bound with the module name.

    Args:
        name: Module or component name for log attribution.

    Returns:
        Loguru logger instance bound with the provided name context.
    """
    return logger.bind(module=name)


def page_context(log: "logger", page_number: int, url: str) -> "logger":
    """Bind the listing page being processed onto ``log``.

    Example:
        page_log = page_context(log, 2, "https://movie.douban.com/top250?start=25&filter=")
        page_log.info("Page extraction complete", items_extracted=25)
    """
    return log.bind(page_number=page_number, url=url)
