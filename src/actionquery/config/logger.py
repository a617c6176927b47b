"""Logger configuration."""

import logging
import sys
from collections.abc import Mapping
from typing import Any

from loguru import logger
from loki_logger_handler.formatters.loguru_formatter import LoguruFormatter
from loki_logger_handler.loki_logger_handler import LokiLoggerHandler

from .config import settings

__all__ = ["config_logger"]


# Libraries whose stdlib loggers are routed into loguru.
_INTERCEPTED = ("uvicorn", "uvicorn.access", "uvicorn.error", "sqlalchemy.engine")

# Extras shown first so action related lines line up when scanning logs.
_LEADING_EXTRAS = ("action_id", "hook", "cause")


def config_logger() -> None:
    """Configure loguru sinks for the current environment.

    Development logs colored lines to stdout and a rotating file. Testing logs
    to stdout only. Production logs single line records to stderr and ships
    them to Loki.
    """
    is_production = settings.app_env == "production"

    _intercept_stdlib(settings.log_level)
    logger.remove()

    if settings.app_env == "development":
        logger.add(
            settings.log_path,
            rotation=settings.rotation,
            compression="zip",
            format=_development_format,
            colorize=False,
            enqueue=True,
            backtrace=False,
            diagnose=False,
            level=logging.DEBUG,
        )

    if is_production:
        logger.add(
            sys.stderr,
            format=_production_format,
            level=settings.log_level,
            colorize=False,
            enqueue=True,
            backtrace=False,
            diagnose=False,
        )
        logger.add(
            LokiLoggerHandler(
                url=settings.loki_url,
                labels={
                    "application": "actionquery",
                    "environment": settings.app_env,
                    "version": settings.version,
                },
                timeout=5,
                enable_structured_loki_metadata=True,
                default_formatter=LoguruFormatter(),  # type: ignore[arg-type]
            ),
            serialize=True,
            enqueue=True,
            level=settings.log_level,
        )
        return

    logger.add(
        sys.stdout,
        format=_development_format,
        level=settings.log_level,
        colorize=True,
        backtrace=True,
        diagnose=True,
        catch=True,
    )


def _intercept_stdlib(level: str) -> None:
    handler = InterceptHandler()
    logging.basicConfig(handlers=[handler], level=level, force=True)
    for name in _INTERCEPTED:
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = []
        stdlib_logger.propagate = True


class InterceptHandler(logging.Handler):
    """Forward stdlib log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:  # noqa: PLR6301
        """Re-emit ``record`` through loguru at the caller's depth."""
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_back and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _ordered_extras(extra: Mapping[str, Any]) -> list[tuple[str, Any]]:
    leading_keys = set(_LEADING_EXTRAS)
    leading = [(key, extra[key]) for key in _LEADING_EXTRAS if key in extra]
    rest = [(k, v) for k, v in extra.items() if k not in leading_keys]
    return leading + rest


def _production_format(record: Mapping[str, Any]) -> str:
    ts = record["time"].strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
    location = f"{record['name']}:{record['line']}"
    line = f"{ts} | {record['level']:<8} | {location} - {{message}}"
    extras = _ordered_extras(record["extra"])
    if extras:
        line += " | " + " | ".join(
            f"{key}={_escape(value)}" for key, value in extras
        )
    return line + "\n{exception}"


def _development_format(record: Mapping[str, Any]) -> str:
    ts = record["time"].strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
    location = f"{record['name']}:{record['function']}:{record['line']}"
    line = (
        f"<green>{ts}</green> | <level>{record['level']:<8}</level> | "
        f"<cyan>{location}</cyan> - <level>{{message}}</level>"
    )
    extras = _ordered_extras(record["extra"])
    if extras:
        line += " | " + " | ".join(
            f"<yellow>{key}</yellow>=<cyan>{_escape(value)}</cyan>"
            for key, value in extras
        )
    return line + "\n{exception}"


def _escape(value: Any) -> str:  # noqa: ANN401
    # Keep braces and markup tags in values from being parsed by loguru.
    return str(value).replace("{", "{{").replace("}", "}}").replace("<", r"\<")
