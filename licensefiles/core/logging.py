"""structlog events rendered through the ``licensefiles`` stdlib logger."""

from __future__ import annotations

import logging
import os
import sys

import structlog

from licensefiles.exceptions import ConfigurationError

LEVEL_ENV = "LICENSE_FILES_LOG_LEVEL"
FORMAT_ENV = "LICENSE_FILES_LOG_FORMAT"

_RENDERERS = {
    "console": structlog.dev.ConsoleRenderer,
    "json": structlog.processors.JSONRenderer,
}


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Send package logs to stderr, console-rendered or as JSON lines.

    Arguments win over ``LICENSE_FILES_LOG_LEVEL`` (default INFO) and
    ``LICENSE_FILES_LOG_FORMAT`` (default console). Stdout is left to
    command output.
    """
    level = (level or os.environ.get(LEVEL_ENV) or "INFO").upper()
    fmt = (fmt or os.environ.get(FORMAT_ENV) or "console").lower()
    if fmt not in _RENDERERS:
        raise ConfigurationError(f"unknown log format '{fmt}' (expected console or json)")

    pre_chain = _pre_chain()
    structlog.configure(
        processors=[structlog.contextvars.merge_contextvars, *pre_chain,
                    structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _RENDERERS[fmt](),
            ],
        )
    )

    logger = logging.getLogger("licensefiles")
    try:
        logger.setLevel(level)
    except ValueError as exc:
        raise ConfigurationError(f"unknown log level '{level}'") from exc
    logger.handlers[:] = [handler]
    logger.propagate = False
