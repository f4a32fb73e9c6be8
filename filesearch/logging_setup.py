import logging
import sys
from typing import IO, Optional
import structlog

LOGGER_NAME = "filesearch"

def _build_renderer(force_json_logs: bool, stream: IO[str]):
    # json for machine consumers, colored console output only when stream is a terminal.
    if force_json_logs:
        return structlog.processors.JSONRenderer(sort_keys=True)
    isatty = getattr(stream, "isatty", None)
    return structlog.dev.ConsoleRenderer(colors=bool(isatty and isatty()))

def configure_logging(
    log_level_str: str = "warning",
    force_json_logs: bool = False,
    stream: Optional[IO[str]] = None,
) -> logging.Handler:
    """Route structlog events for the ``filesearch`` logger tree to ``stream``.

    Library users who never call this get structlog's defaults, which print
    every event (debug included) to stdout. The CLI always calls it, so its
    stdout carries only results. Calling it again replaces the previous
    handler rather than stacking a second one.
    """
    stream = stream if stream is not None else sys.stderr
    level = logging.getLevelName(log_level_str.upper())
    if not isinstance(level, int):
        level = logging.WARNING

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processor=_build_renderer(force_json_logs, stream),
        foreign_pre_chain=[structlog.stdlib.add_log_level],
    ))

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    # stdout is reserved for search results.
    package_logger.propagate = False

    structlog.get_logger(__name__).debug("logging_configured", level=log_level_str, json=force_json_logs)
    return handler
