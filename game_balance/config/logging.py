"""
Logging Configuration for Game Balance Analytics

Routes structlog and stdlib records through one handler so that application
events, library warnings and uvicorn output share a format. Every record is
stamped with the application name, environment and version.
"""

import logging
import sys
from typing import Any, Dict, List, Optional

import structlog
from structlog.processors import JSONRenderer, TimeStamper
from structlog.stdlib import ProcessorFormatter, add_log_level
from structlog.types import Processor

from game_balance.config.settings import Settings, get_settings

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def app_context_processor(settings: Settings) -> Processor:
    """Processor adding app, env and version fields to every record"""
    context = {"app": settings.app_name, "env": settings.app_env, "version": settings.version}

    def add_app_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        for key, value in context.items():
            event_dict.setdefault(key, value)
        return event_dict

    return add_app_context


def build_processors(settings: Settings) -> List[Processor]:
    """Processors shared by structlog loggers and foreign stdlib records"""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        add_log_level,
        TimeStamper(fmt="iso", utc=True),
        app_context_processor(settings),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def select_renderer(log_format: str) -> Processor:
    """JSON for "json", a console renderer otherwise"""
    if log_format == "json":
        return JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(
    log_level: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> None:
    """
    Configure structured logging for the application.

    Uvicorn loggers lose their own handlers and propagate to the root
    handler. Access logs are only kept in debug mode.

    Args:
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR)
        settings: Application settings; defaults to `get_settings()`
    """
    settings = settings or get_settings()
    level_name = (log_level or settings.monitoring.log_level).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    processors = build_processors(settings)
    structlog.configure(
        processors=processors + [ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        ProcessorFormatter(
            processors=[
                ProcessorFormatter.remove_processors_meta,
                select_renderer(settings.monitoring.log_format),
            ],
            foreign_pre_chain=processors,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True
    logging.getLogger("uvicorn.access").disabled = not settings.debug

    structlog.get_logger(__name__).info(
        "Logging configured",
        level=level_name,
        format=settings.monitoring.log_format,
        access_log=settings.debug,
    )
