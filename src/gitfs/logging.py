"""structlog rendering for the gitfs package loggers.

gitfs modules log through ``logging.getLogger(__name__)``. Nothing is
rendered until an application opts in with :func:`configure_logging`, which
attaches one structlog ``ProcessorFormatter`` handler to the ``gitfs``
logger only, leaving the host application's root logger alone.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from gitfs.config import Settings, get_settings

PACKAGE_LOGGER = "gitfs"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def configure_logging(
    settings: Settings | None = None,
    json_output: bool | None = None,
) -> logging.Logger:
    """Render gitfs log records with structlog.

    Args:
        settings: Source of ``LOG_LEVEL`` and ``APP_ENV``; defaults to get_settings().
        json_output: Force JSON output. If None, JSON only when APP_ENV is prod.

    Calling it again replaces the previously installed handler.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO
    if json_output is None:
        json_output = settings.app_env == "prod"

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(logger.handlers):
        if isinstance(existing.formatter, structlog.stdlib.ProcessorFormatter):
            logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


@contextmanager
def operation_context(operation: str, repo: object, revision: object = None) -> Iterator[None]:
    """Tag records logged inside the block with the repository and revision."""
    fields: dict[str, object] = {"operation": operation, "repo": str(repo)}
    if revision is not None:
        fields["revision"] = str(revision)
    with structlog.contextvars.bound_contextvars(**fields):
        yield
