"""
Structured Logging
==================
structlog integration for key/value run summaries.

Structured loggers wrap the stdlib loggers of the `shiftplan` hierarchy, so
events reach the handlers installed by `setup_logging` and nothing is printed
when the application has not configured logging.

Usage:
    from shiftplan.utils.structured_logging import get_structured_logger

    log = get_structured_logger("shiftplan.solver.generator")
    log.info("generation_finished", cells_written=412, under_target=3)
"""
import logging
from typing import Any

import structlog
import structlog.contextvars


def configure_structlog(json_output: bool = False) -> None:
    """
    Configure structlog rendering.

    Args:
        json_output: If True, render events as JSON (for pipelines).
                    If False, render key=value pairs (for humans).
    """
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.processors.KeyValueRenderer(key_order=["event"], sort_keys=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        cache_logger_on_first_use=False,
    )


def get_structured_logger(name: str) -> Any:
    """
    Get a structured logger backed by the stdlib logger `name`.

    Args:
        name: Logger name (e.g., "shiftplan.solver.generator")
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def bind_context(**kwargs) -> None:
    """
    Bind context variables for all subsequent structured log calls.

    Args:
        **kwargs: Context values (e.g., year=2025, month=3)
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all context variables."""
    structlog.contextvars.clear_contextvars()
