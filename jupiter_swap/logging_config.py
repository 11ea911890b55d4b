"""
Logging setup for swap runs.

Swap modules log through stdlib ``logging.getLogger(__name__)``. Records are
rendered by structlog as JSON lines, or as console output when debugging, and
carry the mint pair that ``JupiterSwap.swap`` binds for the duration of a swap.
"""

import logging
import sys
from typing import IO, List, Optional

import structlog

from .config import settings

# Transport libraries log every request at INFO
_QUIET_LOGGERS = ("httpcore", "httpx")


def _swap_processors(json_output: bool) -> List[structlog.types.Processor]:
    processors: List[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_output:
        processors.append(structlog.processors.format_exc_info)
    return processors


def setup_logging(
    log_level: Optional[str] = None,
    json_output: Optional[bool] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """Install a single root handler that renders swap logs through structlog.

    Args:
        log_level: Level name; falls back to ``settings.log_level``, then INFO
        json_output: True for JSON lines, False for console output. Defaults
            to console at DEBUG and JSON otherwise.
        stream: Destination for rendered lines (default: stdout)
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    if json_output is None:
        json_output = level != logging.DEBUG

    pre_chain = _swap_processors(json_output)
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # stdlib records pick up the swap context through foreign_pre_chain
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
