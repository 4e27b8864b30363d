"""
Structured logging setup shared by every pipeline component.

Components obtain a logger through ``structlog.get_logger(__name__)`` and bind a
``component`` field. Events are snake_case names with key/value context.
"""

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from structlog.typing import Processor

if TYPE_CHECKING:
    from vitals.config import LoggingConfig

_SHARED_PROCESSORS: list[Processor] = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


def configure_logging(config: "LoggingConfig | None" = None) -> None:
    """Configure structlog on top of the stdlib logging machinery."""
    level = config.level if config else "INFO"
    renderer: Processor = (
        structlog.dev.ConsoleRenderer()
        if config is not None and config.format == "console"
        else structlog.processors.JSONRenderer()
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)

    structlog.configure(
        processors=[*_SHARED_PROCESSORS, renderer],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
