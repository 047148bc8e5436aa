"""Logging configuration for encapsulated-e2e.

Events always reach stderr, rendered for a terminal unless JSON is asked
for. A run can also keep a JSON-lines log file, so a CI job retains the
commands a scenario ran after its workspace is gone.
"""

import logging
import sys
from pathlib import Path

import structlog

# -v, -vv, -vvv on the CLI
VERBOSITY_LEVELS = ["warning", "info", "debug"]

# Applied to structlog events and to records from plain stdlib loggers alike
_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def _formatter(renderer: structlog.types.Processor) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_SHARED_PROCESSORS,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )


def configure_logging(
    level: str = "warning",
    log_file: str | Path | None = None,
    json_output: bool = False,
) -> None:
    """Configure logging for the harness and the CLI.

    Args:
        level: Log level (debug, info, warning, error, critical)
        log_file: Also append JSON lines here; parent directories are created
        json_output: Render stderr as JSON instead of the console format
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(
        _formatter(
            structlog.processors.JSONRenderer()
            if json_output
            else structlog.dev.ConsoleRenderer(colors=False)
        )
    )
    handlers: list[logging.Handler] = [console]

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path)
        file_handler.setFormatter(_formatter(structlog.processors.JSONRenderer()))
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(log_level)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def level_for_verbosity(verbose: int, default: str = "warning") -> str:
    """Map a repeated -v count to a log level name.

    Zero keeps `default`; anything past the last level stays at debug.
    """
    if verbose <= 0:
        return default
    return VERBOSITY_LEVELS[min(verbose, len(VERBOSITY_LEVELS) - 1)]


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
