"""
Structured logging configuration using structlog.

Provides consistent, structured logging across the application with:
- JSON output in production
- Pretty console output in development
- Context binding for per-extraction tracing
- Optional file output to the log directory (per-run rotation)
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import structlog
from structlog.typing import Processor

from resource_mapper.core.config import settings


def _cull_old_logs(logs_dir: Path, keep: int) -> None:
    """Delete old log files, keeping only the N most recent.

    Args:
        logs_dir: Directory containing log files
        keep: Number of recent log files to retain
    """
    log_files = sorted(
        logs_dir.glob("resource_mapper_*.log"),
        key=lambda p: p.stat().st_mtime,
        reverse=True,
    )

    for old_file in log_files[keep:]:
        try:
            os.remove(old_file)
        except OSError:
            pass  # Ignore permission errors, etc.


def configure_logging(
    log_to_file: Optional[bool] = None, log_sessions_to_keep: Optional[int] = None
) -> None:
    """Configure structlog for the application.

    Call this once at startup, before any logging.

    Args:
        log_to_file: Also write logs/resource_mapper_YYYYMMDD_HHMMSS.log
            (default: settings.log_to_file)
        log_sessions_to_keep: Number of recent run logs to retain
            (default: settings.log_sessions_to_keep)

    Outputs:
        - Console (colored in debug, JSON otherwise)
        - File, when enabled
    """
    if log_to_file is None:
        log_to_file = settings.log_to_file
    if log_sessions_to_keep is None:
        log_sessions_to_keep = settings.log_sessions_to_keep

    shared_processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.ExtraAdder(),
    ]

    if settings.debug:
        processors = shared_processors + [structlog.dev.ConsoleRenderer(colors=True)]
        level = logging.DEBUG
    else:
        processors = shared_processors + [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
        level = logging.INFO

    # Clear any existing handlers first (needed for reconfiguration in tests)
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    root_logger.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    if log_to_file:
        logs_dir = Path(settings.log_dir)
        logs_dir.mkdir(parents=True, exist_ok=True)

        # keep-1 to make room for the new file
        _cull_old_logs(logs_dir, keep=log_sessions_to_keep - 1)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        file_handler = logging.FileHandler(
            logs_dir / f"resource_mapper_{timestamp}.log", mode="w"
        )
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(file_handler)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        Bound structlog logger

    Usage:
        from resource_mapper.core.logging import get_logger

        log = get_logger(__name__)
        log.info("something_happened", key="value")
    """
    return structlog.get_logger(name)


def bind_context(**kwargs) -> None:
    """
    Bind context variables that will be included in all subsequent logs.

    Useful for run-scoped context such as the questionnaire being processed:

        bind_context(questionnaire_id=questionnaire.id)
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables from the logging context."""
    structlog.contextvars.clear_contextvars()
