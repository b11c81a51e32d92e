"""
Centralized logging configuration for the trading engine.

This module provides standardized logging configuration using structlog
for all components. Controller state changes and per-cycle decisions are
logged through dedicated bound loggers so that a cycle can be audited
from the log stream alone.
"""
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Union

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    log_file: Optional[Union[str, Path]] = None,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        log_file: Optional path of a file that receives a copy of every record
        extra_processors: Additional structlog processors to include
    """
    # Convert string level to logging constant
    log_level = getattr(logging, level.upper())

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    # Configure standard library logging
    logging.basicConfig(
        level=log_level,
        handlers=handlers,
        format="%(message)s"  # structlog will handle formatting
    )

    # Build processor chain
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    # Colors would end up as escape codes in the file sink
    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=log_file is None))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_state_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for controller lifecycle changes (start, stop, cancellation).

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger bound to the controller subsystem
    """
    return get_logger(name).bind(
        subsystem="controller",
        audit_trail=True
    )


def get_cycle_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for evaluation cycle decisions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger bound to the trading cycle subsystem
    """
    return get_logger(name).bind(
        subsystem="trading_cycle",
        audit_trail=True
    )


def log_state_transition(
    logger: FilteringBoundLogger,
    from_state: str,
    to_state: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a controller state transition with standardized format.

    Args:
        logger: Structlog logger instance
        from_state: Current state
        to_state: Target state
        trigger: What triggered the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
        event_type="state_transition"
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("State transition")


def log_cycle_skip(
    logger: FilteringBoundLogger,
    reason: str,
    stage: str,
    context: Optional[dict[str, Any]] = None,
    is_error: bool = False
) -> None:
    """
    Log an evaluation cycle that ended before an order was submitted.

    Args:
        logger: Structlog logger instance
        reason: Short machine-readable reason (e.g. "insufficient_data")
        stage: Cycle stage at which evaluation stopped
        context: Additional context data
        is_error: Log at error level instead of info
    """
    bound_logger = logger.bind(
        skip_reason=reason,
        stage=stage,
        event_type="cycle_skipped"
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if is_error:
        bound_logger.error("Cycle skipped")
    else:
        bound_logger.info("Cycle skipped")
