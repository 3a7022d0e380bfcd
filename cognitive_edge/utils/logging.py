# ABOUTME: Structured logging configuration using loguru for the protocol service.
# ABOUTME: Supports context fields (phase, session_id, attempt) with console and rotating file output.

import sys
from pathlib import Path
from typing import Any

from loguru import logger

# Default log format with structured context
DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level> | "
    "{extra}"
)

VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def setup_logging(
    log_level: str = "INFO",
    log_dir: str | Path | None = None,
    console_output: bool = True,
    file_output: bool = True,
    format_string: str | None = None,
    rotation: str = "100 MB",
    retention: str = "30 days",
    compression: str = "zip"
) -> None:
    """
    Configure loguru sinks for the service.

    Usage:
        >>> setup_logging(log_level="DEBUG", log_dir="logs")
        >>> logger.bind(phase="Complete").info("Session finished")

    Args:
        log_level: Minimum log level ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        log_dir: Directory for log files (default: "logs")
        console_output: Enable stderr logging (default: True)
        file_output: Enable file logging (default: True)
        format_string: Custom format string (default: structured format)
        rotation: When to rotate log files (default: "100 MB")
        retention: How long to keep old logs (default: "30 days")
        compression: Compression for rotated logs (default: "zip")

    Raises:
        ValueError: If log_level is invalid
    """
    log_level = log_level.upper()
    if log_level not in VALID_LEVELS:
        raise ValueError(
            f"Invalid log level: '{log_level}'. "
            f"Must be one of: {', '.join(sorted(VALID_LEVELS))}"
        )

    logger.remove()

    fmt = format_string or DEFAULT_FORMAT

    if console_output:
        logger.add(
            sys.stderr,
            format=fmt,
            level=log_level,
            colorize=True,
            backtrace=True,
            diagnose=False,
        )

    if file_output:
        log_dir = Path("logs") if log_dir is None else Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            str(log_dir / "cognitive_edge_{time:YYYY-MM-DD}.log"),
            format=fmt,
            level=log_level,
            rotation=rotation,
            retention=retention,
            compression=compression,
            backtrace=True,
            diagnose=False,
            enqueue=True,  # Thread-safe
        )

    logger.info(
        f"Logging configured: level={log_level}, "
        f"console={console_output}, file={file_output}"
    )


def log_turn_event(
    message: str,
    phase: str,
    attempt_count: int,
    session_id: str | None = None,
    level: str = "INFO",
    **extra_context: Any
) -> None:
    """
    Log a turn event with the standard context fields.

    User input and responder text are never passed here; only sizes and
    phase metadata are logged.

    Usage:
        >>> log_turn_event(
        ...     "Processing turn",
        ...     phase="Listen for Core Frame",
        ...     attempt_count=1,
        ...     session_id="sess_42",
        ...     user_input_length=120,
        ... )
    """
    context = {
        "phase": phase,
        "attempt": attempt_count,
        **extra_context
    }

    if session_id:
        context["session_id"] = session_id

    logger.bind(**context).log(level.upper(), message)


def log_phase_transition(
    from_phase: str,
    to_phase: str,
    attempt_count: int,
    session_id: str | None = None,
    duration_ms: float | None = None
) -> None:
    """
    Log a phase transition (or repeat) with timing information.

    Usage:
        >>> log_phase_transition(
        ...     from_phase="Stabilize & Structure",
        ...     to_phase="Listen for Core Frame",
        ...     attempt_count=1,
        ...     duration_ms=1503.2
        ... )
    """
    context: dict[str, Any] = {
        "from_phase": from_phase,
        "to_phase": to_phase,
        "attempt": attempt_count,
    }

    if session_id:
        context["session_id"] = session_id

    if duration_ms is not None:
        context["duration_ms"] = round(duration_ms, 1)

    if from_phase == to_phase:
        logger.bind(**context).info(f"Phase repeat: {from_phase} (next attempt {attempt_count})")
    else:
        logger.bind(**context).info(f"Phase transition: {from_phase} -> {to_phase}")
