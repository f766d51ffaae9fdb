"""
Engine Logging System
=====================
Structured logging for the scoring engine and its boundaries.

This module provides:
- Structured JSON logging for machine-parseable outputs
- Human-readable console output
- Named loggers for scores and engine decisions
- Reading back JSONL log files

Usage:
    from speech_eval.logging_config import get_engine_logger, log_evaluation_score

    logger = get_engine_logger("scoring")
    logger.info("Scored evaluation", extra={"evaluation_id": "..."})

    # Convenience functions
    log_evaluation_score(evaluation_id, total_points, max_total_points, divider, final_score)
    log_engine_decision("divider_fallback", {"divider": 0})
"""

import sys
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any, Union

from .config import get_config


# Attributes every LogRecord carries; anything else came in through extra={}
_RESERVED_ATTRS = frozenset((
    'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
    'levelno', 'lineno', 'module', 'msecs', 'pathname', 'process',
    'processName', 'relativeCreated', 'stack_info', 'exc_info', 'exc_text',
    'thread', 'threadName', 'taskName', 'message', 'context',
))


# =============================================================================
# CUSTOM FORMATTERS
# =============================================================================

class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs log records as JSON objects with consistent structure:
    {
        "timestamp": "2024-01-15T10:30:00.123456",
        "level": "INFO",
        "logger": "speech_eval.scores",
        "message": "Scored evaluation",
        "context": {...}
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, 'context') and record.context:
            log_data['context'] = record.context

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS:
                continue
            try:
                json.dumps(value)
                log_data[key] = value
            except (TypeError, ValueError):
                log_data[key] = str(value)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable formatter for console output.

    Format: [LEVEL] logger: message (key=value, ...)
    """

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        if self.use_colors and level in self.COLORS:
            level = f"{self.COLORS[level]}{level}{self.RESET}"

        msg = f"[{level}] {record.name}: {record.getMessage()}"

        extras = []
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS:
                continue
            if isinstance(value, (str, int, float, bool)):
                extras.append(f"{key}={value}")
            elif isinstance(value, dict) and len(value) < 3:
                extras.append(f"{key}={value}")

        if extras:
            msg += f" ({', '.join(extras)})"

        return msg


# =============================================================================
# LOGGER FACTORY
# =============================================================================

LOGGER_NAMESPACE = "speech_eval"

_loggers: Dict[str, logging.Logger] = {}


def _level_from_config() -> int:
    return getattr(logging, get_config().logging.log_level.upper(), logging.INFO)


def get_engine_logger(
    name: str,
    log_to_file: Optional[bool] = None
) -> logging.Logger:
    """
    Get or create an engine logger.

    Args:
        name: Logger name (e.g., "scores", "decisions", "analysis")
        log_to_file: Whether to also write JSONL to paths.logs/<name>/.
            Defaults to LoggingConfig.log_to_file.

    Returns:
        Configured logger instance
    """
    full_name = f"{LOGGER_NAMESPACE}.{name}"

    if full_name in _loggers:
        return _loggers[full_name]

    config = get_config()
    logger = logging.getLogger(full_name)
    logger.setLevel(_level_from_config())
    logger.propagate = False

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(ConsoleFormatter())
    logger.addHandler(console_handler)

    if log_to_file is None:
        log_to_file = config.logging.log_to_file

    if log_to_file:
        log_dir = config.paths.logs / name
        log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d")
        log_file = log_dir / f"{name}_{timestamp}.jsonl"

        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    _loggers[full_name] = logger
    return logger


def reset_loggers() -> None:
    """Close and forget all cached engine loggers (used after config changes)."""
    for logger in _loggers.values():
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
    _loggers.clear()


def get_score_logger() -> logging.Logger:
    """Get a logger for evaluation scores."""
    return get_engine_logger("scores")


def get_decision_logger() -> logging.Logger:
    """Get a logger for fallbacks and mapping decisions."""
    return get_engine_logger("decisions")


# =============================================================================
# CONVENIENCE LOGGING FUNCTIONS
# =============================================================================

def log_evaluation_score(
    evaluation_id: Optional[str],
    total_points: float,
    max_total_points: float,
    divider: float,
    final_score: float,
    skill_count: int = 0,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Log the final score triple for an evaluation.

    Args:
        evaluation_id: Evaluation identifier, if the caller has one
        total_points: Sum of effective weighted points
        max_total_points: Sum of weight * max_score
        divider: Divider used to reach the ceiling
        final_score: Normalized final score
        skill_count: Number of skill scores considered
        logger: Optional logger override
    """
    config = get_config()
    if not config.logging.log_scores:
        return

    log = logger or get_score_logger()
    log.info(
        f"Scored evaluation {evaluation_id or '<unsaved>'}: {final_score:.2f}",
        extra={
            'evaluation_id': evaluation_id,
            'total_points': total_points,
            'max_total_points': max_total_points,
            'divider': divider,
            'final_score': final_score,
            'skill_count': skill_count,
        }
    )


def log_engine_decision(
    decision_type: str,
    details: Dict[str, Any],
    evaluation_id: Optional[str] = None,
    level: int = logging.INFO,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Log a decision the engine made on the caller's behalf.

    Args:
        decision_type: Type of decision (e.g., "divider_fallback", "unknown_category")
        details: Decision details
        evaluation_id: Evaluation identifier, if known
        level: Log level for the record
        logger: Optional logger override
    """
    config = get_config()
    if not config.logging.log_decisions:
        return

    log = logger or get_decision_logger()
    extra = {
        'decision_type': decision_type,
        'details': details
    }
    if evaluation_id:
        extra['evaluation_id'] = evaluation_id

    log.log(level, f"Decision: {decision_type}", extra=extra)


# =============================================================================
# LOG FILE UTILITIES
# =============================================================================

def get_log_path(log_type: str = "scores") -> Path:
    """Get today's log file path for a logger name."""
    config = get_config()
    timestamp = datetime.now().strftime("%Y%m%d")
    return config.paths.logs / log_type / f"{log_type}_{timestamp}.jsonl"


def read_log_file(log_path: Union[str, Path]) -> list:
    """
    Read a JSONL log file and return list of log entries.

    Args:
        log_path: Path to the log file

    Returns:
        List of parsed log entry dictionaries
    """
    entries = []
    with open(log_path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if line:
                try:
                    entries.append(json.loads(line))
                except json.JSONDecodeError:
                    continue
    return entries


def get_score_logs_for_evaluation(evaluation_id: str) -> list:
    """Get all score log entries for a specific evaluation."""
    config = get_config()
    log_dir = config.paths.logs / "scores"

    entries = []
    for log_file in log_dir.glob("*.jsonl"):
        for entry in read_log_file(log_file):
            if entry.get('evaluation_id') == evaluation_id:
                entries.append(entry)

    return entries
