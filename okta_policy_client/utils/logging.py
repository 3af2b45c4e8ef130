"""
Centralized Logging Configuration

Provides unified logging configuration with optional correlation ID support.
"""

import os
import sys
import uuid
import socket
import time
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEFAULT_CONSOLE_LEVEL = os.getenv("CONSOLE_LOG_LEVEL", LOG_LEVEL).upper()
# File logging always captures DEBUG unless explicitly overridden
DEFAULT_FILE_LEVEL = os.getenv("FILE_LOG_LEVEL", "DEBUG").upper()

LOG_FILENAME = "okta_policy_client.log"

# Store correlation ID (simple global variable approach)
_CORRELATION_ID = None

# Track configured loggers to prevent duplicate handlers
_CONFIGURED_LOGGERS = set()

# Set by configure_logging from Settings.LOG_DIR
_LOG_DIR: Optional[Path] = None


def generate_correlation_id(prefix="cli"):
    """
    Generate a globally unique correlation ID.

    Args:
        prefix: Identifier prefix (default: 'cli')

    Returns:
        Unique correlation ID string
    """
    hostname = socket.gethostname().split('.')[-1]
    timestamp = int(time.time())
    random_part = uuid.uuid4().hex[:6]
    return f"{prefix}-{hostname}-{timestamp}-{random_part}"


def set_correlation_id(correlation_id: Optional[str]) -> None:
    """Set a correlation ID for the current context."""
    global _CORRELATION_ID
    _CORRELATION_ID = correlation_id


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID."""
    return _CORRELATION_ID


def get_default_log_dir() -> Optional[Path]:
    """Log directory from configure_logging or LOG_DIR, or None when file logging is disabled."""
    if _LOG_DIR:
        return _LOG_DIR
    log_dir = os.getenv("LOG_DIR")
    if not log_dir:
        return None
    return Path(log_dir)


def _file_handler(log_dir: Path) -> RotatingFileHandler:
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, LOG_FILENAME)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10*1024*1024,
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setLevel(DEFAULT_FILE_LEVEL)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(pathname)s:%(lineno)d - %(message)s',
        '%Y-%m-%d %H:%M:%S'
    )
    file_handler.setFormatter(file_formatter)
    return file_handler


def configure_logging(level: Optional[str] = None, log_dir: Optional[str] = None) -> None:
    """
    Apply LOG_LEVEL and LOG_DIR from Settings.

    Updates the console level of every logger handed out so far and of those
    created later. A log directory adds the rotating file handler to loggers
    that don't have one yet.

    Args:
        level: Console log level name (e.g. "DEBUG"); unchanged when None
        log_dir: Directory for okta_policy_client.log; unchanged when None
    """
    global DEFAULT_CONSOLE_LEVEL, _LOG_DIR

    if level:
        DEFAULT_CONSOLE_LEVEL = level.upper()
    if log_dir:
        _LOG_DIR = Path(log_dir)

    for name in _CONFIGURED_LOGGERS:
        logger = logging.getLogger(name)
        has_file_handler = False
        for handler in logger.handlers:
            # RotatingFileHandler is itself a StreamHandler
            if isinstance(handler, RotatingFileHandler):
                has_file_handler = True
            elif isinstance(handler, logging.StreamHandler):
                handler.setLevel(DEFAULT_CONSOLE_LEVEL)
        if _LOG_DIR and not has_file_handler:
            logger.addHandler(_file_handler(_LOG_DIR))


def _with_correlation(method):
    def wrapper(msg, *args, **kwargs):
        correlation_id = get_correlation_id()
        if correlation_id:
            msg = f"[{correlation_id}] {msg}"
        return method(msg, *args, **kwargs)
    return wrapper


def get_logger(name: str, log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Get a properly configured logger.

    Args:
        name: Logger name (typically __name__)
        log_dir: Directory for log files, defaults to LOG_DIR

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)

    if name in _CONFIGURED_LOGGERS:
        return logger

    _CONFIGURED_LOGGERS.add(name)

    # Capture everything; handlers do the filtering
    logger.setLevel(logging.DEBUG)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    # stderr keeps stdout clean for scripts that print results
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(DEFAULT_CONSOLE_LEVEL)
    console_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        '%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    log_dir = log_dir or get_default_log_dir()
    if log_dir:
        logger.addHandler(_file_handler(log_dir))

    # Prevent duplicate logs
    if name != "root":
        logger.propagate = False

    logger.debug = _with_correlation(logger.debug)
    logger.info = _with_correlation(logger.info)
    logger.warning = _with_correlation(logger.warning)
    logger.error = _with_correlation(logger.error)
    logger.critical = _with_correlation(logger.critical)

    return logger


logger = get_logger("okta_policy_client")
