"""
Logging Infrastructure Module

Provides:
- Plugin log file with daily rotation (JSON lines)
- Colored console output with subsystem prefixes
- Subsystem loggers for capture, recall and adapter traffic

The capture, recall and adapter paths log through ``SubsystemLogger`` adapters
tagged with their subsystem; the registry, startup and plugin modules use
``logging.getLogger(__name__)``. Both end up on the ``lightrag_memory`` package
logger, where ``configure_logging`` installs the handlers.
"""
import os
import sys
import json
import logging
from logging.handlers import TimedRotatingFileHandler
from datetime import datetime, timezone
from typing import Optional
from functools import lru_cache

ROOT_LOGGER_NAME = "lightrag_memory"

# Default configuration
DEFAULT_LOG_DIR = "./logs"
DEFAULT_LOG_FILE = "memory.log"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_MAX_DAYS = 15
DEFAULT_JSON_FORMAT = True


class JSONFormatter(logging.Formatter):
    """Format log records as JSON lines with UTC timestamps."""

    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "subsystem": getattr(record, "subsystem", record.name),
            "message": record.getMessage(),
        }

        # Conversation key, when the caller attached one
        conversation_id = getattr(record, "conversation_id", None)
        if conversation_id:
            log_record["conversation_id"] = conversation_id

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record, default=str)


class ColoredConsoleFormatter(logging.Formatter):
    """Colored console output with subsystem prefixes."""

    COLORS = {
        'DEBUG': '\033[90m',     # Gray
        'INFO': '\033[36m',      # Cyan
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    SUBSYSTEM_COLORS = ['\033[36m', '\033[32m', '\033[33m', '\033[34m', '\033[35m', '\033[31m']

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()

    def _subsystem_color(self, subsystem: str) -> str:
        hash_val = sum(ord(c) for c in subsystem)
        return self.SUBSYSTEM_COLORS[hash_val % len(self.SUBSYSTEM_COLORS)]

    def format(self, record: logging.LogRecord) -> str:
        subsystem = getattr(record, "subsystem", record.name)
        # "lightrag_memory.hooks.capture" -> "hooks.capture"
        if subsystem.startswith(f"{ROOT_LOGGER_NAME}."):
            subsystem = subsystem[len(ROOT_LOGGER_NAME) + 1:]

        timestamp = datetime.now().strftime('%H:%M:%S')
        level = record.levelname
        message = record.getMessage()

        if self.use_colors:
            level_color = self.COLORS.get(level, '')
            sub_color = self._subsystem_color(subsystem)
            return f"\033[90m{timestamp}\033[0m {sub_color}[{subsystem}]\033[0m {level_color}{message}\033[0m"
        return f"{timestamp} [{subsystem}] {level} {message}"


class SubsystemLogger(logging.LoggerAdapter):
    """Logger adapter that adds subsystem context."""

    def __init__(self, logger: logging.Logger, subsystem: str):
        super().__init__(logger, {'subsystem': subsystem})
        self.subsystem = subsystem

    def process(self, msg, kwargs):
        kwargs.setdefault('extra', {})
        kwargs['extra']['subsystem'] = self.subsystem
        return msg, kwargs

    def child(self, name: str) -> "SubsystemLogger":
        """Create a child logger with extended subsystem path."""
        return SubsystemLogger(self.logger, f"{self.subsystem}/{name}")


class LoggingManager:
    """Handler setup for the ``lightrag_memory`` package logger."""

    def __init__(self):
        self.log_dir = DEFAULT_LOG_DIR
        self.log_level = DEFAULT_LOG_LEVEL
        self.max_days = DEFAULT_MAX_DAYS
        self.json_format = DEFAULT_JSON_FORMAT
        self.package_logger = logging.getLogger(ROOT_LOGGER_NAME)

    def configure(
        self,
        log_dir: Optional[str] = None,
        log_level: Optional[str] = None,
        max_days: Optional[int] = None,
        json_format: Optional[bool] = None,
        console_colors: bool = True
    ):
        """Apply settings and (re)install the file and console handlers."""
        if log_dir:
            self.log_dir = log_dir
        if log_level:
            self.log_level = log_level.upper()
        if max_days is not None:
            self.max_days = max_days
        if json_format is not None:
            self.json_format = json_format

        os.makedirs(self.log_dir, exist_ok=True)
        self.package_logger.setLevel(getattr(logging, self.log_level, logging.INFO))

        # Reconfiguring replaces handlers rather than stacking them
        for handler in list(self.package_logger.handlers):
            handler.close()
        self.package_logger.handlers.clear()

        file_handler = TimedRotatingFileHandler(
            filename=self.get_log_file_path(),
            when="midnight",
            backupCount=self.max_days,
            encoding="utf-8"
        )
        file_handler.suffix = "%Y-%m-%d"
        if self.json_format:
            file_handler.setFormatter(JSONFormatter())
        else:
            file_handler.setFormatter(logging.Formatter('%(asctime)s [%(name)s] %(levelname)s: %(message)s'))
        self.package_logger.addHandler(file_handler)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(ColoredConsoleFormatter(use_colors=console_colors))
        self.package_logger.addHandler(console_handler)

        self.package_logger.propagate = False

    def get_log_file_path(self) -> str:
        return os.path.join(self.log_dir, DEFAULT_LOG_FILE)


_manager = LoggingManager()


def configure_logging(
    log_dir: Optional[str] = None,
    log_level: Optional[str] = None,
    max_days: Optional[int] = None,
    json_format: Optional[bool] = None,
    console_colors: bool = True
):
    """Configure the logging system. Calling it again replaces the handlers."""
    _manager.configure(
        log_dir=log_dir,
        log_level=log_level,
        max_days=max_days,
        json_format=json_format,
        console_colors=console_colors
    )


def get_logger(subsystem: str) -> SubsystemLogger:
    """
    Get a subsystem logger.

    Usage:
        log = get_logger("capture")
        log.info("Turn captured")

        child = log.child("inbound")
        child.debug("Inbound message skipped")
    """
    return SubsystemLogger(_manager.package_logger, subsystem)


def get_log_file_path() -> str:
    """Get the current log file path."""
    return _manager.get_log_file_path()


@lru_cache(maxsize=32)
def _cached_logger(subsystem: str) -> SubsystemLogger:
    return get_logger(subsystem)


def capture_logger() -> SubsystemLogger:
    return _cached_logger("capture")


def recall_logger() -> SubsystemLogger:
    return _cached_logger("recall")


def adapter_logger() -> SubsystemLogger:
    return _cached_logger("adapter")
