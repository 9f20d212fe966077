"""
Logging setup for typedconf.

Provides the logging configuration model, pretty and JSON formatters, and
the configuration keys under which logging settings are stored in a raw
configuration store.
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional, Type

from pydantic import BaseModel, Field, field_validator, model_validator

from .accessors import get_class, get_file, get_int, get_size_in_bytes, get_string
from .store import RawConfigurationStore
from .units import SizeInBytes
from .validation import require_max, require_min, require_min_size, require_one_of, require_subclass

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
MIN_FILE_SIZE = 1 << 20


class LogFormat(Enum):
    PRETTY = "pretty"
    JSON = "json"


# ANSI color codes
RESET = "\033[0m"
COLORS = {
    "DEBUG": "\033[37m",
    "INFO": "\033[36m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[41m\033[97m",
    "TIME": "\033[90m",
    "MODULE": "\033[35m",
}

# LogRecord attributes that are not structured extras
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class PrettyFormatter(logging.Formatter):
    """
    Human-readable formatter.
    Format:
    2025-08-13 14:35:12.345 UTC | INFO     | accessors:42 | raft.port = 9000 (custom)
    """

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors

    def _color(self, name: str, text: str) -> str:
        if not self.use_colors:
            return text
        return f"{COLORS.get(name, '')}{text}{RESET}"

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        message = record.getMessage()
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return " | ".join([
            self._color("TIME", f"{timestamp} UTC"),
            self._color(record.levelname, f"{record.levelname:<8}"),
            self._color("MODULE", f"{record.module}:{record.lineno}"),
            message,
        ])


class JsonFormatter(logging.Formatter):
    """JSON formatter that keeps structured ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k, v in record.__dict__.items():
            if k in _STANDARD_ATTRS:
                continue
            try:
                json.dumps(v)
                base[k] = v
            except TypeError:
                base[k] = str(v)
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, separators=(",", ":"))


class LoggingConfiguration(BaseModel):
    """Logging system configuration with validation."""
    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = Field(default="pretty", pattern="^(pretty|json)$")
    output: str = Field(default="console", pattern="^(console|file|both)$")
    file_path: Optional[Path] = None
    max_file_size: str = "10MB"
    backup_count: int = Field(default=5, ge=1, le=100)
    # logging.Formatter itself selects the built-in formatter named by `format`
    formatter_class: Type[logging.Formatter] = logging.Formatter

    @field_validator('max_file_size')
    @classmethod
    def validate_max_file_size(cls, v):
        """Require a parseable size of at least 1MB."""
        require_min(MIN_FILE_SIZE)("max_file_size", SizeInBytes.value_of(v).size)
        return v

    @model_validator(mode='after')
    def validate_file_path(self):
        """Validate file path when file output is used."""
        if self.output in ('file', 'both') and not self.file_path:
            raise ValueError("file_path is required when output is 'file' or 'both'")
        return self

    @property
    def max_file_size_bytes(self) -> int:
        return SizeInBytes.value_of(self.max_file_size).size


def create_formatter(
    log_format: str,
    formatter_class: Type[logging.Formatter] = logging.Formatter
) -> logging.Formatter:
    """Instantiate ``formatter_class``, or the built-in formatter for ``log_format`` if it is the base class."""
    if formatter_class is not logging.Formatter:
        return formatter_class()
    if log_format == LogFormat.PRETTY.value:
        return PrettyFormatter()
    if log_format == LogFormat.JSON.value:
        return JsonFormatter()
    raise ValueError(f"Unknown log format: {log_format}")


def configure_logging(
    config: Optional[LoggingConfiguration] = None,
    logger_name: str = "typedconf",
    formatter: Optional[logging.Formatter] = None
) -> logging.Logger:
    """
    Configure the typedconf logger from a logging configuration.

    Args:
        config: Logging configuration, defaults if omitted
        logger_name: Name of the logger to configure
        formatter: Formatter overriding the one selected by ``config.format``

    Returns:
        The configured logger
    """
    config = config or LoggingConfiguration()
    formatter = formatter or create_formatter(config.format, config.formatter_class)

    handlers = []
    if config.output in ("console", "both"):
        handlers.append(logging.StreamHandler(sys.stderr))
    if config.output in ("file", "both"):
        config.file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size_bytes,
            backupCount=config.backup_count,
            encoding="utf-8"
        ))

    for handler in handlers:
        handler.setFormatter(formatter)

    configured = logging.getLogger(logger_name)
    configured.setLevel(getattr(logging, config.level))
    for handler in list(configured.handlers):
        configured.removeHandler(handler)
        handler.close()
    for handler in handlers:
        configured.addHandler(handler)
    configured.propagate = False
    return configured


class LoggingConfigKeys:
    """Store keys for the logging configuration."""
    PREFIX = "typedconf.logging"

    LEVEL_KEY = PREFIX + ".level"
    LEVEL_DEFAULT = "INFO"

    FORMAT_KEY = PREFIX + ".format"
    FORMAT_DEFAULT = LogFormat.PRETTY.value

    OUTPUT_KEY = PREFIX + ".output"
    OUTPUT_DEFAULT = "console"

    FORMATTER_PARAMETER = PREFIX + ".formatter"
    FORMATTER_CLASS = logging.Formatter

    class File:
        PREFIX = "typedconf.logging.file"

        PATH_KEY = PREFIX + ".path"
        PATH_DEFAULT = Path("logs", "typedconf.log")

        MAX_SIZE_KEY = PREFIX + ".max-size"
        MAX_SIZE_DEFAULT = SizeInBytes.value_of("10MB")

        BACKUP_COUNT_KEY = PREFIX + ".backup-count"
        BACKUP_COUNT_DEFAULT = 5

        @staticmethod
        def path(store: RawConfigurationStore) -> Path:
            return get_file(store.get_file, LoggingConfigKeys.File.PATH_KEY,
                            LoggingConfigKeys.File.PATH_DEFAULT)

        @staticmethod
        def max_size(store: RawConfigurationStore) -> SizeInBytes:
            return get_size_in_bytes(store.get_size_in_bytes, LoggingConfigKeys.File.MAX_SIZE_KEY,
                                     LoggingConfigKeys.File.MAX_SIZE_DEFAULT,
                                     require_min_size(MIN_FILE_SIZE))

        @staticmethod
        def backup_count(store: RawConfigurationStore) -> int:
            return get_int(store.get_int, LoggingConfigKeys.File.BACKUP_COUNT_KEY,
                           LoggingConfigKeys.File.BACKUP_COUNT_DEFAULT, require_min(1), require_max(100))

    @staticmethod
    def level(store: RawConfigurationStore) -> str:
        return get_string(store.get, LoggingConfigKeys.LEVEL_KEY, LoggingConfigKeys.LEVEL_DEFAULT,
                          require_one_of(LOG_LEVELS))

    @staticmethod
    def format(store: RawConfigurationStore) -> str:
        return get_string(store.get, LoggingConfigKeys.FORMAT_KEY, LoggingConfigKeys.FORMAT_DEFAULT,
                          require_one_of([f.value for f in LogFormat]))

    @staticmethod
    def output(store: RawConfigurationStore) -> str:
        return get_string(store.get, LoggingConfigKeys.OUTPUT_KEY, LoggingConfigKeys.OUTPUT_DEFAULT,
                          require_one_of(("console", "file", "both")))

    @staticmethod
    def formatter_class(store: RawConfigurationStore) -> Type[logging.Formatter]:
        return get_class(store.get, LoggingConfigKeys.FORMATTER_PARAMETER, LoggingConfigKeys.FORMATTER_CLASS,
                         require_subclass(logging.Formatter))


def load_logging_configuration(store: RawConfigurationStore) -> LoggingConfiguration:
    """
    Read the logging configuration from a raw store.

    Raises:
        ConfigurationValidationError: If a stored value is invalid
    """
    output = LoggingConfigKeys.output(store)
    return LoggingConfiguration(
        level=LoggingConfigKeys.level(store),
        format=LoggingConfigKeys.format(store),
        output=output,
        file_path=LoggingConfigKeys.File.path(store) if output != "console" else None,
        max_file_size=str(LoggingConfigKeys.File.max_size(store)),
        backup_count=LoggingConfigKeys.File.backup_count(store),
        formatter_class=LoggingConfigKeys.formatter_class(store),
    )
