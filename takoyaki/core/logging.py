# takoyaki/core/logging.py
"""
Centralized logging system for the service.

Provides:
- TakoyakiLogger: Global logging configuration
- LoggingMixin: Consistent logging behavior for classes
- log_with_context: Attach block/request context to a single record
"""

import logging
import sys
from logging import DEBUG, INFO, WARNING, ERROR
from pathlib import Path
from typing import Optional
from datetime import datetime


ROOT_LOGGER_NAME = 'takoyaki'

# LogRecord attribute holding the context of a log_with_context call
CONTEXT_ATTR = 'takoyaki_context'


class TakoyakiFormatter(logging.Formatter):
    """Timestamped line, optionally followed by `| key=value` context pairs in call order"""

    def __init__(self, include_context: bool = False):
        self.include_context = include_context
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
        line = f"{timestamp} - {record.name} - {record.levelname} - {record.getMessage()}"

        context = getattr(record, CONTEXT_ATTR, None)
        if self.include_context and context:
            pairs = ' '.join(f"{key}={value}" for key, value in context.items() if value is not None)
            if pairs:
                line = f"{line} | {pairs}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"

        return line


class TakoyakiLogger:
    """Global logging configuration for the `takoyaki` logger tree"""

    _configured = False

    @classmethod
    def configure(cls,
                  log_dir: Optional[Path] = None,
                  log_level: str = "INFO",
                  console_enabled: bool = True,
                  file_enabled: bool = True,
                  structured_format: bool = True) -> None:

        if cls._configured:
            return

        level = getattr(logging, log_level.upper())
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        if console_enabled:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(level)
            if structured_format:
                console_handler.setFormatter(TakoyakiFormatter(include_context=True))
            else:
                console_handler.setFormatter(logging.Formatter(
                    '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
                ))
            root_logger.addHandler(console_handler)

        if file_enabled and log_dir:
            log_dir.mkdir(parents=True, exist_ok=True)
            file_formatter = TakoyakiFormatter(include_context=True)

            file_handler = logging.FileHandler(log_dir / 'takoyaki.log')
            file_handler.setLevel(level)
            file_handler.setFormatter(file_formatter)
            root_logger.addHandler(file_handler)

            # Failed blocks and archive errors only
            error_handler = logging.FileHandler(log_dir / 'takoyaki_errors.log')
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(file_formatter)
            root_logger.addHandler(error_handler)

        cls._configured = True

    @classmethod
    def reset(cls) -> None:
        """Drop handlers so configure() can run again"""
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in list(root_logger.handlers):
            handler.close()
            root_logger.removeHandler(handler)
        cls._configured = False

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if not cls._configured:
            cls.configure(file_enabled=False)

        if not name.startswith(ROOT_LOGGER_NAME):
            name = f'{ROOT_LOGGER_NAME}.{name}'

        return logging.getLogger(name)


def get_class_logger(cls_instance) -> logging.Logger:
    module = cls_instance.__class__.__module__
    prefix = f'{ROOT_LOGGER_NAME}.'
    if module.startswith(prefix):
        module = module[len(prefix):]

    return TakoyakiLogger.get_logger(f"{module}.{cls_instance.__class__.__name__}")


def log_with_context(logger: logging.Logger, level: int, message: str,
                     exc_info: bool = False, **context) -> None:
    if logger.isEnabledFor(level):
        logger.log(level, message, exc_info=exc_info, extra={CONTEXT_ATTR: context})


class LoggingMixin:
    """Class-named logger plus level helpers that take keyword context"""

    @property
    def logger(self) -> logging.Logger:
        if not hasattr(self, '_logger'):
            self._logger = get_class_logger(self)
        return self._logger

    def log_debug(self, message: str, **context) -> None:
        log_with_context(self.logger, DEBUG, message, **context)

    def log_info(self, message: str, **context) -> None:
        log_with_context(self.logger, INFO, message, **context)

    def log_warning(self, message: str, **context) -> None:
        log_with_context(self.logger, WARNING, message, **context)

    def log_error(self, message: str, **context) -> None:
        log_with_context(self.logger, ERROR, message, **context)


__all__ = [
    "TakoyakiLogger",
    "TakoyakiFormatter",
    "LoggingMixin",
    "get_class_logger",
    "log_with_context",
    "DEBUG",
    "INFO",
    "WARNING",
    "ERROR",
]
