"""
SDK Logging System
Category-based, field-tagged logging with zero overhead when disabled
"""

import logging
import logging.handlers
import os
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from ..utils.helpers import format_duration


ROOT_LOGGER_NAME = 'cex_sdk'

FILE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
CONSOLE_FORMAT = '%(asctime)s | %(levelname)s | %(message)s'


class LogCategory(Enum):
    """Independently switchable record categories; each maps to a child logger"""
    API_CALLS = "api_calls"
    RATE_LIMITING = "rate_limiting"
    SIGNING = "signing"
    SYSTEM_EVENTS = "system_events"
    ERROR_TRACES = "error_traces"


# Config attribute and default for each switchable category
_CATEGORY_SETTINGS = {
    LogCategory.API_CALLS: ('LOG_API_CALLS', True),
    LogCategory.RATE_LIMITING: ('LOG_RATE_LIMITING', True),
    LogCategory.SIGNING: ('LOG_SIGNING', False),
    LogCategory.SYSTEM_EVENTS: ('LOG_SYSTEM_EVENTS', True),
}


def format_fields(message: str, **kwargs) -> str:
    """Append `key=value` pairs to a message, skipping empty values"""
    fields = [f"{k}={v}" for k, v in kwargs.items() if v is not None]
    if not fields:
        return message
    return f"{message} | " + " | ".join(fields)


class Logger:
    """
    SDK logger

    Records go to `cex_sdk.<category>` child loggers. With a configuration
    object the logger installs console and/or rotating file handlers on its
    base logger; without one it installs nothing and the host application's
    logging setup decides where records end up.
    """

    def __init__(self, config=None, name: str = ROOT_LOGGER_NAME):
        """
        Args:
            config: Object exposing LOG_* settings (e.g. cex_sdk.config.Config)
            name: Base logger name
        """
        self.config = config
        self.name = name
        self._enabled = True

        self._base = logging.getLogger(name)
        self._children: Dict[LogCategory, logging.Logger] = {
            category: logging.getLogger(f'{name}.{category.value}') for category in LogCategory
        }

        if config is None:
            if not self._base.handlers:
                self._base.addHandler(logging.NullHandler())
        else:
            self._install_handlers()

        self._category_states: Dict[LogCategory, bool] = {
            category: getattr(config, attr, default)
            for category, (attr, default) in _CATEGORY_SETTINGS.items()
        }
        self._category_states[LogCategory.ERROR_TRACES] = True

    @classmethod
    def null(cls) -> "Logger":
        """Logger that discards everything"""
        logger = cls(name=f'{ROOT_LOGGER_NAME}.null')
        logger._enabled = False
        return logger

    # ===== Handler setup =====

    def _install_handlers(self):
        """Replace the base logger's handlers with the configured outputs"""
        level = getattr(logging, self.config.LOG_LEVEL, logging.INFO)
        self._base.setLevel(level)
        self._base.handlers = []

        for handler in self._build_handlers():
            handler.setLevel(level)
            self._base.addHandler(handler)

    def _build_handlers(self) -> List[logging.Handler]:
        output = self.config.LOG_OUTPUT
        handlers: List[logging.Handler] = []

        if output in ('console', 'both'):
            console = logging.StreamHandler()
            console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
            handlers.append(console)

        if output in ('file', 'both'):
            os.makedirs(self.config.LOG_FILE_PATH, exist_ok=True)
            log_file = Path(self.config.LOG_FILE_PATH) / f"cex_sdk_{datetime.now():%Y%m%d}.log"
            rotating = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=self.config.LOG_FILE_MAX_SIZE * 1024 * 1024,
                backupCount=self.config.LOG_FILE_BACKUP_COUNT,
            )
            rotating.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
            handlers.append(rotating)

        return handlers

    # ===== Category control =====

    def is_enabled(self, category: LogCategory) -> bool:
        return self._enabled and self._category_states.get(category, False)

    def enable_category(self, category: LogCategory):
        self._category_states[category] = True
        self.system("Logging category enabled", category=category.value)

    def disable_category(self, category: LogCategory):
        """Switch a category off; ERROR_TRACES cannot be disabled"""
        if category is LogCategory.ERROR_TRACES:
            self.warning("ERROR_TRACES cannot be disabled")
            return

        self._category_states[category] = False
        self.system("Logging category disabled", category=category.value)

    def get_category_status(self) -> Dict[str, bool]:
        return {category.value: state for category, state in self._category_states.items()}

    def _emit(self, category: LogCategory, level: int, message: str, **fields):
        if self.is_enabled(category):
            self._children[category].log(level, format_fields(message, **fields))

    def _plain(self, level: int, message: str, **fields):
        if self._enabled:
            self._base.log(level, format_fields(message, **fields))

    # ===== Category records =====

    def api_call(self, method: str, url: str, status: Optional[int] = None,
                 duration: Optional[float] = None, **kwargs):
        """One completed HTTP exchange"""
        duration_ms = f"{duration*1000:.2f}" if duration is not None else None
        self._emit(LogCategory.API_CALLS, logging.INFO, f"API Call: {method} {url}",
                   status=status, duration_ms=duration_ms, **kwargs)

    def rate_limited(self, api_type: str, waited: float, **kwargs):
        """A request that had to wait for a rate-limit token"""
        self._emit(LogCategory.RATE_LIMITING, logging.INFO, f"Rate limited: {api_type}",
                   waited=format_duration(waited), **kwargs)

    def request_signed(self, endpoint: str, nonce: str, **kwargs):
        """A signed private request; never the secret or the signature"""
        self._emit(LogCategory.SIGNING, logging.DEBUG, f"Signed request: {endpoint}",
                   nonce=nonce, **kwargs)

    def system(self, message: str, **kwargs):
        self._emit(LogCategory.SYSTEM_EVENTS, logging.INFO, message, **kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs):
        """
        Error record, emitted whatever the category switches say

        Args:
            message: Error description
            exc_info: Also log the active exception's traceback
            **kwargs: Context fields
        """
        self._emit(LogCategory.ERROR_TRACES, logging.ERROR, message, **kwargs)
        if exc_info and self._enabled:
            self._base.exception(message)

    # ===== Uncategorized records =====

    def debug(self, message: str, **kwargs):
        self._plain(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._plain(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._plain(logging.WARNING, message, **kwargs)

    def critical(self, message: str, **kwargs):
        self._plain(logging.CRITICAL, message, **kwargs)
