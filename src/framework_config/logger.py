"""
Framework Config Logger
Leveled, prefixed logging on top of the stdlib ``framework_config`` logger.
"""
import logging
import os
from typing import Literal, Any, Dict

LogLevel = Literal['silent', 'error', 'warn', 'info', 'debug', 'trace']

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOG_LEVELS: Dict[str, int] = {
    'silent': logging.CRITICAL + 10,
    'error': logging.ERROR,
    'warn': logging.WARNING,
    'info': logging.INFO,
    'debug': logging.DEBUG,
    'trace': TRACE
}

LOGGER_NAME = "framework_config"

PREFIX = os.getenv('FRAMEWORK_CONFIG_LOG_PREFIX', '[configuration]')

_base_logger = logging.getLogger(LOGGER_NAME)
_current_level: LogLevel = 'info'

# Detect initial log level from env. Without it the stdlib hierarchy decides.
env_level = os.getenv('FRAMEWORK_CONFIG_LOG_LEVEL', '').lower()
if env_level in LOG_LEVELS:
    _current_level = env_level  # type: ignore
    _base_logger.setLevel(LOG_LEVELS[env_level])

def get_log_level() -> LogLevel:
    return _current_level

def set_log_level(level: LogLevel) -> None:
    global _current_level
    if level in LOG_LEVELS:
        _current_level = level
        _base_logger.setLevel(LOG_LEVELS[level])

class ConfigurationLogger:
    """Prefixed logger used by every framework_config module."""

    def __init__(self, logger: logging.Logger, prefix: str = PREFIX):
        self._logger = logger
        self._prefix = prefix

    def _format(self, message: str) -> str:
        return f"{self._prefix} {message}"

    def _log(self, level: int, message: str, *args: Any, **kwargs: Any) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, self._format(message), *args, **kwargs)

    def error(self, message: str, *args: Any, exc_info: Any = None) -> None:
        self._log(logging.ERROR, message, *args, exc_info=exc_info)

    def warn(self, message: str, *args: Any) -> None:
        self._log(logging.WARNING, message, *args)

    def info(self, message: str, *args: Any) -> None:
        self._log(logging.INFO, message, *args)

    def debug(self, message: str, *args: Any) -> None:
        self._log(logging.DEBUG, message, *args)

    def trace(self, message: str, *args: Any) -> None:
        self._log(TRACE, message, *args)

_logger_instance = ConfigurationLogger(_base_logger)

def get_logger() -> ConfigurationLogger:
    return _logger_instance
