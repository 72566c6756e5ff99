"""Core modules for ChatCal.

Configuration, logging and error handling shared by the processors and
exporters. The application controller lives in ``chatcal.core.application``.
"""

from .config_manager import AppConfig, ConfigManager
from .error_handler import (
    ChatCalError,
    ConfigurationError,
    EventValidationError,
    ExportError,
    ErrorHandler,
    ErrorSeverity
)
from .logging_manager import LoggingManager

__all__ = [
    "AppConfig",
    "ConfigManager",
    "ChatCalError",
    "ConfigurationError",
    "EventValidationError",
    "ExportError",
    "ErrorHandler",
    "ErrorSeverity",
    "LoggingManager"
]
