"""Error Handling for ChatCal

Exception hierarchy and a central handler that logs failures and notifies
registered callbacks. Expected outcomes such as "no date found in the message"
are not errors and never pass through here.
"""

import logging
from enum import Enum
from typing import Callable, Dict, Optional, Type


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ChatCalError(Exception):
    """Base exception class for ChatCal."""

    def __init__(self, message: str, severity: ErrorSeverity = ErrorSeverity.MEDIUM):
        self.message = message
        self.severity = severity
        super().__init__(self.message)


class ConfigurationError(ChatCalError):
    """Error raised when configuration or resolution context is invalid."""
    pass


class EventValidationError(ChatCalError):
    """Error raised when an Event would violate its invariants."""

    def __init__(self, message: str):
        super().__init__(message, ErrorSeverity.HIGH)


class ExportError(ChatCalError):
    """Error raised when an event cannot be rendered to an export format."""

    def __init__(self, message: str, export_format: str = "ics"):
        self.export_format = export_format
        super().__init__(message, ErrorSeverity.HIGH)


class ErrorHandler:
    """Error handler for the message pipeline and command line."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """Initialize error handler."""
        self.logger = logger or logging.getLogger(__name__)
        self.error_callbacks: Dict[Type[Exception], Callable[[Exception], None]] = {}

    def register_error_callback(self, exception_type: Type[Exception],
                              callback: Callable[[Exception], None]):
        """Register a callback for specific exception types.

        Args:
            exception_type: The exception type to handle
            callback: Function to call when this exception occurs
        """
        self.error_callbacks[exception_type] = callback

    def handle_error(self, error: Exception, context: Optional[str] = None) -> bool:
        """Handle an error with appropriate logging and callbacks.

        Args:
            error: The exception that occurred
            context: Additional context about where the error occurred

        Returns:
            True if error was handled successfully, False otherwise
        """
        try:
            severity = self.get_error_severity(error)
            error_message = self.format_error_message(error, context)

            self._log_error(error_message, severity)

            # Most specific registered callback wins
            for error_type in type(error).__mro__:
                if error_type in self.error_callbacks:
                    self.error_callbacks[error_type](error)
                    break

            return True

        except Exception as handler_error:
            self.logger.critical(f"Error handler failed: {handler_error}")
            return False

    def get_error_severity(self, error: Exception) -> ErrorSeverity:
        """Determine error severity based on exception type.

        Args:
            error: The exception to analyze

        Returns:
            Appropriate severity level
        """
        if isinstance(error, ChatCalError):
            return error.severity

        severity_map = {
            FileNotFoundError: ErrorSeverity.MEDIUM,
            PermissionError: ErrorSeverity.HIGH,
            ValueError: ErrorSeverity.MEDIUM,
            MemoryError: ErrorSeverity.CRITICAL,
            KeyboardInterrupt: ErrorSeverity.LOW,
        }

        return severity_map.get(type(error), ErrorSeverity.MEDIUM)

    def format_error_message(self, error: Exception, context: Optional[str] = None) -> str:
        """Format error message for logging and display."""
        message = str(error)
        if context:
            message = f"{context}: {message}"

        return message

    def _log_error(self, message: str, severity: ErrorSeverity):
        """Log error with the level matching its severity."""
        log_methods = {
            ErrorSeverity.LOW: self.logger.info,
            ErrorSeverity.MEDIUM: self.logger.warning,
            ErrorSeverity.HIGH: self.logger.error,
            ErrorSeverity.CRITICAL: self.logger.critical,
        }

        log_method = log_methods[severity]
        log_method(message, exc_info=severity in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL))
