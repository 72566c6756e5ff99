"""Centralized Logging Management for ChatCal

Handles log configuration, formatting, and output management. Library modules
only ask for named loggers; handlers are installed once by the application or
the command line via ``LoggingManager.configure``.
"""

import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Union


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to console output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }

    def format(self, record):
        """Format log record with colors for console output."""
        log_message = super().format(record)
        return f"{self.COLORS.get(record.levelname, '')}{log_message}{self.COLORS['RESET']}"


class LoggingManager:
    """Centralized logging configuration and management."""

    _instance: Optional['LoggingManager'] = None
    _initialized: bool = False

    def __new__(cls) -> 'LoggingManager':
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize logging manager (only once)."""
        if self._initialized:
            return

        self.log_dir: Optional[Path] = None
        self.loggers: Dict[str, logging.Logger] = {}
        self.handlers: list = []
        self._initialized = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get or create a logger with the specified name.

        Args:
            name: Logger name (typically __name__ of the module)

        Returns:
            Logger instance
        """
        manager = cls()
        return manager._get_logger_instance(name)

    def _get_logger_instance(self, name: str) -> logging.Logger:
        """Internal method to get logger instance."""
        if name in self.loggers:
            return self.loggers[name]

        logger = logging.getLogger(name)
        self.loggers[name] = logger
        return logger

    @classmethod
    def configure(
        cls,
        level: str = "INFO",
        log_dir: Optional[Union[str, Path]] = None,
        log_to_console: bool = True,
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5
    ) -> 'LoggingManager':
        """Install handlers on the root logger.

        Args:
            level: Console log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for rotating log files; no file logging if None
            log_to_console: Whether to log to stdout
            max_bytes: Size at which the main log file rotates
            backup_count: Number of rotated files to keep

        Returns:
            The logging manager
        """
        manager = cls()
        manager._setup_root_logger(level, log_dir, log_to_console, max_bytes, backup_count)
        return manager

    def _setup_root_logger(self, level: str, log_dir: Optional[Union[str, Path]],
                           log_to_console: bool, max_bytes: int, backup_count: int):
        """Configure the root logger with handlers."""
        numeric_level = self._to_level(level)
        root_logger = logging.getLogger()
        root_logger.setLevel(logging.DEBUG)

        # Only drop handlers this manager installed earlier
        for handler in self.handlers:
            root_logger.removeHandler(handler)
            handler.close()
        self.handlers = []

        if log_to_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(numeric_level)
            console_handler.setFormatter(ColoredFormatter(
                '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
                datefmt='%H:%M:%S'
            ))
            self._add_handler(root_logger, console_handler)

        if log_dir is None:
            return

        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        file_formatter = logging.Formatter(
            '%(asctime)s | %(name)s | %(levelname)s | %(funcName)s:%(lineno)d | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        # File handler for all logs
        log_file = self.log_dir / f"chatcal_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_formatter)
        self._add_handler(root_logger, file_handler)

        # Error file handler for errors only
        error_file = self.log_dir / f"chatcal_errors_{datetime.now().strftime('%Y%m%d')}.log"
        error_handler = logging.handlers.RotatingFileHandler(
            error_file,
            maxBytes=max_bytes // 2,
            backupCount=backup_count * 2,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(file_formatter)
        self._add_handler(root_logger, error_handler)

    def _add_handler(self, root_logger: logging.Logger, handler: logging.Handler):
        root_logger.addHandler(handler)
        self.handlers.append(handler)

    @staticmethod
    def _to_level(level: str) -> int:
        numeric_level = getattr(logging, level.upper(), None)
        if not isinstance(numeric_level, int):
            raise ValueError(f'Invalid log level: {level}')
        return numeric_level

    def set_log_level(self, level: str):
        """Set the logging level for the console handler.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        numeric_level = self._to_level(level)
        for handler in self.handlers:
            if isinstance(handler, logging.StreamHandler) and getattr(handler, 'stream', None) is sys.stdout:
                handler.setLevel(numeric_level)
                break

    def get_log_stats(self) -> Dict[str, float]:
        """Get statistics about log files.

        Returns:
            Dictionary with log file statistics
        """
        stats = {
            'total_files': 0,
            'total_size_mb': 0,
            'error_files': 0,
            'debug_files': 0
        }
        if self.log_dir is None or not self.log_dir.exists():
            return stats

        for log_file in self.log_dir.glob("*.log*"):
            stats['total_files'] += 1
            stats['total_size_mb'] += log_file.stat().st_size / (1024 * 1024)

            if 'error' in log_file.name:
                stats['error_files'] += 1
            else:
                stats['debug_files'] += 1

        stats['total_size_mb'] = round(stats['total_size_mb'], 2)
        return stats
