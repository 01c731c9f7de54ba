"""
Structured logging system for Jobly.

Provides centralized logging with console and file outputs, log levels,
and query metrics for keeping an eye on the data layer.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json

from .env import get_log_dir, get_log_level


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks metrics about the statements the data layer runs.
    """

    def __init__(
        self,
        name: str = "jobly",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()  # Remove existing handlers

        self.metrics = {
            "queries_executed": 0,
            "rows_returned": 0,
            "queries_failed": 0,
            "errors_by_type": {},
            "queries_by_table": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"jobly_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        """Internal logging method with context."""
        if context:
            # Decimal equity, datetimes etc. are logged by their str()
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_query(self, table: str, rows: int = 0):
        """Record a statement that ran against `table`."""
        self.metrics["queries_executed"] += 1
        self.metrics["rows_returned"] += rows
        if table not in self.metrics["queries_by_table"]:
            self.metrics["queries_by_table"][table] = {
                "queries": 0,
                "failures": 0,
            }
        self.metrics["queries_by_table"][table]["queries"] += 1

    def record_query_failure(self, table: str, error_type: str):
        """Record a statement that raised."""
        self.metrics["queries_failed"] += 1
        if table not in self.metrics["queries_by_table"]:
            self.metrics["queries_by_table"][table] = {
                "queries": 0,
                "failures": 0,
            }
        self.metrics["queries_by_table"][table]["failures"] += 1

        if error_type not in self.metrics["errors_by_type"]:
            self.metrics["errors_by_type"][error_type] = 0
        self.metrics["errors_by_type"][error_type] += 1

    def get_metrics(self) -> dict:
        """Return current metrics."""
        metrics_copy = self.metrics.copy()
        for table, stats in metrics_copy["queries_by_table"].items():
            attempts = stats["queries"] + stats["failures"]
            if attempts > 0:
                stats["failure_rate"] = round(stats["failures"] / attempts, 3)

        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Data Layer Metrics ===")
        self.info(f"Queries: {metrics['queries_executed']} ok, {metrics['queries_failed']} failed")
        self.info(f"Rows returned: {metrics['rows_returned']}")

        if metrics["queries_by_table"]:
            self.info("Per table:")
            for table, stats in metrics["queries_by_table"].items():
                rate = stats.get("failure_rate", 0) * 100
                self.info(f"  {table}: {stats['queries']} ok, {stats['failures']} failed ({rate:.1f}% failures)")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "jobly",
    level: Optional[str] = None,
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    File logging is only switched on when JOBLY_LOG_DIR is set (or a log_dir
    is passed explicitly).

    Args:
        name: Logger name
        level: Log level; defaults to JOBLY_LOG_LEVEL or INFO
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        if "log_dir" not in kwargs:
            kwargs["log_dir"] = get_log_dir()
        kwargs.setdefault("enable_file", kwargs["log_dir"] is not None)
        _global_logger = StructuredLogger(name=name, level=level or get_log_level(), **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
