"""
Structured operation logging for the record store and its HTTP layer.
"""

import logging
from typing import Any, Dict

from ..core.config import get_log_level, log_level_valid


def mask_tel_number(tel_number: str) -> str:
    """Hide all but the last four characters of a phone number."""
    if not tel_number:
        return ""
    if len(tel_number) <= 4:
        return "*" * len(tel_number)
    return "*" * (len(tel_number) - 4) + tel_number[-4:]


class StructuredLogger:
    """Structured logger for record store operations."""

    def __init__(self, name: str = "qa_checkin"):
        self.logger = logging.getLogger(name)
        # invalid levels are reported by validate_config
        self.logger.setLevel(get_log_level() if log_level_valid() else logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        if status in ("failed", "error"):
            self.logger.error(message)
        else:
            self.logger.info(message)

    def log_record_operation(self, operation: str, tel_number: str, status: str = "success",
                             details: Dict[str, Any] = None):
        """Log a record operation with the phone number masked."""
        log_details = {"tel_number": mask_tel_number(tel_number)}
        if details:
            log_details.update(details)

        self.log_operation(f"record.{operation}", status, log_details)

    def log_request(self, method: str, path: str, status_code: int):
        """Log an API request outcome."""
        self.log_operation("api.request", "success" if status_code < 500 else "failed",
                           {"method": method, "path": path, "status_code": status_code})

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


# Global logger instance
logger = StructuredLogger()
