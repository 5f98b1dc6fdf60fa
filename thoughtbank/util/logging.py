"""
Structured logging for thought store and vector index operations.
"""

import logging
from typing import Any, Dict

from thoughtbank.core.config import LOG_LEVEL


class StructuredLogger:
    """Structured logger for record store and vector index operations."""

    def __init__(self, name: str = "thoughtbank"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, LOG_LEVEL.upper(), logging.INFO))

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

        self.logger.info(message)

    def log_thought_operation(self, operation: str, thought_id: str, details: Dict[str, Any] = None, status: str = "success"):
        """Log a thought record operation."""
        log_details = {"thought_id": thought_id}
        if details:
            log_details.update(details)

        self.log_operation(f"thought.{operation}", status, log_details)

    def log_vector_operation(self, operation: str, record_id: str, details: Dict[str, Any] = None, status: str = "success"):
        """Log a vector operation."""
        log_details = {"record_id": record_id}
        if details:
            log_details.update(details)

        self.log_operation(f"vector.{operation}", status, log_details)

    def log_subject_operation(self, operation: str, subject_type: str, subject_id: str, name: str = None):
        """Log a subject find-or-create."""
        details = {"subject_type": subject_type, "subject_id": subject_id}
        if name is not None:
            details["name"] = name[:50] + "..." if len(name) > 50 else name

        self.log_operation(f"subject.{operation}", "success", details)

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
