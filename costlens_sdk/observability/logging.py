"""
Structured logging utility.

Every component logs through ``CostLensLogger`` so that messages carry the
same ``[component=... key=value]`` prefix, and so that each client instance
can apply its own ``log_level`` without touching global logging config.
"""

import logging
from typing import Optional

# log_level setting -> lowest stdlib level that is emitted
LEVEL_THRESHOLDS = {
    "silent": logging.CRITICAL + 1,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
}


class CostLensLogger:
    """Structured logger with a per-instance level filter."""

    def __init__(self, component: str, level: str = "info"):
        """
        Initialize logger for a component.

        Args:
            component: Component name (e.g., "orchestrator", "tracking")
            level: One of "silent", "error", "warn", "info"; debug messages
                are always left to the stdlib logger configuration
        """
        self.component = component
        self.level = level
        self.logger = logging.getLogger(f"costlens_sdk.{component}")

    def child(self, component: str) -> "CostLensLogger":
        """Logger for another component sharing this level."""
        return CostLensLogger(component, self.level)

    def _format_message(self, message: str, **kwargs) -> str:
        fields = [f"component={self.component}"]
        for key, value in kwargs.items():
            if value is not None:
                fields.append(f"{key}={value}")
        return f"[{' '.join(fields)}] {message}"

    def _enabled(self, level: int) -> bool:
        threshold = LEVEL_THRESHOLDS.get(self.level, logging.WARNING)
        return level >= threshold

    def debug(self, message: str, **kwargs):
        if self.level != "silent":
            self.logger.debug(self._format_message(message, **kwargs))

    def info(self, message: str, **kwargs):
        if self._enabled(logging.INFO):
            self.logger.info(self._format_message(message, **kwargs))

    def warning(self, message: str, error: Optional[BaseException] = None, **kwargs):
        if error is not None:
            kwargs['error_type'] = type(error).__name__
            kwargs['error_msg'] = str(error)
        if self._enabled(logging.WARNING):
            self.logger.warning(self._format_message(message, **kwargs))

    def error(self, message: str, error: Optional[BaseException] = None, **kwargs):
        if error is not None:
            kwargs['error_type'] = type(error).__name__
            kwargs['error_msg'] = str(error)
        if self._enabled(logging.ERROR):
            self.logger.error(self._format_message(message, **kwargs))
