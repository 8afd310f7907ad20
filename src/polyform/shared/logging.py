"""Structured logging utilities for form compilation.

Every pipeline stage logs through a CorrelationLogger so that messages from
one compilation (and one language variant within it) can be tied together.
"""

import logging
from typing import Any, Dict, Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(component)s] %(message)s"


class CorrelationLogger:
    """Logger that automatically includes correlation, component and variant info."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None,
        language: Optional[str] = None,
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for tracking one compilation
            component: Component name for structured logging
            language: Target language of the variant being built, if any
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.split(".")[-1]
        self.language = language

    def for_variant(self, language: Optional[str]) -> "CorrelationLogger":
        """Return a logger bound to one language variant of the same compilation."""
        return CorrelationLogger(
            self.logger.name, self.correlation_id, self.component, language
        )

    def is_enabled_for(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        combined_extra = {
            "component": self.component,
            "correlation_id": self.correlation_id,
            "variant_language": self.language,
        }

        if extra:
            combined_extra.update(extra)

        return combined_extra

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log debug message with correlation info."""
        self.logger.debug(message, extra=self._get_extra(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log info message with correlation info."""
        self.logger.info(message, extra=self._get_extra(extra))

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log warning message with correlation info."""
        self.logger.warning(message, extra=self._get_extra(extra))

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = True,
    ) -> None:
        """Log error message with correlation info."""
        self.logger.error(message, extra=self._get_extra(extra), exc_info=exc_info)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None,
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for tracking one compilation
        component: Component name for structured logging

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)


class _ComponentDefaultFilter(logging.Filter):
    """Fill in ``component`` for records that did not come through CorrelationLogger."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "component"):
            record.component = record.name.split(".")[-1]
        return True


def configure_logging(level: Union[int, str] = logging.WARNING) -> None:
    """Attach a stderr handler to the ``polyform`` logger hierarchy.

    Calling this more than once only adjusts the level.
    """
    root = logging.getLogger("polyform")
    root.setLevel(level)
    if any(getattr(h, "_polyform_handler", False) for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(_ComponentDefaultFilter())
    handler._polyform_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
