"""Structured logging for strict XML parsing.

Records go through the standard ``logging`` module. Each one carries the
emitting component and an optional correlation ID in its ``extra`` mapping,
which tells apart the output of parse calls running side by side.
"""

import logging
from typing import Any, Dict, Optional


class CorrelationLogger:
    """Thin wrapper over ``logging.Logger`` that stamps component and correlation ID."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name, usually the module's ``__name__``
            correlation_id: Identifier shared by all records of one parse call
            component: Short component label; defaults to the last dotted
                part of ``name``
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.rsplit(".", 1)[-1]

    def _log(
        self,
        level: int,
        message: str,
        extra: Optional[Dict[str, Any]],
        exc_info: bool = False,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        fields: Dict[str, Any] = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        fields.update(extra or {})
        self.logger.log(level, message, extra=fields, exc_info=exc_info)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, message, extra)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.WARNING, message, extra)

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        """Log an error, optionally with the active exception's traceback."""
        self._log(logging.ERROR, message, extra, exc_info)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger.

    Example:
        >>> logger = get_logger(__name__, "req-42", "xml_tokenizer")
        >>> logger.debug("Tokenization complete", extra={"token_count": 8})
    """
    return CorrelationLogger(name, correlation_id, component)
