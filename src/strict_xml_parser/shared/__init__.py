"""Shared utilities for strict XML parsing.

This module provides configuration objects, diagnostic types, the syntax error
and logging helpers used across all processing layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    ParserConfig,
    TokenizationConfig,
    TreeConfig,
)
from .errors import XMLSyntaxError
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "GlobalConfig",
    "ParserConfig",
    "TokenizationConfig",
    "TreeConfig",
    "XMLSyntaxError",
    "CorrelationLogger",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
]
