"""Core utilities package"""

from .config import settings, get_settings, Settings
from .logging import setup_logging, get_logger, get_context_logger
from .errors import (
    NumCtxError,
    ConfigurationError,
    ConversionError,
    DivisionError,
    IndeterminateComparison,
    ContextMismatch,
)

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "setup_logging",
    "get_logger",
    "get_context_logger",
    "NumCtxError",
    "ConfigurationError",
    "ConversionError",
    "DivisionError",
    "IndeterminateComparison",
    "ContextMismatch",
]
