"""Logging utilities for music-on-done."""

from .logger import setup_logging, reset_logging, get_logger
from .logging_config import LoggingConfig, get_logging_config
from .formatters import JSONFormatter, StructuredLogAdapter
from .context import (
    InvocationLogFilter,
    generate_invocation_id,
    get_invocation_id,
    set_invocation_id,
)

__all__ = [
    # Logger
    'setup_logging',
    'reset_logging',
    'get_logger',
    # Logging config
    'LoggingConfig',
    'get_logging_config',
    # Structured logging
    'JSONFormatter',
    'StructuredLogAdapter',
    # Context
    'InvocationLogFilter',
    'generate_invocation_id',
    'get_invocation_id',
    'set_invocation_id',
]
