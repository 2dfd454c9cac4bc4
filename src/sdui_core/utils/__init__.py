"""
Utility functions and helper modules.

This module contains shared utilities used across the package: the Supabase
client factory, operation logging and logging configuration.
"""

from .execution_logger import OperationMetrics, log_operation, track_operation
from .logging_setup import JsonFormatter, configure_logging

__all__ = [
    "OperationMetrics",
    "log_operation",
    "track_operation",
    "JsonFormatter",
    "configure_logging",
]
