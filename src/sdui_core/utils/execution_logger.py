"""
Operation Execution Logger for the App State Machine.

This module provides logging utilities for tracking state-machine operations
with timestamps, execution time and structured metadata.

Features:
- Automatic execution time tracking
- Operation entry/exit logging with correlation IDs
- Error tracking with context
"""

import inspect
import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


class OperationMetrics:
    """Container for operation timing and outcome."""

    def __init__(self, operation: str):
        self.operation = operation
        self.correlation_id: str = str(uuid.uuid4())[:8]
        self.start_time: Optional[datetime] = None
        self.start_timestamp: Optional[float] = None
        self.execution_time_seconds: float = 0.0
        self.success: bool = False
        self.error: Optional[str] = None
        self.error_type: Optional[str] = None
        self.metadata: Dict[str, Any] = {}

    def start(self) -> None:
        self.start_time = datetime.now(timezone.utc)
        self.start_timestamp = time.perf_counter()
        logger.debug(
            f"🚀 OP_START: {self.operation}",
            extra={
                "operation": self.operation,
                "correlation_id": self.correlation_id,
                "start_time": self.start_time.isoformat(),
                "event_type": "operation_start",
            },
        )

    def end(
        self,
        success: bool = True,
        error: Optional[str] = None,
        error_type: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        if self.start_timestamp is not None:
            self.execution_time_seconds = time.perf_counter() - self.start_timestamp
        self.success = success
        self.error = error
        self.error_type = error_type
        if metadata:
            self.metadata.update(metadata)

        status_emoji = "✅" if success else "❌"
        logger.log(
            logging.INFO if success else logging.WARNING,
            f"{status_emoji} OP_END: {self.operation} | "
            f"Time: {self.execution_time_seconds:.3f}s | "
            f"Status: {'SUCCESS' if success else 'FAILED'}",
            extra={
                "operation": self.operation,
                "correlation_id": self.correlation_id,
                "execution_time_seconds": self.execution_time_seconds,
                "success": success,
                "error": error,
                "error_type": error_type,
                "metadata": self.metadata,
                "event_type": "operation_end",
            },
        )
        return self.to_dict()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation": self.operation,
            "correlation_id": self.correlation_id,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "execution_time_seconds": self.execution_time_seconds,
            "success": self.success,
            "error": self.error,
            "error_type": self.error_type,
            "metadata": self.metadata,
        }


@asynccontextmanager
async def track_operation(operation: str):
    """
    Async context manager that times an operation and logs its outcome.

    Usage:
        async with track_operation("load_configuration") as metrics:
            await repository.fetch(...)
            metrics.metadata["screens"] = 5
    """
    metrics = OperationMetrics(operation)
    metrics.start()
    try:
        yield metrics
    except Exception as e:
        logger.error(f"💥 OP_ERROR: {operation} | Error: {type(e).__name__} | Message: {e}")
        metrics.end(success=False, error=str(e), error_type=type(e).__name__)
        raise
    else:
        if metrics.error is None:
            metrics.end(success=True)
        else:
            metrics.end(success=False, error=metrics.error, error_type=metrics.error_type)


def log_operation(operation: str):
    """
    Decorator that tracks a state-machine operation.

    A `False` return value is logged as a failed operation.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            metrics = OperationMetrics(operation)
            metrics.start()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                metrics.end(success=False, error=str(e), error_type=type(e).__name__)
                raise
            metrics.end(success=result is not False)
            return result

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            metrics = OperationMetrics(operation)
            metrics.start()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                metrics.end(success=False, error=str(e), error_type=type(e).__name__)
                raise
            metrics.end(success=result is not False)
            return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
