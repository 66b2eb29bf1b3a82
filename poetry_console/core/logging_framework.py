"""
Centralized Logging Framework
Environment-aware logging with structured output and query timing
"""
import sys
import json
import time
import inspect
import logging
import traceback
from typing import Optional, Dict, Any, Callable
from datetime import datetime, timezone
from functools import wraps
from enum import Enum

from .settings import AppSettings, LoggingSettings, get_settings

ROOT_LOGGER_NAME = "poetry_console"

# Set by setup_logging from the settings the application was built with
_slow_query_threshold_ms = LoggingSettings().slow_query_threshold_ms


class LogCategory(str, Enum):
    """Log categories for filtering and routing"""
    REQUEST = "request"
    STORE = "store"
    ANALYTICS = "analytics"
    MODERATION = "moderation"
    PERFORMANCE = "performance"
    BUSINESS = "business"
    ERROR = "error"


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter for production"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }

        if hasattr(record, "category"):
            log_data["category"] = record.category
        if hasattr(record, "duration_ms"):
            log_data["duration_ms"] = record.duration_ms
        if hasattr(record, "extra_data"):
            log_data["data"] = record.extra_data

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info)
            }

        return json.dumps(log_data, ensure_ascii=False, default=str)


class DevelopFormatter(logging.Formatter):
    """Human-readable formatter for development"""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m"
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        reset = self.COLORS["RESET"]

        timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
        base = f"{color}[{timestamp}] {record.levelname:8}{reset} {record.name}: {record.getMessage()}"

        if hasattr(record, "duration_ms"):
            base = f"{base} [took={record.duration_ms}ms]"

        if hasattr(record, "extra_data") and record.extra_data:
            base = f"{base}\n    {color}→{reset} {json.dumps(record.extra_data, ensure_ascii=False, default=str)}"

        if record.exc_info:
            exc_text = "".join(traceback.format_exception(*record.exc_info))
            base = f"{base}\n{color}{exc_text}{reset}"

        return base


def setup_logging(settings: Optional[AppSettings] = None) -> logging.Logger:
    """Attach a single stdout handler to the package root logger"""
    global _slow_query_threshold_ms
    settings = settings or get_settings()
    _slow_query_threshold_ms = settings.logging.slow_query_threshold_ms

    root = logging.getLogger(ROOT_LOGGER_NAME)
    level = getattr(logging, settings.logging.level.value)
    root.setLevel(level)

    root.handlers = []
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if settings.logging.json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(DevelopFormatter())
    root.addHandler(handler)

    return root


class AppLogger:
    """
    Thin wrapper over a stdlib logger.
    Adds category, timing and structured payload fields to each record.
    """

    def __init__(self, name: str = ROOT_LOGGER_NAME):
        self.name = name
        self._logger = logging.getLogger(name)

    @staticmethod
    def _extra(
        category: Optional[LogCategory] = None,
        duration_ms: Optional[float] = None,
        extra_data: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if category:
            result["category"] = category.value
        if duration_ms is not None:
            result["duration_ms"] = round(duration_ms, 2)
        if extra_data:
            result["extra_data"] = extra_data
        return result

    def debug(
        self,
        message: str,
        category: Optional[LogCategory] = None,
        extra_data: Optional[Dict[str, Any]] = None,
        **kwargs
    ):
        self._logger.debug(message, extra=self._extra(category, extra_data=extra_data), **kwargs)

    def info(
        self,
        message: str,
        category: Optional[LogCategory] = None,
        duration_ms: Optional[float] = None,
        extra_data: Optional[Dict[str, Any]] = None,
        **kwargs
    ):
        self._logger.info(message, extra=self._extra(category, duration_ms, extra_data), **kwargs)

    def warning(
        self,
        message: str,
        category: Optional[LogCategory] = None,
        extra_data: Optional[Dict[str, Any]] = None,
        **kwargs
    ):
        self._logger.warning(message, extra=self._extra(category, extra_data=extra_data), **kwargs)

    def error(
        self,
        message: str,
        category: Optional[LogCategory] = None,
        extra_data: Optional[Dict[str, Any]] = None,
        exc_info: bool = False,
        **kwargs
    ):
        extra = self._extra(category or LogCategory.ERROR, extra_data=extra_data)
        self._logger.error(message, extra=extra, exc_info=exc_info, **kwargs)

    def log_request(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_ms: float
    ):
        """Log HTTP request"""
        message = f"{method} {path} → {status_code}"

        level = logging.INFO
        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING

        extra = self._extra(
            LogCategory.REQUEST,
            duration_ms,
            {"method": method, "path": path, "status_code": status_code}
        )
        self._logger.log(level, message, extra=extra)

    def log_performance(
        self,
        operation: str,
        duration_ms: float,
        success: bool = True,
        threshold_ms: Optional[int] = None
    ):
        """Log operation timing; slow operations are raised to WARNING"""
        if threshold_ms is None:
            threshold_ms = _slow_query_threshold_ms
        is_slow = duration_ms > threshold_ms

        message = f"Performance: {operation}"
        if is_slow:
            message = f"SLOW {message}"

        level = logging.WARNING if is_slow else logging.DEBUG
        if not success:
            level = logging.ERROR

        extra = self._extra(
            LogCategory.PERFORMANCE,
            duration_ms,
            {"operation": operation, "success": success, "slow": is_slow}
        )
        self._logger.log(level, message, extra=extra)


def log_execution(
    operation: Optional[str] = None,
    category: LogCategory = LogCategory.BUSINESS
):
    """
    Decorator to log function execution with timing.

    Usage:
        @log_execution("moderation.list_poems", category=LogCategory.MODERATION)
        async def list_poems(...):
            ...
    """
    def decorator(func: Callable):
        op_name = operation or f"{func.__module__}.{func.__name__}"
        logger = AppLogger(f"{ROOT_LOGGER_NAME}.execution")

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                duration = (time.perf_counter() - start) * 1000
                logger.log_performance(op_name, duration, success=False)
                logger.error(f"✗ Error in {op_name}: {e}", category=category, exc_info=True)
                raise
            logger.log_performance(op_name, (time.perf_counter() - start) * 1000)
            return result

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration = (time.perf_counter() - start) * 1000
                logger.log_performance(op_name, duration, success=False)
                logger.error(f"✗ Error in {op_name}: {e}", category=category, exc_info=True)
                raise
            logger.log_performance(op_name, (time.perf_counter() - start) * 1000)
            return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


def get_logger(name: str = ROOT_LOGGER_NAME) -> AppLogger:
    """Get application logger"""
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return AppLogger(name)
