"""
Structured logging for the stock ledger service.

JSON records carry the service name, environment, the current request id and
any ``extra_fields`` passed by the caller.
"""

import json
import logging
import sys
import time
import traceback
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
user_id_var: ContextVar[Optional[str]] = ContextVar("user_id", default=None)

_service_name = "stockledger"
_environment = "development"


class StructuredFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "@timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": _service_name,
            "environment": _environment,
        }

        trace = _trace_context()
        if trace:
            log_obj["trace"] = trace

        log_obj["location"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }

        if record.exc_info:
            log_obj["error"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        if hasattr(record, "extra_fields"):
            log_obj["custom"] = record.extra_fields

        if hasattr(record, "duration_ms"):
            log_obj["performance"] = {"duration_ms": record.duration_ms}

        return json.dumps(log_obj, default=str)


class PlainFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)s [%(name)s] %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        request_id = request_id_var.get()
        if request_id:
            message = f"{message} request_id={request_id}"
        if hasattr(record, "extra_fields"):
            message = f"{message} {json.dumps(record.extra_fields, default=str)}"
        return message


def _trace_context() -> Optional[dict[str, str]]:
    context = {}
    request_id = request_id_var.get()
    if request_id:
        context["request_id"] = request_id
    user_id = user_id_var.get()
    if user_id:
        context["user_id"] = user_id
    return context or None


def setup_logging(
    service_name: str,
    level: str = "INFO",
    json_logs: bool = True,
    environment: str = "development",
) -> None:
    """
    Configure the root logger for the service.

    Args:
        service_name: Name written into every JSON record
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Emit JSON records instead of plain text
        environment: Deployment environment label
    """
    global _service_name, _environment
    _service_name = service_name
    _environment = environment

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter() if json_logs else PlainFormatter())
    root_logger.addHandler(console_handler)

    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    root_logger.info(
        "Logging initialized",
        extra={"extra_fields": {"service": service_name, "level": level, "json": json_logs}},
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_request_context(request_id: Optional[str] = None, user_id: Optional[str] = None) -> None:
    if request_id:
        request_id_var.set(request_id)
    if user_id:
        user_id_var.set(user_id)


def generate_request_id() -> str:
    return str(uuid.uuid4())


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag every request with an X-Request-ID and log its outcome and duration."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_context(request_id=request_id, user_id=request.headers.get("X-User-Id"))

        logger = get_logger(__name__)
        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                exc_info=True,
                extra={
                    "extra_fields": {"method": request.method, "path": request.url.path},
                    "duration_ms": (time.time() - start_time) * 1000,
                },
            )
            raise

        logger.info(
            f"Request completed: {request.method} {request.url.path}",
            extra={
                "extra_fields": {
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                },
                "duration_ms": (time.time() - start_time) * 1000,
            },
        )
        response.headers["X-Request-ID"] = request_id
        return response
