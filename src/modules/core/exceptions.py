"""API-wide error rendering.

Every error leaving the API has the same body: ``{"error": "<message>"}``.
Domain exceptions are translated by the views; this handler covers the
errors DRF raises itself (parse errors, 404/405, throttling).
"""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


def error_response(message: str, status_code: int) -> Response:
    """Build a response carrying the standard error body."""
    return Response({"error": message}, status=status_code)


def flatten_detail(detail: Any) -> str:
    """Collapse DRF error details (dicts, lists, ErrorDetail) into one string."""
    if isinstance(detail, dict):
        return "; ".join(
            f"{field}: {flatten_detail(value)}" for field, value in detail.items()
        )
    if isinstance(detail, list):
        return "; ".join(flatten_detail(item) for item in detail)
    return str(detail)


def api_exception_handler(exc: Exception, context: dict) -> Response | None:
    response = exception_handler(exc, context)
    if response is None:
        return None

    logger.warning(
        "api.error",
        status_code=response.status_code,
        error_type=type(exc).__name__,
    )
    response.data = {"error": flatten_detail(getattr(exc, "detail", response.data))}
    return response


def describe_validation_error(exc: PydanticValidationError) -> str:
    """Render a Pydantic ``ValidationError`` as a single readable line."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "Invalid value.")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)
