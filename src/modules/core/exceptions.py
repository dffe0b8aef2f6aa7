"""Shared error envelope for the API.

Every domain exception derives from ``DomainError`` and carries:

- ``code``: a stable, machine-checkable discriminator (``insufficient_stock``).
- ``status_code``: the HTTP status the API layer should answer with.
- ``context``: structured details the caller needs to correct the request
  (available vs. requested stock, allowed next statuses, ...).

Views catch the domain errors they expect and render ``exc.to_dict()``.
``api_exception_handler`` renders everything DRF raises (validation, parse,
permission, 404/405) in the same ``{"code", "detail", ...}`` shape.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


class DomainError(Exception):
    """Base class for business-rule violations surfaced to API callers."""

    code = "domain_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "The request could not be processed."

    def __init__(
        self, message: Optional[str] = None, **context: Any
    ) -> None:
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "detail": self.message, **self.context}


class InvalidInput(DomainError):
    """Malformed identifiers, payloads or values rejected at the boundary."""

    code = "invalid_input"
    default_message = "Invalid input."


class PersistenceFailure(DomainError):
    """The unit of work was aborted by the storage layer.

    The message never carries storage details; those go to the logs.
    """

    code = "persistence_failure"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "The operation could not be completed. No changes were saved."


class InternalAccessDenied(exceptions.APIException):
    """Missing or wrong ``X-Internal-Key`` on an internal-only endpoint."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized internal access."
    default_code = "unauthorized"


_DRF_CODES = {
    InternalAccessDenied: "unauthorized",
    exceptions.ValidationError: "invalid_input",
    exceptions.ParseError: "invalid_input",
    exceptions.NotFound: "not_found",
    exceptions.MethodNotAllowed: "method_not_allowed",
    exceptions.NotAuthenticated: "unauthorized",
    exceptions.AuthenticationFailed: "unauthorized",
    exceptions.PermissionDenied: "forbidden",
    exceptions.UnsupportedMediaType: "unsupported_media_type",
}


def api_exception_handler(exc, context):
    """DRF ``EXCEPTION_HANDLER`` producing the shared error envelope."""
    if isinstance(exc, DomainError):
        return Response(exc.to_dict(), status=exc.status_code)

    response = exception_handler(exc, context)
    if response is None:
        return None

    code = "error"
    for exc_class, exc_code in _DRF_CODES.items():
        if isinstance(exc, exc_class):
            code = exc_code
            break

    if isinstance(exc, exceptions.ValidationError):
        body = {
            "code": code,
            "detail": "Invalid request payload.",
            "errors": response.data,
        }
    else:
        detail = response.data.get("detail") if isinstance(response.data, dict) else None
        body = {"code": code, "detail": str(detail or exc)}

    logger.info(
        "api.request_rejected",
        code=code,
        status_code=response.status_code,
    )
    response.data = body
    return response


def invalid_input_from_pydantic(exc: PydanticValidationError) -> InvalidInput:
    """Translate a DTO validation failure into an ``InvalidInput`` error."""
    return InvalidInput(
        "Invalid request payload.",
        errors=[
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
            }
            for error in exc.errors()
        ],
    )
