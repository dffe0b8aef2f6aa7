"""Internal-only access guard.

Catalog mutations (update/delete products) are reserved for internal
callers that present the shared secret in the ``X-Internal-Key`` header.
"""

from __future__ import annotations

import hmac

import structlog
from django.conf import settings
from rest_framework.permissions import BasePermission

from modules.core.exceptions import InternalAccessDenied

logger = structlog.get_logger(__name__)

INTERNAL_KEY_HEADER = "X-Internal-Key"


class IsInternalRequest(BasePermission):
    """Grant access only when ``X-Internal-Key`` matches ``INTERNAL_API_KEY``.

    An unset ``INTERNAL_API_KEY`` denies every request (fail closed).
    Denial raises ``InternalAccessDenied`` (401) instead of returning
    ``False``, which DRF would turn into a 403.
    """

    def has_permission(self, request, view) -> bool:
        expected = settings.INTERNAL_API_KEY
        provided = request.headers.get(INTERNAL_KEY_HEADER, "")
        if expected and hmac.compare_digest(provided.encode(), expected.encode()):
            return True
        logger.warning(
            "internal_access_denied",
            path=request.path,
            method=request.method,
            key_present=bool(provided),
        )
        raise InternalAccessDenied()
