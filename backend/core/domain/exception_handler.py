"""
core.domain.exception_handler — DRF-compatible global exception handler.

Maps domain exceptions from ``core.domain.exceptions`` to proper
DRF ``Response`` objects so that views don't need per-endpoint
try/except boilerplate.

Report views additionally opt in to a **structured failure envelope**
by declaring a ``failure_message`` attribute.  Any unexpected exception
raised while such a view aggregates data is logged with its traceback
and rendered as::

    HTTP 500
    {"success": false, "message": "<failure_message>", "error": "<str(exc)>"}

Views without ``failure_message`` keep Django's default behaviour
(the exception propagates).

Register in ``settings.py``::

    REST_FRAMEWORK = {
        ...
        'EXCEPTION_HANDLER': 'core.domain.exception_handler.domain_exception_handler',
    }
"""

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_default_handler

from core.domain.exceptions import (
    Conflict,
    DomainError,
    NotFound,
    PermissionDenied,
)

logger = logging.getLogger(__name__)

# Domain exception → HTTP status code
_STATUS_MAP: dict[type, int] = {
    PermissionDenied:  403,
    NotFound:          404,
    Conflict:          409,
    DomainError:       400,  # catch-all base class last
}


def domain_exception_handler(exc: Exception, context: dict) -> Response | None:
    """
    DRF exception handler that also handles ``core.domain.exceptions``.

    The default DRF handler is called first.  If it returns ``None``
    (meaning DRF doesn't recognise the exception), we check whether
    it's one of our domain exceptions and return an appropriate response.
    Finally, views declaring ``failure_message`` get the structured
    500 envelope instead of an unhandled crash.
    """
    # Let DRF handle its own exceptions (ValidationError, AuthN, etc.)
    response = drf_default_handler(exc, context)
    if response is not None:
        return response

    view = context.get("view")

    # Most specific first; DomainError is the catch-all
    for exc_class, status_code in _STATUS_MAP.items():
        if isinstance(exc, exc_class):
            logger.warning(
                "Domain exception [%s] in %s: %s",
                exc_class.__name__,
                view.__class__.__name__ if view is not None else "unknown",
                exc,
            )
            return Response(
                {"detail": str(exc)},
                status=status_code,
            )

    failure_message = getattr(view, "failure_message", None)
    if failure_message:
        logger.exception(
            "Aggregation failure in %s: %s",
            view.__class__.__name__,
            exc,
        )
        return Response(
            {
                "success": False,
                "message": failure_message,
                "error": str(exc),
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    # Not ours: let it propagate
    return None
