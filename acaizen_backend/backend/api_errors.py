# backend/api_errors.py

"""
API ERROR NORMALIZATION

Every domain error leaves the API as:
    {"error": {"code": "<MACHINE_CODE>", "message": "<human message>"}}
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.response import Response


def error_response(*, code: str, message: str, http_status: int = status.HTTP_400_BAD_REQUEST):
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )


def domain_error_response(exc, *, http_status: int = status.HTTP_400_BAD_REQUEST):
    """Translate a service-layer exception carrying a `code` attribute."""
    return error_response(
        code=getattr(exc, "code", "ERROR"),
        message=str(exc),
        http_status=http_status,
    )
