"""Centralized error transformation for the HTTP layer.

Maps SocialAuth errors (domain and infrastructure) to HTTPException responses.
"""

from typing import Any

from fastapi import HTTPException

from socialauth.domain.shared.error import (
    BadRequestError,
    ConfigurationError,
    DomainError,
    InfrastructureError,
    NotFoundError,
    PersistenceError,
    SocialAuthError,
)

DOMAIN_ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    BadRequestError: 400,
    NotFoundError: 404,
}

INFRASTRUCTURE_ERROR_STATUS_MAP: dict[type[InfrastructureError], int] = {
    PersistenceError: 500,
    ConfigurationError: 500,
}


def map_error(error: SocialAuthError) -> HTTPException:
    """Map a SocialAuth error to an HTTPException.

    Args:
        error: The error to map.

    Returns:
        HTTPException with appropriate status code and detail.
    """
    detail: dict[str, Any] = {
        "code": error.code,
        "message": error.message,
    }

    if isinstance(error, InfrastructureError):
        # Infrastructure errors → 503 unless the request itself is lost
        status_code = INFRASTRUCTURE_ERROR_STATUS_MAP.get(type(error), 503)
        return HTTPException(status_code=status_code, detail=detail)

    if isinstance(error, DomainError):
        status_code = DOMAIN_ERROR_STATUS_MAP.get(type(error), 400)
        return HTTPException(status_code=status_code, detail=detail)

    # Fallback for unknown SocialAuthError subclasses
    return HTTPException(status_code=500, detail=detail)
