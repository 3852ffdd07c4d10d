"""Error hierarchy for SocialAuth.

Error layers:
- SocialAuthError: Base class for all SocialAuth errors
- DomainError: Bad requests and recoverable flow failures (4xx responses)
- InfrastructureError: System-level failures like provider/storage issues (5xx responses)

These errors are mapped to HTTP responses by the exception handlers in the app factory.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from socialauth.domain.auth.model.value import FlowError


class SocialAuthError(Exception):
    """Base class for all SocialAuth errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors (business logic violations - typically 4xx)
# =============================================================================


class DomainError(SocialAuthError):
    """Base class for domain/business errors."""


class NotFoundError(DomainError):
    """Resource not found."""


class BadRequestError(DomainError):
    """Request cannot be served as sent (e.g. wrong HTTP method)."""


class FlowFailure(DomainError):
    """A callback could not be completed for a recoverable reason.

    Carries one of the FlowError codes. Never leaves the flow coordinator:
    it is turned into a redirect to the login page with ``?error=<code>``.
    """

    def __init__(self, error: "FlowError", message: str | None = None) -> None:
        super().__init__(message or f"Social login failed: {error}", code=str(error))
        self.error = error


# =============================================================================
# Infrastructure Errors (system-level failures - typically 5xx)
# =============================================================================


class InfrastructureError(SocialAuthError):
    """Base class for infrastructure/system errors."""


class ExternalServiceError(InfrastructureError):
    """External service (identity provider, upstream API) is unavailable or failed."""


class ProviderError(ExternalServiceError):
    """Identity provider rejected or failed the token exchange or identity fetch."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        response_body: str | None = None,
    ) -> None:
        super().__init__(message, code=code or "provider_error")
        self.response_body = response_body


class PersistenceError(InfrastructureError):
    """A record could not be written to storage."""


class ConfigurationError(InfrastructureError):
    """System misconfiguration detected."""
