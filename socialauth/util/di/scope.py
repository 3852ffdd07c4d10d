"""Custom Dishka scopes for SocialAuth."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """Dependency injection scopes.

    Hierarchy: APP -> UOW

    - APP: Application lifetime (config, HTTP client, provider registry)
    - UOW: Unit of Work, one per HTTP request (DB session, login flow)
    """

    APP = new_scope("APP")
    UOW = new_scope("UOW")
