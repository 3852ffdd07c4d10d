"""Auth domain ports."""

from .identity_provider import IdentityProvider
from .provider_registry import ProviderRegistry
from .repository import ProvisionUser, SocialProfileRepository, UserRepository
from .session import SessionStore

__all__ = [
    "IdentityProvider",
    "ProviderRegistry",
    "ProvisionUser",
    "SessionStore",
    "SocialProfileRepository",
    "UserRepository",
]
