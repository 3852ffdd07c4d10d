"""Auth domain services."""

from .flow import SocialAuthFlow
from .identity_mapper import map_identity
from .profile import ProfileResolver
from .redirect import validate_redirect
from .user import UserResolver

__all__ = [
    "ProfileResolver",
    "SocialAuthFlow",
    "UserResolver",
    "map_identity",
    "validate_redirect",
]
