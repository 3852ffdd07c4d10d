"""Auth domain models."""

from .identity import AccessToken, ExternalIdentity
from .social_profile import SocialProfile
from .user import LocalUser
from .value import FlowAction, FlowError, ProfileId

__all__ = [
    "AccessToken",
    "ExternalIdentity",
    "FlowAction",
    "FlowError",
    "LocalUser",
    "ProfileId",
    "SocialProfile",
]
