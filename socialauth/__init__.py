"""SocialAuth: federated login coordinator for ASGI applications."""

__version__ = "0.1.0"
