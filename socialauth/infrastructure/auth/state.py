"""Signed OAuth state tokens."""

import binascii
import hashlib
import hmac
import json
import logging
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode

logger = logging.getLogger(__name__)

# OAuth state validity period (10 minutes)
STATE_EXPIRY_SECONDS = 600


class StateSigner:
    """Creates and checks self-verifying OAuth ``state`` values.

    The state carries the login nonce, the provider name and an expiry
    timestamp, signed with HMAC-SHA256. The nonce itself lives in the browser
    session, which ties a state to the browser that started the login.
    """

    def __init__(self, secret: str, expiry_seconds: int = STATE_EXPIRY_SECONDS) -> None:
        if not secret:
            raise ValueError("State secret must not be empty")
        self._secret = secret.encode()
        self._expiry_seconds = expiry_seconds

    def create(self, provider: str, nonce: str) -> str:
        """Create a URL-safe state token in the format ``payload.signature``."""
        payload = {
            "nonce": nonce,
            "provider": provider,
            "exp": int(time.time()) + self._expiry_seconds,
        }
        payload_bytes = json.dumps(payload, separators=(",", ":")).encode()
        payload_b64 = urlsafe_b64encode(payload_bytes).rstrip(b"=").decode()

        signature = hmac.new(self._secret, payload_bytes, hashlib.sha256).digest()
        signature_b64 = urlsafe_b64encode(signature).rstrip(b"=").decode()

        return f"{payload_b64}.{signature_b64}"

    def verify(self, state: str) -> tuple[str, str] | None:
        """Return ``(provider, nonce)`` for a valid state, else None."""
        parts = state.split(".")
        if len(parts) != 2:
            return None

        payload_b64, signature_b64 = parts
        try:
            # Restore base64 padding
            payload_bytes = urlsafe_b64decode(payload_b64 + "==")
            signature = urlsafe_b64decode(signature_b64 + "==")
        except (binascii.Error, ValueError):
            return None

        expected_sig = hmac.new(self._secret, payload_bytes, hashlib.sha256).digest()
        if not hmac.compare_digest(signature, expected_sig):
            logger.warning("OAuth state signature verification failed")
            return None

        try:
            payload = json.loads(payload_bytes)
        except ValueError:
            return None

        if not isinstance(payload, dict) or payload.get("exp", 0) < time.time():
            logger.warning("OAuth state expired")
            return None

        provider, nonce = payload.get("provider"), payload.get("nonce")
        if not isinstance(provider, str) or not isinstance(nonce, str):
            return None
        return provider, nonce
