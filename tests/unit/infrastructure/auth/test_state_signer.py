"""Unit tests for OAuth state signing/verification."""

import time
from unittest.mock import patch

import pytest

from socialauth.infrastructure.auth.state import STATE_EXPIRY_SECONDS, StateSigner


@pytest.fixture
def signer() -> StateSigner:
    return StateSigner("test-secret-key-for-signing-min-32")


class TestStateCreation:
    def test_state_format(self, signer: StateSigner):
        state = signer.create("github", "n-1")

        # State should be format: payload.signature
        assert len(state.split(".")) == 2

    def test_states_differ_per_nonce(self, signer: StateSigner):
        assert signer.create("github", "n-1") != signer.create("github", "n-2")

    def test_state_is_url_safe(self, signer: StateSigner):
        state = signer.create("github", "n-1")

        allowed = set("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_.")
        assert set(state) <= allowed

    def test_empty_secret_is_rejected(self):
        with pytest.raises(ValueError):
            StateSigner("")


class TestStateVerification:
    def test_returns_provider_and_nonce_for_valid_state(self, signer: StateSigner):
        assert signer.verify(signer.create("orcid", "n-1")) == ("orcid", "n-1")

    def test_rejects_other_secret(self, signer: StateSigner):
        state = StateSigner("a-completely-different-secret-key").create("github", "n-1")

        assert signer.verify(state) is None

    def test_rejects_tampered_payload(self, signer: StateSigner):
        payload, signature = signer.create("github", "n-1").split(".")
        tampered = ("A" if payload[0] != "A" else "B") + payload[1:]

        assert signer.verify(f"{tampered}.{signature}") is None

    def test_rejects_expired_state(self, signer: StateSigner):
        state = signer.create("github", "n-1")

        with patch("socialauth.infrastructure.auth.state.time.time", return_value=time.time() + STATE_EXPIRY_SECONDS + 1):
            assert signer.verify(state) is None

    @pytest.mark.parametrize("state", ["", "no-dot", "a.b.c", "!!!.???"])
    def test_rejects_malformed_state(self, signer: StateSigner, state: str):
        assert signer.verify(state) is None
