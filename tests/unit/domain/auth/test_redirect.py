"""Unit tests for post-login redirect handling."""

import pytest

from socialauth.domain.auth.service.redirect import absolute_url, validate_redirect, with_error


class TestValidateRedirect:
    @pytest.mark.parametrize(
        "candidate",
        ["/", "/dashboard", "/a/b?c=d", "/path#frag", "/users/login?next=/x"],
    )
    def test_accepts_local_paths(self, candidate: str):
        assert validate_redirect(candidate) == candidate

    @pytest.mark.parametrize(
        "candidate",
        [
            "//evil.example",
            "//evil.example/path",
            "https://evil.example",
            "http://localhost/dashboard",
            "dashboard",
            "javascript:alert(1)",
            "",
            None,
        ],
    )
    def test_rejects_everything_else(self, candidate):
        assert validate_redirect(candidate) is None

    def test_rejects_non_string(self):
        assert validate_redirect(["/dashboard"]) is None  # type: ignore[arg-type]


class TestAbsoluteUrl:
    def test_joins_path_with_base(self):
        assert absolute_url("http://testserver/", "/dashboard") == "http://testserver/dashboard"

    def test_keeps_absolute_location(self):
        assert absolute_url("http://testserver/", "https://app.example/") == "https://app.example/"

    def test_without_base_returns_location(self):
        assert absolute_url("", "/dashboard") == "/dashboard"


class TestWithError:
    def test_appends_query(self):
        assert with_error("/users/login", "provider_failure") == "/users/login?error=provider_failure"

    def test_extends_existing_query(self):
        assert (
            with_error("/users/login?lang=en", "finder_failure")
            == "/users/login?lang=en&error=finder_failure"
        )
