"""Global test fixtures."""

import os

# Set the session secret before any test modules import Config
# This must happen at module load time, not in a fixture
os.environ.setdefault("SOCIALAUTH_SESSION__SECRET_KEY", "test-secret-for-unit-tests-min-32")
os.environ.setdefault("SOCIALAUTH_SERVICE_CONFIG", "/nonexistent/social_auth.yaml")
