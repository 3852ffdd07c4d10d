import logging
import os
import sys
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from socialauth.domain.shared.error import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_CONFIG_FILE = "config/social_auth.yaml"
SERVICE_CONFIG_SECTION = "SocialAuth"


# =============================================================================
# Provider Configuration
# =============================================================================


class ProviderConfig(BaseModel):
    """One identity provider (nested under auth.providers.<name>).

    ``identity_fields`` renames keys of the provider's user payload to the
    SDK field names the identity mapper expects, e.g. ``{"name": "fullname"}``.
    """

    type: Literal["oauth2", "orcid"] = "oauth2"
    client_id: str = ""
    client_secret: str = ""
    scope: str = ""
    authorize_url: str = ""
    token_url: str = ""
    identity_url: str = ""
    identity_fields: dict[str, str] = {}
    sandbox: bool = True  # ORCiD only: use sandbox.orcid.org
    options: dict[str, str] = {}  # Extra query parameters for the authorize URL


# =============================================================================
# Social Auth Configuration
# =============================================================================


class SocialAuthConfig(BaseModel):
    """Login flow configuration.

    - request_method: HTTP method the login action accepts
    - login_url: where failed callbacks are sent, with ``?error=<code>``
    - login_redirect: default destination after a successful login
    - user_entity: store the user in session as a LocalUser (True) or a flat dict;
      True needs a server-side session store, the cookie session holds JSON only
    - user_model / social_profile_model: storage identifiers (table names)
    - finder: named query used to load an already linked user
    - fields: ``{"password": <column>}``, the field stripped from the session user
    - session_key: session key the user is written under
    - get_user_callback: user repository method that provisions new users,
      used when no provisioning callable is injected
    - log_errors: log provider failures
    - providers: provider service config; empty means "load the service file"
    """

    request_method: str = "POST"
    login_url: str = "/users/login"
    login_redirect: str = "/"
    user_entity: bool = False
    user_model: str = "users"
    social_profile_model: str = "social_profiles"
    finder: str = "all"
    fields: dict[str, str] = {"password": "password"}
    session_key: str = "Auth.User"
    get_user_callback: str = "get_user"
    log_errors: bool = True
    route_prefix: str = "/auth"
    callback_url: str = "{base_url}/auth/{provider}/callback"
    state_secret: str = ""  # Signs OAuth state; falls back to session.secret_key
    providers: dict[str, ProviderConfig] = {}

    @field_validator("request_method")
    @classmethod
    def _upper_method(cls, v: str) -> str:
        return v.upper()

    @property
    def password_field(self) -> str:
        return self.fields.get("password", "password")

    def callback_url_for(self, provider: str, base_url: str = "") -> str:
        """Expand the callback URL template for a provider."""
        return self.callback_url.format(base_url=base_url.rstrip("/"), provider=provider)


# =============================================================================
# Application Configuration
# =============================================================================


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load settings from YAML file specified by SOCIALAUTH_CONFIG_FILE env var."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        yaml_data = self._load_yaml_config()
        return yaml_data.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        config_file = os.environ.get("SOCIALAUTH_CONFIG_FILE")
        if config_file:
            path = Path(config_file)
            if path.exists():
                return yaml.safe_load(path.read_text()) or {}
        return {}


class Server(BaseModel):
    """Server configuration (nested in Config, uses env_nested_delimiter)."""

    name: str = "SocialAuth"
    version: str = "0.1.0"
    description: str = "Federated login for ASGI applications"
    base_url: str = "http://localhost:8000"
    logfire: bool = False  # Instrument FastAPI and httpx with logfire


class SessionConfig(BaseModel):
    """Cookie session configuration."""

    secret_key: str = ""  # Must be set in production
    cookie_name: str = "session"
    max_age: int = 14 * 24 * 60 * 60  # 14 days
    https_only: bool = False


class DatabaseConfig(BaseModel):
    """Database configuration (nested in Config, uses env_nested_delimiter)."""

    url: str = "sqlite+aiosqlite:///:memory:"
    echo: bool = False
    create_tables: bool = True  # Create missing tables at startup


class LoggingConfig(BaseModel):
    """Logging configuration (nested in Config, uses env_nested_delimiter)."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @property
    def file(self) -> str | None:
        """Get log file path from SOCIALAUTH_LOG_FILE env var."""
        return os.environ.get("SOCIALAUTH_LOG_FILE")


class Config(BaseSettings):
    server: Server = Server()
    session: SessionConfig = SessionConfig()
    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()
    auth: SocialAuthConfig = Field(default_factory=SocialAuthConfig)

    model_config = {
        "env_prefix": "SOCIALAUTH_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",  # Allows SOCIALAUTH_AUTH__LOGIN_URL override
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML config.

        Priority (highest to lowest):
        1. init_settings - values passed to Config()
        2. env_settings - environment variables
        3. dotenv_settings - .env file
        4. yaml_settings - SOCIALAUTH_CONFIG_FILE yaml
        5. file_secret_settings - secrets from files
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def resolve_service_config(config: Config) -> Config:
    """Return a config whose ``auth.providers`` is filled in.

    Explicit provider config wins. Otherwise the provider map is read from the
    ``SocialAuth`` section of the service file named by
    SOCIALAUTH_SERVICE_CONFIG (default ``config/social_auth.yaml``).

    Raises:
        ConfigurationError: If the service file exists but is malformed
    """
    if config.auth.providers:
        return config

    path = Path(os.environ.get("SOCIALAUTH_SERVICE_CONFIG", DEFAULT_SERVICE_CONFIG_FILE))
    if not path.exists():
        logger.warning("No identity providers configured and %s not found", path)
        return config

    try:
        data = yaml.safe_load(path.read_text()) or {}
        section = data.get(SERVICE_CONFIG_SECTION) or {}
        providers = {
            name: ProviderConfig.model_validate(values or {})
            for name, values in (section.get("providers") or {}).items()
        }
    except (yaml.YAMLError, AttributeError, ValueError) as e:
        raise ConfigurationError(
            f"Invalid social auth service config in {path}: {e}",
            code="invalid_service_config",
        ) from e

    logger.info("Loaded %d identity provider(s) from %s", len(providers), path)
    auth = config.auth.model_copy(update={"providers": providers})
    return config.model_copy(update={"auth": auth})


def configure_logging(config: LoggingConfig) -> None:
    """Configure Python logging based on config.

    Should be called early in application startup so all loggers pick up
    the configuration.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config.format, datefmt=config.date_format)

    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(config.level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logging.debug("Logging configured: level=%s, file=%s", config.level, config.file)
