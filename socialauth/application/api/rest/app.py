import logging
from contextlib import asynccontextmanager

import logfire
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from socialauth.application.api.errors import map_error
from socialauth.application.api.middleware import SocialAuthMiddleware
from socialauth.application.api.rest.routes import health
from socialauth.application.di import create_container
from socialauth.config import Config, configure_logging, resolve_service_config
from socialauth.domain.auth.port.provider_registry import ProviderRegistry
from socialauth.domain.auth.port.repository import ProvisionUser
from socialauth.domain.shared.error import ConfigurationError, SocialAuthError
from socialauth.util.di.fastapi import setup_dishka

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = app.state.dishka_container

    # Resolve the registry up front so misconfigured providers fail at startup
    registry = await container.get(ProviderRegistry)
    logger.info("Identity providers available: %s", ", ".join(registry.available_providers()) or "none")

    yield

    await container.close()


def create_app(
    config: Config | None = None,
    *,
    provision_user: ProvisionUser | None = None,
    registry: ProviderRegistry | None = None,
) -> FastAPI:
    """Create FastAPI application.

    Args:
        config: Application config; read from the environment when omitted
        provision_user: Creates local users for new social profiles.
            Defaults to the user repository's ``get_user_callback`` method.
        registry: Replaces the provider registry built from config

    Raises:
        ConfigurationError: If there is no session secret, or if
            ``auth.user_entity`` is set (the cookie session cannot hold it)
    """
    config = resolve_service_config(config or Config())

    # Configure logging early
    configure_logging(config.logging)
    logger.info("Starting %s v%s", config.server.name, config.server.version)

    if not config.session.secret_key:
        raise ConfigurationError(
            "session.secret_key must be set (SOCIALAUTH_SESSION__SECRET_KEY)",
            code="missing_secret",
        )
    if config.auth.user_entity:
        # The cookie session only holds JSON
        raise ConfigurationError(
            "auth.user_entity requires a server-side session; "
            "the cookie session stores the user as a flat dict",
            code="unsupported_session_user",
        )

    app_instance = FastAPI(
        title=config.server.name,
        description=config.server.description,
        version=config.server.version,
        lifespan=lifespan,
    )

    if config.server.logfire:
        logfire.configure(service_name=config.server.name, send_to_logfire="if-token-present")
        logfire.instrument_httpx()
        logfire.instrument_fastapi(app_instance)

    # Middleware added last runs first: session, then DI container, then login routes
    app_instance.add_middleware(SocialAuthMiddleware, route_prefix=config.auth.route_prefix)

    container = create_container(config, provision_user=provision_user, registry=registry)
    setup_dishka(container, app_instance)

    app_instance.add_middleware(
        SessionMiddleware,
        secret_key=config.session.secret_key,
        session_cookie=config.session.cookie_name,
        max_age=config.session.max_age,
        https_only=config.session.https_only,
    )

    app_instance.include_router(health.router)

    @app_instance.exception_handler(SocialAuthError)
    async def socialauth_error_handler(request: Request, exc: SocialAuthError):
        http_exc = map_error(exc)
        if http_exc.status_code >= 500:
            logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
        return JSONResponse(status_code=http_exc.status_code, content=http_exc.detail)

    # Global exception handler - logs all unhandled exceptions
    @app_instance.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled exception on %s %s",
            request.method,
            request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app_instance
