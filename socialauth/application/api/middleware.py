"""ASGI middleware serving the social login routes."""

import logging
import re

from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response
from starlette.types import ASGIApp, Receive, Scope, Send

from socialauth.application.api.errors import map_error
from socialauth.domain.auth.model.request import AuthRequest
from socialauth.domain.auth.model.value import FlowAction
from socialauth.domain.auth.port.session import SessionStore
from socialauth.domain.auth.service.flow import SocialAuthFlow
from socialauth.domain.shared.error import DomainError

logger = logging.getLogger(__name__)


class SocialAuthMiddleware:
    """Answers ``{prefix}/{provider}/login`` and ``{prefix}/{provider}/callback``.

    Every other request, including other actions under the prefix, goes to
    the wrapped app untouched. Must sit inside SessionMiddleware and the DI
    ContainerMiddleware.

    Domain errors (wrong method, unknown provider) become JSON error
    responses. Infrastructure errors propagate to the server error handler.
    """

    def __init__(self, app: ASGIApp, route_prefix: str = "/auth") -> None:
        self.app = app
        prefix = re.escape(route_prefix.rstrip("/"))
        self._route = re.compile(rf"^{prefix}/(?P<provider>[^/]+)/(?P<action>[^/]+)/?$")

    def match(self, path: str) -> tuple[str, FlowAction] | None:
        """Return (provider, action) for a social login path, else None."""
        route = self._route.match(path)
        if route is None:
            return None
        action = FlowAction.parse(route["action"])
        if action is None:
            return None
        return route["provider"], action

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        matched = self.match(scope["path"])
        if matched is None:
            return await self.app(scope, receive, send)

        provider, action = matched
        request = Request(scope, receive=receive)
        response = await self._handle(request, provider, action)
        await response(scope, receive, send)

    async def _handle(self, request: Request, provider: str, action: FlowAction) -> Response:
        container = request.state.dishka_container
        flow = await container.get(SocialAuthFlow)
        session = await container.get(SessionStore)

        auth_request = AuthRequest(
            action=action,
            provider=provider,
            method=request.method,
            session=session,
            query_params=dict(request.query_params),
            url=str(request.url),
            base_url=str(request.base_url),
            referer=request.headers.get("referer"),
        )

        try:
            outcome = await flow.handle(auth_request)
        except DomainError as e:
            logger.info("Social auth %s rejected: %s", action, e.message)
            http_exc = map_error(e)
            return JSONResponse(status_code=http_exc.status_code, content=http_exc.detail)

        return RedirectResponse(outcome.location, status_code=outcome.status_code)
