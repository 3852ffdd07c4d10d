"""Per-request values exchanged between the HTTP layer and the login flow."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from socialauth.domain.auth.model.value import FlowAction

if TYPE_CHECKING:
    from socialauth.domain.auth.port.session import SessionStore


@dataclass(frozen=True)
class AuthRequest:
    """One inbound login or callback request.

    Everything the flow needs is carried here, so nothing about the request
    is ever stored on a service.
    """

    action: FlowAction
    provider: str
    method: str
    session: "SessionStore"
    query_params: Mapping[str, str] = field(default_factory=dict)
    url: str = ""  # Request target, for logs
    base_url: str = ""  # Scheme and host redirects are made absolute against
    referer: str | None = None


@dataclass(frozen=True)
class Redirect:
    """Send the browser elsewhere."""

    location: str
    status_code: int = 302
