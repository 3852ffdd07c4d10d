"""Session store adapters."""

from collections.abc import MutableMapping
from typing import Any

from socialauth.domain.auth.port.session import SessionStore


class MappingSessionStore(SessionStore):
    """SessionStore over a mutable mapping, e.g. Starlette's ``request.session``.

    Starlette's SessionMiddleware serializes the mapping into the session
    cookie after the response, so values must be JSON-serializable when the
    cookie backend is used.
    """

    def __init__(self, data: MutableMapping[str, Any]) -> None:
        self._data = data

    def read(self, key: str) -> Any:
        return self._data.get(key)

    def write(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
