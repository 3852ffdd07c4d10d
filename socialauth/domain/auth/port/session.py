"""Session store port."""

from abc import abstractmethod
from typing import Any, Protocol

from socialauth.domain.shared.port import Port


class SessionStore(Port, Protocol):
    """Per-browser key/value session.

    Writes made while handling a request must be readable by the next request
    from the same browser.
    """

    @abstractmethod
    def read(self, key: str) -> Any:
        """Value stored under key, or None."""
        ...

    @abstractmethod
    def write(self, key: str, value: Any) -> None: ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key; missing keys are ignored."""
        ...

    def consume(self, key: str) -> Any:
        """Read a value and remove it."""
        value = self.read(key)
        if value is not None:
            self.delete(key)
        return value
