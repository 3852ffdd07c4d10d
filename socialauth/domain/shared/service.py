"""Base class for domain services."""

from dataclasses import dataclass
from typing import dataclass_transform


@dataclass_transform(kw_only_default=True)
class _ServiceMeta(type):
    """Turns every Service subclass into a keyword-only dataclass."""

    def __new__(mcs, name: str, bases: tuple, namespace: dict):
        cls = super().__new__(mcs, name, bases, namespace)
        if any(isinstance(b, mcs) for b in bases):
            return dataclass(kw_only=True)(cls)
        return cls


class Service(metaclass=_ServiceMeta):
    """Domain service built once per unit of work.

    Collaborators are declared as dataclass fields and injected by keyword.
    Services hold no per-request state of their own.
    """
