from .provider import AuthProvider, resolve_provisioner

__all__ = ["AuthProvider", "resolve_provisioner"]
