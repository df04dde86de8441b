"""
Package manager backends for unipkg.

Importing this package registers the built-in backends. Registration order
is the order result groups are displayed in.
"""

from unipkg.backend.base import PackageBackend
from unipkg.backend.factory import BackendFactory, backend_factory
from unipkg.backend.dnf import DNFBackend
from unipkg.backend.flatpak import FlatpakBackend
from unipkg.backend.cargo import CargoBackend

backend_factory.register_backend("dnf", DNFBackend)
backend_factory.register_backend("flatpak", FlatpakBackend)
backend_factory.register_backend("cargo", CargoBackend)

__all__ = [
    "PackageBackend",
    "BackendFactory",
    "backend_factory",
    "DNFBackend",
    "FlatpakBackend",
    "CargoBackend",
]
