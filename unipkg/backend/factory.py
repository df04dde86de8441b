"""
Factory for creating package manager backends.

Registration order is significant: it is the order result groups are shown in.
"""

import logging
from typing import Dict, List, Optional, Type

from unipkg.backend.base import PackageBackend
from unipkg.core.interfaces import BackendConfig
from unipkg.core.system_dependency_checker import SystemDependencyChecker


logger = logging.getLogger(__name__)


class BackendFactory:
    """
    Ordered registry of backend classes.
    """

    def __init__(self):
        """Initialize the backend factory."""
        self._backend_classes: Dict[str, Type[PackageBackend]] = {}

    def register_backend(self, name: str, backend_class: Type[PackageBackend]) -> None:
        """
        Register a backend class.

        Args:
            name: Name of the backend.
            backend_class: Backend class to register.
        """
        self._backend_classes[name] = backend_class
        logger.debug(f"Registered backend: {name}")

    def create_backend(
        self,
        name: str,
        config: Optional[BackendConfig] = None,
        **kwargs
    ) -> Optional[PackageBackend]:
        """
        Create a backend instance.

        Args:
            name: Name of the backend to create.
            config: Configuration for the backend.
            **kwargs: Additional arguments to pass to the backend constructor.

        Returns:
            Backend instance if the backend is registered, None otherwise.
        """
        if name not in self._backend_classes:
            logger.warning(f"Backend not registered: {name}")
            return None
        return self._backend_classes[name](config=config, **kwargs)

    def get_registered_backends(self) -> List[str]:
        """Return registered backend names in registration order."""
        return list(self._backend_classes.keys())

    def is_backend_registered(self, name: str) -> bool:
        """Check if a backend is registered."""
        return name in self._backend_classes

    def create_backends(
        self,
        names: Optional[List[str]] = None,
        config: Optional[BackendConfig] = None,
        dependency_checker: Optional[SystemDependencyChecker] = None
    ) -> List[PackageBackend]:
        """
        Create backends in registration order.

        Args:
            names: Backends to create. If None, creates every registered backend.
                The order of this list wins over registration order.
            config: Configuration shared by all backends.
            dependency_checker: Checker shared by all backends.

        Returns:
            Backend instances; unknown names are logged and skipped.
        """
        checker = dependency_checker or SystemDependencyChecker()
        wanted = names if names is not None else self.get_registered_backends()

        backends = []
        for name in wanted:
            backend = self.create_backend(name, config, dependency_checker=checker)
            if backend is not None:
                backends.append(backend)
        return backends

    def get_available_backends(
        self,
        names: Optional[List[str]] = None,
        config: Optional[BackendConfig] = None,
        dependency_checker: Optional[SystemDependencyChecker] = None
    ) -> List[PackageBackend]:
        """
        Create backends and keep only the installed ones.

        Availability is checked once here, before any search is dispatched.
        """
        available = [
            backend for backend in self.create_backends(names, config, dependency_checker)
            if backend.is_available()
        ]
        logger.debug(f"Available backends: {[b.get_name() for b in available]}")
        return available


# Create a singleton instance
backend_factory = BackendFactory()
