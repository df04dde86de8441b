"""
Exceptions for unipkg.

This module contains the exception hierarchy for unipkg operations.
"""


class UnipkgError(Exception):
    """Base exception for unipkg operations."""
    pass


class ConfigurationError(UnipkgError):
    """Raised when configuration is invalid."""
    pass


class NoSourcesAvailableError(UnipkgError):
    """Raised when no package manager is available to search."""
    pass


class TerminalError(UnipkgError):
    """Raised when the terminal cannot be acquired, drawn to, or restored."""
    pass


class BackendNotFoundError(UnipkgError):
    """Raised when a selected package names a backend that is not loaded."""

    def __init__(self, backend_name: str):
        super().__init__(f"Backend not found: {backend_name}")
        self.backend_name = backend_name


class InstallationError(UnipkgError):
    """Raised when a backend fails to install a package."""
    pass
