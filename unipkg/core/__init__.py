"""Core components for unipkg."""

from .interfaces import (
    AppConfig,
    BackendConfig,
    PackageRecord,
    ResultGroup,
    UIConfig
)
from .exceptions import (
    UnipkgError,
    ConfigurationError,
    NoSourcesAvailableError,
    TerminalError,
    BackendNotFoundError,
    InstallationError
)

__all__ = [
    "AppConfig",
    "BackendConfig",
    "PackageRecord",
    "ResultGroup",
    "UIConfig",
    "UnipkgError",
    "ConfigurationError",
    "NoSourcesAvailableError",
    "TerminalError",
    "BackendNotFoundError",
    "InstallationError"
]
