"""
unipkg - search several package managers at once and install from one place.

A query is sent to every installed package manager (dnf, flatpak, cargo) in
parallel; the results are shown grouped by package manager in a terminal
browser, and the chosen package is installed with the package manager that
found it.
"""

__version__ = "0.1.0"

from .core.engine import UnipkgEngine
from .core.exceptions import (
    UnipkgError,
    NoSourcesAvailableError,
    TerminalError,
    BackendNotFoundError,
    InstallationError
)
from .core.interfaces import PackageRecord, ResultGroup

__all__ = [
    "UnipkgEngine",
    "UnipkgError",
    "NoSourcesAvailableError",
    "TerminalError",
    "BackendNotFoundError",
    "InstallationError",
    "PackageRecord",
    "ResultGroup"
]
