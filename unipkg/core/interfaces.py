"""
Core interfaces for unipkg.

This module contains the data models shared by the backends, the search
aggregator and the terminal interface.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class PackageRecord:
    """
    A single package returned by a backend search.

    ``install_id`` is what gets handed back to the backend for installation;
    the other fields are for display only.
    """
    source: str
    display_name: str
    install_id: str
    description: str = ""
    version: Optional[str] = None


@dataclass(frozen=True)
class ResultGroup:
    """
    Records returned by one backend, in the order the backend produced them.
    """
    source_name: str
    records: Tuple[PackageRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    @property
    def is_empty(self) -> bool:
        return not self.records


@dataclass
class BackendConfig:
    """
    Configuration for backends.
    """
    command_timeout: Optional[int] = 120
    dnf_use_sudo: bool = True
    flatpak_remote: str = "flathub"


@dataclass
class UIConfig:
    """
    Configuration for the terminal interface.
    """
    max_panel_height: int = 12
    poll_interval: float = 0.2


@dataclass
class AppConfig:
    """
    Effective configuration for a unipkg run.
    """
    backends: Optional[List[str]] = None
    backend: BackendConfig = field(default_factory=BackendConfig)
    ui: UIConfig = field(default_factory=UIConfig)
