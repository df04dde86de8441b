"""
Core engine for unipkg.

This module contains the orchestrator that ties the backends, the search
aggregator and the result browser together, and dispatches installs.
"""

import logging
from typing import List, Optional, Sequence

from unipkg.backend import backend_factory
from unipkg.backend.base import PackageBackend
from unipkg.backend.factory import BackendFactory
from unipkg.core.aggregation import SearchAggregator, SearchProgress
from unipkg.core.configuration import ConfigurationManager
from unipkg.core.exceptions import BackendNotFoundError, NoSourcesAvailableError
from unipkg.core.interfaces import AppConfig, PackageRecord, ResultGroup
from unipkg.core.system_dependency_checker import SystemDependencyChecker
from unipkg.tui.loop import run_selection
from unipkg.tui.selection import SelectionState
from unipkg.tui.terminal import TerminalSession


logger = logging.getLogger(__name__)


class UnipkgEngine:
    """
    Central orchestrator for a search-select-install run.
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        config: Optional[AppConfig] = None,
        factory: Optional[BackendFactory] = None,
        dependency_checker: Optional[SystemDependencyChecker] = None
    ):
        """
        Initialize the engine.

        Args:
            config_path: Path to the configuration file. Ignored if ``config`` is given.
            config: Ready-made configuration.
            factory: Backend registry. Defaults to the built-in backends.
            dependency_checker: Checker shared by all backends.
        """
        self.config = config or ConfigurationManager(config_path).load()
        self.factory = factory or backend_factory
        self.dependency_checker = dependency_checker or SystemDependencyChecker()

    def get_available_backends(self, names: Optional[List[str]] = None) -> List[PackageBackend]:
        """
        Load the backends whose package manager is installed.

        Args:
            names: Backends to consider. If None, uses the configured list,
                or every registered backend.

        Returns:
            Available backends in display order.

        Raises:
            NoSourcesAvailableError: If none of them is installed.
        """
        if names is None:
            names = self.config.backends
        backends = self.factory.get_available_backends(names, self.config.backend, self.dependency_checker)
        if not backends:
            wanted = names if names is not None else self.factory.get_registered_backends()
            raise NoSourcesAvailableError(
                f"No package managers found. Please install at least one: {', '.join(wanted)}"
            )
        return backends

    def search(
        self,
        query: str,
        backends: Sequence[PackageBackend],
        progress: Optional[SearchProgress] = None
    ) -> List[ResultGroup]:
        """Search all backends concurrently; one group per backend."""
        return SearchAggregator(progress).search(query, backends)

    def select(
        self,
        groups: Sequence[ResultGroup],
        session: Optional[TerminalSession] = None
    ) -> Optional[PackageRecord]:
        """Let the user pick a record from the groups in the terminal."""
        state = SelectionState(groups)
        return run_selection(
            state,
            session,
            max_panel_height=self.config.ui.max_panel_height,
            poll_interval=self.config.ui.poll_interval
        )

    def install(self, record: PackageRecord, backends: Sequence[PackageBackend]) -> PackageBackend:
        """
        Install a record with the backend that produced it.

        Returns:
            The backend that installed the record.

        Raises:
            BackendNotFoundError: If no backend's name matches ``record.source``.
            InstallationError: If the install command fails.
        """
        for backend in backends:
            if backend.get_name() == record.source:
                logger.info(f"Installing {record.install_id} via {backend.get_name()}")
                backend.install(record)
                return backend
        raise BackendNotFoundError(record.source)
