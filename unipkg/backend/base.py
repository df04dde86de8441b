"""
Base class for package manager backends.

A backend wraps one package manager command: it reports whether the command
is installed, turns a search query into PackageRecords, and installs a record
it produced.
"""

import abc
import logging
from typing import List, Optional

from unipkg.core.exceptions import InstallationError
from unipkg.core.interfaces import BackendConfig, PackageRecord
from unipkg.core.system_dependency_checker import SystemDependencyChecker


logger = logging.getLogger(__name__)

NO_DESCRIPTION = "No description available"


class PackageBackend(abc.ABC):
    """
    Abstract base class for package manager backends.

    Subclasses set ``command`` and implement the search/install command lines
    and the output parser. ``search`` must not raise for a failing command or
    unparseable output; it returns an empty list instead.
    """

    command: str = ""

    def __init__(
        self,
        config: Optional[BackendConfig] = None,
        dependency_checker: Optional[SystemDependencyChecker] = None
    ):
        """
        Initialize the backend.

        Args:
            config: Configuration for the backend. If None, uses default configuration.
            dependency_checker: Shared checker used to locate and run commands.
        """
        self.config = config or BackendConfig()
        self.dependency_checker = dependency_checker or SystemDependencyChecker()

    @abc.abstractmethod
    def get_name(self) -> str:
        """Return the backend identity, stored in PackageRecord.source."""
        pass

    def is_available(self) -> bool:
        """Return True if the package manager command is installed."""
        available = self.dependency_checker.check_command_availability(self.command)
        if not available:
            self.dependency_checker.log_missing_dependency(self.command, self.get_name())
        return available

    def search(self, query: str) -> List[PackageRecord]:
        """
        Search the package manager for a query.

        Args:
            query: Search query string.

        Returns:
            Parsed records, or an empty list if the command failed.
        """
        result = self.dependency_checker.execute_command_safely(
            self.search_command(query), self.get_name(), timeout=self.config.command_timeout
        )
        if result is None:
            return []

        try:
            records = self.parse_search_output(result.stdout)
        except (ValueError, IndexError) as e:
            logger.warning(f"Could not parse {self.get_name()} search output: {e}")
            return []

        logger.debug(f"{self.get_name()} returned {len(records)} records for '{query}'")
        return records

    def install(self, record: PackageRecord) -> None:
        """
        Install a record previously returned by ``search``.

        Raises:
            InstallationError: If the install command fails.
        """
        status = self.dependency_checker.run_interactive(self.install_command(record), self.get_name())
        if status != 0:
            raise InstallationError(f"{self.get_name()} install of {record.install_id} failed (exit code {status})")
        logger.info(f"Installed {record.install_id} via {self.get_name()}")

    @abc.abstractmethod
    def search_command(self, query: str) -> List[str]:
        """Build the search command line."""
        pass

    @abc.abstractmethod
    def install_command(self, record: PackageRecord) -> List[str]:
        """Build the install command line."""
        pass

    @abc.abstractmethod
    def parse_search_output(self, output: str) -> List[PackageRecord]:
        """Parse the search command's standard output."""
        pass
