"""
Tests for the DNF backend.
"""

from unittest.mock import Mock

import pytest

from unipkg.backend.base import PackageBackend
from unipkg.backend.dnf import DNFBackend
from unipkg.core.exceptions import InstallationError
from unipkg.core.interfaces import BackendConfig, PackageRecord
from tests.fixtures.sample_data import DNF_SEARCH_OUTPUT


class TestDNFBackend:
    """Test cases for DNFBackend."""

    @pytest.fixture(autouse=True)
    def setup_backend(self, mock_checker, backend_config):
        self.checker = mock_checker
        self.backend = DNFBackend(config=backend_config, dependency_checker=mock_checker)

    def test_is_a_package_backend(self):
        assert isinstance(self.backend, PackageBackend)
        assert self.backend.get_name() == "dnf"

    def test_search_command(self):
        assert self.backend.search_command("ripgrep") == [
            "dnf", "search", "--assumeyes", "--setopt=assumeyes=True", "ripgrep"
        ]

    def test_parse_search_output(self):
        records = self.backend.parse_search_output(DNF_SEARCH_OUTPUT)

        assert [r.install_id for r in records] == ["ripgrep", "ripgrep-doc", "rust-grep-devel"]
        assert records[0] == PackageRecord(
            source="dnf",
            display_name="ripgrep (x86_64)",
            install_id="ripgrep",
            description="Line oriented search tool using Rust's regex library",
            version=None
        )
        assert records[1].display_name == "ripgrep-doc (noarch)"

    def test_parse_name_without_arch(self):
        records = self.backend.parse_search_output("nodot\tA package without arch\n")

        assert records[0].display_name == "nodot"
        assert records[0].install_id == "nodot"

    def test_parse_keeps_dots_in_name(self):
        records = self.backend.parse_search_output("python3.12.x86_64\tPython 3.12\n")

        assert records[0].install_id == "python3.12"
        assert records[0].display_name == "python3.12 (x86_64)"

    def test_parse_skips_rows_without_description(self):
        assert self.backend.parse_search_output("pkg.x86_64\t   \n") == []

    def test_parse_empty_output(self):
        assert self.backend.parse_search_output("") == []

    def test_search_runs_command_with_timeout(self):
        self.checker.execute_command_safely.return_value = Mock(stdout=DNF_SEARCH_OUTPUT)

        records = self.backend.search("ripgrep")

        assert len(records) == 3
        self.checker.execute_command_safely.assert_called_once_with(
            self.backend.search_command("ripgrep"), "dnf", timeout=5
        )

    def test_search_failure_returns_empty_list(self):
        self.checker.execute_command_safely.return_value = None

        assert self.backend.search("ripgrep") == []

    def test_install_uses_sudo_by_default(self):
        record = PackageRecord("dnf", "ripgrep (x86_64)", "ripgrep", "grep")

        self.backend.install(record)

        self.checker.run_interactive.assert_called_once_with(
            ["sudo", "dnf", "install", "-y", "ripgrep"], "dnf"
        )

    def test_install_without_sudo(self, mock_checker):
        backend = DNFBackend(config=BackendConfig(dnf_use_sudo=False), dependency_checker=mock_checker)
        record = PackageRecord("dnf", "ripgrep", "ripgrep", "grep")

        assert backend.install_command(record) == ["dnf", "install", "-y", "ripgrep"]

    def test_install_failure_raises(self):
        self.checker.run_interactive.return_value = 1
        record = PackageRecord("dnf", "ripgrep", "ripgrep", "grep")

        with pytest.raises(InstallationError, match="ripgrep"):
            self.backend.install(record)

    def test_is_available_checks_command(self):
        self.checker.check_command_availability.return_value = False

        assert self.backend.is_available() is False
        self.checker.check_command_availability.assert_called_once_with("dnf")
        self.checker.log_missing_dependency.assert_called_once_with("dnf", "dnf")
