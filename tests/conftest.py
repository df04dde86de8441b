"""
Pytest configuration and fixtures for unipkg tests.
"""

import pytest
from unittest.mock import Mock

from unipkg.core.interfaces import AppConfig, BackendConfig
from unipkg.core.system_dependency_checker import SystemDependencyChecker
from tests.fixtures.sample_data import SAMPLE_GROUPS


@pytest.fixture
def sample_groups():
    """Groups: empty dnf, flatpak with two records, cargo with one."""
    return list(SAMPLE_GROUPS)


@pytest.fixture
def backend_config():
    """Create a test backend configuration."""
    return BackendConfig(command_timeout=5, dnf_use_sudo=True, flatpak_remote="flathub")


@pytest.fixture
def app_config():
    """Create a test application configuration."""
    return AppConfig()


@pytest.fixture
def mock_checker():
    """Create a mock SystemDependencyChecker."""
    checker = Mock(spec=SystemDependencyChecker)
    checker.check_command_availability.return_value = True
    checker.run_interactive.return_value = 0
    return checker
