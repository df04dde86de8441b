"""
Tests for the SystemDependencyChecker class.
"""

import subprocess
import sys
from unittest.mock import Mock, patch

from unipkg.core.system_dependency_checker import SystemDependencyChecker


class TestSystemDependencyChecker:
    """Test cases for SystemDependencyChecker."""

    def setup_method(self):
        """Set up test fixtures."""
        self.checker = SystemDependencyChecker()

    def test_init(self):
        """Test SystemDependencyChecker initialization."""
        assert self.checker._checked_commands == {}
        assert self.checker._missing_commands == set()
        assert self.checker._platform == sys.platform

    @patch('shutil.which')
    def test_check_command_availability_available(self, mock_which):
        """Test checking for an available command."""
        mock_which.return_value = '/usr/bin/dnf'

        assert self.checker.check_command_availability('dnf') is True
        assert 'dnf' not in self.checker.get_missing_commands()
        mock_which.assert_called_once_with('dnf')

    @patch('shutil.which')
    def test_check_command_availability_missing(self, mock_which):
        """Test checking for a missing command."""
        mock_which.return_value = None

        assert self.checker.check_command_availability('flatpak') is False
        assert 'flatpak' in self.checker.get_missing_commands()

    @patch('shutil.which')
    def test_check_command_availability_cached(self, mock_which):
        """Test that command availability is cached."""
        mock_which.return_value = '/usr/bin/cargo'

        self.checker.check_command_availability('cargo')
        self.checker.check_command_availability('cargo')

        mock_which.assert_called_once_with('cargo')

    def test_get_installation_instructions_known_command(self):
        """Test getting installation instructions for a known command."""
        instructions = self.checker.get_installation_instructions('cargo')
        assert 'rustup' in instructions

    def test_get_installation_instructions_platform_fallback(self):
        """Test falling back to the default instructions."""
        self.checker._platform = 'darwin'
        instructions = self.checker.get_installation_instructions('flatpak')
        assert instructions == SystemDependencyChecker.INSTALLATION_INSTRUCTIONS['flatpak']['default']

    def test_get_installation_instructions_unknown_command(self):
        """Test getting installation instructions for an unknown command."""
        instructions = self.checker.get_installation_instructions('unknowncommand')
        assert 'not available' in instructions

    @patch('unipkg.core.system_dependency_checker.logger')
    def test_log_missing_dependency_once(self, mock_logger):
        """Test that a missing dependency is logged once per backend."""
        self.checker.log_missing_dependency('dnf', 'dnf')
        self.checker.log_missing_dependency('dnf', 'dnf')

        mock_logger.info.assert_called_once()
        assert 'dnf' in self.checker.get_missing_commands()

    @patch('subprocess.run')
    @patch('shutil.which')
    def test_execute_command_safely_success(self, mock_which, mock_run):
        """Test successful command execution."""
        mock_which.return_value = '/usr/bin/cargo'
        mock_run.return_value = Mock(returncode=0, stdout='ripgrep = "14.1.0"\n', stderr='')

        result = self.checker.execute_command_safely(['cargo', 'search', 'ripgrep'], 'cargo', timeout=10)

        assert result is mock_run.return_value
        mock_run.assert_called_once_with(
            ['cargo', 'search', 'ripgrep'],
            capture_output=True,
            text=True,
            errors="replace",
            timeout=10,
            check=False
        )

    @patch('subprocess.run')
    @patch('shutil.which')
    def test_execute_command_safely_nonzero_exit(self, mock_which, mock_run):
        """Test that a failing command yields None."""
        mock_which.return_value = '/usr/bin/dnf'
        mock_run.return_value = Mock(returncode=1, stdout='', stderr='No matches found.\n')

        assert self.checker.execute_command_safely(['dnf', 'search', 'zzz'], 'dnf') is None

    @patch('subprocess.run')
    @patch('shutil.which')
    def test_execute_command_safely_timeout(self, mock_which, mock_run):
        """Test command timeout."""
        mock_which.return_value = '/usr/bin/dnf'
        mock_run.side_effect = subprocess.TimeoutExpired(['dnf'], 5)

        assert self.checker.execute_command_safely(['dnf', 'search', 'x'], 'dnf', timeout=5) is None

    @patch('subprocess.run')
    @patch('shutil.which')
    def test_execute_command_safely_oserror(self, mock_which, mock_run):
        """Test a command that cannot be started."""
        mock_which.return_value = '/usr/bin/flatpak'
        mock_run.side_effect = OSError('Exec format error')

        assert self.checker.execute_command_safely(['flatpak', 'search', 'x'], 'flatpak') is None

    @patch('subprocess.run')
    @patch('shutil.which')
    def test_execute_command_safely_missing_command(self, mock_which, mock_run):
        """Test that a missing command is not run."""
        mock_which.return_value = None

        assert self.checker.execute_command_safely(['cargo', 'search', 'x'], 'cargo') is None
        mock_run.assert_not_called()

    def test_execute_command_safely_empty_command(self):
        """Test executing an empty command."""
        assert self.checker.execute_command_safely([], 'dnf') is None

    @patch('subprocess.run')
    @patch('shutil.which')
    def test_run_interactive_returns_exit_status(self, mock_which, mock_run):
        """Test that interactive commands are attached to the terminal."""
        mock_which.return_value = '/usr/bin/cargo'
        mock_run.return_value = Mock(returncode=101)

        assert self.checker.run_interactive(['cargo', 'install', 'ripgrep'], 'cargo') == 101
        mock_run.assert_called_once_with(['cargo', 'install', 'ripgrep'], check=False)

    @patch('shutil.which')
    def test_run_interactive_missing_command(self, mock_which):
        """Test running a command that is not installed."""
        mock_which.return_value = None

        assert self.checker.run_interactive(['sudo', 'dnf', 'install', '-y', 'x'], 'dnf') == 127

    @patch('subprocess.run')
    @patch('shutil.which')
    def test_run_interactive_oserror(self, mock_which, mock_run):
        """Test an interactive command that fails to start."""
        mock_which.return_value = '/usr/bin/flatpak'
        mock_run.side_effect = OSError('denied')

        assert self.checker.run_interactive(['flatpak', 'install', 'flathub', 'x'], 'flatpak') == 127

    @patch('shutil.which')
    def test_clear_cache(self, mock_which):
        """Test clearing the cache."""
        mock_which.return_value = None
        self.checker.check_command_availability('dnf')
        self.checker.log_missing_dependency('dnf', 'dnf')

        self.checker.clear_cache()

        assert self.checker._checked_commands == {}
        assert self.checker.get_missing_commands() == set()
        assert self.checker._logged_dependencies == set()
