"""
System dependency checker for unipkg.

This module locates package manager commands on the system and runs them,
turning the ways an external command can fail into log messages instead of
exceptions.
"""

import logging
import shutil
import subprocess
import sys
from typing import Dict, List, Optional, Set


logger = logging.getLogger(__name__)


class SystemDependencyChecker:
    """
    Checker for package manager commands.

    Availability lookups are cached for the lifetime of the checker, and a
    missing command is reported at most once per backend.
    """

    INSTALLATION_INSTRUCTIONS = {
        "dnf": {
            "linux": "dnf is typically pre-installed on Fedora systems. Install with: sudo yum install dnf",
            "default": "dnf is only available on Red Hat-based Linux distributions"
        },
        "flatpak": {
            "linux": "Install Flatpak: sudo apt install flatpak (Ubuntu/Debian) or sudo dnf install flatpak (Fedora)",
            "default": "Flatpak is only available on Linux systems"
        },
        "cargo": {
            "darwin": "Install Rust from https://rustup.rs/",
            "linux": "Install Rust from https://rustup.rs/",
            "win32": "Install Rust from https://rustup.rs/",
            "default": "Install Rust from https://rustup.rs/"
        },
        "sudo": {
            "linux": "Install sudo from your package manager or disable it with dnf.use_sudo: false",
            "default": "sudo is required to install system packages"
        }
    }

    def __init__(self):
        """Initialize the system dependency checker."""
        self._checked_commands: Dict[str, bool] = {}
        self._missing_commands: Set[str] = set()
        self._logged_dependencies: Set[str] = set()
        self._platform = sys.platform

    def check_command_availability(self, command: str) -> bool:
        """
        Check if a system command is available.

        Args:
            command: Name of the command to check.

        Returns:
            True if the command is on PATH, False otherwise.
        """
        if command in self._checked_commands:
            return self._checked_commands[command]

        available = shutil.which(command) is not None
        self._checked_commands[command] = available
        if not available:
            self._missing_commands.add(command)

        logger.debug(f"Command '{command}' availability: {available}")
        return available

    def get_installation_instructions(self, command: str) -> str:
        """
        Get installation instructions for a command.

        Args:
            command: Name of the command to get instructions for.

        Returns:
            Platform-specific instructions, or the generic ones.
        """
        if command not in self.INSTALLATION_INSTRUCTIONS:
            return f"Installation instructions for '{command}' are not available. Please consult the official documentation."

        instructions = self.INSTALLATION_INSTRUCTIONS[command]
        if self._platform in instructions:
            return instructions[self._platform]
        return instructions.get("default", f"Please install '{command}' according to your system's package manager.")

    def log_missing_dependency(self, command: str, backend: str) -> None:
        """
        Log a missing command once per command and backend.

        Args:
            command: Name of the missing command.
            backend: Name of the backend that requires the command.
        """
        log_key = f"{command}:{backend}"
        if log_key in self._logged_dependencies:
            return

        self._logged_dependencies.add(log_key)
        self._missing_commands.add(command)

        logger.info(
            f"Missing system dependency for {backend} backend: '{command}' command not found. "
            f"Backend will be skipped. {self.get_installation_instructions(command)}"
        )

    def get_missing_commands(self) -> Set[str]:
        """Return a copy of the commands found to be missing so far."""
        return self._missing_commands.copy()

    def execute_command_safely(self, command: List[str], backend: str,
                               timeout: Optional[int] = 120) -> Optional[subprocess.CompletedProcess]:
        """
        Run a command and capture its output without raising.

        Args:
            command: Command and arguments as a list.
            backend: Name of the backend executing the command.
            timeout: Timeout in seconds, or None to wait indefinitely.

        Returns:
            CompletedProcess for a command that exited with status 0, None otherwise.
        """
        if not command:
            logger.error(f"Empty command provided for {backend} backend")
            return None

        command_line = ' '.join(command)
        if not self.check_command_availability(command[0]):
            self.log_missing_dependency(command[0], backend)
            return None

        try:
            logger.debug(f"Executing command for {backend}: {command_line}")
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=timeout,
                check=False
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"Command '{command_line}' for {backend} backend timed out after {timeout} seconds")
            return None
        except (subprocess.SubprocessError, OSError) as e:
            logger.warning(f"Failed to execute command '{command_line}' for {backend} backend: {e}")
            return None

        if result.returncode != 0:
            logger.warning(
                f"Command '{command_line}' for {backend} backend returned "
                f"exit code {result.returncode}. stderr: {result.stderr.strip()}"
            )
            return None

        return result

    def run_interactive(self, command: List[str], backend: str) -> int:
        """
        Run a command attached to the user's terminal.

        Used for installs, which may prompt for passwords or confirmation.

        Args:
            command: Command and arguments as a list.
            backend: Name of the backend executing the command.

        Returns:
            The command's exit status; 127 if it could not be started.
        """
        command_line = ' '.join(command)
        if not command or not self.check_command_availability(command[0]):
            if command:
                self.log_missing_dependency(command[0], backend)
            return 127

        logger.debug(f"Running interactive command for {backend}: {command_line}")
        try:
            return subprocess.run(command, check=False).returncode
        except OSError as e:
            logger.error(f"Failed to start '{command_line}' for {backend} backend: {e}")
            return 127

    def clear_cache(self) -> None:
        """Clear the command availability cache."""
        self._checked_commands.clear()
        self._missing_commands.clear()
        self._logged_dependencies.clear()
