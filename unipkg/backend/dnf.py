"""
DNF backend for unipkg.

Searches and installs RPM packages with the dnf command.
"""

import logging
from typing import List

from unipkg.backend.base import PackageBackend
from unipkg.core.interfaces import PackageRecord


logger = logging.getLogger(__name__)

# Banner lines dnf prints around the results.
SKIPPED_PREFIXES = ("Updating", "Repositories", "Matched fields")


class DNFBackend(PackageBackend):
    """
    Backend for the DNF package manager.

    dnf search prints ``name.arch<TAB>summary`` lines. Packages are installed
    by name, so the architecture only appears in the display name.
    """

    command = "dnf"

    def get_name(self) -> str:
        return "dnf"

    def search_command(self, query: str) -> List[str]:
        return ["dnf", "search", "--assumeyes", "--setopt=assumeyes=True", query]

    def install_command(self, record: PackageRecord) -> List[str]:
        command = ["dnf", "install", "-y", record.install_id]
        if self.config.dnf_use_sudo:
            command.insert(0, "sudo")
        return command

    def parse_search_output(self, output: str) -> List[PackageRecord]:
        records = []
        for line in output.splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith(SKIPPED_PREFIXES) or "\t" not in stripped:
                continue

            parts = stripped.split("\t")
            full_name = parts[0].strip()
            description = parts[1].strip()
            if not full_name or not description:
                continue

            name, dot, arch = full_name.rpartition(".")
            if not dot:
                name, arch = full_name, ""

            records.append(PackageRecord(
                source=self.get_name(),
                display_name=f"{name} ({arch})" if arch else name,
                install_id=name,
                description=description,
                version=None
            ))
        return records
