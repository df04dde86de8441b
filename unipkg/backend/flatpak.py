"""
Flatpak backend for unipkg.

Searches and installs Flatpak applications with the flatpak command.
"""

import logging
from typing import List

from unipkg.backend.base import NO_DESCRIPTION, PackageBackend
from unipkg.core.interfaces import PackageRecord


logger = logging.getLogger(__name__)


class FlatpakBackend(PackageBackend):
    """
    Backend for the Flatpak package manager.

    flatpak search prints tab-separated columns:
    Name, Description, Application ID, Version, Branch, Remotes.
    Applications are installed by application ID from the configured remote.
    """

    command = "flatpak"

    def get_name(self) -> str:
        return "flatpak"

    def search_command(self, query: str) -> List[str]:
        return ["flatpak", "search", query]

    def install_command(self, record: PackageRecord) -> List[str]:
        return ["flatpak", "install", self.config.flatpak_remote, record.install_id]

    def parse_search_output(self, output: str) -> List[PackageRecord]:
        records = []
        for line in output.splitlines():
            if not line.strip() or "\t" not in line:
                continue

            parts = [part.strip() for part in line.split("\t")]
            if len(parts) < 3:
                continue

            name, description, app_id = parts[0], parts[1], parts[2]
            version = parts[3] if len(parts) > 3 and parts[3] else None
            if not name or not app_id:
                continue

            records.append(PackageRecord(
                source=self.get_name(),
                display_name=name,
                install_id=app_id,
                description=description or NO_DESCRIPTION,
                version=version
            ))
        return records
