"""
Cargo backend for unipkg.

Searches crates.io and installs Rust binaries with the cargo command.
"""

import logging
from typing import List, Optional, Tuple

from unipkg.backend.base import NO_DESCRIPTION, PackageBackend
from unipkg.core.interfaces import PackageRecord


logger = logging.getLogger(__name__)


class CargoBackend(PackageBackend):
    """
    Backend for the Cargo package manager.

    cargo search prints ``name = "version"    # description`` lines followed
    by a ``... and N crates more`` summary and sometimes a ``note:`` line.
    """

    command = "cargo"

    def get_name(self) -> str:
        return "cargo"

    def search_command(self, query: str) -> List[str]:
        return ["cargo", "search", query]

    def install_command(self, record: PackageRecord) -> List[str]:
        return ["cargo", "install", record.install_id]

    def parse_search_output(self, output: str) -> List[PackageRecord]:
        records = []
        for line in output.splitlines():
            stripped = line.strip()
            if (not stripped or stripped.startswith("...")
                    or stripped.startswith("note:") or " = " not in stripped):
                continue

            name, _, rest = stripped.partition(" = ")
            name = name.strip()
            if not name:
                continue

            version, description = _split_version(rest)
            records.append(PackageRecord(
                source=self.get_name(),
                display_name=name,
                install_id=name,
                description=description or NO_DESCRIPTION,
                version=version
            ))
        return records


def _split_version(rest: str) -> Tuple[Optional[str], str]:
    """Split the right-hand side of a search line into version and description."""
    quote_start = rest.find('"')
    if quote_start != -1:
        after_quote = rest[quote_start + 1:]
        quote_end = after_quote.find('"')
        if quote_end == -1:
            return None, rest.strip()
        version = after_quote[:quote_end]
        _, _, description = after_quote[quote_end + 1:].partition("#")
        return version, description.strip()

    version, _, description = rest.partition("#")
    return version.strip() or None, description.strip()
