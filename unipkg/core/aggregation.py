"""
Concurrent search across package manager backends.

This module fans a query out to every backend at once and merges the results
into one ResultGroup per backend, in the order the backends were given.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional, Sequence

from unipkg.backend.base import PackageBackend
from unipkg.core.interfaces import PackageRecord, ResultGroup


logger = logging.getLogger(__name__)


class SearchProgress:
    """
    Per-backend progress hooks for a search.

    ``start`` is called for every backend before its task is submitted, and
    ``finish`` once its task is over, whether it succeeded or not. The base
    class does nothing.
    """

    def start(self, source_name: str) -> None:
        pass

    def finish(self, source_name: str, result_count: int) -> None:
        pass


class SearchAggregator:
    """
    Runs one search task per backend and joins them.

    A backend that raises contributes an empty group; it never cancels or
    delays the reporting of the others. No timeout is applied here.
    """

    def __init__(self, progress: Optional[SearchProgress] = None):
        """
        Initialize the aggregator.

        Args:
            progress: Progress hooks. If None, progress is not reported.
        """
        self.progress = progress or SearchProgress()

    def search(self, query: str, backends: Sequence[PackageBackend]) -> List[ResultGroup]:
        """
        Search every backend concurrently.

        Args:
            query: Search query string.
            backends: Backends to search, already filtered for availability.

        Returns:
            One ResultGroup per backend, in the order of ``backends``.
        """
        if not backends:
            return []

        logger.info(f"Searching for '{query}' across {len(backends)} backends")
        results: Dict[int, List[PackageRecord]] = {}

        with ThreadPoolExecutor(max_workers=len(backends)) as executor:
            future_to_index = {}
            for index, backend in enumerate(backends):
                self.progress.start(backend.get_name())
                future_to_index[executor.submit(self._search_backend, query, backend)] = index

            for future in as_completed(future_to_index):
                index = future_to_index[future]
                results[index] = future.result()

        groups = [
            ResultGroup(source_name=backend.get_name(), records=tuple(results.get(index, [])))
            for index, backend in enumerate(backends)
        ]
        logger.info(f"Found {sum(len(g) for g in groups)} packages for '{query}'")
        return groups

    def _search_backend(self, query: str, backend: PackageBackend) -> List[PackageRecord]:
        """
        Search a single backend, absorbing any failure.

        Returns:
            The backend's records, or an empty list if it raised.
        """
        name = backend.get_name()
        records: List[PackageRecord] = []
        try:
            records = list(backend.search(query))
        except Exception as e:
            logger.warning(f"Search failed for backend {name}: {e}")
            records = []
        finally:
            self.progress.finish(name, len(records))

        logger.debug(f"Backend {name} returned {len(records)} records")
        return records
