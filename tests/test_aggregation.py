"""
Tests for the SearchAggregator.
"""

import subprocess
import threading
from unittest.mock import Mock, patch

import pytest

from unipkg.core.aggregation import SearchAggregator, SearchProgress
from unipkg.core.interfaces import ResultGroup
from tests.fixtures.backends import StubBackend, make_records


class RecordingProgress(SearchProgress):
    """Progress hooks that record the order of calls."""

    def __init__(self):
        self.events = []
        self._lock = threading.Lock()

    def start(self, source_name):
        with self._lock:
            self.events.append(("start", source_name))

    def finish(self, source_name, result_count):
        with self._lock:
            self.events.append(("finish", source_name, result_count))


class TestSearchAggregator:
    """Test cases for SearchAggregator."""

    def setup_method(self):
        self.progress = RecordingProgress()
        self.aggregator = SearchAggregator(self.progress)

    def test_one_group_per_backend(self):
        backends = [
            StubBackend("dnf", make_records("dnf", 2)),
            StubBackend("flatpak", make_records("flatpak", 3)),
            StubBackend("cargo", []),
        ]

        groups = self.aggregator.search("editor", backends)

        assert [g.source_name for g in groups] == ["dnf", "flatpak", "cargo"]
        assert [len(g) for g in groups] == [2, 3, 0]
        assert all(isinstance(g, ResultGroup) for g in groups)
        assert groups[1].records == tuple(backends[1].records)
        assert all(b.queries == ["editor"] for b in backends)

    def test_order_is_registration_order_not_completion_order(self):
        # The first backend finishes last, the last one first.
        backends = [
            StubBackend("slow", make_records("slow", 1), delay=0.3),
            StubBackend("medium", make_records("medium", 1), delay=0.15),
            StubBackend("fast", make_records("fast", 1), delay=0.0),
        ]

        groups = self.aggregator.search("x", backends)

        assert [g.source_name for g in groups] == ["slow", "medium", "fast"]
        assert [g.records[0].source for g in groups] == ["slow", "medium", "fast"]
        finishes = [e[1] for e in self.progress.events if e[0] == "finish"]
        assert finishes == ["fast", "medium", "slow"]

    def test_backends_run_concurrently(self):
        barrier = threading.Barrier(3, timeout=5)

        class BarrierBackend(StubBackend):
            def search(self, query):
                barrier.wait()
                return super().search(query)

        backends = [BarrierBackend(name, make_records(name, 1)) for name in ("a", "b", "c")]

        # Would raise BrokenBarrierError inside the tasks if they ran one by one.
        groups = self.aggregator.search("x", backends)

        assert [len(g) for g in groups] == [1, 1, 1]

    @pytest.mark.parametrize("error", [
        RuntimeError("boom"),
        subprocess.CalledProcessError(1, ["dnf", "search"]),
        ValueError("unparseable output"),
        OSError("exec failed"),
    ])
    def test_failing_backend_yields_empty_group(self, error):
        backends = [
            StubBackend("dnf", make_records("dnf", 2)),
            StubBackend("flatpak", error=error),
            StubBackend("cargo", make_records("cargo", 1)),
        ]

        groups = self.aggregator.search("x", backends)

        assert len(groups) == 3
        assert groups[1].source_name == "flatpak"
        assert groups[1].is_empty
        assert groups[0].records == tuple(backends[0].records)
        assert groups[2].records == tuple(backends[2].records)

    def test_slow_failure_does_not_corrupt_other_groups(self):
        backends = [
            StubBackend("dnf", error=RuntimeError("late failure"), delay=0.2),
            StubBackend("cargo", make_records("cargo", 4)),
        ]

        groups = self.aggregator.search("x", backends)

        assert groups[0].is_empty
        assert len(groups[1]) == 4

    def test_progress_started_before_and_finished_after(self):
        backends = [
            StubBackend("dnf", make_records("dnf", 2)),
            StubBackend("cargo", error=RuntimeError("boom")),
        ]

        self.aggregator.search("x", backends)

        events = self.progress.events
        assert ("finish", "dnf", 2) in events
        assert ("finish", "cargo", 0) in events
        for name in ("dnf", "cargo"):
            start = events.index(("start", name))
            finish = next(i for i, e in enumerate(events) if e[0] == "finish" and e[1] == name)
            assert start < finish

    def test_no_backends(self):
        assert self.aggregator.search("x", []) == []
        assert self.progress.events == []

    def test_default_progress_is_noop(self):
        aggregator = SearchAggregator()
        groups = aggregator.search("x", [StubBackend("dnf", make_records("dnf", 1))])
        assert len(groups[0]) == 1

    @patch('unipkg.core.aggregation.logger')
    def test_failure_is_logged_not_raised(self, mock_logger):
        self.aggregator.search("x", [StubBackend("dnf", error=RuntimeError("boom"))])

        mock_logger.warning.assert_called_once()
        assert "dnf" in mock_logger.warning.call_args[0][0]

    def test_availability_is_not_checked(self):
        backend = StubBackend("dnf", make_records("dnf", 1))
        backend.is_available = Mock(return_value=False)

        groups = self.aggregator.search("x", [backend])

        backend.is_available.assert_not_called()
        assert len(groups) == 1
