"""
Tests for the migration driver: limits, summaries and failure propagation.
"""

import logging
from unittest.mock import Mock

import pytest

from core.errors import ManifestError, ObjectMigrationError
from core.migrator import MigrationSummary, Migrator
from shared.models import ObjectInfo


def make_processor(pid, versions_processed=1, error=None):
    processor = Mock()
    processor.object_info = ObjectInfo(pid)
    if error is not None:
        processor.process_object.side_effect = error
    else:
        processor.process_object.return_value = Mock(versions_processed=versions_processed)
    return processor


@pytest.fixture
def processors():
    return [make_processor(f"demo:{i}", versions_processed=i) for i in range(1, 4)]


@pytest.mark.unit
class TestMigrator:

    def test_processes_every_object_without_limit(self, processors):
        handler = Mock()
        summary = Migrator(processors, handler, show_progress=False).run()

        for processor in processors:
            processor.process_object.assert_called_once_with(handler)
        assert summary.objects_processed == 3
        assert summary.versions_processed == 6

    @pytest.mark.parametrize("limit,expected", [(0, 0), (1, 1), (2, 2), (5, 3), (-1, 3)])
    def test_limit(self, processors, limit, expected):
        summary = Migrator(processors, Mock(), limit=limit, show_progress=False).run()

        assert summary.objects_processed == expected
        called = [p for p in processors if p.process_object.called]
        assert called == processors[:expected]

    def test_limit_stops_pulling_from_source(self):
        pulled = []

        def source():
            for i in range(10):
                pulled.append(i)
                yield make_processor(f"demo:{i}")

        Migrator(source(), Mock(), limit=2, show_progress=False).run()
        assert pulled == [0, 1, 2]

    def test_logs_each_object(self, processors, caplog):
        with caplog.at_level(logging.INFO):
            Migrator(processors, Mock(), show_progress=False).run()
        assert 'Processing "demo:1"...' in caplog.text
        assert 'Processing "demo:3"...' in caplog.text

    def test_failure_stops_run_and_is_reraised(self, caplog):
        failing = make_processor("demo:2", error=ObjectMigrationError("demo:2", "boom", 1))
        after = make_processor("demo:3")
        source = [make_processor("demo:1"), failing, after]

        with pytest.raises(ObjectMigrationError):
            Migrator(source, Mock(), show_progress=False).run()

        after.process_object.assert_not_called()
        assert "demo:2" in caplog.text

    def test_unreadable_history_is_logged_with_pid(self, caplog):
        failing = make_processor("demo:7", error=ManifestError("demo_7.json: version 1 entry is missing 'date'"))
        after = make_processor("demo:8")

        with pytest.raises(ManifestError):
            Migrator([failing, after], Mock(), show_progress=False).run()

        after.process_object.assert_not_called()
        assert "Migration of demo:7 failed" in caplog.text

    def test_object_without_versions_counts_as_processed(self):
        processor = Mock()
        processor.object_info = ObjectInfo("demo:9")
        processor.process_object.return_value = None

        summary = Migrator([processor], Mock(), show_progress=False).run()
        assert summary.objects_processed == 1
        assert summary.versions_processed == 0

    def test_requires_source_and_handler(self):
        with pytest.raises(ValueError):
            Migrator(None, Mock())
        with pytest.raises(ValueError):
            Migrator(object(), Mock())
        with pytest.raises(ValueError):
            Migrator([], None)

    def test_summary_str(self):
        assert str(MigrationSummary(2, 5, 1.26)) == "2 objects, 5 versions in 1.3s"
