"""Tests for the append-only activity log."""

import logging

import pytest

from cekap_app.core.errors import PersistenceError
from cekap_app.services.activity_logger import ActivityLogger

from conftest import FIXED_NOW


class BrokenActivityRepository:
    def append_log(self, timestamp, staff_name, action, doc_id):
        raise PersistenceError("database is locked")


def test_record_appends_entry(services) -> None:
    logger = ActivityLogger(services.activity_repo, lambda: FIXED_NOW)

    assert logger.record("aina", "Created Invoice", "INV-800000") is True

    entry = services.activity_repo.list_logs()[0]
    assert entry.timestamp == FIXED_NOW.isoformat()
    assert entry.staff_name == "aina"
    assert entry.action == "Created Invoice"
    assert entry.doc_id == "INV-800000"


def test_record_without_document(services) -> None:
    services.activity_logger.record("owner", "Updated system settings")
    assert services.activity_repo.list_logs()[0].doc_id is None


def test_record_failure_is_logged_not_raised(caplog) -> None:
    logger = ActivityLogger(BrokenActivityRepository(), lambda: FIXED_NOW)

    with caplog.at_level(logging.ERROR):
        assert logger.record("aina", "Created Invoice", "INV-1") is False

    assert "Activity log write failed" in caplog.text


def test_entries_cannot_be_changed(services) -> None:
    services.activity_logger.record("aina", "Created Invoice", "INV-1")

    with pytest.raises(PersistenceError):
        services.pool.execute("UPDATE activity_logs SET action = 'Deleted everything'")
    with pytest.raises(PersistenceError):
        services.pool.execute("DELETE FROM activity_logs")

    assert services.activity_repo.list_logs()[0].action == "Created Invoice"


def test_list_logs_filters(services) -> None:
    services.activity_repo.append_log("2024-04-28T10:00:00+00:00", "aina", "Created Invoice", "INV-1")
    services.activity_repo.append_log("2024-05-01T10:00:00+00:00", "raj", "Created Receipt", "REC-2")
    services.activity_repo.append_log("2024-05-02T10:00:00+00:00", "aina", "Created Receipt", "REC-3")

    assert [log.doc_id for log in services.activity_repo.list_logs()] == ["REC-3", "REC-2", "INV-1"]
    assert [log.doc_id for log in services.activity_repo.list_logs(keyword="Receipt")] == [
        "REC-3",
        "REC-2",
    ]
    assert [log.doc_id for log in services.activity_repo.list_logs(staff_name="aina")] == [
        "REC-3",
        "INV-1",
    ]
    in_range = services.activity_repo.list_logs(date_from="2024-04-30", date_to="2024-05-01")
    assert [log.doc_id for log in in_range] == ["REC-2"]
