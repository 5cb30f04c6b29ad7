"""
Tests for report persistence and status transitions against the in-memory store.
"""

import asyncio
import threading
import time
from datetime import datetime, timezone

import pytest

from app.config.mock_firestore import MockDocumentReference
from app.core.settings import settings
from app.models.report import ReportCreate
from app.services.report_service import (
    ReportNotFoundError,
    create_report,
    get_report_by_id,
    list_reports,
    list_reports_by_status,
    update_report_status,
)
from app.services.status_workflow import InvalidStatusTransitionError, ReportStatus


def run(coro):
    return asyncio.run(coro)


def make_report(report_payload, **overrides):
    return run(create_report(ReportCreate(**{**report_payload, **overrides})))


def test_create_report_starts_reported_with_one_timestamp(mock_db, report_payload):
    report = make_report(report_payload)

    assert report.status == ReportStatus.REPORTED
    assert len(report.timestamps) == 1
    assert report.created_at == report.timestamps[0]

    stored = mock_db.collection("reports").document(report.id).get().to_dict()
    assert stored["user_id"] == "user-1"
    assert stored["status"] == "reported"


def test_list_reports_filters_by_user(mock_db, report_payload):
    make_report(report_payload, user_id="alice")
    make_report(report_payload, user_id="bob")
    make_report(report_payload, user_id="alice")

    assert len(run(list_reports())) == 3
    alice_reports = run(list_reports(user_id="alice"))
    assert len(alice_reports) == 2
    assert {report.user_id for report in alice_reports} == {"alice"}


def test_list_reports_newest_first(mock_db, report_payload):
    reports = mock_db.collection("reports")
    for doc_id, day in [("older", 1), ("newest", 3), ("middle", 2)]:
        created_at = datetime(2024, 1, day, tzinfo=timezone.utc)
        reports.document(doc_id).set({**report_payload, "status": "reported", "timestamps": [created_at], "created_at": created_at})

    assert [report.id for report in run(list_reports())] == ["newest", "middle", "older"]


def test_list_reports_by_status(mock_db, report_payload):
    report = make_report(report_payload)
    make_report(report_payload)
    run(update_report_status(report.id, ReportStatus.RESOLVED))

    resolved = run(list_reports_by_status(ReportStatus.RESOLVED))
    assert [r.id for r in resolved] == [report.id]
    assert len(run(list_reports_by_status(ReportStatus.REPORTED))) == 1
    assert run(list_reports_by_status(ReportStatus.IN_PROGRESS)) == []


def test_update_status_appends_timestamp(mock_db, report_payload):
    report = make_report(report_payload)

    updated = run(update_report_status(report.id, ReportStatus.RESOLVED))

    assert updated.status == ReportStatus.RESOLVED
    assert len(updated.timestamps) == 2
    assert updated.timestamps[0] == report.timestamps[0]
    assert updated.timestamps[1] >= updated.timestamps[0]


def test_update_status_unknown_report(mock_db):
    with pytest.raises(ReportNotFoundError):
        run(update_report_status("does-not-exist", ReportStatus.RESOLVED))


def test_get_report_by_id(mock_db, report_payload):
    report = make_report(report_payload)

    assert run(get_report_by_id(report.id)).photo_url == report_payload["photo_url"]
    with pytest.raises(ReportNotFoundError):
        run(get_report_by_id("missing"))


def test_any_transition_accepted_by_default(mock_db, report_payload, monkeypatch):
    monkeypatch.setattr(settings, "STRICT_STATUS_TRANSITIONS", False)
    report = make_report(report_payload)
    run(update_report_status(report.id, ReportStatus.RESOLVED))

    reopened = run(update_report_status(report.id, ReportStatus.REPORTED))

    assert reopened.status == ReportStatus.REPORTED
    assert len(reopened.timestamps) == 3


def test_strict_mode_rejects_reopening(mock_db, report_payload):
    report = make_report(report_payload)
    run(update_report_status(report.id, ReportStatus.RESOLVED, strict=True))

    with pytest.raises(InvalidStatusTransitionError):
        run(update_report_status(report.id, ReportStatus.REPORTED, strict=True))

    stored = mock_db.collection("reports").document(report.id).get().to_dict()
    assert stored["status"] == "resolved"
    assert len(stored["timestamps"]) == 2


def test_concurrent_updates_keep_every_timestamp(mock_db, report_payload, monkeypatch):
    report = make_report(report_payload)
    original_get = MockDocumentReference.get

    def slow_get(self, transaction=None):
        snapshot = original_get(self, transaction=transaction)
        # Widen the gap between read and write
        time.sleep(0.05)
        return snapshot

    monkeypatch.setattr(MockDocumentReference, "get", slow_get)

    errors = []

    def update(new_status):
        try:
            run(update_report_status(report.id, new_status))
        except Exception as e:
            errors.append(e)

    threads = [
        threading.Thread(target=update, args=(ReportStatus.IN_PROGRESS,)),
        threading.Thread(target=update, args=(ReportStatus.RESOLVED,)),
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert errors == []
    stored = mock_db.collection("reports").document(report.id).get().to_dict()
    assert len(stored["timestamps"]) == 3
    assert stored["status"] in ("in-progress", "resolved")
