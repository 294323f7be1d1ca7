"""Tests for the per-document session that ties document, history and timeline together."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from engine.actions import DelegateAction
from engine.session import DocumentSession
from models.audit import AuditAction
from models.record import CompanyDocument, Record


def make_session():
    document = CompanyDocument(name="Test Co", records=[
        Record("CUS-001", "Customer", "Acme Corp", email="billing@acme.example"),
        Record("CUS-002", "Customer", "City Bakery"),
    ])
    return DocumentSession(document)


def names(session):
    return [r.name for r in session.document.records]


class TestCommit:
    def test_add_record(self):
        session = make_session()
        record = session.add_record("Customer", "River Cafe", email="hello@rivercafe.example")

        assert record.record_id == "CUS-003"
        assert names(session) == ["Acme Corp", "City Bakery", "River Cafe"]
        assert session.history.undo_history == ["Add customer 'River Cafe'"]

        event = session.timeline.events[-1]
        assert event.action == AuditAction.ADDED
        assert event.entity_id == "CUS-003"
        assert event.entity_type == "Customer"

    def test_edit_record_logs_field_changes(self):
        session = make_session()
        session.edit_record("CUS-001", name="Acme Inc")

        event = session.timeline.events[-1]
        assert event.action == AuditAction.MODIFIED
        assert event.changes["name"].old_value == "Acme Corp"
        assert event.changes["name"].new_value == "Acme Inc"

        session.undo()
        assert session.document.find("CUS-001").name == "Acme Corp"

    def test_noop_edit_records_nothing(self):
        session = make_session()
        session.edit_record("CUS-001", name="Acme Corp")
        assert not session.history.can_undo
        assert session.timeline.event_count == 0

    def test_unknown_record_raises(self):
        session = make_session()
        with pytest.raises(KeyError):
            session.edit_record("CUS-999", name="x")

    def test_cancelled_confirmation_changes_nothing(self):
        session = make_session()
        assert session.delete_record("CUS-001", confirm=lambda: False) is False
        assert session.add_record("Customer", "New", confirm=lambda: False) is None

        assert names(session) == ["Acme Corp", "City Bakery"]
        assert not session.history.can_undo
        assert session.timeline.event_count == 0
        assert session.add_record("Customer", "New").record_id == "CUS-003"

    def test_confirmed_delete(self):
        session = make_session()
        assert session.delete_record("CUS-001", confirm=lambda: True)
        assert names(session) == ["City Bakery"]
        assert session.timeline.events[-1].action == AuditAction.DELETED


class TestUndoPaths:
    def test_undo_event_then_redo_restores_document(self):
        session = make_session()
        session.delete_record("CUS-001")
        event = session.timeline.events[-1]

        assert session.undo_event(event)
        assert names(session) == ["Acme Corp", "City Bakery"]

        assert session.redo_event(event)
        assert names(session) == ["City Bakery"]
        assert not event.is_undone

    def test_selective_undo_of_older_event(self):
        session = make_session()
        session.add_record("Customer", "First")
        session.add_record("Customer", "Second")
        first_event = session.timeline.events[0]

        assert session.undo_event(first_event)
        assert names(session) == ["Acme Corp", "City Bakery", "Second"]
        assert session.history.undo_history == ["Add customer 'Second'"]

        session.undo()
        assert names(session) == ["Acme Corp", "City Bakery"]
        assert not session.history.can_undo

    def test_undo_event_rejected_while_later_edit_is_active(self):
        session = make_session()
        session.add_record("Customer", "Fresh")
        session.edit_record("CUS-003", notes="VIP")
        added = session.timeline.events[0]

        assert session.undo_event(added) is False
        assert "Fresh" in names(session)

    def test_redo_of_undone_add_reuses_no_id(self):
        session = make_session()
        session.add_record("Customer", "Temp")
        added = session.timeline.events[-1]
        session.undo_event(added)

        replacement = session.add_record("Customer", "Other")
        assert replacement.record_id == "CUS-004"
        assert session.redo_event(added)
        ids = [r.record_id for r in session.document.records]
        assert len(ids) == len(set(ids))

    def test_undo_event_blocked_while_later_edit_awaits_redo(self):
        session = make_session()
        record = session.add_record("Customer", "X")
        session.edit_record(record.record_id, name="X2")
        added = session.timeline.events[0]

        assert session.undo()
        assert not session.timeline.can_undo_event(added)
        assert session.undo_event(added) is False

        assert session.history.can_redo
        assert session.redo()
        assert session.document.find(record.record_id).name == "X2"

    def test_undo_event_blocked_while_later_delete_awaits_redo(self):
        session = make_session()
        record = session.add_record("Customer", "X")
        session.delete_record(record.record_id)
        added = session.timeline.events[0]

        assert session.undo()
        assert session.undo_event(added) is False
        assert session.redo()
        assert "X" not in names(session)

    def test_undo_event_allowed_once_redo_branch_is_discarded(self):
        session = make_session()
        record = session.add_record("Customer", "X")
        session.edit_record(record.record_id, name="X2")
        added = session.timeline.events[0]

        session.undo()
        session.add_record("Customer", "Y")
        assert not session.history.can_redo
        assert session.undo_event(added)
        assert names(session) == ["Acme Corp", "City Bakery", "Y"]

    def test_failed_undo_event_reports_false(self):
        session = make_session()

        def fail():
            raise RuntimeError("disk full")

        event = session.execute(DelegateAction("Edit customer 'Acme Corp'", lambda: None, fail))
        assert session.undo_event(event) is False
        assert not event.is_undone
        assert session.history.can_undo

    def test_global_undo_redo(self):
        session = make_session()
        session.add_record("Customer", "A")
        session.delete_record("CUS-002")

        assert session.undo()
        assert names(session) == ["Acme Corp", "City Bakery", "A"]
        assert session.redo()
        assert names(session) == ["Acme Corp", "A"]


class TestSessionState:
    def test_unsaved_changes(self):
        session = make_session()
        assert not session.has_unsaved_changes
        session.add_record("Customer", "A")
        assert session.has_unsaved_changes
        session.mark_saved()
        assert not session.has_unsaved_changes
        assert not session.document.modified

    def test_search_records(self):
        session = make_session()
        assert [r.name for r in session.search_records("acme")] == ["Acme Corp"]

    def test_close_clears_history(self):
        session = make_session()
        session.add_record("Customer", "A")
        session.close()
        assert not session.history.can_undo
        assert session.timeline.event_count == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
