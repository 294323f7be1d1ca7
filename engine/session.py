"""Per-document session: the document plus its linear history and audit timeline.

All committed mutations go through here so the history stack, the audit
timeline and the document change together.
"""

import logging
from typing import Callable, List, Optional

from config.defaults import MAX_HISTORY_SIZE, RECORD_ID_PREFIXES
from engine.actions import AddRecord, DeleteRecord, EditRecord, ReversibleAction
from engine.history import LinearHistory
from engine.list_filter import search_records
from engine.timeline import AuditTimeline
from models.audit import AuditEvent
from models.record import CompanyDocument, Record

logger = logging.getLogger(__name__)

Confirm = Callable[[], bool]


class DocumentSession:
    def __init__(self, document: Optional[CompanyDocument] = None, max_history_size: int = MAX_HISTORY_SIZE):
        self.document = document or CompanyDocument()
        self.history = LinearHistory(max_history_size=max_history_size)
        self.timeline = AuditTimeline(self.history)

    # --- Committing mutations ---

    def execute(self, action: ReversibleAction, confirm: Optional[Confirm] = None) -> Optional[AuditEvent]:
        """Apply an action, push it on the undo stack and log it on the timeline.

        If `confirm` is given and returns False nothing is changed and None is
        returned.
        """
        if confirm is not None and not confirm():
            logger.info("Cancelled: %s", action.description)
            return None
        action.apply()
        self.history.record(action)
        event = self.timeline.record_from_action(action)
        logger.info("%s", action.description)
        return event

    def add_record(
        self,
        entity_type: str,
        name: str,
        confirm: Optional[Confirm] = None,
        **values,
    ) -> Optional[Record]:
        # Asked before an id is allocated so a cancel leaves the document untouched
        if confirm is not None and not confirm():
            logger.info("Cancelled: add %s '%s'", entity_type.lower(), name)
            return None
        prefix = RECORD_ID_PREFIXES.get(entity_type, entity_type[:3].upper())
        record = Record(
            record_id=self.document.next_id(prefix),
            entity_type=entity_type,
            name=name,
            **values,
        )
        self.execute(AddRecord(self.document, record, index=len(self.document.records)))
        return record

    def edit_record(self, record_id: str, confirm: Optional[Confirm] = None, **changes) -> Optional[Record]:
        """Change fields of a record; a no-op edit records nothing."""
        before = self.document.find(record_id)
        after = before.copy_with(**changes)
        action = EditRecord(self.document, before, after)
        if not action.field_changes():
            return before
        if self.execute(action, confirm) is None:
            return None
        return after

    def delete_record(self, record_id: str, confirm: Optional[Confirm] = None) -> bool:
        record = self.document.find(record_id)
        action = DeleteRecord(self.document, record, index=self.document.index_of(record_id))
        return self.execute(action, confirm) is not None

    # --- Undo / redo ---

    def undo(self) -> bool:
        return self.history.undo()

    def redo(self) -> bool:
        return self.history.redo()

    def undo_event(self, event: AuditEvent) -> bool:
        if not self.timeline.can_undo_event(event):
            return False
        return self.timeline.undo_event(event)

    def redo_event(self, event: AuditEvent) -> bool:
        if not self.timeline.can_redo_event(event):
            return False
        return self.timeline.redo_event(event)

    # --- Queries ---

    @property
    def has_unsaved_changes(self) -> bool:
        return not self.history.is_at_saved_state

    def search_records(self, query: str, entity_type: Optional[str] = None) -> List[Record]:
        return search_records(self.document.records, query, entity_type)

    # --- Lifecycle ---

    def mark_saved(self):
        self.history.mark_saved()
        self.document.modified = False

    def close(self):
        """Drop all history state; the session is unusable afterwards."""
        self.history.clear()
        self.timeline.clear()
        self.timeline.detach()
