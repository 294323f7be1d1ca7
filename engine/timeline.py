"""Audit timeline: chronological event log with selective (out-of-order) undo/redo.

Every committed mutation appends an AuditEvent. An event linked to a reversible
action can be undone or redone individually from the version history view.
The timeline holds a back-reference to the LinearHistory so both views stay
consistent: undoing an event takes its action off the undo stack, redoing it
puts the action back, and global Ctrl+Z / Ctrl+Y on a linked action flips the
event's state and logs the matching meta-event.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple, Union

import pandas as pd

from config.defaults import (
    DESCRIPTION_VERBS, EVENT_ID_PREFIX, REDO_DESCRIPTION_PREFIX, UNDO_DESCRIPTION_PREFIX,
)
from engine.actions import ReversibleAction
from engine.history import HistoryChange, LinearHistory
from models.audit import AuditAction, AuditEvent, FieldChange

logger = logging.getLogger(__name__)

TimelineObserver = Callable[[Optional[AuditEvent]], None]


def generate_event_id() -> str:
    return f"{EVENT_ID_PREFIX}{uuid.uuid4().hex}"


def parse_action_description(description: Optional[str]) -> Tuple[AuditAction, str, str]:
    """Derive (action, entity type, entity name) from e.g. "Add customer 'Acme Corp'"."""
    action = AuditAction.MODIFIED
    if not description or not description.strip():
        return action, "", ""

    desc = description.strip()
    for verb, action_name in DESCRIPTION_VERBS:
        if desc.lower().startswith(verb.lower()):
            action = AuditAction[action_name]
            desc = desc[len(verb):]
            break

    head, sep, remainder = desc.partition(" ")
    entity_type = head[:1].upper() + head[1:]
    if not sep:
        return action, entity_type, ""

    remainder = remainder.strip()
    start = remainder.find("'")
    if start < 0:
        return action, entity_type, remainder
    end = remainder.find("'", start + 1)
    entity_name = remainder[start + 1:end] if end > start else ""
    return action, entity_type, entity_name


class AuditTimeline:
    def __init__(self, history: LinearHistory):
        self._history = history
        self._events: List[AuditEvent] = []
        self._actions: Dict[str, ReversibleAction] = {}   # event id -> linked action
        self._observers: List[TimelineObserver] = []
        self._syncing = False
        self._unsubscribe_history = history.subscribe(self._on_history_change)

    # --- Recording ---

    def record_event(
        self,
        description: str,
        entity_type: str,
        entity_name: str,
        action: Union[AuditAction, str],
        *,
        action_ref: Optional[ReversibleAction] = None,
        entity_id: str = "",
        changes: Optional[Dict[str, FieldChange]] = None,
        timestamp: Optional[datetime] = None,
    ) -> AuditEvent:
        """Append a new active event."""
        event = AuditEvent(
            event_id=generate_event_id(),
            description=description,
            action=AuditAction(action),
            entity_type=entity_type or "",
            entity_id=entity_id or "",
            entity_name=entity_name or "",
            timestamp=timestamp or datetime.now(timezone.utc),
            changes=dict(changes or {}),
            linked_action_description=action_ref.description if action_ref else None,
        )
        self._events.append(event)
        if action_ref is not None:
            self._actions[event.event_id] = action_ref
        logger.debug("Audit event %s: %s", event.event_id, description)
        self._notify(event)
        return event

    def record_from_action(self, action: ReversibleAction, timestamp: Optional[datetime] = None) -> AuditEvent:
        """Record an event for an action, taking metadata from the action when it carries any."""
        kind = getattr(action, "kind", None)
        if isinstance(kind, AuditAction):
            return self.record_event(
                action.description,
                action.entity_type,
                action.entity_name,
                kind,
                action_ref=action,
                entity_id=action.entity_id,
                changes=action.field_changes(),
                timestamp=timestamp,
            )
        kind, entity_type, entity_name = parse_action_description(action.description)
        return self.record_event(
            action.description, entity_type, entity_name, kind,
            action_ref=action, timestamp=timestamp,
        )

    # --- Selective undo/redo ---

    def linked_action(self, event: AuditEvent) -> Optional[ReversibleAction]:
        return self._actions.get(event.event_id)

    def can_undo_event(self, event: AuditEvent) -> bool:
        if event.is_undone or event.is_meta:
            return False
        action = self._actions.get(event.event_id)
        if action is None or not self._history.contains(action):
            return False
        if self._later_action_awaits_redo(event):
            return False
        return self._latest_active_for(event) is event

    def can_redo_event(self, event: AuditEvent) -> bool:
        if not event.is_undone or event.is_meta:
            return False
        if event.event_id not in self._actions:
            return False
        return self._oldest_undone_for(event) is event

    def undo_event(self, event: AuditEvent) -> bool:
        """Unapply the event's action and take it off the undo stack."""
        if event.is_undone or event.is_meta:
            logger.debug("Event %s is not undoable", event.event_id)
            return False
        action = self._actions.get(event.event_id)
        if action is None:
            logger.debug("Event %s has no linked action", event.event_id)
            return False

        if not self._run(action.unapply, event):
            return False
        self._syncing = True
        try:
            if not self._history.remove_from_undo_stack(action):
                logger.warning("Action for %r no longer in undo stack", event.description)
        finally:
            self._syncing = False

        self._mark(event, undone=True)
        return True

    def redo_event(self, event: AuditEvent) -> bool:
        """Reapply an undone event's action and put it back on the undo stack."""
        if not event.is_undone or event.is_meta:
            logger.debug("Event %s is not redoable", event.event_id)
            return False
        action = self._actions.get(event.event_id)
        if action is None:
            logger.debug("Event %s has no linked action", event.event_id)
            return False

        if not self._run(action.apply, event):
            return False
        self._syncing = True
        try:
            self._history.remove_from_redo_stack(action)
            self._history.restore(action)
        finally:
            self._syncing = False

        self._mark(event, undone=False)
        return True

    # --- Queries ---

    @property
    def events(self) -> List[AuditEvent]:
        return list(self._events)

    @property
    def event_count(self) -> int:
        return len(self._events)

    def get_event(self, event_id: str) -> Optional[AuditEvent]:
        return next((e for e in self._events if e.event_id == event_id), None)

    def get_filtered_events(
        self,
        action_filter: Optional[Union[AuditAction, str]] = None,
        entity_type_filter: Optional[str] = None,
        from_date: Optional[datetime] = None,
        to_date: Optional[datetime] = None,
    ) -> List[AuditEvent]:
        """Events matching exact structural filters, in insertion order.

        Free-text search is not done here; callers rank the result with
        engine.relevance.
        """
        results = self._events
        if action_filter not in (None, "", "All"):
            wanted = AuditAction(action_filter)
            results = [e for e in results if e.action == wanted]
        if entity_type_filter and entity_type_filter.strip() not in ("", "All"):
            wanted_type = entity_type_filter.strip().lower()
            results = [e for e in results if e.entity_type.lower() == wanted_type]
        if from_date is not None:
            results = [e for e in results if e.timestamp >= from_date]
        if to_date is not None:
            results = [e for e in results if e.timestamp <= to_date]
        return list(results)

    def get_entity_types(self) -> List[str]:
        return sorted({e.entity_type for e in self._events if e.entity_type})

    def meta_events_for(self, event: AuditEvent) -> List[AuditEvent]:
        """Undo/redo meta-events that refer to `event`, oldest first."""
        related = [e for e in self._events if e.related_event_id == event.event_id]
        return sorted(related, key=lambda e: e.timestamp)

    def to_frame(self) -> pd.DataFrame:
        rows = [{
            "Timestamp": e.timestamp.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
            "Action": e.action.value,
            "Entity Type": e.entity_type,
            "Entity ID": e.entity_id,
            "Entity": e.entity_name,
            "Description": e.description,
            "Undone": e.is_undone,
        } for e in self._events]
        return pd.DataFrame(rows, columns=[
            "Timestamp", "Action", "Entity Type", "Entity ID", "Entity", "Description", "Undone",
        ])

    # --- Lifecycle ---

    def clear(self):
        self._events.clear()
        self._actions.clear()
        self._notify(None)

    def detach(self):
        """Stop following the linear history."""
        self._unsubscribe_history()

    def subscribe(self, callback: TimelineObserver) -> Callable[[], None]:
        self._observers.append(callback)

        def unsubscribe():
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    # --- Internals ---

    def _run(self, fn: Callable[[], None], event: AuditEvent) -> bool:
        try:
            fn()
        except Exception:
            logger.exception("Selective undo/redo failed for %r", event.description)
            return False
        return True

    def _mark(self, event: AuditEvent, undone: bool):
        event.is_undone = undone
        prefix = UNDO_DESCRIPTION_PREFIX if undone else REDO_DESCRIPTION_PREFIX
        meta = AuditEvent(
            event_id=generate_event_id(),
            description=f"{prefix}{event.description}",
            action=AuditAction.UNDONE if undone else AuditAction.REDONE,
            entity_type=event.entity_type,
            entity_id=event.entity_id,
            entity_name=event.entity_name,
            related_event_id=event.event_id,
            linked_action_description=event.linked_action_description,
        )
        self._events.append(meta)
        logger.info("%s", meta.description)
        self._notify(meta)

    def _on_history_change(self, change: HistoryChange):
        if self._syncing or change.kind not in ("undo", "redo"):
            return
        event = self._event_for_action(change.action)
        if event is None:
            return
        undone = change.kind == "undo"
        if event.is_undone != undone:
            self._mark(event, undone=undone)

    def _event_for_action(self, action: Optional[ReversibleAction]) -> Optional[AuditEvent]:
        if action is None:
            return None
        for event in reversed(self._events):
            if not event.is_meta and self._actions.get(event.event_id) is action:
                return event
        return None

    def _entity_events(self, event: AuditEvent) -> List[AuditEvent]:
        key = event.entity_key
        if key is None:
            return [event]
        return [e for e in self._events if not e.is_meta and e.entity_key == key]

    def _latest_active_for(self, event: AuditEvent) -> Optional[AuditEvent]:
        # Insertion order breaks timestamp ties
        active = [(e.timestamp, i, e) for i, e in enumerate(self._entity_events(event)) if not e.is_undone]
        return max(active, key=lambda t: t[:2])[2] if active else None

    def _oldest_undone_for(self, event: AuditEvent) -> Optional[AuditEvent]:
        undone = [(e.timestamp, i, e) for i, e in enumerate(self._entity_events(event)) if e.is_undone]
        return min(undone, key=lambda t: t[:2])[2] if undone else None

    def _later_action_awaits_redo(self, event: AuditEvent) -> bool:
        # A later change to the same entity still on the redo stack depends on this one
        entity_events = self._entity_events(event)
        position = next(i for i, e in enumerate(entity_events) if e is event)
        for i, other in enumerate(entity_events):
            if other is event or (other.timestamp, i) < (event.timestamp, position):
                continue
            action = self._actions.get(other.event_id)
            if action is not None and self._history.in_redo_stack(action):
                return True
        return False

    def _notify(self, event: Optional[AuditEvent]):
        for callback in list(self._observers):
            callback(event)
