from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional


class AuditAction(str, Enum):
    ADDED = "Added"
    MODIFIED = "Modified"
    DELETED = "Deleted"
    UNDONE = "Undone"
    REDONE = "Redone"

    @property
    def is_meta(self) -> bool:
        return self in (AuditAction.UNDONE, AuditAction.REDONE)


@dataclass
class FieldChange:
    old_value: Optional[str] = None
    new_value: Optional[str] = None


@dataclass(eq=False)
class AuditEvent:
    event_id: str
    description: str
    action: AuditAction
    entity_type: str = ""
    entity_id: str = ""
    entity_name: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    is_undone: bool = False
    changes: Dict[str, FieldChange] = field(default_factory=dict)
    related_event_id: Optional[str] = None      # meta-events: the event undone/redone
    linked_action_description: Optional[str] = None

    @property
    def is_meta(self) -> bool:
        return self.action.is_meta

    @property
    def entity_key(self) -> Optional[tuple]:
        """(type, id-or-name) used to order undo/redo per entity; None if unknown."""
        ident = self.entity_id or self.entity_name
        if not self.entity_type or not ident:
            return None
        return (self.entity_type.lower(), ident.lower())
