"""Reversible actions: the unit of work recorded by the undo/redo history."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, runtime_checkable

from models.audit import AuditAction, FieldChange
from models.record import CompanyDocument, Record


@runtime_checkable
class ReversibleAction(Protocol):
    """A named pair of effect/un-effect operations for one committed mutation."""

    description: str

    def apply(self) -> None:
        ...

    def unapply(self) -> None:
        ...


class DelegateAction:
    """Action backed by two callables, typically closures over the mutated state."""

    def __init__(self, description: str, apply_fn: Callable[[], Any], unapply_fn: Callable[[], Any]):
        self.description = description
        self._apply_fn = apply_fn
        self._unapply_fn = unapply_fn

    def apply(self):
        self._apply_fn()

    def unapply(self):
        self._unapply_fn()

    def __repr__(self):
        return f"DelegateAction({self.description!r})"


class CompositeAction:
    """Groups several actions so they undo and redo as one step."""

    def __init__(self, description: str, actions: Iterable[ReversibleAction]):
        self.description = description
        self.actions: List[ReversibleAction] = list(actions)

    def apply(self):
        for action in self.actions:
            action.apply()

    def unapply(self):
        for action in reversed(self.actions):
            action.unapply()


class PropertyChangeAction:
    """Sets a single value through a setter; unapply restores the old value."""

    def __init__(self, description: str, setter: Callable[[Any], Any], old_value: Any, new_value: Any):
        self.description = description
        self._setter = setter
        self.old_value = old_value
        self.new_value = new_value

    def apply(self):
        self._setter(self.new_value)

    def unapply(self):
        self._setter(self.old_value)


# --- Record commands ---
# Each command carries its full before/after payload, so apply/unapply depend
# only on that payload and the target document.

def describe(verb: str, entity_type: str, name: str) -> str:
    """Build the standard action description, e.g. "Add customer 'Acme Corp'"."""
    return f"{verb} {entity_type.lower()} '{name}'"


@dataclass(eq=False)
class AddRecord:
    document: CompanyDocument
    record: Record
    index: Optional[int] = None

    kind = AuditAction.ADDED

    @property
    def description(self) -> str:
        return describe("Add", self.record.entity_type, self.record.name)

    @property
    def entity_type(self) -> str:
        return self.record.entity_type

    @property
    def entity_id(self) -> str:
        return self.record.record_id

    @property
    def entity_name(self) -> str:
        return self.record.name

    def field_changes(self) -> Dict[str, FieldChange]:
        return {}

    def apply(self):
        self.document.insert(self.record, self.index)

    def unapply(self):
        self.document.remove(self.record.record_id)


@dataclass(eq=False)
class DeleteRecord:
    document: CompanyDocument
    record: Record
    index: int = 0

    kind = AuditAction.DELETED

    @property
    def description(self) -> str:
        return describe("Delete", self.record.entity_type, self.record.name)

    @property
    def entity_type(self) -> str:
        return self.record.entity_type

    @property
    def entity_id(self) -> str:
        return self.record.record_id

    @property
    def entity_name(self) -> str:
        return self.record.name

    def field_changes(self) -> Dict[str, FieldChange]:
        return {}

    def apply(self):
        self.document.remove(self.record.record_id)

    def unapply(self):
        self.document.insert(self.record, self.index)


@dataclass(eq=False)
class EditRecord:
    document: CompanyDocument
    before: Record
    after: Record
    _changes: Dict[str, FieldChange] = field(init=False, repr=False)

    kind = AuditAction.MODIFIED

    def __post_init__(self):
        old, new = self.before.display_values(), self.after.display_values()
        self._changes = {
            name: FieldChange(old_value=old[name], new_value=new[name])
            for name in old
            if old[name] != new[name]
        }

    @property
    def description(self) -> str:
        # Named after the pre-edit record so a rename reads "Edit customer 'Old'"
        return describe("Edit", self.before.entity_type, self.before.name)

    @property
    def entity_type(self) -> str:
        return self.before.entity_type

    @property
    def entity_id(self) -> str:
        return self.before.record_id

    @property
    def entity_name(self) -> str:
        return self.after.name

    def field_changes(self) -> Dict[str, FieldChange]:
        return dict(self._changes)

    def apply(self):
        self.document.replace(self.after)

    def unapply(self):
        self.document.replace(self.before)
