from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import Dict, List, Optional


@dataclass
class Record:
    record_id: str
    entity_type: str       # "Customer", "Supplier", "Product", "Employee"
    name: str
    email: str = ""
    phone: str = ""
    notes: str = ""
    created_at: datetime = field(default_factory=datetime.now)

    def copy_with(self, **changes) -> "Record":
        return replace(self, **changes)

    def display_values(self) -> Dict[str, str]:
        """Editable fields as display strings, keyed by field name."""
        return {
            f.name: str(getattr(self, f.name))
            for f in fields(self)
            if f.name not in ("record_id", "entity_type", "created_at")
        }


@dataclass
class CompanyDocument:
    """The single open document: an ordered list of records."""
    name: str = "Untitled"
    records: List[Record] = field(default_factory=list)
    modified: bool = False
    id_counters: Dict[str, int] = field(default_factory=dict)

    def index_of(self, record_id: str) -> Optional[int]:
        for i, r in enumerate(self.records):
            if r.record_id == record_id:
                return i
        return None

    def find(self, record_id: str) -> Record:
        idx = self.index_of(record_id)
        if idx is None:
            raise KeyError(f"No record with id '{record_id}'")
        return self.records[idx]

    def insert(self, record: Record, index: Optional[int] = None):
        if index is None or index > len(self.records):
            self.records.append(record)
        else:
            self.records.insert(index, record)
        self.modified = True

    def remove(self, record_id: str) -> int:
        """Remove a record and return the position it occupied."""
        idx = self.index_of(record_id)
        if idx is None:
            raise KeyError(f"No record with id '{record_id}'")
        del self.records[idx]
        self.modified = True
        return idx

    def replace(self, record: Record):
        idx = self.index_of(record.record_id)
        if idx is None:
            raise KeyError(f"No record with id '{record.record_id}'")
        self.records[idx] = record
        self.modified = True

    def records_of_type(self, entity_type: str) -> List[Record]:
        return [r for r in self.records if r.entity_type == entity_type]

    def next_id(self, prefix: str) -> str:
        # Ids are never reissued, even after a delete, so an undone add can be redone safely
        highest = self.id_counters.get(prefix, 0)
        for r in self.records:
            head, _, tail = r.record_id.partition("-")
            if head == prefix and tail.isdigit():
                highest = max(highest, int(tail))
        self.id_counters[prefix] = highest + 1
        return f"{prefix}-{highest + 1:03d}"
