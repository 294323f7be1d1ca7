"""Generate a sample bookkeeping document for the demo app."""

import random
from datetime import datetime, timedelta

from config.defaults import RECORD_ID_PREFIXES
from models.record import CompanyDocument, Record


SAMPLE_RECORDS = {
    "Customer": [
        ("Acme Corp", "billing@acme.example", "555-0100"),
        ("TechStart Inc", "ap@techstart.example", "555-0101"),
        ("Global Trade LLC", "finance@globaltrade.example", "555-0102"),
        ("City Bakery", "owner@citybakery.example", "555-0103"),
        ("River Cafe", "hello@rivercafe.example", "555-0104"),
    ],
    "Supplier": [
        ("Office Depot", "orders@officedepot.example", "555-0200"),
        ("Staples Direct", "sales@staples.example", "555-0201"),
        ("Grainger", "support@grainger.example", "555-0202"),
    ],
    "Product": [
        ("Widget A", "", ""),
        ("Premium Service Plan", "", ""),
        ("Laptop Stand", "", ""),
        ("USB Hub", "", ""),
    ],
    "Employee": [
        ("John Smith", "john.smith@company.example", "555-0300"),
        ("Maria Garcia", "maria.garcia@company.example", "555-0301"),
        ("David Chen", "david.chen@company.example", "555-0302"),
    ],
}


def generate_sample_document(name: str = "Sample Company") -> CompanyDocument:
    """Build a document with a handful of records of each entity type."""
    random.seed(42)
    now = datetime.now()
    document = CompanyDocument(name=name)
    for entity_type, rows in SAMPLE_RECORDS.items():
        prefix = RECORD_ID_PREFIXES[entity_type]
        for i, (record_name, email, phone) in enumerate(rows, start=1):
            document.records.append(Record(
                record_id=f"{prefix}-{i:03d}",
                entity_type=entity_type,
                name=record_name,
                email=email,
                phone=phone,
                created_at=now - timedelta(days=random.randint(1, 90)),
            ))
    return document
