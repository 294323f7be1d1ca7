from models.record import Record, CompanyDocument
from models.audit import AuditEvent, AuditAction, FieldChange
