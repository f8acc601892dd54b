"""In-memory audit sink: keeps records in emission order for tests and development."""

from custody.audit.port import AuditSinkPort
from custody.audit.records import AuditRecord


class InMemoryAuditSink(AuditSinkPort):
    def __init__(self):
        self.records: list[AuditRecord] = []

    def emit(self, record: AuditRecord) -> None:
        self.records.append(record)

    def of_kind(self, kind: type[AuditRecord]) -> list[AuditRecord]:
        return [r for r in self.records if isinstance(r, kind)]

    def clear(self) -> None:
        self.records.clear()
