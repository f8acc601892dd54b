"""Audit sink port: where query snapshots are published for observers.

The custody core writes records to the port and never depends on how a
sink stores or transmits them; sinks are swapped via configuration.
"""

from abc import ABC, abstractmethod

from custody.audit.records import AuditRecord


class AuditSinkPort(ABC):
    """Abstract interface for audit sinks."""

    @abstractmethod
    def emit(self, record: AuditRecord) -> None:
        """Append a record to the sink. Must not mutate the record."""
        ...
