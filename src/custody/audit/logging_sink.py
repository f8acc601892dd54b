"""Logging audit sink: publishes each record as a structured log line."""

import structlog

from custody.audit.port import AuditSinkPort
from custody.audit.records import AuditRecord

logger = structlog.get_logger("custody.audit")


class LoggingAuditSink(AuditSinkPort):
    def emit(self, record: AuditRecord) -> None:
        logger.info("audit_record", kind=type(record).__name__, **record.model_dump())
