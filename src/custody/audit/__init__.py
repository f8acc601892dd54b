"""Audit sink abstraction: pluggable publication of audit records."""

import os

_sink_instance = None


def get_audit_sink():
    """Return the configured audit sink (singleton).

    Uses InMemoryAuditSink by default. Set the AUDIT_SINK environment
    variable to ``log`` to publish records through structlog instead.
    """
    global _sink_instance
    if _sink_instance is None:
        sink = os.environ.get("AUDIT_SINK", "memory")
        if sink == "memory":
            from custody.audit.memory_sink import InMemoryAuditSink

            _sink_instance = InMemoryAuditSink()
        elif sink == "log":
            from custody.audit.logging_sink import LoggingAuditSink

            _sink_instance = LoggingAuditSink()
        else:
            raise ValueError(f"Unknown audit sink: {sink}")
    return _sink_instance


def reset_audit_sink():
    """Reset the audit sink singleton (useful for testing)."""
    global _sink_instance
    _sink_instance = None
