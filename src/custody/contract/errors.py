"""Custody rule violations.

Every error aborts the attempted operation and carries a stable ``kind``
for programmatic handling alongside a human-readable ``reason``. They are
Protean ``ValidationError`` subclasses, so Protean's exception handlers
treat them as rule violations.
"""

from protean.exceptions import ValidationError


class CustodyError(ValidationError):
    kind = "custody_error"
    field = "contract"

    def __init__(self, reason: str, field: str | None = None) -> None:
        self.reason = reason
        super().__init__({field or self.field: [reason]})


class Unauthorized(CustodyError):
    """Caller is not the party the operation requires."""

    kind = "unauthorized"
    field = "caller"


class InvalidPhase(CustodyError):
    """Contract phase or shipment state does not permit the operation."""

    kind = "invalid_phase"
    field = "state"


class ItemAlreadyAssigned(CustodyError):
    kind = "item_already_assigned"
    field = "item_indices"


class DestinationMismatch(CustodyError):
    kind = "destination_mismatch"
    field = "location"


class InvalidStatusCode(CustodyError):
    kind = "invalid_status_code"
    field = "status_code"


class UnknownReference(CustodyError):
    """An item index or shipment number that does not exist."""

    kind = "not_found"
    field = "reference"
