"""Audit record shapes written to the audit sink.

Each record is a flat, immutable snapshot. ``ContractStateUpdated`` is part
of the published contract with observers but no operation emits it.
"""

from pydantic import BaseModel, ConfigDict


class AuditRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    contract_id: str


class ItemQuery(AuditRecord):
    index: int
    name: str
    description: str | None = None
    unit: str | None = None
    volume: int
    price: int
    shipment_id: int
    current_location: str | None = None
    managed_by: str | None = None


class ShipmentQuery(AuditRecord):
    shipment_id: int
    etd: int
    eta: int
    atd: int
    ata: int
    state: str
    origin: str | None = None
    destination: str | None = None
    current_location: str | None = None
    courier_name: str | None = None


class CourierHistory(AuditRecord):
    courier_name: str | None = None
    item_indices: list[int]


class ContractStateUpdated(AuditRecord):
    phase: str


AUDIT_RECORD_KINDS = {
    "ItemQuery": ItemQuery,
    "ShipmentQuery": ShipmentQuery,
    "CourierHistory": CourierHistory,
    "ContractStateUpdated": ContractStateUpdated,
}
