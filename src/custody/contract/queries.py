"""Read-only snapshots of a contract for external consumption.

Queries need no authorization and never persist anything: each call loads
a fresh copy of the aggregate, builds a frozen record, writes it to the
audit sink and returns it.
"""

from protean.utils.globals import current_domain
from pydantic import BaseModel, ConfigDict

from custody.audit import get_audit_sink
from custody.audit.port import AuditSinkPort
from custody.audit.records import CourierHistory, ItemQuery, ShipmentQuery
from custody.contract.contract import Contract, Identity, Shipment, ShipmentState

_SUPPLIER_MANAGED = {ShipmentState.PREPARE, ShipmentState.SIGNED}


class ContractCounts(BaseModel):
    model_config = ConfigDict(frozen=True)

    contract_id: str
    phase: str
    item_count: int
    shipment_count: int
    courier_count: int
    pending_count: int
    satisfied: bool


def managing_party(contract: Contract, shipment: Shipment) -> Identity | None:
    """The party currently responsible for a shipment's goods."""
    state = ShipmentState(shipment.state)
    if state in _SUPPLIER_MANAGED:
        return contract.supplier
    if state == ShipmentState.DELIVERED:
        return contract.owner
    return shipment.courier


class QueryService:
    def __init__(self, contract_id: str, sink: AuditSinkPort | None = None):
        self.contract_id = str(contract_id)
        self.sink = sink if sink is not None else get_audit_sink()

    def _contract(self) -> Contract:
        return current_domain.repository_for(Contract).get(self.contract_id)

    def item_snapshot(self, index: int) -> ItemQuery:
        contract = self._contract()
        item = contract.item_at(index)

        current_location = None
        managed_by = None
        if item.shipment_id:
            shipment = contract.shipment_numbered(item.shipment_id)
            current_location = shipment.current_location
            party = managing_party(contract, shipment)
            managed_by = party.name if party else None

        record = ItemQuery(
            contract_id=self.contract_id,
            index=item.index,
            name=item.name,
            description=item.description,
            unit=item.unit,
            volume=item.volume,
            price=item.price,
            shipment_id=item.shipment_id,
            current_location=current_location,
            managed_by=managed_by,
        )
        self.sink.emit(record)
        return record

    def shipment_snapshot(self, shipment_id: int) -> ShipmentQuery:
        shipment = self._contract().shipment_numbered(shipment_id)
        record = ShipmentQuery(
            contract_id=self.contract_id,
            shipment_id=shipment.number,
            etd=shipment.etd,
            eta=shipment.eta,
            atd=shipment.atd,
            ata=shipment.ata,
            state=ShipmentState(shipment.state).label,
            origin=shipment.origin,
            destination=shipment.destination,
            current_location=shipment.current_location,
            courier_name=shipment.courier.name if shipment.courier else None,
        )
        self.sink.emit(record)
        return record

    def courier_holding(self, courier_credential: str) -> CourierHistory:
        # An unknown courier reads as an empty ledger entry
        holding = self._contract().holding_for(courier_credential)
        record = CourierHistory(
            contract_id=self.contract_id,
            courier_name=holding.courier.name if holding else None,
            item_indices=holding.indices if holding else [],
        )
        self.sink.emit(record)
        return record

    def counts(self) -> ContractCounts:
        contract = self._contract()
        return ContractCounts(
            contract_id=self.contract_id,
            phase=contract.phase,
            item_count=len(contract.items or []),
            shipment_count=len(contract.shipments or []),
            courier_count=len({h.courier.credential for h in (contract.holdings or [])}),
            pending_count=contract.pending_count or 0,
            satisfied=contract.is_satisfied(),
        )
