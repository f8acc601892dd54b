"""Shipment board: one row per shipment across all contracts."""

from protean.core.projector import on
from protean.fields import Boolean, Identifier, Integer, String
from protean.utils.globals import current_domain

from custody.contract.contract import Contract, ShipmentState
from custody.contract.events import (
    ShipmentCreated,
    ShipmentHandedOver,
    ShipmentReceived,
    ShipmentSigned,
    ShipmentStatusUpdated,
)
from custody.domain import custody


def board_key_for(contract_id, shipment_id) -> str:
    return f"{contract_id}:{shipment_id}"


@custody.projection
class ShipmentBoardView:
    board_key = Identifier(identifier=True, required=True)
    contract_id = Identifier(required=True)
    shipment_id = Integer(required=True)
    courier_name = String()
    origin = String()
    destination = String()
    current_location = String()
    state = String(required=True)
    atd = Integer(default=0)
    ata = Integer(default=0)
    delivered = Boolean(default=False)


@custody.projector(projector_for=ShipmentBoardView, aggregates=[Contract])
class ShipmentBoardProjector:
    def _set_state(self, event, state: ShipmentState, **changes):
        repo = current_domain.repository_for(ShipmentBoardView)
        view = repo.get(board_key_for(event.contract_id, event.shipment_id))
        view.state = state.value
        for field_name, value in changes.items():
            setattr(view, field_name, value)
        repo.add(view)

    @on(ShipmentCreated)
    def on_shipment_created(self, event):
        current_domain.repository_for(ShipmentBoardView).add(
            ShipmentBoardView(
                board_key=board_key_for(event.contract_id, event.shipment_id),
                contract_id=event.contract_id,
                shipment_id=event.shipment_id,
                courier_name=event.courier_name,
                origin=event.origin,
                destination=event.destination,
                current_location=event.current_location,
                state=ShipmentState.PREPARE.value,
            )
        )

    @on(ShipmentSigned)
    def on_shipment_signed(self, event):
        self._set_state(event, ShipmentState.SIGNED)

    @on(ShipmentHandedOver)
    def on_shipment_handed_over(self, event):
        self._set_state(event, ShipmentState.HANDED_OVER)

    @on(ShipmentStatusUpdated)
    def on_shipment_status_updated(self, event):
        self._set_state(
            event,
            ShipmentState(event.state),
            current_location=event.location,
            atd=event.atd or 0,
            ata=event.ata or 0,
        )

    @on(ShipmentReceived)
    def on_shipment_received(self, event):
        self._set_state(
            event,
            ShipmentState.DELIVERED,
            current_location=event.location,
            delivered=True,
        )
