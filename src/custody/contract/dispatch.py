"""Shipment dispatch: command and handler.

The supplier entrusts a set of unassigned items to a courier.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from custody.contract.contract import Contract
from custody.domain import custody

logger = structlog.get_logger(__name__)


@custody.command(part_of="Contract")
class CreateShipment:
    """Create a shipment of unassigned items for a courier."""

    contract_id = Identifier(required=True)
    caller = String(required=True, max_length=255)
    courier_credential = String(required=True, max_length=255)
    courier_name = String(max_length=100)
    current_location = String(max_length=200)
    item_indices = Text(required=True)  # JSON list of item indices
    origin = String(required=True, max_length=200)
    destination = String(required=True, max_length=200)
    etd = Integer(default=0)
    eta = Integer(default=0)


@custody.command_handler(part_of=Contract)
class DispatchHandler:
    @handle(CreateShipment)
    def create_shipment(self, command):
        item_indices = (
            json.loads(command.item_indices) if isinstance(command.item_indices, str) else command.item_indices
        )
        repo = current_domain.repository_for(Contract)
        contract = repo.get(command.contract_id)
        number = contract.create_shipment(
            caller=command.caller,
            courier_credential=command.courier_credential,
            courier_name=command.courier_name,
            current_location=command.current_location,
            item_indices=item_indices,
            origin=command.origin,
            destination=command.destination,
            etd=command.etd,
            eta=command.eta,
        )
        repo.add(contract)
        logger.info(
            "Shipment created",
            contract_id=str(contract.id),
            shipment_id=number,
            item_count=len(item_indices),
        )
        return number
