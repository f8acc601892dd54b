"""Shipment transit: courier commands and handler.

Couriers sign for a shipment, confirm the hand-over and report transit
status codes until arrival.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from custody.contract.contract import Contract
from custody.domain import custody

logger = structlog.get_logger(__name__)


@custody.command(part_of="Contract")
class SignShipment:
    contract_id = Identifier(required=True)
    caller = String(required=True, max_length=255)
    shipment_id = Integer(required=True, min_value=1)


@custody.command(part_of="Contract")
class HandOverShipment:
    contract_id = Identifier(required=True)
    caller = String(required=True, max_length=255)
    shipment_id = Integer(required=True, min_value=1)


@custody.command(part_of="Contract")
class UpdateShipmentStatus:
    """Report a courier status code (2 handed over, 3 departed, 4 arrived)."""

    contract_id = Identifier(required=True)
    caller = String(required=True, max_length=255)
    shipment_id = Integer(required=True, min_value=1)
    location = String(max_length=200)
    status_code = Integer(required=True)


@custody.command_handler(part_of=Contract)
class TransitHandler:
    @handle(SignShipment)
    def sign_shipment(self, command):
        repo = current_domain.repository_for(Contract)
        contract = repo.get(command.contract_id)
        contract.sign_shipment(caller=command.caller, number=command.shipment_id)
        repo.add(contract)
        logger.info("Shipment signed", contract_id=str(contract.id), shipment_id=command.shipment_id)

    @handle(HandOverShipment)
    def hand_over(self, command):
        repo = current_domain.repository_for(Contract)
        contract = repo.get(command.contract_id)
        contract.hand_over(caller=command.caller, number=command.shipment_id)
        repo.add(contract)
        logger.info("Shipment handed over", contract_id=str(contract.id), shipment_id=command.shipment_id)

    @handle(UpdateShipmentStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Contract)
        contract = repo.get(command.contract_id)
        contract.update_status(
            caller=command.caller,
            number=command.shipment_id,
            new_location=command.location,
            status_code=command.status_code,
        )
        repo.add(contract)
        logger.info(
            "Shipment status updated",
            contract_id=str(contract.id),
            shipment_id=command.shipment_id,
            status_code=command.status_code,
            location=command.location,
        )
