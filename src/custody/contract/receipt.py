"""Shipment receipt: command and handler.

The owner takes delivery, which releases the courier's items from the
pending count.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from custody.contract.contract import Contract
from custody.domain import custody

logger = structlog.get_logger(__name__)


@custody.command(part_of="Contract")
class ReceiveShipment:
    contract_id = Identifier(required=True)
    caller = String(required=True, max_length=255)
    shipment_id = Integer(required=True, min_value=1)


@custody.command_handler(part_of=Contract)
class ReceiptHandler:
    @handle(ReceiveShipment)
    def receive(self, command):
        repo = current_domain.repository_for(Contract)
        contract = repo.get(command.contract_id)
        contract.receive(caller=command.caller, number=command.shipment_id)
        repo.add(contract)
        logger.info(
            "Shipment received",
            contract_id=str(contract.id),
            shipment_id=command.shipment_id,
            pending_count=contract.pending_count,
            satisfied=contract.is_satisfied(),
        )
