"""Contract formation: commands and handler.

The owner opens a contract, registers items and names the supplier; the
supplier then signs.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from custody.contract.contract import Contract
from custody.domain import custody

logger = structlog.get_logger(__name__)


@custody.command(part_of="Contract")
class OpenContract:
    """Open a new contract owned by the caller."""

    caller = String(required=True, max_length=255)
    owner_name = String(max_length=100)


@custody.command(part_of="Contract")
class AddItem:
    """Register an item while the contract is being prepared."""

    contract_id = Identifier(required=True)
    caller = String(required=True, max_length=255)
    name = String(required=True, max_length=200)
    description = String(max_length=1000)
    unit = String(max_length=50)
    volume = Integer(min_value=0, default=0)
    price = Integer(min_value=0, default=0)


@custody.command(part_of="Contract")
class InitContract:
    """Name the supplier and the acceptable ETA window."""

    contract_id = Identifier(required=True)
    caller = String(required=True, max_length=255)
    supplier_credential = String(required=True, max_length=255)
    supplier_name = String(max_length=100)
    min_eta = Integer(required=True)
    max_eta = Integer(required=True)


@custody.command(part_of="Contract")
class SignContract:
    contract_id = Identifier(required=True)
    caller = String(required=True, max_length=255)


@custody.command_handler(part_of=Contract)
class FormationHandler:
    @handle(OpenContract)
    def open_contract(self, command):
        contract = Contract.open(
            owner_credential=command.caller,
            owner_name=command.owner_name,
        )
        current_domain.repository_for(Contract).add(contract)
        logger.info("Contract opened", contract_id=str(contract.id))
        return str(contract.id)

    @handle(AddItem)
    def add_item(self, command):
        repo = current_domain.repository_for(Contract)
        contract = repo.get(command.contract_id)
        index = contract.add_item(
            caller=command.caller,
            name=command.name,
            description=command.description,
            unit=command.unit,
            volume=command.volume,
            price=command.price,
        )
        repo.add(contract)
        logger.info(
            "Item added",
            contract_id=str(contract.id),
            item_index=index,
            pending_count=contract.pending_count,
        )
        return index

    @handle(InitContract)
    def init_contract(self, command):
        repo = current_domain.repository_for(Contract)
        contract = repo.get(command.contract_id)
        contract.init_contract(
            caller=command.caller,
            supplier_credential=command.supplier_credential,
            supplier_name=command.supplier_name,
            min_eta=command.min_eta,
            max_eta=command.max_eta,
        )
        repo.add(contract)
        logger.info("Contract initialized", contract_id=str(contract.id))

    @handle(SignContract)
    def sign_contract(self, command):
        repo = current_domain.repository_for(Contract)
        contract = repo.get(command.contract_id)
        contract.sign_contract(caller=command.caller)
        repo.add(contract)
        logger.info("Contract signed", contract_id=str(contract.id))
