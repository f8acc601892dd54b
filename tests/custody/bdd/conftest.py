"""Shared BDD fixtures and step definitions for the Custody domain."""

import pytest
from custody.contract.contract import Contract
from custody.contract.events import (
    ContractInitialized,
    ContractSigned,
    ItemAdded,
    ShipmentCreated,
    ShipmentHandedOver,
    ShipmentReceived,
    ShipmentSigned,
    ShipmentStatusUpdated,
)
from custody.contract.errors import CustodyError
from pytest_bdd import given, parsers, then

OWNER = "cred-owner"
SUPPLIER = "cred-supplier"
COURIER = "cred-courier"

_CUSTODY_EVENT_CLASSES = {
    "ItemAdded": ItemAdded,
    "ContractInitialized": ContractInitialized,
    "ContractSigned": ContractSigned,
    "ShipmentCreated": ShipmentCreated,
    "ShipmentSigned": ShipmentSigned,
    "ShipmentHandedOver": ShipmentHandedOver,
    "ShipmentStatusUpdated": ShipmentStatusUpdated,
    "ShipmentReceived": ShipmentReceived,
}


def _signed_contract(item_count):
    contract = Contract.open(OWNER, "Olivia")
    for i in range(item_count):
        contract.add_item(OWNER, f"Item {i}", volume=1, price=10)
    contract.init_contract(OWNER, SUPPLIER, "Sam", 100, 200)
    contract.sign_contract(SUPPLIER)
    return contract


@pytest.fixture()
def error():
    """Container for a captured custody rule violation."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a contract with {count:d} item owned by "{owner}"'),
    target_fixture="contract",
)
def prepared_contract(count, owner):
    contract = Contract.open(owner, "Olivia")
    for i in range(count):
        contract.add_item(owner, f"Item {i}", volume=1, price=10)
    contract._events.clear()
    return contract


@given(parsers.cfparse("a signed contract with {count:d} item"), target_fixture="contract")
def signed_contract(count):
    contract = _signed_contract(count)
    contract._events.clear()
    return contract


@given("a signed contract with a prepared shipment", target_fixture="contract")
def contract_with_shipment():
    contract = _signed_contract(1)
    contract.create_shipment(SUPPLIER, COURIER, "Charlie", "FAC", [0], "FAC", "DC", 10, 50)
    contract._events.clear()
    return contract


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the contract phase is "{phase}"'))
def contract_phase_is(contract, phase):
    assert contract.phase == phase


@then("the contract is satisfied")
def contract_satisfied(contract):
    assert contract.is_satisfied() is True


@then("the contract is not satisfied")
def contract_not_satisfied(contract):
    assert contract.is_satisfied() is False


@then(parsers.cfparse("the pending count is {count:d}"))
def pending_count_is(contract, count):
    assert contract.pending_count == count


@then(parsers.cfparse('shipment {number:d} is in state "{state}"'))
def shipment_state_is(contract, number, state):
    assert contract.shipment_numbered(number).state == state


@then(parsers.cfparse('shipment {number:d} is located at "{location}"'))
def shipment_location_is(contract, number, location):
    assert contract.shipment_numbered(number).current_location == location


@then(parsers.cfparse('the operation fails with "{kind}"'))
def operation_fails(error, kind):
    assert error["exc"] is not None, "Expected a custody error but none was raised"
    assert isinstance(error["exc"], CustodyError)
    assert error["exc"].kind == kind


@then(parsers.cfparse("a {event_type} event is raised"))
def custody_event_raised(contract, event_type):
    event_cls = _CUSTODY_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in contract._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in contract._events]}"
