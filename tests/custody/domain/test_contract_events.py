"""Tests for Contract domain events: each method raises the correct event."""

import json

import pytest
from custody.contract.contract import Contract
from custody.contract.errors import Unauthorized
from custody.contract.events import (
    ContractInitialized,
    ContractOpened,
    ContractSigned,
    ItemAdded,
    ShipmentCreated,
    ShipmentHandedOver,
    ShipmentReceived,
    ShipmentSigned,
    ShipmentStatusUpdated,
)

OWNER = "cred-owner"
SUPPLIER = "cred-supplier"
COURIER = "cred-courier"


def _signed_contract():
    contract = Contract.open(OWNER, "Olivia Owner")
    contract.add_item(OWNER, "Pallet", volume=1, price=10)
    contract.init_contract(OWNER, SUPPLIER, "Sam Supplier", 100, 200)
    contract.sign_contract(SUPPLIER)
    return contract


def _with_shipment():
    contract = _signed_contract()
    contract.create_shipment(SUPPLIER, COURIER, "Charlie", "FAC", [0], "FAC", "DC", 10, 50)
    return contract


class TestFormationEvents:
    def test_open_raises_contract_opened(self):
        contract = Contract.open(OWNER, "Olivia Owner")
        assert len(contract._events) == 1
        assert isinstance(contract._events[0], ContractOpened)
        assert contract._events[0].owner_name == "Olivia Owner"

    def test_add_item_raises_item_added(self):
        contract = Contract.open(OWNER)
        contract.add_item(OWNER, "Pallet", volume=1, price=10)
        event = contract._events[-1]
        assert isinstance(event, ItemAdded)
        assert event.index == 0
        assert event.pending_count == 1

    def test_init_raises_contract_initialized(self):
        contract = Contract.open(OWNER)
        contract.init_contract(OWNER, SUPPLIER, "Sam Supplier", 100, 200)
        event = contract._events[-1]
        assert isinstance(event, ContractInitialized)
        assert event.min_eta == 100
        assert event.max_eta == 200

    def test_sign_raises_contract_signed(self):
        contract = _signed_contract()
        assert isinstance(contract._events[-1], ContractSigned)


class TestShipmentEvents:
    def test_create_raises_shipment_created(self):
        contract = _with_shipment()
        event = contract._events[-1]
        assert isinstance(event, ShipmentCreated)
        assert event.shipment_id == 1
        assert json.loads(event.item_indices) == [0]
        assert event.destination == "DC"

    def test_sign_raises_shipment_signed(self):
        contract = _with_shipment()
        contract.sign_shipment(COURIER, 1)
        assert isinstance(contract._events[-1], ShipmentSigned)

    def test_hand_over_raises_shipment_handed_over(self):
        contract = _with_shipment()
        contract.sign_shipment(COURIER, 1)
        contract.hand_over(COURIER, 1)
        assert isinstance(contract._events[-1], ShipmentHandedOver)

    def test_update_status_raises_status_updated(self):
        contract = _with_shipment()
        contract.sign_shipment(COURIER, 1)
        contract.update_status(COURIER, 1, "Highway 9", 3)
        event = contract._events[-1]
        assert isinstance(event, ShipmentStatusUpdated)
        assert event.status_code == 3
        assert event.state == "Departed"
        assert event.atd > 0

    def test_receive_raises_shipment_received(self):
        contract = _with_shipment()
        contract.receive(OWNER, 1)
        event = contract._events[-1]
        assert isinstance(event, ShipmentReceived)
        assert json.loads(event.released_items) == [0]
        assert event.pending_count == 0

    def test_rejected_operation_raises_nothing(self):
        contract = _with_shipment()
        count = len(contract._events)
        with pytest.raises(Unauthorized):
            contract.sign_shipment(OWNER, 1)
        assert len(contract._events) == count
