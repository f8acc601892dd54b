"""Contract aggregate (CQRS): the core of the custody domain.

A Contract binds an owner, a single supplier and any number of couriers. It
owns the item table, the shipment table and the courier ledger so that the
cross-entity rules (an item joins at most one shipment, the pending count
matches undelivered items) hold inside one consistency boundary.

Contract phases:
    PREPARE → CREATED → SIGNED   (DONE is declared but never entered)

Shipment transit states:
    PREPARE → SIGNED → HANDED_OVER → DEPARTED → ARRIVED → DELIVERED

Every method checks all of its guards before it mutates anything, so a
rejected operation leaves the aggregate untouched.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import (
    Boolean,
    DateTime,
    HasMany,
    Integer,
    String,
    Text,
    ValueObject,
)

from custody.contract.access import verify
from custody.contract.errors import (
    DestinationMismatch,
    InvalidPhase,
    InvalidStatusCode,
    ItemAlreadyAssigned,
    UnknownReference,
)
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
from custody.domain import custody


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class ContractPhase(Enum):
    PREPARE = "Prepare"
    CREATED = "Created"
    SIGNED = "Signed"
    DONE = "Done"


class ShipmentState(Enum):
    PREPARE = "Prepare"
    SIGNED = "Signed"
    HANDED_OVER = "Handed_Over"
    DEPARTED = "Departed"
    ARRIVED = "Arrived"
    DELIVERED = "Delivered"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


# Courier status codes accepted by update_status (1 < code < 5)
_STATUS_TRANSITIONS = {
    2: ShipmentState.HANDED_OVER,
    3: ShipmentState.DEPARTED,
    4: ShipmentState.ARRIVED,
}


def _timestamp() -> int:
    return int(datetime.now(UTC).timestamp())


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@custody.value_object(part_of="Contract")
class Identity:
    """A verified caller credential and the party's display name."""

    credential = String(required=True, max_length=255)
    name = String(max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@custody.entity(part_of="Contract")
class Item:
    """A tracked good, addressed by its dense 0-based index."""

    index = Integer(min_value=0)
    name = String(required=True, max_length=200)
    description = String(max_length=1000)
    unit = String(max_length=50)
    volume = Integer(min_value=0, default=0)
    price = Integer(min_value=0, default=0)
    shipment_id = Integer(default=0)  # 0 = unassigned, else 1-based shipment number
    pending = Boolean(default=True)


@custody.entity(part_of="Contract")
class Shipment:
    """A batch of items entrusted to one courier, addressed by its 1-based number."""

    number = Integer(min_value=1)
    item_indices = Text()  # JSON list of item indices
    origin = String(max_length=200)
    destination = String(max_length=200)
    current_location = String(max_length=200)
    courier = ValueObject(Identity)
    etd = Integer(default=0)
    eta = Integer(default=0)
    atd = Integer(default=0)
    ata = Integer(default=0)
    state = String(
        choices=ShipmentState,
        default=ShipmentState.PREPARE.value,
    )

    @property
    def indices(self) -> list[int]:
        return json.loads(self.item_indices) if self.item_indices else []


@custody.entity(part_of="Contract")
class CourierHolding:
    """Ledger entry: the items most recently entrusted to a courier."""

    courier = ValueObject(Identity)
    item_indices = Text()  # JSON list of item indices

    @property
    def indices(self) -> list[int]:
        return json.loads(self.item_indices) if self.item_indices else []


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@custody.aggregate
class Contract:
    owner = ValueObject(Identity)
    supplier = ValueObject(Identity)
    phase = String(
        choices=ContractPhase,
        default=ContractPhase.PREPARE.value,
    )
    min_eta = Integer(default=0)
    max_eta = Integer(default=0)
    pending_count = Integer(default=0)
    items = HasMany(Item)
    shipments = HasMany(Shipment)
    holdings = HasMany(CourierHolding)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def open(cls, owner_credential: str, owner_name: str | None = None):
        """Open a contract in PREPARE, owned by the calling party."""
        now = datetime.now(UTC)
        contract = cls(
            owner=Identity(credential=owner_credential, name=owner_name),
            phase=ContractPhase.PREPARE.value,
            pending_count=0,
            created_at=now,
            updated_at=now,
        )
        contract.raise_(
            ContractOpened(
                contract_id=str(contract.id),
                owner_name=owner_name or "",
            )
        )
        return contract

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    def item_at(self, index: int) -> Item:
        item = next((i for i in (self.items or []) if i.index == index), None)
        if item is None:
            raise UnknownReference(f"Item {index} does not exist", field="item_index")
        return item

    def shipment_numbered(self, number: int) -> Shipment:
        shipment = next((s for s in (self.shipments or []) if s.number == number), None)
        if shipment is None:
            raise UnknownReference(f"Shipment {number} does not exist", field="shipment_id")
        return shipment

    def holding_for(self, courier_credential: str) -> CourierHolding | None:
        return next(
            (h for h in (self.holdings or []) if h.courier.credential == str(courier_credential)),
            None,
        )

    def is_satisfied(self) -> bool:
        """True once every item added during PREPARE has been received."""
        return (self.pending_count or 0) == 0

    # -------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------
    def _assert_phase(self, expected: ContractPhase, action: str) -> None:
        current = ContractPhase(self.phase)
        if current != expected:
            raise InvalidPhase(f"Cannot {action} while the contract is {current.value}")

    @staticmethod
    def _assert_state(shipment: Shipment, expected: ShipmentState, action: str) -> None:
        current = ShipmentState(shipment.state)
        if current != expected:
            raise InvalidPhase(f"Cannot {action} shipment {shipment.number} in {current.value} state")

    # -------------------------------------------------------------------
    # Contract formation
    # -------------------------------------------------------------------
    def add_item(
        self,
        caller: str,
        name: str,
        description: str | None = None,
        unit: str | None = None,
        volume: int = 0,
        price: int = 0,
    ) -> int:
        """Register an unassigned item; only the owner, only while preparing."""
        self._assert_phase(ContractPhase.PREPARE, "add items")
        verify(caller, self.owner, "owner")

        index = len(self.items or [])
        item = Item(
            index=index,
            name=name,
            description=description,
            unit=unit,
            volume=volume,
            price=price,
            shipment_id=0,
            pending=True,
        )
        pending_count = (self.pending_count or 0) + 1
        event = ItemAdded(
            contract_id=str(self.id),
            index=index,
            name=name,
            volume=item.volume,
            price=item.price,
            pending_count=pending_count,
        )

        self.add_items(item)
        self.pending_count = pending_count
        self.updated_at = datetime.now(UTC)
        self.raise_(event)
        return index

    def init_contract(
        self,
        caller: str,
        supplier_credential: str,
        supplier_name: str | None,
        min_eta: int,
        max_eta: int,
    ) -> None:
        """Name the supplier and the acceptable ETA window."""
        self._assert_phase(ContractPhase.PREPARE, "initialize the contract")
        verify(caller, self.owner, "owner")

        supplier = Identity(credential=supplier_credential, name=supplier_name)
        event = ContractInitialized(
            contract_id=str(self.id),
            supplier_name=supplier_name or "",
            min_eta=min_eta,
            max_eta=max_eta,
        )

        self.supplier = supplier
        self.min_eta = min_eta
        self.max_eta = max_eta
        self.phase = ContractPhase.CREATED.value
        self.updated_at = datetime.now(UTC)
        self.raise_(event)

    def sign_contract(self, caller: str) -> None:
        """Supplier accepts the contract."""
        self._assert_phase(ContractPhase.CREATED, "sign the contract")
        verify(caller, self.supplier, "supplier")

        self.phase = ContractPhase.SIGNED.value
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ContractSigned(
                contract_id=str(self.id),
                supplier_name=self.supplier.name or "",
            )
        )

    # -------------------------------------------------------------------
    # Shipments
    # -------------------------------------------------------------------
    def create_shipment(
        self,
        caller: str,
        courier_credential: str,
        courier_name: str | None,
        current_location: str,
        item_indices: list[int],
        origin: str,
        destination: str,
        etd: int,
        eta: int,
    ) -> int:
        """Entrust unassigned items to a courier; returns the shipment number."""
        self._assert_phase(ContractPhase.SIGNED, "create shipments")
        verify(caller, self.supplier, "supplier")

        items = []
        seen = set()
        for index in item_indices:
            item = self.item_at(index)
            if item.shipment_id or index in seen:
                raise ItemAlreadyAssigned(f"Item {index} already belongs to a shipment")
            seen.add(index)
            items.append(item)

        # Build every new object before touching state so a rejected value
        # leaves the contract as it was
        courier = Identity(credential=courier_credential, name=courier_name)
        number = len(self.shipments or []) + 1
        indices_json = json.dumps([item.index for item in items])
        shipment = Shipment(
            number=number,
            item_indices=indices_json,
            origin=origin,
            destination=destination,
            current_location=current_location,
            courier=courier,
            etd=etd,
            eta=eta,
            state=ShipmentState.PREPARE.value,
        )
        holding = self.holding_for(courier_credential)
        new_holding = (
            CourierHolding(courier=courier, item_indices=indices_json) if holding is None else None
        )
        event = ShipmentCreated(
            contract_id=str(self.id),
            shipment_id=number,
            courier_name=courier_name or "",
            item_indices=indices_json,
            origin=origin,
            destination=destination,
            current_location=current_location or "",
            etd=etd,
            eta=eta,
        )

        self.add_shipments(shipment)

        # A courier's ledger entry is replaced, not extended
        if new_holding is not None:
            self.add_holdings(new_holding)
        else:
            holding.courier = courier
            holding.item_indices = indices_json

        for item in items:
            item.shipment_id = number

        self.updated_at = datetime.now(UTC)
        self.raise_(event)
        return number

    def sign_shipment(self, caller: str, number: int) -> None:
        """Courier accepts the shipment."""
        shipment = self.shipment_numbered(number)
        self._assert_state(shipment, ShipmentState.PREPARE, "sign")
        verify(caller, shipment.courier, "courier")

        shipment.state = ShipmentState.SIGNED.value
        self.updated_at = datetime.now(UTC)
        self.raise_(ShipmentSigned(contract_id=str(self.id), shipment_id=number))

    def hand_over(self, caller: str, number: int) -> None:
        """Courier confirms the goods were handed over."""
        shipment = self.shipment_numbered(number)
        self._assert_state(shipment, ShipmentState.SIGNED, "hand over")
        verify(caller, shipment.courier, "courier")

        shipment.state = ShipmentState.HANDED_OVER.value
        self.updated_at = datetime.now(UTC)
        self.raise_(ShipmentHandedOver(contract_id=str(self.id), shipment_id=number))

    def update_status(self, caller: str, number: int, new_location: str, status_code: int) -> None:
        """Courier reports a transit status.

        Codes: 2 re-affirms HANDED_OVER, 3 departs (records ATD), 4 arrives
        (records ATA, location must equal the destination). The shipment must
        still be in SIGNED state, which makes this unreachable after
        ``hand_over``.
        """
        shipment = self.shipment_numbered(number)
        self._assert_state(shipment, ShipmentState.SIGNED, "update status of")
        verify(caller, shipment.courier, "courier")

        if status_code not in _STATUS_TRANSITIONS:
            raise InvalidStatusCode(f"Status code must be 2, 3 or 4, got {status_code}")
        target = _STATUS_TRANSITIONS[status_code]
        if target == ShipmentState.ARRIVED and new_location != shipment.destination:
            raise DestinationMismatch(
                f"Arrival location {new_location!r} does not match destination {shipment.destination!r}"
            )

        now = _timestamp()
        atd = now if target == ShipmentState.DEPARTED else shipment.atd
        ata = now if target == ShipmentState.ARRIVED else shipment.ata
        event = ShipmentStatusUpdated(
            contract_id=str(self.id),
            shipment_id=number,
            status_code=status_code,
            state=target.value,
            location=new_location,
            atd=atd,
            ata=ata,
        )

        # Location is the only assignment that can still fail validation
        shipment.current_location = new_location
        shipment.state = target.value
        shipment.atd = atd
        shipment.ata = ata

        self.updated_at = datetime.now(UTC)
        self.raise_(event)

    def receive(self, caller: str, number: int) -> None:
        """Owner takes delivery; releases the items last entrusted to the courier."""
        shipment = self.shipment_numbered(number)
        verify(caller, self.owner, "owner")

        holding = self.holding_for(shipment.courier.credential)
        released = holding.indices if holding else []
        pending = self.pending_count or 0
        if len(released) > pending:
            raise InvalidPhase(f"Receiving shipment {number} would release more items than are pending")
        released_items = [self.item_at(index) for index in released]
        event = ShipmentReceived(
            contract_id=str(self.id),
            shipment_id=number,
            location=shipment.destination,
            released_items=json.dumps(released),
            pending_count=pending - len(released),
        )

        shipment.current_location = shipment.destination
        shipment.state = ShipmentState.DELIVERED.value
        for item in released_items:
            item.pending = False
        self.pending_count = pending - len(released)

        self.updated_at = datetime.now(UTC)
        self.raise_(event)
