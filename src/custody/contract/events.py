"""Custody domain events: immutable facts about contract and shipment changes.

All events are past tense, versioned, and carry the shipment number or item
index they concern so projectors can key their views without reloading the
aggregate.
"""

from protean.fields import Identifier, Integer, String, Text

from custody.domain import custody


@custody.event(part_of="Contract")
class ContractOpened:
    """An owner opened a new custody contract."""

    __version__ = 1

    contract_id = Identifier(required=True)
    owner_name = String()


@custody.event(part_of="Contract")
class ItemAdded:
    """The owner registered an item to be supplied."""

    __version__ = 1

    contract_id = Identifier(required=True)
    index = Integer(required=True)
    name = String(required=True)
    volume = Integer()
    price = Integer()
    pending_count = Integer(required=True)


@custody.event(part_of="Contract")
class ContractInitialized:
    """The owner named the supplier and the acceptable ETA window."""

    __version__ = 1

    contract_id = Identifier(required=True)
    supplier_name = String()
    min_eta = Integer(required=True)
    max_eta = Integer(required=True)


@custody.event(part_of="Contract")
class ContractSigned:
    """The supplier accepted the contract."""

    __version__ = 1

    contract_id = Identifier(required=True)
    supplier_name = String()


@custody.event(part_of="Contract")
class ShipmentCreated:
    """The supplier prepared a shipment and entrusted it to a courier."""

    __version__ = 1

    contract_id = Identifier(required=True)
    shipment_id = Integer(required=True)
    courier_name = String()
    item_indices = Text(required=True)  # JSON list of item indices
    origin = String()
    destination = String()
    current_location = String()
    etd = Integer()
    eta = Integer()


@custody.event(part_of="Contract")
class ShipmentSigned:
    """The courier accepted the shipment."""

    __version__ = 1

    contract_id = Identifier(required=True)
    shipment_id = Integer(required=True)


@custody.event(part_of="Contract")
class ShipmentHandedOver:
    """The supplier handed the goods over to the courier."""

    __version__ = 1

    contract_id = Identifier(required=True)
    shipment_id = Integer(required=True)


@custody.event(part_of="Contract")
class ShipmentStatusUpdated:
    """The courier reported a transit status and location."""

    __version__ = 1

    contract_id = Identifier(required=True)
    shipment_id = Integer(required=True)
    status_code = Integer(required=True)
    state = String(required=True)
    location = String()
    atd = Integer()
    ata = Integer()


@custody.event(part_of="Contract")
class ShipmentReceived:
    """The owner received the shipment at its destination."""

    __version__ = 1

    contract_id = Identifier(required=True)
    shipment_id = Integer(required=True)
    location = String()
    released_items = Text()  # JSON list of item indices no longer pending
    pending_count = Integer(required=True)
