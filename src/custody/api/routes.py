"""FastAPI routes for the Custody domain."""

import json

from fastapi import APIRouter, FastAPI, Header, Request
from fastapi.responses import JSONResponse
from protean.utils.globals import current_domain

from custody.api.schemas import (
    AddItemRequest,
    ContractIdResponse,
    CreateShipmentRequest,
    ErrorDetail,
    ErrorResponse,
    InitContractRequest,
    ItemIndexResponse,
    OpenContractRequest,
    ShipmentIdResponse,
    StatusResponse,
    UpdateStatusRequest,
)
from custody.audit.records import CourierHistory, ItemQuery, ShipmentQuery
from custody.contract.dispatch import CreateShipment
from custody.contract.errors import CustodyError
from custody.contract.formation import AddItem, InitContract, OpenContract, SignContract
from custody.contract.queries import ContractCounts, QueryService
from custody.contract.receipt import ReceiveShipment
from custody.contract.transit import HandOverShipment, SignShipment, UpdateShipmentStatus

_ERROR_STATUS = {
    "unauthorized": 403,
    "not_found": 404,
    "invalid_phase": 409,
    "item_already_assigned": 409,
    "destination_mismatch": 422,
    "invalid_status_code": 422,
}


async def custody_error_handler(_request: Request, exc: CustodyError) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(kind=exc.kind, reason=exc.reason))
    return JSONResponse(status_code=_ERROR_STATUS.get(exc.kind, 400), content=body.model_dump())


def register_custody_error_handlers(app: FastAPI) -> None:
    """Map custody rule violations to HTTP responses carrying their kind."""
    app.add_exception_handler(CustodyError, custody_error_handler)


# ---------------------------------------------------------------------------
# Contract Router
# ---------------------------------------------------------------------------
contract_router = APIRouter(prefix="/contracts", tags=["contracts"])


@contract_router.post("", status_code=201, response_model=ContractIdResponse)
async def open_contract(body: OpenContractRequest, x_caller: str = Header()) -> ContractIdResponse:
    """Open a new contract owned by the caller."""
    command = OpenContract(caller=x_caller, owner_name=body.owner_name)
    result = current_domain.process(command, asynchronous=False)
    return ContractIdResponse(contract_id=result)


@contract_router.post("/{contract_id}/items", status_code=201, response_model=ItemIndexResponse)
async def add_item(contract_id: str, body: AddItemRequest, x_caller: str = Header()) -> ItemIndexResponse:
    """Register an item while the contract is being prepared."""
    command = AddItem(
        contract_id=contract_id,
        caller=x_caller,
        name=body.name,
        description=body.description,
        unit=body.unit,
        volume=body.volume,
        price=body.price,
    )
    result = current_domain.process(command, asynchronous=False)
    return ItemIndexResponse(item_index=result)


@contract_router.put("/{contract_id}/init", response_model=StatusResponse)
async def init_contract(contract_id: str, body: InitContractRequest, x_caller: str = Header()) -> StatusResponse:
    """Name the supplier and the acceptable ETA window."""
    command = InitContract(
        contract_id=contract_id,
        caller=x_caller,
        supplier_credential=body.supplier_credential,
        supplier_name=body.supplier_name,
        min_eta=body.min_eta,
        max_eta=body.max_eta,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="created")


@contract_router.put("/{contract_id}/sign", response_model=StatusResponse)
async def sign_contract(contract_id: str, x_caller: str = Header()) -> StatusResponse:
    command = SignContract(contract_id=contract_id, caller=x_caller)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="signed")


@contract_router.post("/{contract_id}/shipments", status_code=201, response_model=ShipmentIdResponse)
async def create_shipment(
    contract_id: str, body: CreateShipmentRequest, x_caller: str = Header()
) -> ShipmentIdResponse:
    """Entrust unassigned items to a courier."""
    command = CreateShipment(
        contract_id=contract_id,
        caller=x_caller,
        courier_credential=body.courier_credential,
        courier_name=body.courier_name,
        current_location=body.current_location,
        item_indices=json.dumps(body.item_indices),
        origin=body.origin,
        destination=body.destination,
        etd=body.etd,
        eta=body.eta,
    )
    result = current_domain.process(command, asynchronous=False)
    return ShipmentIdResponse(shipment_id=result)


@contract_router.put("/{contract_id}/shipments/{shipment_id}/sign", response_model=StatusResponse)
async def sign_shipment(contract_id: str, shipment_id: int, x_caller: str = Header()) -> StatusResponse:
    command = SignShipment(contract_id=contract_id, caller=x_caller, shipment_id=shipment_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="signed")


@contract_router.put("/{contract_id}/shipments/{shipment_id}/hand-over", response_model=StatusResponse)
async def hand_over(contract_id: str, shipment_id: int, x_caller: str = Header()) -> StatusResponse:
    command = HandOverShipment(contract_id=contract_id, caller=x_caller, shipment_id=shipment_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="handed_over")


@contract_router.put("/{contract_id}/shipments/{shipment_id}/status", response_model=StatusResponse)
async def update_status(
    contract_id: str, shipment_id: int, body: UpdateStatusRequest, x_caller: str = Header()
) -> StatusResponse:
    """Report a courier status code for the shipment."""
    command = UpdateShipmentStatus(
        contract_id=contract_id,
        caller=x_caller,
        shipment_id=shipment_id,
        location=body.location,
        status_code=body.status_code,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="status_updated")


@contract_router.put("/{contract_id}/shipments/{shipment_id}/receive", response_model=StatusResponse)
async def receive_shipment(contract_id: str, shipment_id: int, x_caller: str = Header()) -> StatusResponse:
    """Owner takes delivery of the shipment."""
    command = ReceiveShipment(contract_id=contract_id, caller=x_caller, shipment_id=shipment_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="delivered")


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
@contract_router.get("/{contract_id}/items/{index}", response_model=ItemQuery)
async def item_snapshot(contract_id: str, index: int) -> ItemQuery:
    return QueryService(contract_id).item_snapshot(index)


@contract_router.get("/{contract_id}/shipments/{shipment_id}", response_model=ShipmentQuery)
async def shipment_snapshot(contract_id: str, shipment_id: int) -> ShipmentQuery:
    return QueryService(contract_id).shipment_snapshot(shipment_id)


@contract_router.get("/{contract_id}/couriers/{courier_credential}", response_model=CourierHistory)
async def courier_holding(contract_id: str, courier_credential: str) -> CourierHistory:
    return QueryService(contract_id).courier_holding(courier_credential)


@contract_router.get("/{contract_id}/counts", response_model=ContractCounts)
async def counts(contract_id: str) -> ContractCounts:
    return QueryService(contract_id).counts()
