"""Pydantic API schemas for the Custody domain.

These are the external API contracts, separate from domain commands.
The API layer translates between these schemas and domain commands. The
caller's credential travels in the ``X-Caller`` header, not in bodies.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class OpenContractRequest(BaseModel):
    owner_name: str | None = None


class AddItemRequest(BaseModel):
    name: str
    description: str | None = None
    unit: str | None = None
    volume: int = Field(default=0, ge=0)
    price: int = Field(default=0, ge=0)


class InitContractRequest(BaseModel):
    supplier_credential: str
    supplier_name: str | None = None
    min_eta: int
    max_eta: int


class CreateShipmentRequest(BaseModel):
    courier_credential: str
    courier_name: str | None = None
    current_location: str | None = None
    item_indices: list[int]
    origin: str
    destination: str
    etd: int = 0
    eta: int = 0


class UpdateStatusRequest(BaseModel):
    location: str
    status_code: int


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class ContractIdResponse(BaseModel):
    contract_id: str


class ItemIndexResponse(BaseModel):
    item_index: int


class ShipmentIdResponse(BaseModel):
    shipment_id: int


class StatusResponse(BaseModel):
    status: str


class ErrorDetail(BaseModel):
    kind: str
    reason: str


class ErrorResponse(BaseModel):
    error: ErrorDetail
