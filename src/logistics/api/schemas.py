"""Pydantic API schemas for the Logistics domain.

These are the external API contracts — separate from domain commands.
The API layer translates between these schemas and domain commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class OrderLineRequest(BaseModel):
    product_id: str
    animal_id: str | None = None
    quantity: int = Field(ge=1)
    unit_price: float = Field(ge=0)


class PlaceOrderRequest(BaseModel):
    payer_id: str | None = None
    lines: list[OrderLineRequest]


class RecordSettlementRequest(BaseModel):
    settlement_state: str


class StartProcessingRequest(BaseModel):
    notes: str | None = None


class ConsolidateRequest(BaseModel):
    bucket_ids: list[str]
    minimum_value: float | None = None


class RecordTrackingRequest(BaseModel):
    tracking_id: str


class ReportProblemRequest(BaseModel):
    description: str


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str


class OrderIdResponse(BaseModel):
    order_id: str


class SettlementResponse(BaseModel):
    status: str
    bucket_id: str | None = None


class ConsolidationResponse(BaseModel):
    shipment_ids: list[str]
    combined_value: float
    purchase_list: list[dict]
    packing_list: list[dict]


class TrackingResponse(BaseModel):
    status: str
    shipment_id: str


class ProblemReportResponse(BaseModel):
    status: str
    ticket_id: str | None = None


class CandidateBucketResponse(BaseModel):
    bucket_id: str
    organization_id: str
    organization_name: str
    city: str | None = None
    status: str
    created_at: datetime | None = None
    total_value: float
    order_count: int
    line_count: int
    item_count: int
    meets_minimum: bool
    shortfall: float


class UnassignedOrderResponse(BaseModel):
    order_id: str
    payer_id: str | None = None
    total_value: float
    line_count: int
    settled_at: datetime | None = None


class ShipmentBoardResponse(BaseModel):
    shipment_id: str
    bucket_id: str
    organization_id: str
    organization_name: str | None = None
    city: str | None = None
    status: str
    tracking_id: str | None = None
    total_value: float | None = None
    line_count: int | None = None
    placed_at: datetime | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None


class LineHistoryResponse(BaseModel):
    line_id: str
    order_id: str
    bucket_id: str
    shipment_id: str | None = None
    stage: str
    quantity: int
    product_name: str
    organization_name: str
    animal_name: str
    tracking_id: str | None = None
    updated_at: datetime | None = None
