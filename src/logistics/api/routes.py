"""FastAPI routes for the Logistics domain."""

import json

from fastapi import APIRouter, Query
from fastapi.responses import Response
from protean.utils.globals import current_domain

from logistics.api.schemas import (
    CandidateBucketResponse,
    ConsolidateRequest,
    ConsolidationResponse,
    LineHistoryResponse,
    OrderIdResponse,
    PlaceOrderRequest,
    ProblemReportResponse,
    RecordSettlementRequest,
    RecordTrackingRequest,
    ReportProblemRequest,
    SettlementResponse,
    ShipmentBoardResponse,
    StartProcessingRequest,
    StatusResponse,
    TrackingResponse,
    UnassignedOrderResponse,
)
from logistics.bucket.aggregation import attach_settled_order
from logistics.bucket.staging import StartProcessing
from logistics.consolidation.consolidation import ConsolidateBuckets
from logistics.consolidation.exports import combined_csv
from logistics.order.checkout import PlaceOrder, RecordSettlement
from logistics.projections.shipment_board import shipment_board
from logistics.reporting.candidates import consolidated_lines, list_candidate_buckets, list_unassigned_orders
from logistics.reporting.finances import financial_summary
from logistics.reporting.line_reports import list_line_history, pending_purchase_preview
from logistics.shared.stages import SettlementState
from logistics.shipment.delivery import ConfirmReceipt, ReportProblem
from logistics.shipment.tracking import RecordTracking

logistics_router = APIRouter(prefix="/logistics", tags=["logistics"])


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
@logistics_router.post("/orders", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest) -> OrderIdResponse:
    command = PlaceOrder(
        payer_id=body.payer_id,
        lines=json.dumps([line.model_dump() for line in body.lines]),
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=result)


@logistics_router.put("/orders/{order_id}/settlement", response_model=SettlementResponse)
async def record_settlement(order_id: str, body: RecordSettlementRequest) -> SettlementResponse:
    """Record the payment verdict; completed orders are attached to their bucket."""
    command = RecordSettlement(order_id=order_id, settlement_state=body.settlement_state)
    current_domain.process(command, asynchronous=False)

    bucket_id = None
    if body.settlement_state == SettlementState.COMPLETED.value:
        bucket_id = attach_settled_order(order_id)
    return SettlementResponse(status=body.settlement_state, bucket_id=bucket_id)


@logistics_router.get("/orders/unassigned", response_model=list[UnassignedOrderResponse])
async def unassigned_orders() -> list[UnassignedOrderResponse]:
    return [UnassignedOrderResponse(**row) for row in list_unassigned_orders()]


# ---------------------------------------------------------------------------
# Buckets
# ---------------------------------------------------------------------------
@logistics_router.get("/buckets/candidates", response_model=list[CandidateBucketResponse])
async def candidate_buckets(minimum_value: float | None = Query(default=None, ge=0)) -> list[CandidateBucketResponse]:
    """Buckets that can be selected for consolidation, oldest first."""
    return [CandidateBucketResponse(**row) for row in list_candidate_buckets(minimum_value)]


@logistics_router.put("/buckets/{bucket_id}/processing", response_model=StatusResponse)
async def start_processing(bucket_id: str, body: StartProcessingRequest) -> StatusResponse:
    current_domain.process(StartProcessing(bucket_id=bucket_id, notes=body.notes), asynchronous=False)
    return StatusResponse(status="processing")


@logistics_router.put("/buckets/{bucket_id}/confirm-receipt", response_model=StatusResponse)
async def confirm_receipt(bucket_id: str) -> StatusResponse:
    current_domain.process(ConfirmReceipt(bucket_id=bucket_id), asynchronous=False)
    return StatusResponse(status="fulfilled")


@logistics_router.post("/buckets/{bucket_id}/problems", status_code=201, response_model=ProblemReportResponse)
async def report_problem(bucket_id: str, body: ReportProblemRequest) -> ProblemReportResponse:
    command = ReportProblem(bucket_id=bucket_id, description=body.description)
    ticket_id = current_domain.process(command, asynchronous=False)
    return ProblemReportResponse(status="reported", ticket_id=ticket_id)


# ---------------------------------------------------------------------------
# Consolidation and shipments
# ---------------------------------------------------------------------------
@logistics_router.post("/consolidations", status_code=201, response_model=ConsolidationResponse)
async def consolidate(body: ConsolidateRequest) -> ConsolidationResponse:
    command = ConsolidateBuckets(
        bucket_ids=json.dumps(body.bucket_ids),
        minimum_value=body.minimum_value,
    )
    result = current_domain.process(command, asynchronous=False)
    return ConsolidationResponse(
        shipment_ids=result["shipment_ids"],
        combined_value=result["combined_value"],
        purchase_list=result["purchase_list"],
        packing_list=result["packing_list"],
    )


@logistics_router.get("/shipments", response_model=list[ShipmentBoardResponse])
async def list_shipments(status: str | None = None) -> list[ShipmentBoardResponse]:
    return [ShipmentBoardResponse(**view.to_dict()) for view in shipment_board(status)]


@logistics_router.get("/shipments/export.csv")
async def export_shipments(shipment_ids: list[str] = Query(...)) -> Response:
    """Combined per-organization CSV for the given shipments."""
    content = combined_csv(consolidated_lines(shipment_ids))
    return Response(
        content=content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="consolidated-shipments.csv"'},
    )


@logistics_router.put("/tracking/{target_id}", response_model=TrackingResponse)
async def record_tracking(target_id: str, body: RecordTrackingRequest) -> TrackingResponse:
    """Record a carrier tracking id against a shipment or its bucket."""
    command = RecordTracking(target_id=target_id, tracking_id=body.tracking_id)
    shipment_id = current_domain.process(command, asynchronous=False)
    return TrackingResponse(status="shipped", shipment_id=shipment_id)


# ---------------------------------------------------------------------------
# Line reports
# ---------------------------------------------------------------------------
@logistics_router.get("/lines/history", response_model=list[LineHistoryResponse])
async def line_history(stage: str | None = None, search: str | None = None) -> list[LineHistoryResponse]:
    """Archive of ordered, shipped and delivered lines."""
    return [LineHistoryResponse(**row) for row in list_line_history(stage, search)]


@logistics_router.get("/purchases/preview")
async def purchase_preview() -> list[dict]:
    """Pending lines grouped by producer, before consolidation."""
    return pending_purchase_preview()


# ---------------------------------------------------------------------------
# Finances
# ---------------------------------------------------------------------------
@logistics_router.get("/finances/summary")
async def finances_summary() -> dict:
    return financial_summary()
