"""Closed vocabularies and transition tables for every pipeline state machine.

State Machines:
    OrderLine stage:   PENDING → ORDERED → SHIPPED → DELIVERED
    Bucket status:     COLLECTING → [PROCESSING] → ORDERED → SHIPPED → FULFILLED
    Shipment status:   PLACED → SHIPPED → DELIVERED
    Order settlement:  PENDING → COMPLETED | FAILED

Aggregates validate every move through the ``assert_*_transition`` helpers
below instead of comparing raw status strings.
"""

from enum import Enum

from protean.exceptions import ValidationError


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class FulfillmentStage(Enum):
    PENDING = "pending"
    ORDERED = "ordered"
    SHIPPED = "shipped"
    DELIVERED = "delivered"


class BucketStatus(Enum):
    COLLECTING = "collecting"
    PROCESSING = "processing"
    ORDERED = "ordered"
    SHIPPED = "shipped"
    FULFILLED = "fulfilled"


class ShipmentStatus(Enum):
    PLACED = "placed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"


class SettlementState(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Transition tables
# ---------------------------------------------------------------------------
_STAGE_TRANSITIONS = {
    FulfillmentStage.PENDING: {FulfillmentStage.ORDERED},
    FulfillmentStage.ORDERED: {FulfillmentStage.SHIPPED},
    FulfillmentStage.SHIPPED: {FulfillmentStage.DELIVERED},
    FulfillmentStage.DELIVERED: set(),  # terminal
}

_BUCKET_TRANSITIONS = {
    BucketStatus.COLLECTING: {BucketStatus.PROCESSING, BucketStatus.ORDERED},
    BucketStatus.PROCESSING: {BucketStatus.ORDERED},
    BucketStatus.ORDERED: {BucketStatus.SHIPPED},
    BucketStatus.SHIPPED: {BucketStatus.FULFILLED},
    BucketStatus.FULFILLED: set(),  # terminal
}

_SHIPMENT_TRANSITIONS = {
    ShipmentStatus.PLACED: {ShipmentStatus.SHIPPED},
    ShipmentStatus.SHIPPED: {ShipmentStatus.DELIVERED},
    ShipmentStatus.DELIVERED: set(),  # terminal
}

_SETTLEMENT_TRANSITIONS = {
    SettlementState.PENDING: {SettlementState.COMPLETED, SettlementState.FAILED},
    SettlementState.COMPLETED: set(),
    SettlementState.FAILED: set(),
}

# Buckets the Consolidation Gate accepts as input
CONSOLIDATABLE_STATUSES = frozenset({BucketStatus.COLLECTING, BucketStatus.PROCESSING})


def _assert_transition(table: dict, current: Enum, target: Enum, field: str) -> None:
    if target not in table.get(current, set()):
        raise ValidationError({field: [f"Cannot transition from {current.value} to {target.value}"]})


def assert_stage_transition(current: FulfillmentStage, target: FulfillmentStage) -> None:
    _assert_transition(_STAGE_TRANSITIONS, current, target, "fulfillment_stage")


def assert_bucket_transition(current: BucketStatus, target: BucketStatus) -> None:
    _assert_transition(_BUCKET_TRANSITIONS, current, target, "status")


def assert_shipment_transition(current: ShipmentStatus, target: ShipmentStatus) -> None:
    _assert_transition(_SHIPMENT_TRANSITIONS, current, target, "status")


def assert_settlement_transition(current: SettlementState, target: SettlementState) -> None:
    _assert_transition(_SETTLEMENT_TRANSITIONS, current, target, "settlement_state")
