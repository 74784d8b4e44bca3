"""Order aggregate (CQRS) — one donor transaction and its lines.

An Order is created at checkout, settled once by the payment collaborator,
attached to at most one organization Bucket, and afterwards only its lines
move, driven by consolidation, tracking and delivery confirmation.

State Machines:
    settlement_state:        PENDING → COMPLETED | FAILED
    line fulfillment_stage:  PENDING → ORDERED → SHIPPED → DELIVERED
"""

import json
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from logistics.domain import logistics
from logistics.order.events import (
    OrderAttachedToBucket,
    OrderLinesAdvanced,
    OrderPlaced,
    SettlementRecorded,
)
from logistics.shared.stages import (
    FulfillmentStage,
    SettlementState,
    assert_settlement_transition,
    assert_stage_transition,
)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@logistics.entity(part_of="Order")
class OrderLine:
    """A wishlist product bought for one animal, or for the organization itself."""

    product_id = Identifier(required=True)
    animal_id = Identifier()
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    fulfillment_stage = String(
        max_length=20,
        choices=FulfillmentStage,
        default=FulfillmentStage.PENDING.value,
    )
    shipment_id = Identifier()

    @property
    def value(self) -> float:
        return round(self.quantity * self.unit_price, 2)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@logistics.aggregate
class Order:
    payer_id = Identifier()  # None for guest checkouts
    total_value = Float(min_value=0.0, default=0.0)
    settlement_state = String(
        max_length=20,
        choices=SettlementState,
        default=SettlementState.PENDING.value,
    )
    lines = HasMany(OrderLine)
    bucket_id = Identifier()
    tracking_id = String(max_length=100)
    created_at = DateTime()
    settled_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, lines_data: list[dict], payer_id: str | None = None):
        """Create a pending order from checkout line data."""
        if not lines_data:
            raise ValidationError({"lines": ["An order needs at least one line"]})

        now = datetime.now(UTC)
        order = cls(
            payer_id=payer_id,
            settlement_state=SettlementState.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        for line_data in lines_data:
            order.add_lines(OrderLine(**line_data))
        order.total_value = round(sum(line.value for line in order.lines), 2)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                payer_id=payer_id,
                total_value=order.total_value,
                line_count=len(order.lines),
                lines=json.dumps(lines_data),
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_settled(self) -> bool:
        return self.settlement_state == SettlementState.COMPLETED.value

    def lines_in_stage(self, stage: FulfillmentStage, shipment_id: str | None = None) -> list[OrderLine]:
        return [
            line
            for line in (self.lines or [])
            if line.fulfillment_stage == stage.value and (shipment_id is None or str(line.shipment_id) == shipment_id)
        ]

    def pending_value(self) -> float:
        """Value of lines that have not been ordered from a producer yet."""
        if not self.is_settled:
            return 0.0
        return round(sum(line.value for line in self.lines_in_stage(FulfillmentStage.PENDING)), 2)

    # -------------------------------------------------------------------
    # Settlement
    # -------------------------------------------------------------------
    def record_settlement(self, settlement_state: str) -> bool:
        """Apply the payment verdict. Returns False when it was already applied."""
        target = SettlementState(settlement_state)
        current = SettlementState(self.settlement_state)
        if current == target:
            return False
        assert_settlement_transition(current, target)

        now = datetime.now(UTC)
        self.settlement_state = target.value
        self.settled_at = now
        self.updated_at = now
        self.raise_(
            SettlementRecorded(
                order_id=str(self.id),
                settlement_state=target.value,
                settled_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Aggregation
    # -------------------------------------------------------------------
    def assign_to_bucket(self, bucket_id: str, organization_id: str) -> bool:
        """Attach the order to an organization bucket. Returns False if already attached there."""
        if not self.is_settled:
            raise ValidationError({"settlement_state": ["Only settled orders can be attached to a bucket"]})
        if self.bucket_id:
            if str(self.bucket_id) == str(bucket_id):
                return False
            raise ValidationError({"bucket_id": [f"Order is already attached to bucket {self.bucket_id}"]})

        now = datetime.now(UTC)
        self.bucket_id = bucket_id
        self.updated_at = now
        self.raise_(
            OrderAttachedToBucket(
                order_id=str(self.id),
                bucket_id=bucket_id,
                organization_id=organization_id,
                pending_value=self.pending_value(),
                attached_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Line progression
    # -------------------------------------------------------------------
    def _advance_lines(self, lines: list[OrderLine], target: FulfillmentStage, shipment_id: str | None) -> list:
        if not lines:
            return []
        for line in lines:
            assert_stage_transition(FulfillmentStage(line.fulfillment_stage), target)

        now = datetime.now(UTC)
        for line in lines:
            line.fulfillment_stage = target.value
            if target == FulfillmentStage.ORDERED:
                line.shipment_id = shipment_id
        self.updated_at = now
        self.raise_(
            OrderLinesAdvanced(
                order_id=str(self.id),
                line_ids=json.dumps([str(line.id) for line in lines]),
                fulfillment_stage=target.value,
                shipment_id=shipment_id,
                advanced_at=now,
            )
        )
        return lines

    def mark_lines_ordered(self, shipment_id: str) -> list[OrderLine]:
        """Advance every pending line to ORDERED and stamp it with the shipment."""
        if not self.is_settled:
            return []
        return self._advance_lines(self.lines_in_stage(FulfillmentStage.PENDING), FulfillmentStage.ORDERED, shipment_id)

    def mark_lines_shipped(self, shipment_id: str, tracking_id: str) -> list[OrderLine]:
        self.tracking_id = tracking_id
        return self._advance_lines(
            self.lines_in_stage(FulfillmentStage.ORDERED, shipment_id),
            FulfillmentStage.SHIPPED,
            shipment_id,
        )

    def mark_lines_delivered(self, shipment_id: str) -> list[OrderLine]:
        return self._advance_lines(
            self.lines_in_stage(FulfillmentStage.SHIPPED, shipment_id),
            FulfillmentStage.DELIVERED,
            shipment_id,
        )


def settled_pending_value(orders) -> float:
    """Bucket total: pending line value across the settled orders attached to it."""
    return round(sum(order.pending_value() for order in orders), 2)
