"""Shipment aggregate (CQRS) — one physical consolidated delivery.

A shipment is created per bucket at consolidation and moves in lock-step with
it afterwards.

State Machine:
    PLACED → SHIPPED → DELIVERED
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Float, Identifier, Integer, String

from logistics.domain import logistics
from logistics.shared.errors import AlreadyShipped
from logistics.shared.stages import ShipmentStatus, assert_shipment_transition
from logistics.shipment.events import ShipmentDelivered, ShipmentDispatched, ShipmentPlaced


@logistics.aggregate
class Shipment:
    organization_id = Identifier(required=True)
    bucket_id = Identifier(required=True)
    status = String(
        max_length=20,
        choices=ShipmentStatus,
        default=ShipmentStatus.PLACED.value,
    )
    tracking_id = String(max_length=100)
    total_value = Float(min_value=0.0, default=0.0)
    line_count = Integer(min_value=0, default=0)
    placed_at = DateTime()
    shipped_at = DateTime()
    delivered_at = DateTime()

    @classmethod
    def place(cls, bucket_id: str, organization_id: str, total_value: float, line_count: int):
        now = datetime.now(UTC)
        shipment = cls(
            bucket_id=bucket_id,
            organization_id=organization_id,
            status=ShipmentStatus.PLACED.value,
            total_value=round(total_value, 2),
            line_count=line_count,
            placed_at=now,
        )
        shipment.raise_(
            ShipmentPlaced(
                shipment_id=str(shipment.id),
                bucket_id=str(bucket_id),
                organization_id=str(organization_id),
                total_value=shipment.total_value,
                line_count=line_count,
                placed_at=now,
            )
        )
        return shipment

    @property
    def current_status(self) -> ShipmentStatus:
        return ShipmentStatus(self.status)

    def dispatch(self, tracking_id: str) -> bool:
        """Record the carrier tracking id. Returns False if it is already recorded."""
        if self.current_status in (ShipmentStatus.SHIPPED, ShipmentStatus.DELIVERED):
            if self.tracking_id == tracking_id:
                return False
            raise AlreadyShipped(self.tracking_id, tracking_id)

        assert_shipment_transition(self.current_status, ShipmentStatus.SHIPPED)
        now = datetime.now(UTC)
        self.status = ShipmentStatus.SHIPPED.value
        self.tracking_id = tracking_id
        self.shipped_at = now
        self.raise_(
            ShipmentDispatched(
                shipment_id=str(self.id),
                bucket_id=str(self.bucket_id),
                organization_id=str(self.organization_id),
                tracking_id=tracking_id,
                shipped_at=now,
            )
        )
        return True

    def mark_delivered(self) -> bool:
        if self.current_status == ShipmentStatus.DELIVERED:
            return False

        assert_shipment_transition(self.current_status, ShipmentStatus.DELIVERED)
        now = datetime.now(UTC)
        self.status = ShipmentStatus.DELIVERED.value
        self.delivered_at = now
        self.raise_(
            ShipmentDelivered(
                shipment_id=str(self.id),
                bucket_id=str(self.bucket_id),
                organization_id=str(self.organization_id),
                delivered_at=now,
            )
        )
        return True
