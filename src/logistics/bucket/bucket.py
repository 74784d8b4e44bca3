"""Bucket aggregate (CQRS) — the open batch order of one organization.

Settled orders accumulate in the organization's single collecting bucket until
an operator consolidates it into a shipment. The bucket total is not stored:
it is always derived from the pending lines of the settled orders attached to
it, so it cannot drift from line state.

State Machine:
    COLLECTING → [PROCESSING] → ORDERED → SHIPPED → FULFILLED

While collecting, ``collecting_key`` holds the organization id. The field is
unique at the store, so a second collecting bucket for the same organization
is rejected on save. It is cleared as soon as the bucket leaves collecting.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text

from logistics.bucket.events import (
    BucketFulfilled,
    BucketOpened,
    BucketOrdered,
    BucketProcessingStarted,
    BucketShipped,
    ProblemReported,
)
from logistics.domain import logistics
from logistics.shared.errors import AlreadyShipped
from logistics.shared.stages import BucketStatus, assert_bucket_transition


@logistics.aggregate
class Bucket:
    organization_id = Identifier(required=True)
    status = String(
        max_length=20,
        choices=BucketStatus,
        default=BucketStatus.COLLECTING.value,
    )
    collecting_key = String(max_length=50, unique=True)
    notes = Text()
    shipment_id = Identifier()
    tracking_id = String(max_length=100)
    created_at = DateTime()
    updated_at = DateTime()
    processed_at = DateTime()
    ordered_at = DateTime()
    shipped_at = DateTime()
    fulfilled_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def open(cls, organization_id: str):
        now = datetime.now(UTC)
        bucket = cls(
            organization_id=organization_id,
            status=BucketStatus.COLLECTING.value,
            collecting_key=str(organization_id),
            created_at=now,
            updated_at=now,
        )
        bucket.raise_(
            BucketOpened(
                bucket_id=str(bucket.id),
                organization_id=str(organization_id),
                opened_at=now,
            )
        )
        return bucket

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def current_status(self) -> BucketStatus:
        return BucketStatus(self.status)

    @property
    def is_collecting(self) -> bool:
        return self.current_status == BucketStatus.COLLECTING

    def _transition_to(self, target: BucketStatus) -> datetime:
        assert_bucket_transition(self.current_status, target)
        now = datetime.now(UTC)
        self.status = target.value
        self.collecting_key = None
        self.updated_at = now
        return now

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def start_processing(self, notes: str | None = None) -> None:
        """Take the bucket off the collecting slot while the operator reviews it."""
        now = self._transition_to(BucketStatus.PROCESSING)
        self.processed_at = now
        if notes:
            self.notes = notes
        self.raise_(
            BucketProcessingStarted(
                bucket_id=str(self.id),
                organization_id=str(self.organization_id),
                notes=notes,
                processed_at=now,
            )
        )

    def mark_ordered(self, shipment_id: str) -> None:
        now = self._transition_to(BucketStatus.ORDERED)
        self.shipment_id = shipment_id
        self.ordered_at = now
        self.raise_(
            BucketOrdered(
                bucket_id=str(self.id),
                organization_id=str(self.organization_id),
                shipment_id=shipment_id,
                ordered_at=now,
            )
        )

    def record_tracking(self, tracking_id: str) -> bool:
        """Move to SHIPPED under ``tracking_id``.

        Returns False when the bucket already carries the same tracking id.
        A different id on an already shipped bucket raises ``AlreadyShipped``.
        """
        if self.current_status in (BucketStatus.SHIPPED, BucketStatus.FULFILLED):
            if self.tracking_id == tracking_id:
                return False
            raise AlreadyShipped(self.tracking_id, tracking_id)

        now = self._transition_to(BucketStatus.SHIPPED)
        self.tracking_id = tracking_id
        self.shipped_at = now
        self.raise_(
            BucketShipped(
                bucket_id=str(self.id),
                organization_id=str(self.organization_id),
                shipment_id=str(self.shipment_id),
                tracking_id=tracking_id,
                shipped_at=now,
            )
        )
        return True

    def confirm_receipt(self) -> bool:
        """Close the bucket. Returns False when it was already fulfilled."""
        if self.current_status == BucketStatus.FULFILLED:
            return False

        now = self._transition_to(BucketStatus.FULFILLED)
        self.fulfilled_at = now
        self.raise_(
            BucketFulfilled(
                bucket_id=str(self.id),
                organization_id=str(self.organization_id),
                shipment_id=str(self.shipment_id) if self.shipment_id else None,
                fulfilled_at=now,
            )
        )
        return True

    def report_problem(self, description: str) -> None:
        if self.current_status != BucketStatus.SHIPPED:
            raise ValidationError({"status": [f"Problems can only be reported for shipped buckets, not {self.status}"]})
        if not description or not description.strip():
            raise ValidationError({"description": ["Describe the problem"]})

        self.raise_(
            ProblemReported(
                bucket_id=str(self.id),
                organization_id=str(self.organization_id),
                shipment_id=str(self.shipment_id) if self.shipment_id else None,
                tracking_id=self.tracking_id,
                description=description.strip(),
                reported_at=datetime.now(UTC),
            )
        )
