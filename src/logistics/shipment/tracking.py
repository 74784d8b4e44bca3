"""Shipment tracking — record the carrier tracking id for a placed shipment.

The target may be given as a shipment id or as the id of the bucket the
shipment was consolidated from. Tracking moves the shipment, its bucket and
every line stamped with the shipment to SHIPPED together.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from logistics.bucket.bucket import Bucket
from logistics.domain import logistics
from logistics.order.order import Order
from logistics.order.queries import orders_in_bucket
from logistics.shared.errors import InvalidTrackingId
from logistics.shared.stages import BucketStatus, assert_bucket_transition
from logistics.shipment.shipment import Shipment

logger = structlog.get_logger(__name__)

MAX_TRACKING_ID_LENGTH = 100


def normalize_tracking_id(tracking_id: str | None) -> str:
    cleaned = (tracking_id or "").strip()
    if not cleaned:
        raise InvalidTrackingId(tracking_id, "Tracking id must not be empty")
    if len(cleaned) > MAX_TRACKING_ID_LENGTH:
        raise InvalidTrackingId(tracking_id, f"Tracking id must be at most {MAX_TRACKING_ID_LENGTH} characters")
    return cleaned


def resolve_target(target_id: str) -> tuple[Bucket, Shipment | None]:
    """Load the bucket and shipment behind a shipment id or a bucket id."""
    shipment_repo = current_domain.repository_for(Shipment)
    bucket_repo = current_domain.repository_for(Bucket)
    try:
        shipment = shipment_repo.get(target_id)
    except ObjectNotFoundError:
        shipment = None
    if shipment is not None:
        return bucket_repo.get(str(shipment.bucket_id)), shipment

    bucket = bucket_repo.get(target_id)
    if not bucket.shipment_id:
        return bucket, None
    return bucket, shipment_repo.get(str(bucket.shipment_id))


@logistics.command(part_of="Shipment")
class RecordTracking:
    target_id = Identifier(required=True)  # shipment id or bucket id
    tracking_id = Text()  # length is checked by normalize_tracking_id


@logistics.command_handler(part_of=Shipment)
class TrackingHandler:
    @handle(RecordTracking)
    def record_tracking(self, command):
        tracking_id = normalize_tracking_id(command.tracking_id)
        bucket, shipment = resolve_target(str(command.target_id))

        if shipment is None:
            # Not consolidated yet; report it as the bucket transition it is
            assert_bucket_transition(bucket.current_status, BucketStatus.SHIPPED)

        shipment_changed = shipment.dispatch(tracking_id)
        bucket_changed = bucket.record_tracking(tracking_id)
        if not (shipment_changed or bucket_changed):
            logger.info("Tracking id already recorded", shipment_id=str(shipment.id), tracking_id=tracking_id)
            return str(shipment.id)

        order_repo = current_domain.repository_for(Order)
        for order in orders_in_bucket(bucket.id):
            order.mark_lines_shipped(str(shipment.id), tracking_id)
            order_repo.add(order)

        current_domain.repository_for(Shipment).add(shipment)
        current_domain.repository_for(Bucket).add(bucket)

        logger.info(
            "Shipment dispatched",
            shipment_id=str(shipment.id),
            bucket_id=str(bucket.id),
            tracking_id=tracking_id,
        )
        return str(shipment.id)
