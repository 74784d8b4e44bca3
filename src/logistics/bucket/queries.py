"""Bucket read helpers."""

from protean.utils.globals import current_domain

from logistics.bucket.bucket import Bucket
from logistics.order.order import settled_pending_value
from logistics.order.queries import orders_in_bucket
from logistics.shared.stages import BucketStatus, FulfillmentStage


def find_collecting(organization_id) -> Bucket | None:
    repo = current_domain.repository_for(Bucket)
    found = repo._dao.query.filter(
        organization_id=str(organization_id),
        status=BucketStatus.COLLECTING.value,
    ).all()
    return found.items[0] if found.items else None


def buckets_in(statuses) -> list[Bucket]:
    repo = current_domain.repository_for(Bucket)
    buckets = []
    for status in statuses:
        buckets.extend(repo._dao.query.filter(status=status.value).limit(None).all().items)
    return sorted(buckets, key=lambda bucket: bucket.created_at)


def bucket_total(bucket_id) -> float:
    return settled_pending_value(orders_in_bucket(bucket_id))


def pending_lines(bucket_id) -> list:
    """(order, line) pairs of settled orders in the bucket that are still pending."""
    return [
        (order, line)
        for order in orders_in_bucket(bucket_id)
        if order.is_settled
        for line in order.lines_in_stage(FulfillmentStage.PENDING)
    ]
