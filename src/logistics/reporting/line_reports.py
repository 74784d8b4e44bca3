"""Line-level operator reports — what producers will be asked for, and what already left.

``pending_purchase_preview`` groups the pending lines of every consolidatable
bucket by producer before anything is ordered. ``list_line_history`` is the
archive of lines that already moved past pending.
"""

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from logistics.bucket.bucket import Bucket
from logistics.bucket.queries import buckets_in, pending_lines
from logistics.consolidation.exports import FOR_ORGANIZATION, UNASSIGNED_PRODUCER
from logistics.consolidation.lines import resolve_lines
from logistics.directory.lookups import UNKNOWN_NAME, DirectoryLookups
from logistics.order.queries import settled_orders
from logistics.shared.stages import CONSOLIDATABLE_STATUSES, FulfillmentStage

HISTORY_STAGES = (FulfillmentStage.ORDERED, FulfillmentStage.SHIPPED, FulfillmentStage.DELIVERED)


def pending_purchase_preview() -> list[dict]:
    """Pending lines of collecting and processing buckets, grouped by producer.

    Each product carries its total quantity and the recipients it is split
    between. Products without a producer are grouped last under the
    unassigned heading.
    """
    lookups = DirectoryLookups()
    lines = []
    for bucket in buckets_in(sorted(CONSOLIDATABLE_STATUSES, key=lambda s: s.value)):
        lines.extend(resolve_lines(bucket.id, str(bucket.organization_id), pending_lines(bucket.id), lookups))

    producers: dict[str | None, dict] = {}
    for line in lines:
        producer = producers.setdefault(
            line.producer_id,
            {
                "producer_id": line.producer_id,
                "producer_name": line.producer_name or UNASSIGNED_PRODUCER,
                "producer_email": line.producer_email or "",
                "total_value": 0.0,
                "products": {},
            },
        )
        producer["total_value"] = round(producer["total_value"] + line.value, 2)

        product = producer["products"].setdefault(
            line.product_id,
            {
                "product_id": line.product_id,
                "product_name": line.product_name,
                "total_quantity": 0,
                "recipients": [],
                "line_ids": [],
            },
        )
        product["total_quantity"] += line.quantity
        product["line_ids"].append(line.line_id)
        product["recipients"].append(
            {
                "organization_name": line.organization_name,
                "street": line.street,
                "city": line.city,
                "postal_code": line.postal_code,
                "recipient": line.animal_name if line.animal_id else FOR_ORGANIZATION,
                "quantity": line.quantity,
            }
        )

    ordered = sorted(producers.values(), key=lambda p: (p["producer_id"] is None, p["producer_name"]))
    return [{**producer, "products": list(producer["products"].values())} for producer in ordered]


def list_line_history(stage: str | None = None, search: str | None = None) -> list[dict]:
    """Lines that were ordered, shipped or delivered, most recently updated first.

    ``stage`` narrows to one of those stages. ``search`` matches product,
    organization or animal names, case-insensitively.
    """
    stages = HISTORY_STAGES
    if stage:
        if stage not in {s.value for s in HISTORY_STAGES}:
            raise ValidationError({"stage": [f"Unknown history stage {stage}"]})
        stages = (FulfillmentStage(stage),)
    query = (search or "").strip().lower()

    lookups = DirectoryLookups()
    bucket_repo = current_domain.repository_for(Bucket)
    organizations: dict[str, str] = {}

    rows = []
    for order in settled_orders():
        if not order.bucket_id:
            continue
        bucket_id = str(order.bucket_id)
        if bucket_id not in organizations:
            organization = lookups.organization(bucket_repo.get(bucket_id).organization_id)
            organizations[bucket_id] = organization.name if organization else UNKNOWN_NAME

        for line in order.lines or []:
            if FulfillmentStage(line.fulfillment_stage) not in stages:
                continue
            product = lookups.product(line.product_id)
            animal = lookups.animal(line.animal_id)
            row = {
                "line_id": str(line.id),
                "order_id": str(order.id),
                "bucket_id": bucket_id,
                "shipment_id": str(line.shipment_id) if line.shipment_id else None,
                "stage": line.fulfillment_stage,
                "quantity": line.quantity,
                "product_name": product.name if product else UNKNOWN_NAME,
                "organization_name": organizations[bucket_id],
                "animal_name": animal.name if animal else UNKNOWN_NAME,
                "tracking_id": order.tracking_id,
                "updated_at": order.updated_at,
            }
            if query and not any(
                query in row[name].lower() for name in ("product_name", "organization_name", "animal_name")
            ):
                continue
            rows.append(row)

    return sorted(rows, key=lambda row: row["updated_at"], reverse=True)
