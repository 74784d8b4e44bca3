"""Operator read side — what can be consolidated, and what could not be routed."""

from protean.utils.globals import current_domain

from logistics.bucket.queries import buckets_in, pending_lines
from logistics.consolidation.gate import default_minimum_order_value
from logistics.consolidation.lines import resolve_lines
from logistics.directory.lookups import UNKNOWN_NAME, DirectoryLookups
from logistics.order.queries import orders_in_bucket, unassigned_settled_orders
from logistics.shared.stages import CONSOLIDATABLE_STATUSES
from logistics.shipment.shipment import Shipment


def list_candidate_buckets(minimum_value: float | None = None) -> list[dict]:
    """Collecting and processing buckets with pending lines, oldest first."""
    minimum_value = default_minimum_order_value() if minimum_value is None else minimum_value
    lookups = DirectoryLookups()

    candidates = []
    for bucket in buckets_in(sorted(CONSOLIDATABLE_STATUSES, key=lambda s: s.value)):
        pending = pending_lines(bucket.id)
        if not pending:
            continue

        organization = lookups.organization(bucket.organization_id)
        total_value = round(sum(line.value for _, line in pending), 2)
        candidates.append(
            {
                "bucket_id": str(bucket.id),
                "organization_id": str(bucket.organization_id),
                "organization_name": organization.name if organization else UNKNOWN_NAME,
                "city": organization.city if organization else None,
                "status": bucket.status,
                "created_at": bucket.created_at,
                "total_value": total_value,
                "order_count": len({str(order.id) for order, _ in pending}),
                "line_count": len(pending),
                "item_count": sum(line.quantity for _, line in pending),
                "meets_minimum": total_value >= minimum_value,
                "shortfall": max(round(minimum_value - total_value, 2), 0.0),
            }
        )
    return candidates


def list_unassigned_orders() -> list[dict]:
    return [
        {
            "order_id": str(order.id),
            "payer_id": str(order.payer_id) if order.payer_id else None,
            "total_value": order.total_value,
            "line_count": len(order.lines or []),
            "settled_at": order.settled_at,
        }
        for order in unassigned_settled_orders()
    ]


def consolidated_lines(shipment_ids) -> list:
    """Line views of already placed shipments, for regenerating exports."""
    lookups = DirectoryLookups()
    shipment_repo = current_domain.repository_for(Shipment)

    lines = []
    for shipment_id in shipment_ids:
        shipment = shipment_repo.get(str(shipment_id))
        pairs = [
            (order, line)
            for order in orders_in_bucket(shipment.bucket_id)
            for line in (order.lines or [])
            if str(line.shipment_id) == str(shipment.id)
        ]
        lines.extend(resolve_lines(shipment.bucket_id, shipment.organization_id, pairs, lookups))
    return lines
