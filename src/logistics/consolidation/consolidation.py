"""Bucket consolidation — turn selected buckets into placed shipments.

Totals are recomputed from freshly loaded orders, the gate validates the
whole selection, and only then are shipments created and lines, orders and
buckets advanced. Everything is persisted in the handler's unit of work, so
the selection is ordered entirely or not at all.
"""

import json

import structlog
from protean import handle
from protean.fields import Float, Text
from protean.utils.globals import current_domain

from logistics.bucket.bucket import Bucket
from logistics.bucket.queries import pending_lines
from logistics.consolidation.exports import combined_csv, packing_list, purchase_list
from logistics.consolidation.gate import BucketSelection, ConsolidationGate, unique_ids
from logistics.consolidation.lines import resolve_lines
from logistics.directory.lookups import DirectoryLookups
from logistics.domain import logistics
from logistics.order.order import Order
from logistics.shared.errors import EmptySelection
from logistics.shipment.shipment import Shipment

logger = structlog.get_logger(__name__)


@logistics.command(part_of="Shipment")
class ConsolidateBuckets:
    """Order the pending lines of the selected buckets from their producers."""

    bucket_ids = Text(required=True)  # JSON list of bucket IDs
    minimum_value = Float(min_value=0.0)


@logistics.command_handler(part_of=Shipment)
class ConsolidationHandler:
    @handle(ConsolidateBuckets)
    def consolidate(self, command):
        raw_ids = json.loads(command.bucket_ids) if isinstance(command.bucket_ids, str) else command.bucket_ids
        bucket_ids = unique_ids(raw_ids)
        if not bucket_ids:
            raise EmptySelection()

        bucket_repo = current_domain.repository_for(Bucket)
        selections = [
            BucketSelection(bucket=bucket, pending=pending_lines(bucket.id))
            for bucket in (bucket_repo.get(bucket_id) for bucket_id in bucket_ids)
        ]

        gate = ConsolidationGate(command.minimum_value)
        combined_value = gate.check(selections)

        lookups = DirectoryLookups()
        order_repo = current_domain.repository_for(Order)
        shipment_repo = current_domain.repository_for(Shipment)

        shipment_ids = []
        lines = []
        for selection in selections:
            bucket = selection.bucket
            organization_id = str(bucket.organization_id)
            lines.extend(resolve_lines(bucket.id, organization_id, selection.pending, lookups))

            shipment = Shipment.place(
                bucket_id=str(bucket.id),
                organization_id=organization_id,
                total_value=selection.total_value,
                line_count=len(selection.pending),
            )
            shipment_id = str(shipment.id)
            shipment_repo.add(shipment)

            for order in selection.orders:
                order.mark_lines_ordered(shipment_id)
                order_repo.add(order)

            bucket.mark_ordered(shipment_id)
            bucket_repo.add(bucket)
            shipment_ids.append(shipment_id)

        logger.info(
            "Buckets consolidated",
            bucket_ids=bucket_ids,
            shipment_ids=shipment_ids,
            combined_value=combined_value,
            minimum_value=gate.minimum_value,
        )

        return {
            "shipment_ids": shipment_ids,
            "combined_value": combined_value,
            "purchase_list": purchase_list(lines),
            "packing_list": packing_list(lines),
            "csv": combined_csv(lines),
        }
