"""Delivery confirmation — the organization closes the loop on a shipment.

ConfirmReceipt fulfils the bucket and delivers its shipment and lines.
ReportProblem escalates to the support desk and changes no status.
"""

import structlog
from protean import handle
from protean.exceptions import InvalidOperationError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from logistics.bucket.bucket import Bucket
from logistics.domain import logistics
from logistics.order.order import Order
from logistics.order.queries import orders_in_bucket
from logistics.shipment.shipment import Shipment
from logistics.support import get_support_desk

logger = structlog.get_logger(__name__)


@logistics.command(part_of="Bucket")
class ConfirmReceipt:
    bucket_id = Identifier(required=True)


@logistics.command(part_of="Bucket")
class ReportProblem:
    bucket_id = Identifier(required=True)
    description = Text()


@logistics.command_handler(part_of=Bucket)
class DeliveryHandler:
    @handle(ConfirmReceipt)
    def confirm_receipt(self, command):
        bucket_repo = current_domain.repository_for(Bucket)
        bucket = bucket_repo.get(command.bucket_id)
        if not bucket.confirm_receipt():
            logger.info("Bucket already fulfilled", bucket_id=str(bucket.id))
            return

        shipment_id = str(bucket.shipment_id)
        shipment_repo = current_domain.repository_for(Shipment)
        shipment = shipment_repo.get(shipment_id)
        shipment.mark_delivered()
        shipment_repo.add(shipment)

        order_repo = current_domain.repository_for(Order)
        for order in orders_in_bucket(bucket.id):
            order.mark_lines_delivered(shipment_id)
            order_repo.add(order)

        bucket_repo.add(bucket)
        logger.info("Receipt confirmed", bucket_id=str(bucket.id), shipment_id=shipment_id)

    @handle(ReportProblem)
    def report_problem(self, command):
        bucket_repo = current_domain.repository_for(Bucket)
        bucket = bucket_repo.get(command.bucket_id)
        bucket.report_problem(command.description)

        result = get_support_desk().escalate(
            bucket_id=str(bucket.id),
            organization_id=str(bucket.organization_id),
            description=command.description.strip(),
            shipment_id=str(bucket.shipment_id) if bucket.shipment_id else None,
            tracking_id=bucket.tracking_id,
        )
        if not result.get("accepted"):
            logger.error("Support escalation rejected", bucket_id=str(bucket.id), error=result.get("error"))
            raise InvalidOperationError(f"Problem report could not be escalated: {result.get('error')}")

        bucket_repo.add(bucket)
        logger.warning(
            "Delivery problem reported",
            bucket_id=str(bucket.id),
            organization_id=str(bucket.organization_id),
            ticket_id=result.get("ticket_id"),
        )
        return result.get("ticket_id")
