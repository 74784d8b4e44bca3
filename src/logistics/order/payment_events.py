"""Inbound cross-domain event handler — Logistics reacts to Payment events.

Listens for OrderSettled events from the Payments domain, records the verdict
on the order and, for completed payments, attaches the order to its
organization's collecting bucket.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.payments import OrderSettled

from logistics.bucket.aggregation import attach_settled_order
from logistics.domain import logistics
from logistics.order.checkout import RecordSettlement
from logistics.order.order import Order
from logistics.shared.stages import SettlementState

logger = structlog.get_logger(__name__)

# Register external event so Protean can deserialize it
logistics.register_external_event(OrderSettled, "Payments.OrderSettled.v1")


@logistics.event_handler(part_of=Order, stream_category="payments::payment")
class PaymentSettlementEventHandler:
    """Reacts to Payment domain events to feed settled orders into buckets."""

    @handle(OrderSettled)
    def on_order_settled(self, event: OrderSettled) -> None:
        logger.info(
            "Recording order settlement from payments",
            order_id=str(event.order_id),
            settlement_state=event.settlement_state,
        )
        current_domain.process(
            RecordSettlement(order_id=event.order_id, settlement_state=event.settlement_state),
            asynchronous=False,
        )

        if event.settlement_state == SettlementState.COMPLETED.value:
            attach_settled_order(event.order_id)
