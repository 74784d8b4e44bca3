"""Order read helpers shared by aggregation, consolidation and reporting.

Repository queries default to a page of 100 records; every helper here reads
with `limit(None)` so large buckets are seen whole.
"""

from protean.utils.globals import current_domain

from logistics.order.order import Order
from logistics.shared.stages import SettlementState


def orders_in_bucket(bucket_id) -> list[Order]:
    repo = current_domain.repository_for(Order)
    return repo._dao.query.filter(bucket_id=str(bucket_id)).limit(None).all().items


def settled_orders() -> list[Order]:
    repo = current_domain.repository_for(Order)
    return repo._dao.query.filter(settlement_state=SettlementState.COMPLETED.value).limit(None).all().items


def unassigned_settled_orders() -> list[Order]:
    """Settled orders that could not be routed to any organization bucket."""
    return [order for order in settled_orders() if not order.bucket_id]
