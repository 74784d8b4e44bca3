"""Batch aggregation — attach settled orders to their organization's bucket.

Only one collecting bucket may exist per organization. Find-or-create runs
under a per-organization lock, and the unique ``collecting_key`` rejects a
duplicate that slips past the lock (another process, another worker). On that
conflict the attach is retried, and the retry finds the winner's bucket.
"""

import threading
from collections import defaultdict

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from logistics.bucket.bucket import Bucket
from logistics.bucket.queries import find_collecting
from logistics.directory.lookups import DirectoryLookups
from logistics.domain import logistics
from logistics.order.order import Order

logger = structlog.get_logger(__name__)

_MAX_ATTACH_ATTEMPTS = 3

_registry_lock = threading.Lock()
_organization_locks: dict[str, threading.Lock] = defaultdict(threading.Lock)


def organization_lock(organization_id) -> threading.Lock:
    with _registry_lock:
        return _organization_locks[str(organization_id)]


@logistics.command(part_of="Bucket")
class AttachSettledOrder:
    order_id = Identifier(required=True)


@logistics.command_handler(part_of=Bucket)
class BatchAggregationHandler:
    @handle(AttachSettledOrder)
    def attach_settled_order(self, command):
        order_repo = current_domain.repository_for(Order)
        order = order_repo.get(command.order_id)

        if not order.is_settled:
            raise ValidationError({"settlement_state": ["Only settled orders can be attached to a bucket"]})
        if order.bucket_id:
            return str(order.bucket_id)

        organization_ids = DirectoryLookups().organizations_for_lines(order.lines)
        if not organization_ids:
            logger.warning("Settled order has no resolvable organization", order_id=str(order.id))
            return None

        organization_id = organization_ids[0]
        if len(organization_ids) > 1:
            logger.warning(
                "Order spans several organizations; routing to the first",
                order_id=str(order.id),
                organization_id=organization_id,
                misrouted_organization_ids=organization_ids[1:],
            )

        bucket = find_collecting(organization_id)
        if bucket is None:
            bucket = Bucket.open(organization_id)
            current_domain.repository_for(Bucket).add(bucket)
            logger.info("Opened collecting bucket", bucket_id=str(bucket.id), organization_id=organization_id)

        order.assign_to_bucket(str(bucket.id), organization_id)
        order_repo.add(order)

        logger.info(
            "Attached settled order to bucket",
            order_id=str(order.id),
            bucket_id=str(bucket.id),
            organization_id=organization_id,
        )
        return str(bucket.id)


def attach_settled_order(order_id) -> str | None:
    """Attach a settled order, serialized per organization.

    Returns the bucket id, or None when the order has no resolvable
    organization and stays unassigned.
    """
    order = current_domain.repository_for(Order).get(str(order_id))
    organization_ids = DirectoryLookups().organizations_for_lines(order.lines or [])
    lock_key = organization_ids[0] if organization_ids else str(order_id)

    for attempt in range(1, _MAX_ATTACH_ATTEMPTS + 1):
        try:
            with organization_lock(lock_key):
                return current_domain.process(AttachSettledOrder(order_id=str(order_id)), asynchronous=False)
        except ValidationError as exc:
            if "collecting_key" not in exc.messages or attempt == _MAX_ATTACH_ATTEMPTS:
                raise
            logger.warning(
                "Collecting bucket conflict; retrying attach",
                order_id=str(order_id),
                organization_id=lock_key,
                attempt=attempt,
            )
