"""Consolidation gate — decides whether a bucket selection may be ordered.

The gate only inspects already loaded state. Every check runs before the
command handler mutates anything, so a rejected selection leaves all buckets,
orders and lines untouched.
"""

import os
from dataclasses import dataclass, field

from protean.exceptions import ValidationError

from logistics.bucket.bucket import Bucket
from logistics.shared.errors import BelowMinimumOrderValue, EmptySelection
from logistics.shared.stages import CONSOLIDATABLE_STATUSES

DEFAULT_MINIMUM_ORDER_VALUE = 500.0


def default_minimum_order_value() -> float:
    return float(os.environ.get("MINIMUM_ORDER_VALUE", DEFAULT_MINIMUM_ORDER_VALUE))


def unique_ids(bucket_ids) -> list[str]:
    """Selected ids in selection order, without duplicates."""
    seen: list[str] = []
    for bucket_id in bucket_ids or []:
        if bucket_id and str(bucket_id) not in seen:
            seen.append(str(bucket_id))
    return seen


@dataclass
class BucketSelection:
    bucket: Bucket
    pending: list = field(default_factory=list)  # (order, line) pairs

    @property
    def total_value(self) -> float:
        return round(sum(line.value for _, line in self.pending), 2)

    @property
    def orders(self) -> list:
        distinct = {}
        for order, _ in self.pending:
            distinct.setdefault(str(order.id), order)
        return list(distinct.values())


class ConsolidationGate:
    def __init__(self, minimum_value: float | None = None):
        self.minimum_value = default_minimum_order_value() if minimum_value is None else minimum_value

    def check(self, selections: list[BucketSelection]) -> float:
        """Validate the selection and return its combined value."""
        if not selections:
            raise EmptySelection()

        for selection in selections:
            bucket = selection.bucket
            if bucket.current_status not in CONSOLIDATABLE_STATUSES:
                raise ValidationError({"bucket_ids": [f"Bucket {bucket.id} is {bucket.status} and cannot be consolidated"]})
            if not selection.pending:
                raise ValidationError({"bucket_ids": [f"Bucket {bucket.id} has no pending lines"]})

        combined_value = round(sum(selection.total_value for selection in selections), 2)
        if combined_value < self.minimum_value:
            raise BelowMinimumOrderValue(combined_value, self.minimum_value)
        return combined_value
