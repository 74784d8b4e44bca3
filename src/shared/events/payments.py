"""Cross-domain event contracts for Payments domain events.

The payment gateway integration lives outside this repository. Logistics only
needs to know when an order's payment has settled, so this is the one
contract it consumes. It is registered as an external event via
domain.register_external_event() with a matching __type__ string so Protean's
stream deserialization works correctly.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Float, Identifier, String


class OrderSettled(BaseEvent):
    """The payment for a donor order reached a final state."""

    __version__ = 1

    order_id = Identifier(required=True)
    settlement_state = String(required=True)  # "completed" or "failed"
    amount = Float()
    settled_at = DateTime(required=True)
