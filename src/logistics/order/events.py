"""Order domain events — immutable facts about donor orders and their lines."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from logistics.domain import logistics


@logistics.event(part_of="Order")
class OrderPlaced:
    """A donor completed checkout; payment has not settled yet."""

    __version__ = 1

    order_id = Identifier(required=True)
    payer_id = Identifier()
    total_value = Float(required=True)
    line_count = Integer(required=True)
    lines = Text(required=True)  # JSON list of line dicts
    placed_at = DateTime(required=True)


@logistics.event(part_of="Order")
class SettlementRecorded:
    """The payment collaborator settled the order as completed or failed."""

    __version__ = 1

    order_id = Identifier(required=True)
    settlement_state = String(required=True)
    settled_at = DateTime(required=True)


@logistics.event(part_of="Order")
class OrderAttachedToBucket:
    __version__ = 1

    order_id = Identifier(required=True)
    bucket_id = Identifier(required=True)
    organization_id = Identifier(required=True)
    pending_value = Float(required=True)
    attached_at = DateTime(required=True)


@logistics.event(part_of="Order")
class OrderLinesAdvanced:
    """One or more lines moved forward in the fulfillment stage machine."""

    __version__ = 1

    order_id = Identifier(required=True)
    line_ids = Text(required=True)  # JSON list of line IDs
    fulfillment_stage = String(required=True)
    shipment_id = Identifier()
    advanced_at = DateTime(required=True)
