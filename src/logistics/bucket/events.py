"""Bucket domain events — the per-organization batch order lifecycle."""

from protean.fields import DateTime, Identifier, String, Text

from logistics.domain import logistics


@logistics.event(part_of="Bucket")
class BucketOpened:
    """A new collecting bucket was opened for an organization."""

    __version__ = 1

    bucket_id = Identifier(required=True)
    organization_id = Identifier(required=True)
    opened_at = DateTime(required=True)


@logistics.event(part_of="Bucket")
class BucketProcessingStarted:
    __version__ = 1

    bucket_id = Identifier(required=True)
    organization_id = Identifier(required=True)
    notes = Text()
    processed_at = DateTime(required=True)


@logistics.event(part_of="Bucket")
class BucketOrdered:
    """The bucket was consolidated into a placed shipment."""

    __version__ = 1

    bucket_id = Identifier(required=True)
    organization_id = Identifier(required=True)
    shipment_id = Identifier(required=True)
    ordered_at = DateTime(required=True)


@logistics.event(part_of="Bucket")
class BucketShipped:
    __version__ = 1

    bucket_id = Identifier(required=True)
    organization_id = Identifier(required=True)
    shipment_id = Identifier(required=True)
    tracking_id = String(required=True)
    shipped_at = DateTime(required=True)


@logistics.event(part_of="Bucket")
class BucketFulfilled:
    """The organization confirmed receipt of the shipment."""

    __version__ = 1

    bucket_id = Identifier(required=True)
    organization_id = Identifier(required=True)
    shipment_id = Identifier()
    fulfilled_at = DateTime(required=True)


@logistics.event(part_of="Bucket")
class ProblemReported:
    """The organization reported a delivery problem. No status changes."""

    __version__ = 1

    bucket_id = Identifier(required=True)
    organization_id = Identifier(required=True)
    shipment_id = Identifier()
    tracking_id = String()
    description = Text(required=True)
    reported_at = DateTime(required=True)
