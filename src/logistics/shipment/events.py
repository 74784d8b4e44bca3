"""Shipment domain events."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from logistics.domain import logistics


@logistics.event(part_of="Shipment")
class ShipmentPlaced:
    """A consolidated purchase was placed with the producers."""

    __version__ = 1

    shipment_id = Identifier(required=True)
    bucket_id = Identifier(required=True)
    organization_id = Identifier(required=True)
    total_value = Float(required=True)
    line_count = Integer(required=True)
    placed_at = DateTime(required=True)


@logistics.event(part_of="Shipment")
class ShipmentDispatched:
    __version__ = 1

    shipment_id = Identifier(required=True)
    bucket_id = Identifier(required=True)
    organization_id = Identifier(required=True)
    tracking_id = String(required=True)
    shipped_at = DateTime(required=True)


@logistics.event(part_of="Shipment")
class ShipmentDelivered:
    __version__ = 1

    shipment_id = Identifier(required=True)
    bucket_id = Identifier(required=True)
    organization_id = Identifier(required=True)
    delivered_at = DateTime(required=True)
