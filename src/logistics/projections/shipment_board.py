"""Shipment board — operator view of every placed shipment and its progress."""

from protean.core.projector import on
from protean.fields import DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from logistics.directory.lookups import UNKNOWN_NAME, DirectoryLookups
from logistics.domain import logistics
from logistics.shared.stages import ShipmentStatus
from logistics.shipment.events import ShipmentDelivered, ShipmentDispatched, ShipmentPlaced
from logistics.shipment.shipment import Shipment


@logistics.projection
class ShipmentBoardView:
    shipment_id = Identifier(identifier=True, required=True)
    bucket_id = Identifier(required=True)
    organization_id = Identifier(required=True)
    organization_name = String()
    city = String()
    status = String(required=True)
    tracking_id = String()
    total_value = Float()
    line_count = Integer()
    placed_at = DateTime()
    shipped_at = DateTime()
    delivered_at = DateTime()


@logistics.projector(projector_for=ShipmentBoardView, aggregates=[Shipment])
class ShipmentBoardProjector:
    @on(ShipmentPlaced)
    def on_shipment_placed(self, event):
        organization = DirectoryLookups().organization(event.organization_id)
        current_domain.repository_for(ShipmentBoardView).add(
            ShipmentBoardView(
                shipment_id=event.shipment_id,
                bucket_id=event.bucket_id,
                organization_id=event.organization_id,
                organization_name=organization.name if organization else UNKNOWN_NAME,
                city=organization.city if organization else None,
                status=ShipmentStatus.PLACED.value,
                total_value=event.total_value,
                line_count=event.line_count,
                placed_at=event.placed_at,
            )
        )

    @on(ShipmentDispatched)
    def on_shipment_dispatched(self, event):
        repo = current_domain.repository_for(ShipmentBoardView)
        view = repo.get(event.shipment_id)
        view.status = ShipmentStatus.SHIPPED.value
        view.tracking_id = event.tracking_id
        view.shipped_at = event.shipped_at
        repo.add(view)

    @on(ShipmentDelivered)
    def on_shipment_delivered(self, event):
        repo = current_domain.repository_for(ShipmentBoardView)
        view = repo.get(event.shipment_id)
        view.status = ShipmentStatus.DELIVERED.value
        view.delivered_at = event.delivered_at
        repo.add(view)


def shipment_board(status: str | None = None) -> list[ShipmentBoardView]:
    repo = current_domain.repository_for(ShipmentBoardView)
    query = repo._dao.query.filter(status=status) if status else repo._dao.query
    return sorted(query.limit(None).all().items, key=lambda view: view.placed_at, reverse=True)
