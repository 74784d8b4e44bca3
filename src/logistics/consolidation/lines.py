"""Resolved line views — an order line joined with its directory records.

These are what the purchase list, packing list and CSV export are built from.
They are computed on demand and never stored.
"""

from dataclasses import dataclass

from logistics.directory.lookups import UNKNOWN_NAME, DirectoryLookups


@dataclass(frozen=True)
class ConsolidatedLine:
    line_id: str
    order_id: str
    bucket_id: str
    organization_id: str
    organization_name: str
    street: str
    city: str
    postal_code: str
    phone: str
    product_id: str
    product_name: str
    producer_id: str | None
    producer_name: str | None
    animal_id: str | None
    animal_name: str | None
    quantity: int
    unit_price: float
    producer_email: str | None = None

    @property
    def value(self) -> float:
        return round(self.quantity * self.unit_price, 2)


def resolve_lines(bucket_id, organization_id, order_lines, lookups: DirectoryLookups | None = None):
    """Build line views for ``(order, line)`` pairs of one bucket."""
    lookups = lookups or DirectoryLookups()
    organization = lookups.organization(organization_id)

    views = []
    for order, line in order_lines:
        product = lookups.product(line.product_id)
        producer = lookups.producer(product.producer_id) if product else None
        animal = lookups.animal(line.animal_id)
        views.append(
            ConsolidatedLine(
                line_id=str(line.id),
                order_id=str(order.id),
                bucket_id=str(bucket_id),
                organization_id=str(organization_id),
                organization_name=organization.name if organization else UNKNOWN_NAME,
                street=(organization.street if organization else None) or "",
                city=(organization.city if organization else None) or "",
                postal_code=(organization.postal_code if organization else None) or "",
                phone=(organization.phone if organization else None) or "",
                product_id=str(line.product_id),
                product_name=product.name if product else UNKNOWN_NAME,
                producer_id=str(producer.id) if producer else None,
                producer_name=producer.name if producer else None,
                animal_id=str(line.animal_id) if line.animal_id else None,
                animal_name=animal.name if animal else None,
                quantity=line.quantity,
                unit_price=line.unit_price,
                producer_email=producer.contact_email if producer else None,
            )
        )
    return views
