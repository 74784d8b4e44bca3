"""Directory records — organizations, animals, producers and products.

The pipeline only reads these. Catalog and organization management happen
elsewhere; the records are mirrored here so order lines can be resolved to a
recipient animal, its organization, and the producer a product is bought from.
"""

from protean.fields import Float, Identifier, String

from logistics.domain import logistics


@logistics.aggregate
class Organization:
    """An animal-hosting organization that receives consolidated goods."""

    name = String(required=True, max_length=255)
    street = String(max_length=255)
    city = String(max_length=100)
    postal_code = String(max_length=20)
    phone = String(max_length=50)


@logistics.aggregate
class Animal:
    name = String(required=True, max_length=255)
    species = String(max_length=100)
    organization_id = Identifier()


@logistics.aggregate
class Producer:
    """The vendor a purchase order is ultimately placed with."""

    name = String(required=True, max_length=255)
    contact_email = String(max_length=254)


@logistics.aggregate
class Product:
    name = String(required=True, max_length=255)
    price = Float(min_value=0.0, default=0.0)
    purchase_price = Float(min_value=0.0, default=0.0)
    producer_id = Identifier()
