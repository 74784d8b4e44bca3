import json
from types import SimpleNamespace

import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def logistics_bed():
    from logistics.domain import logistics

    bed = DomainFixture(logistics)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(logistics_bed):
    from logistics.support import reset_support_desk

    reset_support_desk()
    with logistics_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def directory():
    """Two organizations, one animal each, one producer and two products."""
    from logistics.directory.directory import Animal, Organization, Producer, Product
    from protean import current_domain

    shelter = Organization(
        name="Happy Paws Shelter",
        street="Leśna 5",
        city="Warszawa",
        postal_code="00-001",
        phone="+48 600 100 200",
    )
    haven = Organization(name="Cat Haven", street="Polna 12", city="Kraków", postal_code="30-002", phone="+48 600 300 400")
    burek = Animal(name="Burek", species="dog", organization_id=str(shelter.id))
    mruczek = Animal(name="Mruczek", species="cat", organization_id=str(haven.id))
    petfood = Producer(name="PetFood Co", contact_email="orders@petfood.example")
    dry_food = Product(name="Dry food 10kg", price=60.0, purchase_price=40.0, producer_id=str(petfood.id))
    blanket = Product(name="Blanket", price=30.0, purchase_price=20.0)

    for record in (shelter, haven, burek, mruczek, petfood, dry_food, blanket):
        current_domain.repository_for(type(record)).add(record)

    return SimpleNamespace(
        shelter=shelter,
        haven=haven,
        burek=burek,
        mruczek=mruczek,
        petfood=petfood,
        dry_food=dry_food,
        blanket=blanket,
    )


@pytest.fixture()
def settled_order(directory):
    """Factory: place an order, settle it as completed and attach it.

    ``lines`` defaults to dry food for Burek worth ``value``.
    """
    from logistics.bucket.aggregation import attach_settled_order
    from logistics.order.checkout import PlaceOrder, RecordSettlement
    from protean import current_domain

    def _settled_order(value: float = 60.0, lines: list[dict] | None = None, attach: bool = True) -> str:
        lines = lines or [
            {
                "product_id": str(directory.dry_food.id),
                "animal_id": str(directory.burek.id),
                "quantity": 1,
                "unit_price": value,
            }
        ]
        order_id = current_domain.process(PlaceOrder(lines=json.dumps(lines)), asynchronous=False)
        current_domain.process(
            RecordSettlement(order_id=order_id, settlement_state="completed"),
            asynchronous=False,
        )
        if attach:
            attach_settled_order(order_id)
        return order_id

    return _settled_order
