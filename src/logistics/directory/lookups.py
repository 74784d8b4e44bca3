"""Directory lookups — resolve order lines to animals, organizations and producers."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from logistics.directory.directory import Animal, Organization, Producer, Product

UNKNOWN_NAME = "N/A"


class DirectoryLookups:
    """Read-only resolver over directory records.

    Missing records resolve to ``None`` rather than raising, because a line
    pointing at a deleted animal or product must still flow through the
    pipeline.
    """

    def _get(self, cls, identifier):
        if not identifier:
            return None
        try:
            return current_domain.repository_for(cls).get(str(identifier))
        except ObjectNotFoundError:
            return None

    def animal(self, animal_id) -> Animal | None:
        return self._get(Animal, animal_id)

    def organization(self, organization_id) -> Organization | None:
        return self._get(Organization, organization_id)

    def product(self, product_id) -> Product | None:
        return self._get(Product, product_id)

    def producer(self, producer_id) -> Producer | None:
        return self._get(Producer, producer_id)

    def organization_id_for_animal(self, animal_id) -> str | None:
        animal = self.animal(animal_id)
        if animal is None or not animal.organization_id:
            return None
        return str(animal.organization_id)

    def organizations_for_lines(self, lines) -> list[str]:
        """Distinct organization ids referenced by ``lines``, in line order."""
        seen: list[str] = []
        for line in lines:
            organization_id = self.organization_id_for_animal(line.animal_id)
            if organization_id and organization_id not in seen:
                seen.append(organization_id)
        return seen

    def producer_id_for_product(self, product_id) -> str | None:
        product = self.product(product_id)
        if product is None or not product.producer_id:
            return None
        return str(product.producer_id)
