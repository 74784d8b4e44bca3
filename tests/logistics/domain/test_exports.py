"""Tests for consolidation exports — purchase list, packing list and CSV."""

from logistics.consolidation.exports import (
    CSV_HEADER,
    FOR_ORGANIZATION,
    UNASSIGNED_PRODUCER,
    combined_csv,
    packing_list,
    packing_rows,
    purchase_list,
)
from logistics.consolidation.lines import ConsolidatedLine

_SHELTER = {
    "organization_id": "org-1",
    "organization_name": "Happy Paws Shelter",
    "street": "Leśna 5",
    "city": "Warszawa",
    "postal_code": "00-001",
    "phone": "+48 600 100 200",
}


def _line(line_id, product_id, product_name, quantity, unit_price, producer=None, animal=None, **organization):
    org = {**_SHELTER, **organization}
    return ConsolidatedLine(
        line_id=line_id,
        order_id=f"order-{line_id}",
        bucket_id="bucket-1",
        product_id=product_id,
        product_name=product_name,
        producer_id=producer[0] if producer else None,
        producer_name=producer[1] if producer else None,
        animal_id=animal[0] if animal else None,
        animal_name=animal[1] if animal else None,
        quantity=quantity,
        unit_price=unit_price,
        **org,
    )


def _lines():
    petfood = ("producer-1", "PetFood Co")
    return [
        _line("l1", "food", "Dry food 10kg", 2, 60.0, producer=petfood, animal=("a1", "Burek")),
        _line("l2", "food", "Dry food 10kg", 3, 60.0, producer=petfood, animal=("a2", "Azor")),
        _line("l3", "blanket", "Blanket", 1, 30.0),
        _line(
            "l4",
            "food",
            "Dry food 10kg",
            1,
            60.0,
            producer=petfood,
            animal=("a3", "Mruczek"),
            organization_id="org-2",
            organization_name="Cat Haven",
            street="Polna 12",
            city="Kraków",
            postal_code="30-002",
            phone="",
        ),
    ]


class TestPurchaseList:
    def test_quantities_are_conserved(self):
        lines = _lines()
        groups = purchase_list(lines)
        purchased = sum(item["quantity"] for group in groups for item in group["items"])
        assert purchased == sum(line.quantity for line in lines)

    def test_grouped_by_producer_with_unassigned_last(self):
        groups = purchase_list(_lines())
        assert [group["producer_name"] for group in groups] == ["PetFood Co", UNASSIGNED_PRODUCER]
        assert groups[0]["items"] == [{"product_id": "food", "product_name": "Dry food 10kg", "quantity": 6}]

    def test_carries_no_organization_or_pricing(self):
        group = purchase_list(_lines())[0]
        assert "organization_name" not in group
        assert all("unit_price" not in item and "value" not in item for item in group["items"])


class TestPackingList:
    def test_one_entry_per_organization(self):
        organizations = packing_list(_lines())
        assert [org["organization_name"] for org in organizations] == ["Happy Paws Shelter", "Cat Haven"]

    def test_grouped_by_recipient(self):
        shelter = packing_list(_lines())[0]
        assert [group["recipient"] for group in shelter["groups"]] == [FOR_ORGANIZATION, "Azor", "Burek"]
        assert shelter["groups"][0]["items"] == [{"product_name": "Blanket", "quantity": 1}]

    def test_rows(self):
        rows = packing_rows(_lines())
        assert ("Happy Paws Shelter", "Dry food 10kg", 2, "Burek") in rows
        assert ("Cat Haven", "Dry food 10kg", 1, "Mruczek") in rows
        assert sum(quantity for _, _, quantity, _ in rows) == 7


class TestCombinedCsv:
    def test_starts_with_bom_and_header(self):
        content = combined_csv(_lines())
        assert content.startswith("\ufeff")
        header = content[1:].split("\n")[0]
        assert header == ";".join(f'"{column}"' for column in CSV_HEADER)

    def test_one_row_per_organization_and_product(self):
        rows = combined_csv(_lines())[1:].strip("\n").split("\n")[1:]
        assert rows == [
            '"Happy Paws Shelter";"Leśna 5";"Warszawa";"00-001";"+48 600 100 200";"Dry food 10kg";"5";"300.00"',
            '"Happy Paws Shelter";"Leśna 5";"Warszawa";"00-001";"+48 600 100 200";"Blanket";"1";"30.00"',
            '"Cat Haven";"Polna 12";"Kraków";"30-002";"";"Dry food 10kg";"1";"60.00"',
        ]

    def test_delimiter_inside_values_is_quoted(self):
        line = _line("l1", "p", "Toy; squeaky", 1, 5.0, organization_name='Shelter "North"')
        row = combined_csv([line]).split("\n")[1]
        assert row.startswith('"Shelter ""North""";')
        assert '"Toy; squeaky"' in row

    def test_empty_export_has_header_only(self):
        assert combined_csv([]) == "\ufeff" + ";".join(f'"{c}"' for c in CSV_HEADER) + "\n"
