"""Consolidation exports — supplier purchase list, packing list and CSV.

All three are views over resolved ``ConsolidatedLine`` records. The purchase
list carries no organization or pricing data because it goes to producers;
the packing list and CSV go to whoever packs and ships per organization.
"""

import csv
import io

from logistics.consolidation.lines import ConsolidatedLine

UNASSIGNED_PRODUCER = "Unassigned producer"
FOR_ORGANIZATION = "For the organization"

CSV_HEADER = ["Organization", "Street", "City", "Postal code", "Phone", "Product", "Quantity", "Line value"]
CSV_BOM = "\ufeff"


def purchase_list(lines: list[ConsolidatedLine]) -> list[dict]:
    """Quantities per product grouped by producer.

    Lines whose product has no producer are kept under an unassigned group so
    the purchased quantity always equals the consolidated quantity.
    """
    groups: dict[str | None, dict] = {}
    for line in lines:
        group = groups.setdefault(
            line.producer_id,
            {
                "producer_id": line.producer_id,
                "producer_name": line.producer_name or UNASSIGNED_PRODUCER,
                "items": {},
            },
        )
        item = group["items"].setdefault(
            line.product_id,
            {"product_id": line.product_id, "product_name": line.product_name, "quantity": 0},
        )
        item["quantity"] += line.quantity

    ordered = sorted(groups.values(), key=lambda g: (g["producer_id"] is None, g["producer_name"]))
    return [{**group, "items": list(group["items"].values())} for group in ordered]


def packing_list(lines: list[ConsolidatedLine]) -> list[dict]:
    """Per organization, what to pack for each animal and for the organization itself."""
    organizations: dict[str, dict] = {}
    for line in lines:
        organization = organizations.setdefault(
            line.organization_id,
            {
                "organization_id": line.organization_id,
                "organization_name": line.organization_name,
                "street": line.street,
                "city": line.city,
                "postal_code": line.postal_code,
                "phone": line.phone,
                "groups": {},
            },
        )
        recipient = line.animal_name if line.animal_id else FOR_ORGANIZATION
        group = organization["groups"].setdefault(
            line.animal_id,
            {"animal_id": line.animal_id, "recipient": recipient or FOR_ORGANIZATION, "items": {}},
        )
        item = group["items"].setdefault(line.product_id, {"product_name": line.product_name, "quantity": 0})
        item["quantity"] += line.quantity

    result = []
    for organization in organizations.values():
        # The organization's own group goes first, then animals by name
        groups = sorted(
            organization["groups"].values(),
            key=lambda g: (g["animal_id"] is not None, g["recipient"]),
        )
        result.append(
            {
                **organization,
                "groups": [{**group, "items": list(group["items"].values())} for group in groups],
            }
        )
    return result


def packing_rows(lines: list[ConsolidatedLine]) -> list[tuple[str, str, int, str]]:
    """Flat (organization, product, quantity, recipient) rows of the packing list."""
    return [
        (organization["organization_name"], item["product_name"], item["quantity"], group["recipient"])
        for organization in packing_list(lines)
        for group in organization["groups"]
        for item in group["items"]
    ]


def combined_csv(lines: list[ConsolidatedLine]) -> str:
    """Semicolon-delimited export, one row per organization and product, with a UTF-8 BOM."""
    rows: dict[tuple[str, str], dict] = {}
    for line in lines:
        row = rows.setdefault(
            (line.organization_id, line.product_id),
            {"line": line, "quantity": 0, "value": 0.0},
        )
        row["quantity"] += line.quantity
        row["value"] += line.value

    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=";", quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for row in rows.values():
        line = row["line"]
        writer.writerow(
            [
                line.organization_name,
                line.street,
                line.city,
                line.postal_code,
                line.phone,
                line.product_name,
                row["quantity"],
                f"{row['value']:.2f}",
            ]
        )
    return CSV_BOM + buffer.getvalue()
