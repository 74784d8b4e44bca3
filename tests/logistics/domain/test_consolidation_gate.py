"""Tests for the consolidation gate — threshold guard and selection checks."""

import pytest
from logistics.bucket.bucket import Bucket
from logistics.consolidation.gate import (
    DEFAULT_MINIMUM_ORDER_VALUE,
    BucketSelection,
    ConsolidationGate,
    default_minimum_order_value,
    unique_ids,
)
from logistics.order.order import Order
from logistics.shared.errors import BelowMinimumOrderValue, EmptySelection
from logistics.shared.stages import FulfillmentStage
from protean.exceptions import ValidationError


def _selection(*values, organization_id="org-1"):
    bucket = Bucket.open(organization_id)
    pending = []
    for value in values:
        order = Order.place([{"product_id": "prod-1", "quantity": 1, "unit_price": value}])
        order.record_settlement("completed")
        pending.extend((order, line) for line in order.lines_in_stage(FulfillmentStage.PENDING))
    return BucketSelection(bucket=bucket, pending=pending)


class TestThresholdGuard:
    def test_combined_value_at_or_above_minimum_passes(self):
        assert ConsolidationGate(500).check([_selection(60, 450)]) == 510.0

    def test_exact_minimum_passes(self):
        assert ConsolidationGate(500).check([_selection(500)]) == 500.0

    def test_below_minimum_reports_shortfall(self):
        with pytest.raises(BelowMinimumOrderValue) as exc:
            ConsolidationGate(500).check([_selection(300, organization_id="org-2")])
        assert exc.value.shortfall == 200.0
        assert exc.value.combined_value == 300.0
        assert exc.value.minimum_value == 500.0

    def test_selection_totals_are_combined(self):
        combined = ConsolidationGate(500).check([_selection(300), _selection(250, organization_id="org-2")])
        assert combined == 550.0

    def test_below_minimum_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            ConsolidationGate(1000).check([_selection(999.99)])


class TestSelectionChecks:
    def test_empty_selection(self):
        with pytest.raises(EmptySelection):
            ConsolidationGate(500).check([])

    def test_bucket_without_pending_lines_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            ConsolidationGate(0).check([BucketSelection(bucket=Bucket.open("org-1"))])
        assert "no pending lines" in exc.value.messages["bucket_ids"][0]

    def test_already_ordered_bucket_is_rejected(self):
        selection = _selection(600)
        selection.bucket.mark_ordered("ship-1")
        with pytest.raises(ValidationError) as exc:
            ConsolidationGate(500).check([selection])
        assert "cannot be consolidated" in exc.value.messages["bucket_ids"][0]

    def test_processing_bucket_is_accepted(self):
        selection = _selection(600)
        selection.bucket.start_processing()
        assert ConsolidationGate(500).check([selection]) == 600.0


class TestConfiguration:
    def test_default_minimum(self, monkeypatch):
        monkeypatch.delenv("MINIMUM_ORDER_VALUE", raising=False)
        assert default_minimum_order_value() == DEFAULT_MINIMUM_ORDER_VALUE == 500.0
        assert ConsolidationGate().minimum_value == 500.0

    def test_minimum_from_environment(self, monkeypatch):
        monkeypatch.setenv("MINIMUM_ORDER_VALUE", "750")
        assert ConsolidationGate().minimum_value == 750.0

    def test_explicit_minimum_wins(self, monkeypatch):
        monkeypatch.setenv("MINIMUM_ORDER_VALUE", "750")
        assert ConsolidationGate(100).minimum_value == 100


def test_unique_ids_keeps_selection_order():
    assert unique_ids(["b2", "b1", "b2", "", None]) == ["b2", "b1"]
