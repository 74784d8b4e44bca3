"""Application tests for order intake commands."""

import json

import pytest
from logistics.order.checkout import PlaceOrder, RecordSettlement
from logistics.order.order import Order
from logistics.shared.stages import SettlementState
from protean import current_domain
from protean.exceptions import ValidationError


def _place(**overrides):
    lines = [{"product_id": "prod-1", "animal_id": "animal-1", "quantity": 3, "unit_price": 20.0}]
    return current_domain.process(
        PlaceOrder(lines=json.dumps(overrides.pop("lines", lines)), **overrides),
        asynchronous=False,
    )


class TestPlaceOrder:
    def test_creates_pending_order(self):
        order_id = _place(payer_id="donor-1")
        order = current_domain.repository_for(Order).get(order_id)
        assert order.settlement_state == SettlementState.PENDING.value
        assert order.total_value == 60.0
        assert len(order.lines) == 1

    def test_guest_checkout(self):
        order = current_domain.repository_for(Order).get(_place())
        assert order.payer_id is None

    def test_requires_lines(self):
        with pytest.raises(ValidationError):
            _place(lines=[])


class TestRecordSettlement:
    def test_completed(self):
        order_id = _place()
        current_domain.process(RecordSettlement(order_id=order_id, settlement_state="completed"), asynchronous=False)
        order = current_domain.repository_for(Order).get(order_id)
        assert order.is_settled

    def test_repeat_is_noop(self):
        order_id = _place()
        command = RecordSettlement(order_id=order_id, settlement_state="completed")
        current_domain.process(command, asynchronous=False)
        first = current_domain.repository_for(Order).get(order_id).settled_at
        current_domain.process(command, asynchronous=False)
        assert current_domain.repository_for(Order).get(order_id).settled_at == first

    def test_failed_after_completed_is_rejected(self):
        order_id = _place()
        current_domain.process(RecordSettlement(order_id=order_id, settlement_state="completed"), asynchronous=False)
        with pytest.raises(ValidationError):
            current_domain.process(RecordSettlement(order_id=order_id, settlement_state="failed"), asynchronous=False)

    def test_unknown_state_is_rejected(self):
        with pytest.raises(ValidationError):
            RecordSettlement(order_id="order-1", settlement_state="refunded")
