"""Order intake — checkout and settlement commands."""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from logistics.domain import logistics
from logistics.order.order import Order
from logistics.shared.stages import SettlementState


@logistics.command(part_of="Order")
class PlaceOrder:
    payer_id = Identifier()
    lines = Text(required=True)  # JSON: list of {product_id, animal_id, quantity, unit_price}


@logistics.command(part_of="Order")
class RecordSettlement:
    """Apply the payment collaborator's verdict to a pending order."""

    order_id = Identifier(required=True)
    settlement_state = String(required=True, max_length=20, choices=SettlementState)


@logistics.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        lines_data = json.loads(command.lines) if isinstance(command.lines, str) else command.lines
        order = Order.place(lines_data, payer_id=command.payer_id)
        current_domain.repository_for(Order).add(order)
        return str(order.id)

    @handle(RecordSettlement)
    def record_settlement(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if order.record_settlement(command.settlement_state):
            repo.add(order)
