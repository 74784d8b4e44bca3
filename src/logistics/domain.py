"""Logistics bounded context — Order Consolidation and Fulfillment.

Merges many small, independently paid donor orders for the same organization
into one bulk purchase placed with producers, tracks it as a physical
shipment, and reconciles delivery back to every order line. Uses CQRS because
the pipeline is a fixed, linear set of state transitions.
"""

import structlog
from protean.domain import Domain

logistics = Domain(name="logistics")

logger = structlog.get_logger(__name__)
