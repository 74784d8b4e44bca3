"""Fake support desk — records escalations in memory for tests and development."""

from datetime import UTC, datetime
from uuid import uuid4

from logistics.support.port import SupportDeskPort


class FakeSupportDesk(SupportDeskPort):
    """Support desk that accepts every escalation by default."""

    def __init__(self):
        self.should_succeed = True
        self.failure_reason = "Support desk unavailable"
        self.tickets: list[dict] = []

    def configure(self, should_succeed: bool = True, failure_reason: str = "Support desk unavailable"):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def escalate(
        self,
        bucket_id: str,
        organization_id: str,
        description: str,
        shipment_id: str | None = None,
        tracking_id: str | None = None,
    ) -> dict:
        if not self.should_succeed:
            return {"accepted": False, "ticket_id": None, "error": self.failure_reason}

        ticket = {
            "ticket_id": f"TICKET-{uuid4().hex[:8].upper()}",
            "bucket_id": bucket_id,
            "organization_id": organization_id,
            "shipment_id": shipment_id,
            "tracking_id": tracking_id,
            "description": description,
            "opened_at": datetime.now(UTC).isoformat(),
        }
        self.tickets.append(ticket)
        return {"accepted": True, "ticket_id": ticket["ticket_id"]}
