"""Support desk port — abstract interface for problem escalation."""

from abc import ABC, abstractmethod


class SupportDeskPort(ABC):
    @abstractmethod
    def escalate(
        self,
        bucket_id: str,
        organization_id: str,
        description: str,
        shipment_id: str | None = None,
        tracking_id: str | None = None,
    ) -> dict:
        """Open a support ticket for a delivery problem.

        Returns:
            dict with keys: accepted (bool), ticket_id, and error when rejected
        """
        ...
