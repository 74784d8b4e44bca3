"""Operator-correctable rejections raised by the pipeline.

All of them are ``ValidationError`` subclasses so the FastAPI exception
handlers report them as 400s, while callers can still catch the specific
type and read the structured attributes.
"""

from protean.exceptions import ValidationError


class BelowMinimumOrderValue(ValidationError):
    """The selected buckets do not add up to the minimum order value."""

    def __init__(self, combined_value: float, minimum_value: float):
        self.combined_value = round(combined_value, 2)
        self.minimum_value = round(minimum_value, 2)
        self.shortfall = round(minimum_value - combined_value, 2)
        super().__init__(
            {
                "bucket_ids": [
                    f"Combined value {self.combined_value:.2f} is below the minimum order value "
                    f"{self.minimum_value:.2f}; shortfall {self.shortfall:.2f}"
                ]
            }
        )


class EmptySelection(ValidationError):
    """No buckets were selected for consolidation."""

    def __init__(self):
        super().__init__({"bucket_ids": ["Select at least one bucket to consolidate"]})


class AlreadyShipped(ValidationError):
    """A different tracking id was supplied for an already shipped target."""

    def __init__(self, tracking_id: str, attempted: str):
        self.tracking_id = tracking_id
        self.attempted = attempted
        super().__init__(
            {"tracking_id": [f"Already shipped with tracking id {tracking_id}; refusing to overwrite with {attempted}"]}
        )


class InvalidTrackingId(ValidationError):
    def __init__(self, tracking_id: str | None, reason: str):
        self.tracking_id = tracking_id
        super().__init__({"tracking_id": [reason]})
