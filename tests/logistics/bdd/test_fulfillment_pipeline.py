"""BDD tests for the fulfillment pipeline."""

from logistics.shared.errors import AlreadyShipped, BelowMinimumOrderValue
from logistics.shipment.delivery import ConfirmReceipt
from protean import current_domain
from pytest_bdd import parsers, scenarios, then, when

scenarios("features/fulfillment_pipeline.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('receipt of bucket "{bucket}" is confirmed'))
def confirm_receipt(pipeline, bucket):
    current_domain.process(ConfirmReceipt(bucket_id=pipeline.buckets[bucket]), asynchronous=False)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the consolidation is rejected with a shortfall of {shortfall:f}"))
def rejected_with_shortfall(error, shortfall):
    assert isinstance(error["exc"], BelowMinimumOrderValue)
    assert error["exc"].shortfall == shortfall


@then("the tracking is rejected as already shipped")
def rejected_as_already_shipped(error):
    assert isinstance(error["exc"], AlreadyShipped)


@then("no error is raised")
def no_error(error):
    assert error["exc"] is None
