"""Shared BDD fixtures and step definitions for the fulfillment pipeline."""

import json
from types import SimpleNamespace

import pytest
from logistics.bucket.bucket import Bucket
from logistics.bucket.queries import bucket_total
from logistics.consolidation.consolidation import ConsolidateBuckets
from logistics.order.order import Order
from logistics.order.queries import orders_in_bucket
from logistics.shipment.shipment import Shipment
from logistics.shipment.tracking import RecordTracking
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when


@pytest.fixture()
def pipeline():
    """Labels used in the feature files, mapped to real identifiers."""
    return SimpleNamespace(orders={}, buckets={}, shipments={})


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


def _settle(directory, settled_order, pipeline, label, value, animal):
    line = {
        "product_id": str(directory.dry_food.id),
        "animal_id": str(getattr(directory, animal.lower()).id),
        "quantity": 1,
        "unit_price": value,
    }
    order_id = settled_order(lines=[line])
    pipeline.orders[label] = order_id
    return str(current_domain.repository_for(Order).get(order_id).bucket_id)


# ---------------------------------------------------------------------------
# Given / When steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('order "{label}" worth {value:f} for {animal} settled into bucket "{bucket}"'))
def order_settled_into_bucket(directory, settled_order, pipeline, label, value, animal, bucket):
    bucket_id = _settle(directory, settled_order, pipeline, label, value, animal)
    assert pipeline.buckets.setdefault(bucket, bucket_id) == bucket_id


@when(parsers.cfparse('order "{label}" worth {value:f} for {animal} settles'))
def order_settles(directory, settled_order, pipeline, label, value, animal):
    _settle(directory, settled_order, pipeline, label, value, animal)


@given(parsers.cfparse('bucket "{bucket}" is consolidated with a minimum of {minimum:f} as shipment "{shipment}"'))
@when(parsers.cfparse('bucket "{bucket}" is consolidated with a minimum of {minimum:f} as shipment "{shipment}"'))
def bucket_consolidated(pipeline, bucket, minimum, shipment):
    command = ConsolidateBuckets(bucket_ids=json.dumps([pipeline.buckets[bucket]]), minimum_value=minimum)
    result = current_domain.process(command, asynchronous=False)
    [pipeline.shipments[shipment]] = result["shipment_ids"]


@when(parsers.cfparse('consolidating bucket "{bucket}" with a minimum of {minimum:f} is attempted'))
def consolidation_attempted(pipeline, error, bucket, minimum):
    command = ConsolidateBuckets(bucket_ids=json.dumps([pipeline.buckets[bucket]]), minimum_value=minimum)
    try:
        current_domain.process(command, asynchronous=False)
    except ValidationError as exc:
        error["exc"] = exc


@given(parsers.cfparse('tracking id "{tracking_id}" is recorded for shipment "{shipment}"'))
@when(parsers.cfparse('tracking id "{tracking_id}" is recorded for shipment "{shipment}"'))
def tracking_recorded(pipeline, error, tracking_id, shipment):
    error["exc"] = None
    command = RecordTracking(target_id=pipeline.shipments[shipment], tracking_id=tracking_id)
    try:
        current_domain.process(command, asynchronous=False)
    except ValidationError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('a new collecting bucket "{bucket}" is opened for order "{label}"'))
def new_bucket_opened(pipeline, bucket, label):
    bucket_id = str(current_domain.repository_for(Order).get(pipeline.orders[label]).bucket_id)
    assert bucket_id not in pipeline.buckets.values()
    pipeline.buckets[bucket] = bucket_id
    assert current_domain.repository_for(Bucket).get(bucket_id).status == "collecting"


@then(parsers.cfparse('order "{label}" joins bucket "{bucket}"'))
def order_joins_bucket(pipeline, label, bucket):
    order = current_domain.repository_for(Order).get(pipeline.orders[label])
    assert str(order.bucket_id) == pipeline.buckets[bucket]


@then(parsers.cfparse('bucket "{bucket}" totals {value:f}'))
def bucket_totals(pipeline, bucket, value):
    assert bucket_total(pipeline.buckets[bucket]) == value


@then(parsers.cfparse('bucket "{bucket}" is "{status}"'))
def bucket_status_is(pipeline, bucket, status):
    assert current_domain.repository_for(Bucket).get(pipeline.buckets[bucket]).status == status


@then(parsers.cfparse('every line in bucket "{bucket}" is "{stage}"'))
def every_line_is(pipeline, bucket, stage):
    lines = [line for order in orders_in_bucket(pipeline.buckets[bucket]) for line in order.lines]
    assert lines
    assert all(line.fulfillment_stage == stage for line in lines)


@then(parsers.cfparse('shipment "{shipment}" has tracking id "{tracking_id}"'))
def shipment_tracking_id(pipeline, shipment, tracking_id):
    assert current_domain.repository_for(Shipment).get(pipeline.shipments[shipment]).tracking_id == tracking_id


@then(parsers.cfparse('shipment "{shipment}" is "{status}"'))
def shipment_status_is(pipeline, shipment, status):
    assert current_domain.repository_for(Shipment).get(pipeline.shipments[shipment]).status == status
