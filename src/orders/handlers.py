# src/orders/handlers.py
from decimal import DecimalException

from boto3.dynamodb.types import DYNAMODB_CONTEXT

from customers.models import Order
from ingest_common.errors import LookupMiss, ParseError
from ingest_common.results import apply_rows

WIDTH = 3  # order_id, customer_id, amount, ...


def parse_amount(raw):
    """Parse an amount DynamoDB can store exactly (38 significant digits)."""
    try:
        amount = DYNAMODB_CONTEXT.create_decimal(raw.strip())
    except DecimalException as exc:
        raise ParseError(f"invalid amount {raw!r}: {exc!r}") from exc
    # Unparseable text comes back as NaN; InvalidOperation is not trapped.
    if not amount.is_finite() or amount < 0:
        raise ParseError(f"invalid amount {raw!r}")
    return amount


def ingest_order(store, row):
    order_id, customer_id = row[0].strip(), row[1].strip()
    amount = parse_amount(row[2])
    if not order_id:
        raise ParseError("empty order id")

    customer = store.get(customer_id)
    if customer is None:
        raise LookupMiss(f"customer {customer_id!r} not found for order {order_id!r}")

    # Not idempotent: replaying a file appends the order again.
    try:
        customer.add_order(Order(id=order_id, amount=amount))
    except DecimalException as exc:
        raise ParseError(f"total for {customer_id!r} out of range after {order_id!r}: {exc!r}") from exc
    store.put(customer)
    return customer


def process_orders(rows, store, source=""):
    return apply_rows("orders", rows, ingest_order, store, source)
