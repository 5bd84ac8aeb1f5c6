from decimal import Decimal

from customers.handlers import ingest_customer, process_customers
from orders.handlers import ingest_order


def test_customer_row_creates_empty_aggregate(store):
    ingest_customer(store, ["C1", "Alice"])

    customer = store.get("C1")
    assert customer.id == "C1"
    assert customer.name == "Alice"
    assert customer.orders == []
    assert customer.total_spent == Decimal("0")


def test_extra_columns_are_ignored(store):
    ingest_customer(store, ["C1", "Alice", "alice@example.com", "gold"])
    assert store.get("C1").name == "Alice"


def test_reingesting_customer_resets_orders_and_total(store):
    ingest_customer(store, ["C1", "Alice"])
    ingest_order(store, ["O1", "C1", "42.50"])
    assert store.get("C1").total_spent == Decimal("42.50")

    ingest_customer(store, ["C1", "Alice Smith"])

    customer = store.get("C1")
    assert customer.name == "Alice Smith"
    assert customer.orders == []
    assert customer.total_spent == Decimal("0")


def test_process_customers_skips_bad_rows_and_keeps_going(store, table):
    table.fail_put_ids.add("C2")
    rows = [["C1", "Alice"], ["", "Ghost"], ["C2", "Bob"], ["C3", "Carol"]]

    result = process_customers(rows, store, source="customers.csv")

    assert (result.applied, result.skipped) == (2, 2)
    assert sorted(table.items) == ["C1", "C3"]
