# src/customers/handlers.py
from customers.models import Customer
from ingest_common.errors import ParseError
from ingest_common.results import apply_rows

WIDTH = 2  # id, name, ...


def ingest_customer(store, row):
    # Unconditional overwrite: re-ingesting an ID drops its orders and total.
    customer_id = row[0].strip()
    if not customer_id:
        raise ParseError("empty customer id")
    customer = Customer(id=customer_id, name=row[1].strip())
    store.put(customer)
    return customer


def process_customers(rows, store, source=""):
    return apply_rows("customers", rows, ingest_customer, store, source)
