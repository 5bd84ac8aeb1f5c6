# src/items/handlers.py
import logging

from ingest_common.errors import ParseError, PersistError
from ingest_common.results import apply_rows

logger = logging.getLogger(__name__)

WIDTH = 2  # item_id, order_id, ...


def ingest_item(store, row):
    """Attach item_id to every order whose id matches, across all customers.

    Order ids are not unique across customers, so a collision attaches the
    item to each of them. Each matching customer is written back on its own;
    a failed write is logged and the others are still attempted.
    """
    item_id, order_id = row[0].strip(), row[1].strip()
    if not item_id:
        raise ParseError("empty item id")

    matched = updated = 0
    for customer in store.scan_all():
        if not customer.attach_item(order_id, item_id):
            continue
        matched += 1
        try:
            store.put(customer)
        except PersistError as exc:
            logger.error("item %s on order %s not saved for customer %s: %s",
                         item_id, order_id, customer.id, exc)
            continue
        updated += 1

    if not matched:
        logger.debug("item %s: no order %s in table", item_id, order_id)
    return updated


def process_items(rows, store, source=""):
    return apply_rows("items", rows, ingest_item, store, source)
