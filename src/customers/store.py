# src/customers/store.py
import logging
from decimal import DecimalException
from typing import List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from customers.models import Customer
from ingest_common.errors import PersistError, StoreError

logger = logging.getLogger(__name__)


class CustomerTable:
    """Customer aggregates in a DynamoDB table keyed by ``ID``.

    Every write is a full overwrite. There is no conditional expression or
    version attribute, so two writers racing on the same ID resolve as
    last-write-wins; callers must serialize mutations per customer ID.
    """

    def __init__(self, table):
        self._table = table

    @classmethod
    def from_settings(cls, settings) -> "CustomerTable":
        return cls(boto3.resource("dynamodb").Table(settings.table_name))

    def get(self, customer_id: str) -> Optional[Customer]:
        try:
            res = self._table.get_item(Key={"ID": customer_id}, ConsistentRead=True)
        except (ClientError, BotoCoreError) as exc:
            raise StoreError(f"get {customer_id!r} failed: {exc}") from exc
        if "Item" not in res:
            return None
        return Customer.from_item(res["Item"])

    def put(self, customer: Customer) -> None:
        if not customer.id:
            raise PersistError("customer ID is missing")
        logger.debug("Saving customer %s", customer.id)
        try:
            self._table.put_item(Item=customer.to_item())
        except (ClientError, BotoCoreError, DecimalException, TypeError) as exc:
            raise PersistError(f"put {customer.id!r} failed: {exc}") from exc

    def scan_all(self) -> List[Customer]:
        customers: List[Customer] = []
        kwargs = {}
        while True:
            try:
                page = self._table.scan(**kwargs)
            except (ClientError, BotoCoreError) as exc:
                raise StoreError(f"scan failed: {exc}") from exc
            customers.extend(Customer.from_item(item) for item in page.get("Items", []))
            last_key = page.get("LastEvaluatedKey")
            if not last_key:
                return customers
            kwargs["ExclusiveStartKey"] = last_key
