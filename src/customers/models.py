# src/customers/models.py
"""Customer aggregate: a customer with its embedded orders and item references."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List

from boto3.dynamodb.types import DYNAMODB_CONTEXT

ZERO = Decimal("0")


@dataclass(slots=True)
class Order:
    id: str
    amount: Decimal
    item_ids: List[str] = field(default_factory=list)


@dataclass(slots=True)
class Customer:
    id: str
    name: str
    total_spent: Decimal = ZERO
    orders: List[Order] = field(default_factory=list)

    def add_order(self, order: Order) -> None:
        # DynamoDB's 38-digit context; raises decimal.Inexact/Overflow rather
        # than storing a rounded total.
        self.total_spent = DYNAMODB_CONTEXT.add(self.total_spent, order.amount)
        self.orders.append(order)

    def attach_item(self, order_id: str, item_id: str) -> int:
        """Append item_id to every order with a matching id; return the match count."""
        hits = 0
        for order in self.orders:
            if order.id == order_id:
                order.item_ids.append(item_id)
                hits += 1
        return hits

    def to_item(self) -> Dict[str, Any]:
        return {
            "ID": self.id,
            "Name": self.name,
            "TotalSpent": self.total_spent,
            "Orders": [
                {"ID": o.id, "Amount": o.amount, "ItemIDs": list(o.item_ids)}
                for o in self.orders
            ],
        }

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "Customer":
        # Older rows may carry NULL or missing lists.
        orders = [
            Order(
                id=str(raw.get("ID", "")),
                amount=Decimal(str(raw.get("Amount") or 0)),
                item_ids=[str(i) for i in (raw.get("ItemIDs") or [])],
            )
            for raw in (item.get("Orders") or [])
        ]
        return cls(
            id=str(item["ID"]),
            name=str(item.get("Name", "")),
            total_spent=Decimal(str(item.get("TotalSpent") or 0)),
            orders=orders,
        )

    def to_message(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "total_amount_spent": float(self.total_spent),
            "orders": [
                {"id": o.id, "amount": float(o.amount), "item_ids": list(o.item_ids)}
                for o in self.orders
            ],
        }
