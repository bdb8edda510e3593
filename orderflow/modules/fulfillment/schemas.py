from datetime import datetime
from decimal import Decimal
from typing import List
from pydantic import BaseModel
from orderflow.modules.orders.enums import OrderStatus, Priority
from orderflow.modules.orders.models import Order, StockItem

class FulfillmentOrder(BaseModel):
    """Warehouse-facing projection of an order"""
    id: str
    customer_name: str
    status: OrderStatus
    priority: Priority
    assigned_to: str | None = None
    due_date: datetime
    items: List[StockItem] = []
    total: Decimal
    created_at: datetime
    notes: str | None = None

    @classmethod
    def from_order(cls, order: Order) -> "FulfillmentOrder":
        details = order.fulfillment
        if details is None:
            raise ValueError(f"Order {order.id} has no fulfillment details")
        return cls(
            id=order.id,
            customer_name=order.customer_name,
            status=order.status,
            priority=details.priority,
            assigned_to=details.assigned_to,
            due_date=details.due_date,
            items=details.items,
            total=order.total,
            created_at=order.created_at,
            notes=details.notes,
        )

class FulfillmentStats(BaseModel):
    total: int = 0
    active: int = 0
    overdue: int = 0
    urgent: int = 0
    completed: int = 0
