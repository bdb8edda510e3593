from decimal import Decimal
from pydantic import BaseModel, Field, computed_field
from orderflow.modules.orders import transitions
from orderflow.modules.orders.enums import OrderStatus
from orderflow.modules.orders.models import Order

class OrderStats(BaseModel):
    """Dashboard rollup. Per-status counts always sum to `total`."""
    total: int = 0
    pending: int = 0
    processing: int = 0
    shipped: int = 0
    delivered: int = 0
    cancelled: int = 0
    revenue: Decimal = Field(Decimal("0.00"), description="Sum of totals across every status")

    def count(self, status: OrderStatus) -> int:
        return getattr(self, OrderStatus(status).value)

class TransitionRequest(BaseModel):
    """Schema for moving an order to another status"""
    status: OrderStatus

class OrderResponse(Order):
    """Public order data"""

    @computed_field
    @property
    def can_advance(self) -> bool:
        return transitions.can_advance(self.status)

    @computed_field
    @property
    def next_status(self) -> OrderStatus | None:
        if not transitions.can_advance(self.status):
            return None
        return transitions.next_status(self.status)
