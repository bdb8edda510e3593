from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field
from orderflow.modules.orders.enums import OrderStatus, Priority, OrderChangeType

# In-memory records held by the order store. Nothing here is persisted.

class LineItem(BaseModel):
    id: str
    name: str
    quantity: int = Field(..., ge=1)
    price: Decimal = Field(..., ge=0, description="Unit price")

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

class StockItem(BaseModel):
    id: str
    name: str
    quantity: int = Field(..., ge=1)
    sku: str
    location: str = Field(..., description="Warehouse bin, e.g. A1-B2")
    available: int = Field(0, ge=0, description="Units on hand")

class TrackingEvent(BaseModel):
    """A shipment progress entry. `status` is a free-text label, not an OrderStatus."""
    id: str
    status: str
    description: str
    timestamp: datetime
    location: str

class FulfillmentDetails(BaseModel):
    priority: Priority = Priority.MEDIUM
    assigned_to: str | None = None
    due_date: datetime
    items: List[StockItem] = []
    notes: str | None = None

class Order(BaseModel):
    id: str
    customer_name: str
    customer_email: str | None = None
    status: OrderStatus = OrderStatus.PENDING
    total: Decimal = Field(..., ge=0)
    created_at: datetime
    estimated_delivery: datetime | None = None
    tracking_number: str | None = None
    shipping_address: str = ""
    payment_method: str = ""
    items: List[LineItem] = []

    # Warehouse-facing data, present only for orders on the fulfillment board
    fulfillment: FulfillmentDetails | None = None
    # Append-only, chronological
    events: List[TrackingEvent] = []

    model_config = ConfigDict(validate_assignment=True)

    @computed_field
    @property
    def items_total(self) -> Decimal:
        """Sum of quantity x unit price over the line items"""
        return sum((item.subtotal for item in self.items), Decimal("0"))

class OrderChange(BaseModel):
    """A single mutation published by the order store to its subscribers"""
    type: OrderChangeType
    order_id: str
    old_status: OrderStatus | None = None
    new_status: OrderStatus | None = None
    event: Optional[TrackingEvent] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
