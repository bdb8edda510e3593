from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field
from orderflow.modules.orders.enums import OrderStatus
from orderflow.modules.orders.models import LineItem, Order, TrackingEvent

class OrderTracking(BaseModel):
    """Customer-facing view of an order and its shipment timeline"""
    order_id: str
    customer_name: str
    status: OrderStatus
    tracking_number: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    shipping_address: str
    items: List[LineItem] = []
    events: List[TrackingEvent] = []

    @classmethod
    def from_order(cls, order: Order) -> "OrderTracking":
        return cls(
            order_id=order.id,
            customer_name=order.customer_name,
            status=order.status,
            tracking_number=order.tracking_number,
            estimated_delivery=order.estimated_delivery,
            shipping_address=order.shipping_address,
            items=order.items,
            events=order.events,
        )

class TrackingEventCreate(BaseModel):
    """A tracking event reported from outside, applied on the next feed tick"""
    status: str = Field(..., min_length=1, description="Free-text label, e.g. 'Out for Delivery'")
    description: str = ""
    location: str = ""
    timestamp: Optional[datetime] = None
