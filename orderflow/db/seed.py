from datetime import datetime
from decimal import Decimal
from typing import List
from orderflow.modules.orders.enums import OrderStatus, Priority
from orderflow.modules.orders.models import (
    FulfillmentDetails,
    LineItem,
    Order,
    StockItem,
    TrackingEvent,
)


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def demo_orders() -> List[Order]:
    """
    Demo orders loaded into the store at startup.

    Each order carries its dashboard, fulfillment and tracking data in one
    record. Totals equal the sum of their line items.
    """
    return [
        Order(
            id="ORD-001",
            customer_name="John Doe",
            customer_email="john@example.com",
            status=OrderStatus.PENDING,
            items=[
                LineItem(id="1", name="Wireless Headphones", quantity=1, price=Decimal("99.99")),
                LineItem(id="2", name="Phone Case", quantity=2, price=Decimal("19.99")),
            ],
            total=Decimal("139.97"),
            created_at=_ts("2024-01-15T10:30:00Z"),
            estimated_delivery=_ts("2024-01-20T00:00:00Z"),
            shipping_address="123 Main St, New York, NY 10001",
            payment_method="Credit Card (**** 4242)",
            fulfillment=FulfillmentDetails(
                priority=Priority.HIGH,
                assigned_to="Sarah Johnson",
                due_date=_ts("2024-01-17T17:00:00Z"),
                items=[
                    StockItem(id="1", name="Wireless Headphones", quantity=1, sku="WH-001", location="A1-B2", available=25),
                    StockItem(id="2", name="Phone Case", quantity=2, sku="PC-001", location="A2-C3", available=100),
                ],
                notes="Customer requested expedited shipping",
            ),
            events=[
                TrackingEvent(
                    id="1",
                    status="Order Placed",
                    description="Your order has been received and is being prepared",
                    timestamp=_ts("2024-01-15T10:30:00Z"),
                    location="Processing Center",
                ),
            ],
        ),
        Order(
            id="ORD-002",
            customer_name="Jane Smith",
            customer_email="jane@example.com",
            status=OrderStatus.PROCESSING,
            items=[
                LineItem(id="3", name="Laptop Stand", quantity=1, price=Decimal("49.99")),
                LineItem(id="4", name="USB-C Cable", quantity=3, price=Decimal("12.99")),
            ],
            total=Decimal("88.96"),
            created_at=_ts("2024-01-15T09:15:00Z"),
            estimated_delivery=_ts("2024-01-18T00:00:00Z"),
            tracking_number="TRK123456789",
            shipping_address="456 Oak Ave, Los Angeles, CA 90210",
            payment_method="PayPal",
            fulfillment=FulfillmentDetails(
                priority=Priority.MEDIUM,
                assigned_to="Mike Wilson",
                due_date=_ts("2024-01-16T17:00:00Z"),
                items=[
                    StockItem(id="3", name="Laptop Stand", quantity=1, sku="LS-001", location="B1-A4", available=15),
                    StockItem(id="4", name="USB-C Cable", quantity=3, sku="UC-001", location="C1-D2", available=200),
                ],
            ),
            events=[
                TrackingEvent(
                    id="1",
                    status="Order Placed",
                    description="Your order has been received and is being prepared",
                    timestamp=_ts("2024-01-15T09:15:00Z"),
                    location="Processing Center",
                ),
                TrackingEvent(
                    id="2",
                    status="Order Confirmed",
                    description="Payment processed successfully",
                    timestamp=_ts("2024-01-15T09:30:00Z"),
                    location="Payment Center",
                ),
            ],
        ),
        Order(
            id="ORD-003",
            customer_name="Mike Johnson",
            customer_email="mike@example.com",
            status=OrderStatus.SHIPPED,
            items=[
                LineItem(id="5", name="Gaming Mouse", quantity=1, price=Decimal("79.99")),
            ],
            total=Decimal("79.99"),
            created_at=_ts("2024-01-14T14:45:00Z"),
            estimated_delivery=_ts("2024-01-17T00:00:00Z"),
            tracking_number="TRK987654321",
            shipping_address="789 Pine St, Chicago, IL 60601",
            payment_method="Credit Card (**** 5555)",
            fulfillment=FulfillmentDetails(
                priority=Priority.LOW,
                assigned_to="Lisa Chen",
                due_date=_ts("2024-01-16T17:00:00Z"),
                items=[
                    StockItem(id="5", name="Gaming Mouse", quantity=1, sku="GM-001", location="D1-E3", available=8),
                ],
            ),
            events=[
                TrackingEvent(
                    id="1",
                    status="Order Placed",
                    description="Your order has been received and is being prepared",
                    timestamp=_ts("2024-01-14T14:45:00Z"),
                    location="Processing Center",
                ),
                TrackingEvent(
                    id="2",
                    status="Order Confirmed",
                    description="Payment processed successfully",
                    timestamp=_ts("2024-01-14T15:00:00Z"),
                    location="Payment Center",
                ),
                TrackingEvent(
                    id="3",
                    status="Preparing for Shipment",
                    description="Items are being picked and packed",
                    timestamp=_ts("2024-01-15T08:30:00Z"),
                    location="Fulfillment Center - NYC",
                ),
                TrackingEvent(
                    id="4",
                    status="Shipped",
                    description="Package has been dispatched and is on its way",
                    timestamp=_ts("2024-01-15T14:20:00Z"),
                    location="Distribution Center - NYC",
                ),
                TrackingEvent(
                    id="5",
                    status="In Transit",
                    description="Package is en route to your location",
                    timestamp=_ts("2024-01-16T09:15:00Z"),
                    location="Local Delivery Hub",
                ),
            ],
        ),
    ]
