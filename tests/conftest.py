"""Shared pytest fixtures for order lifecycle tests."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from orderflow.core.config import Settings
from orderflow.db.seed import demo_orders
from orderflow.db.store import OrderStore
from orderflow.main import create_app
from orderflow.modules.orders.enums import OrderStatus, Priority
from orderflow.modules.orders.models import (
    FulfillmentDetails,
    LineItem,
    Order,
    TrackingEvent,
)

NOW = datetime(2024, 1, 16, 12, 0, tzinfo=timezone.utc)


def make_order(
    order_id: str = "ORD-100",
    customer_name: str = "John Doe",
    status: OrderStatus = OrderStatus.PENDING,
    total: str = "10.00",
    **extra,
) -> Order:
    """Build an order with sensible defaults; keyword overrides win."""
    fields = dict(
        id=order_id,
        customer_name=customer_name,
        customer_email=f"{customer_name.split()[0].lower()}@example.com",
        status=status,
        total=Decimal(total),
        created_at=NOW - timedelta(days=1),
        shipping_address="1 Test Way",
        payment_method="PayPal",
        items=[LineItem(id="1", name="Widget", quantity=1, price=Decimal(total))],
    )
    fields.update(extra)
    return Order(**fields)


def make_fulfillment(
    priority: Priority = Priority.MEDIUM,
    due_date: datetime = NOW + timedelta(days=1),
    assigned_to: str | None = "Sarah Johnson",
) -> FulfillmentDetails:
    return FulfillmentDetails(priority=priority, due_date=due_date, assigned_to=assigned_to)


def make_event(event_id: str, hours: int = 0) -> TrackingEvent:
    return TrackingEvent(
        id=event_id,
        status="In Transit",
        description="Package is en route",
        timestamp=NOW + timedelta(hours=hours),
        location="Local Delivery Hub",
    )


@pytest.fixture
def store() -> OrderStore:
    return OrderStore(demo_orders())


@pytest.fixture
def settings() -> Settings:
    return Settings(SIMULATION_AUTOSTART=False, SIMULATION_SEED=7, LOG_LEVEL="WARNING")


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
