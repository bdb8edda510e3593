from collections import Counter
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Type, TypeVar
from orderflow.modules.orders.enums import OrderStatus, Priority
from orderflow.modules.orders.models import Order
from orderflow.modules.orders.schemas import OrderStats
from orderflow.modules.fulfillment.schemas import FulfillmentOrder, FulfillmentStats

E = TypeVar("E", bound=Enum)

ORDER_SEARCH_FIELDS = ("id", "customer_name", "customer_email")
FULFILLMENT_SEARCH_FIELDS = ("id", "customer_name", "assigned_to")

CENTS = Decimal("0.01")
URGENT_PRIORITIES = frozenset({Priority.HIGH, Priority.URGENT})
ACTIVE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.PROCESSING})


def _parse_enum(enum_cls: Type[E], raw: Any) -> Optional[E]:
    if raw is None or isinstance(raw, enum_cls):
        return raw
    try:
        return enum_cls(str(raw).strip().lower())
    except ValueError:
        # "all", blank and unknown values all mean "no filter"
        return None


def parse_status_filter(raw: Any) -> Optional[OrderStatus]:
    """
    Turn a caller-supplied status filter into an OrderStatus, or None for
    "match every status".
    """
    return _parse_enum(OrderStatus, raw)


def parse_priority_filter(raw: Any) -> Optional[Priority]:
    return _parse_enum(Priority, raw)


def matches_search(record: Any, search: Optional[str], fields: Sequence[str]) -> bool:
    """
    Case-insensitive substring match of `search` against any of `fields`.
    An empty term matches everything; a missing or empty field never matches.
    """
    term = (search or "").lower()
    if not term:
        return True
    for field in fields:
        value = getattr(record, field, None)
        if value and term in str(value).lower():
            return True
    return False


def filter_orders(
    orders: Iterable[Order],
    search: Optional[str] = None,
    status: Any = None,
) -> List[Order]:
    """
    Orders matching the search term and the status filter, in their original
    relative order. The input is not modified.
    """
    wanted = parse_status_filter(status)
    return [
        order for order in orders
        if matches_search(order, search, ORDER_SEARCH_FIELDS)
        and (wanted is None or order.status == wanted)
    ]


def filter_fulfillment_orders(
    orders: Iterable[FulfillmentOrder],
    search: Optional[str] = None,
    status: Any = None,
    priority: Any = None,
) -> List[FulfillmentOrder]:
    """Same as filter_orders, searching assignee instead of email and adding a priority filter"""
    wanted_status = parse_status_filter(status)
    wanted_priority = parse_priority_filter(priority)
    return [
        order for order in orders
        if matches_search(order, search, FULFILLMENT_SEARCH_FIELDS)
        and (wanted_status is None or order.status == wanted_status)
        and (wanted_priority is None or getattr(order, "priority", None) == wanted_priority)
    ]


def compute_stats(orders: Iterable[Order]) -> OrderStats:
    """
    Count orders per status and sum their totals.

    Revenue includes every status, cancelled orders too; callers that want a
    narrower figure filter first.
    """
    orders = list(orders)
    counts = Counter(getattr(order, "status", None) for order in orders)
    revenue = sum(
        (Decimal(getattr(order, "total", None) or 0) for order in orders),
        Decimal("0"),
    )
    return OrderStats(
        total=len(orders),
        revenue=revenue.quantize(CENTS),
        **{status.value: counts.get(status, 0) for status in OrderStatus},
    )


def as_utc(value: datetime) -> datetime:
    # Naive timestamps are taken to be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def follows_last_event(order: Order, timestamp: datetime) -> bool:
    """True when an event at `timestamp` can go after the order's existing events"""
    if not order.events:
        return True
    return as_utc(timestamp) >= as_utc(order.events[-1].timestamp)


def is_overdue(order: Any, now: datetime) -> bool:
    due_date = getattr(order, "due_date", None)
    if due_date is None:
        return False
    return as_utc(due_date) < as_utc(now) and order.status != OrderStatus.DELIVERED


def compute_fulfillment_stats(
    orders: Iterable[FulfillmentOrder],
    now: Optional[datetime] = None,
) -> FulfillmentStats:
    """
    Fulfillment board rollup. `now` defaults to the current time and is read
    on every call, so overdue counts follow the clock.
    """
    orders = list(orders)
    now = now or datetime.now(timezone.utc)
    return FulfillmentStats(
        total=len(orders),
        active=sum(1 for o in orders if o.status in ACTIVE_STATUSES),
        overdue=sum(1 for o in orders if is_overdue(o, now)),
        urgent=sum(1 for o in orders if getattr(o, "priority", None) in URGENT_PRIORITIES),
        completed=sum(1 for o in orders if o.status == OrderStatus.DELIVERED),
    )
