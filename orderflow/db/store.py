"""
OrderStore: the single in-memory collection every view reads from.

Views never hold private copies of orders. They read projections of this
store and send transition commands to it; every mutation is published to
subscribers as an OrderChange.

Everything runs on one event loop, so no locking is done here. Each public
mutation completes synchronously before control returns to the loop.
"""
from typing import Callable, Dict, Iterable, List, Optional
import structlog
from orderflow.modules.orders.enums import OrderStatus, OrderChangeType
from orderflow.modules.orders.models import Order, OrderChange, TrackingEvent
from orderflow.modules.orders.query import follows_last_event
from orderflow.modules.orders.transitions import apply_transition, can_advance, next_status

logger = structlog.get_logger(__name__)

Subscriber = Callable[[OrderChange], None]


class OrderStore:
    def __init__(self, orders: Iterable[Order] = ()) -> None:
        # dicts keep insertion order, which is the display order of every view
        self._orders: Dict[str, Order] = {}
        self._subscribers: List[Subscriber] = []
        for order in orders:
            if order.id in self._orders:
                raise ValueError(f"Duplicate order id: {order.id}")
            self._orders[order.id] = order

    def __len__(self) -> int:
        return len(self._orders)

    def __contains__(self, order_id: object) -> bool:
        return order_id in self._orders

    # -------------------- reads --------------------

    def get(self, order_id: str) -> Optional[Order]:
        return self._orders.get(order_id)

    def list(self, order_ids: Optional[Iterable[str]] = None) -> List[Order]:
        """Orders in insertion order, optionally restricted to `order_ids`"""
        if order_ids is None:
            return list(self._orders.values())
        wanted = set(order_ids)
        return [order for order in self._orders.values() if order.id in wanted]

    def find_by_tracking_number(self, number: str) -> Optional[Order]:
        """Look an order up by tracking number, falling back to its id. Case-insensitive."""
        needle = (number or "").strip().lower()
        if not needle:
            return None
        for order in self._orders.values():
            if order.tracking_number and order.tracking_number.lower() == needle:
                return order
        for order in self._orders.values():
            if order.id.lower() == needle:
                return order
        return None

    # -------------------- writes --------------------

    def add(self, order: Order) -> Order:
        if order.id in self._orders:
            raise ValueError(f"Duplicate order id: {order.id}")
        self._orders[order.id] = order
        self._publish(OrderChange(
            type=OrderChangeType.CREATED,
            order_id=order.id,
            new_status=order.status,
        ))
        return order

    def request_transition(self, order_id: str, target: OrderStatus) -> Optional[Order]:
        """
        Move an order to `target`.

        Returns None without touching anything when the id is unknown.
        Illegal targets raise InvalidTransitionError from the lifecycle module.
        """
        order = self._orders.get(order_id)
        if order is None:
            logger.info("transition_ignored", order_id=order_id, reason="order not found")
            return None

        previous = apply_transition(order, target)
        if previous != order.status:
            self._publish(OrderChange(
                type=OrderChangeType.STATUS_CHANGED,
                order_id=order.id,
                old_status=previous,
                new_status=order.status,
            ))
        return order

    def advance(self, order_id: str) -> Optional[Order]:
        """Move an order one step forward. Terminal orders are left as they are."""
        order = self._orders.get(order_id)
        if order is None or not can_advance(order.status):
            return order
        return self.request_transition(order_id, next_status(order.status))

    def append_event(self, order_id: str, event: TrackingEvent) -> Optional[Order]:
        """
        Add `event` after the existing tracking events of an order. Events
        dated before the current last event are ignored, keeping the history
        chronological.
        """
        order = self._orders.get(order_id)
        if order is None:
            logger.info("event_ignored", order_id=order_id, reason="order not found")
            return None
        if not follows_last_event(order, event.timestamp):
            logger.warning("event_ignored", order_id=order_id, event_id=event.id, reason="older than last event")
            return None

        order.events.append(event)
        self._publish(OrderChange(
            type=OrderChangeType.EVENT_APPENDED,
            order_id=order.id,
            new_status=order.status,
            event=event,
        ))
        return order

    # -------------------- subscriptions --------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register `callback` for every change. Returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self, change: OrderChange) -> None:
        for callback in list(self._subscribers):
            try:
                callback(change)
            except Exception:
                # The mutation is already applied; remaining subscribers still get notified
                logger.exception("subscriber_failed", order_id=change.order_id, change=change.type.value)
