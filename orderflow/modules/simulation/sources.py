"""
Event sources decide what happens to which order on a scheduler tick.

RandomEventSource stands in for a live backend with a seeded pseudo-random
generator. QueuedEventSource yields events that something outside pushed
in, e.g. the tracking events endpoint.
"""
from collections import deque
from dataclasses import dataclass
from datetime import datetime
import random
from typing import Deque, List, Optional, Protocol, Sequence, Union
import uuid
import structlog
from orderflow.modules.orders.models import Order, TrackingEvent
from orderflow.modules.orders.transitions import is_terminal
from orderflow.modules.simulation.enums import SimulationAction

logger = structlog.get_logger(__name__)

LOCATION_UPDATE_STATUS = "Location Update"
LOCATION_UPDATE_DESCRIPTION = "Package scanned at facility"
LOCATION_UPDATE_LOCATION = "Transit Hub"


@dataclass(frozen=True)
class StatusAdvance:
    order_id: str


@dataclass(frozen=True)
class TrackingAppend:
    order_id: str
    event: TrackingEvent


SimulatedEvent = Union[StatusAdvance, TrackingAppend]


class EventSource(Protocol):
    def poll(self, orders: Sequence[Order], now: datetime) -> List[SimulatedEvent]:
        """Events to apply this tick, at most one per order"""
        ...


def location_update(now: datetime) -> TrackingEvent:
    return TrackingEvent(
        id=uuid.uuid4().hex,
        status=LOCATION_UPDATE_STATUS,
        description=LOCATION_UPDATE_DESCRIPTION,
        timestamp=now,
        location=LOCATION_UPDATE_LOCATION,
    )


class RandomEventSource:
    """
    Draws one uniform sample per order per tick. Orders whose sample falls
    below `probability` and that are not terminal get one action.

    A sample is drawn for every order, terminal or not, so a given seed
    produces the same sequence regardless of the statuses involved.
    """

    def __init__(
        self,
        action: SimulationAction,
        probability: float,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        if not 0.0 <= probability <= 1.0:
            raise ValueError("probability must be between 0 and 1")
        self.action = SimulationAction(action)
        self.probability = probability
        self._rng = rng or random.Random(seed)

    def poll(self, orders: Sequence[Order], now: datetime) -> List[SimulatedEvent]:
        events: List[SimulatedEvent] = []
        for order in orders:
            sample = self._rng.random()
            if sample >= self.probability or is_terminal(order.status):
                continue
            if self.action == SimulationAction.ADVANCE_STATUS:
                events.append(StatusAdvance(order.id))
            else:
                events.append(TrackingAppend(order.id, location_update(now)))
        return events


class QueuedEventSource:
    """
    Holds externally pushed events until the next tick.

    Events for orders outside the polled scope are dropped. When several
    events wait for the same order, one is released per tick and the rest
    stay queued in arrival order.
    """

    def __init__(self) -> None:
        self._pending: Deque[SimulatedEvent] = deque()

    def __len__(self) -> int:
        return len(self._pending)

    def push(self, event: SimulatedEvent) -> None:
        self._pending.append(event)

    def poll(self, orders: Sequence[Order], now: datetime) -> List[SimulatedEvent]:
        in_scope = {order.id for order in orders}
        released: List[SimulatedEvent] = []
        waiting: Deque[SimulatedEvent] = deque()
        seen = set()
        while self._pending:
            event = self._pending.popleft()
            if event.order_id not in in_scope:
                logger.warning("feed_event_dropped", order_id=event.order_id, reason="order not in scope")
                continue
            if event.order_id in seen:
                waiting.append(event)
                continue
            seen.add(event.order_id)
            released.append(event)
        self._pending = waiting
        return released
