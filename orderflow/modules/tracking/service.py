from datetime import datetime, timezone
import uuid
import structlog
from fastapi import HTTPException, status
from orderflow.db.store import OrderStore
from orderflow.modules.orders.models import Order, TrackingEvent
from orderflow.modules.orders.query import follows_last_event
from orderflow.modules.simulation.enums import SimulationView
from orderflow.modules.simulation.service import SimulationService
from orderflow.modules.simulation.sources import TrackingAppend
from orderflow.modules.tracking.schemas import OrderTracking, TrackingEventCreate

logger = structlog.get_logger(__name__)

class TrackingService:
    def __init__(self, store: OrderStore, simulations: SimulationService):
        self.store = store
        self.simulations = simulations

    def _get_order(self, order_id: str) -> Order:
        order = self.store.get(order_id)
        if not order:
            raise HTTPException(status_code=404, detail="Order not found")
        return order

    async def track(self, number: str) -> OrderTracking:
        """
        Look an order up by tracking number (or order id) and start the
        tracking feed for it.
        """
        if not number or not number.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Please enter a tracking number"
            )

        order = self.store.find_by_tracking_number(number)
        if not order:
            raise HTTPException(status_code=404, detail="Order not found")

        self.simulations.watch(order.id)
        return OrderTracking.from_order(order)

    async def get_timeline(self, order_id: str) -> OrderTracking:
        """Get the complete tracking timeline"""
        return OrderTracking.from_order(self._get_order(order_id))

    async def push_event(self, order_id: str, event_in: TrackingEventCreate) -> TrackingEvent:
        """
        Queue an externally reported tracking event for the feed.

        The feed must be running, and the event may not be dated before the
        order's last tracking event.
        """
        order = self._get_order(order_id)
        if not self.simulations.get(SimulationView.FEED).running:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Tracking feed is not running"
            )
        if event_in.timestamp and not follows_last_event(order, event_in.timestamp):
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Event is older than the last tracking event"
            )

        event = TrackingEvent(
            id=uuid.uuid4().hex,
            status=event_in.status,
            description=event_in.description,
            location=event_in.location,
            timestamp=event_in.timestamp or datetime.now(timezone.utc),
        )
        self.simulations.push(TrackingAppend(order.id, event))
        logger.info("tracking_event_queued", order_id=order.id, event_id=event.id)
        return event
