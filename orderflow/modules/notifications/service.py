import asyncio
from typing import Callable, List, Optional, Set
import structlog
from orderflow.core.websocket import ConnectionManager
from orderflow.db.store import OrderStore
from orderflow.modules.orders.enums import OrderChangeType
from orderflow.modules.orders.models import OrderChange

logger = structlog.get_logger(__name__)

DASHBOARD_CHANNEL = "dashboard"
FULFILLMENT_CHANNEL = "fulfillment"


def tracking_channel(order_id: str) -> str:
    return f"tracking:{order_id}"


class NotificationService:
    """Pushes order store changes to websocket channels"""

    def __init__(self, store: OrderStore, manager: ConnectionManager):
        self.store = store
        self.manager = manager
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._pending: Set[asyncio.Task] = set()

    def start(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self.handle_change)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        for task in list(self._pending):
            task.cancel()

    def channels_for(self, change: OrderChange) -> List[str]:
        """Channels interested in a change"""
        channels = [tracking_channel(change.order_id)]
        if change.type == OrderChangeType.EVENT_APPENDED:
            return channels

        channels.append(DASHBOARD_CHANNEL)
        order = self.store.get(change.order_id)
        if order is not None and order.fulfillment is not None:
            channels.append(FULFILLMENT_CHANNEL)
        return channels

    def build_message(self, change: OrderChange) -> dict:
        return {
            "type": change.type.value,
            "data": change.model_dump(mode="json"),
        }

    def handle_change(self, change: OrderChange) -> None:
        """Store subscriber. Schedules the websocket sends on the running loop."""
        channels = [c for c in self.channels_for(change) if self.manager.has_subscribers(c)]
        if not channels:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("notification_skipped", order_id=change.order_id, reason="no running loop")
            return

        message = self.build_message(change)
        for channel in channels:
            task = loop.create_task(self.manager.broadcast(channel, message))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
