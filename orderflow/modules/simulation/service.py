from typing import Dict, Iterable, List, Optional, Set
import structlog
from orderflow.core.config import Settings
from orderflow.db.store import OrderStore
from orderflow.modules.orders.models import Order
from orderflow.modules.simulation.enums import SimulationAction, SimulationView
from orderflow.modules.simulation.scheduler import SimulationScheduler
from orderflow.modules.simulation.schemas import SimulationStatus
from orderflow.modules.simulation.sources import (
    QueuedEventSource,
    RandomEventSource,
    SimulatedEvent,
)

logger = structlog.get_logger(__name__)


def _derive_seed(seed: Optional[int], offset: int) -> Optional[int]:
    return None if seed is None else seed + offset


class SimulationService:
    """
    Owns one scheduler per view, all working on the same store.

    - dashboard: advances any order's status
    - fulfillment: advances orders that carry fulfillment details
    - tracking: appends location updates to orders a customer has looked up
    - feed: applies events pushed in from outside
    """

    def __init__(self, store: OrderStore, settings: Settings):
        self.store = store
        self.feed = QueuedEventSource()
        self._watched: Set[str] = set()
        seed = settings.SIMULATION_SEED

        self.schedulers: Dict[SimulationView, SimulationScheduler] = {
            SimulationView.DASHBOARD: SimulationScheduler(
                SimulationView.DASHBOARD.value,
                store,
                RandomEventSource(
                    SimulationAction.ADVANCE_STATUS,
                    settings.STATUS_ADVANCE_PROBABILITY,
                    seed=_derive_seed(seed, 0),
                ),
                settings.DASHBOARD_TICK_SECONDS,
            ),
            SimulationView.FULFILLMENT: SimulationScheduler(
                SimulationView.FULFILLMENT.value,
                store,
                RandomEventSource(
                    SimulationAction.ADVANCE_STATUS,
                    settings.STATUS_ADVANCE_PROBABILITY,
                    seed=_derive_seed(seed, 1),
                ),
                settings.FULFILLMENT_TICK_SECONDS,
                scope=lambda order: order.fulfillment is not None,
            ),
            SimulationView.TRACKING: SimulationScheduler(
                SimulationView.TRACKING.value,
                store,
                RandomEventSource(
                    SimulationAction.APPEND_EVENT,
                    settings.TRACKING_EVENT_PROBABILITY,
                    seed=_derive_seed(seed, 2),
                ),
                settings.TRACKING_TICK_SECONDS,
                scope=self._is_watched,
            ),
            SimulationView.FEED: SimulationScheduler(
                SimulationView.FEED.value,
                store,
                self.feed,
                settings.FEED_TICK_SECONDS,
            ),
        }

    def _is_watched(self, order: Order) -> bool:
        return order.id in self._watched

    def get(self, view: SimulationView) -> SimulationScheduler:
        """Scheduler for `view`. Unknown view names raise KeyError."""
        try:
            return self.schedulers[SimulationView(view)]
        except ValueError:
            raise KeyError(view) from None

    def start(self, view: SimulationView) -> SimulationStatus:
        """Start a view's feed. Must be called from inside the running event loop."""
        self.get(view).start()
        return self.status(view)

    async def stop(self, view: SimulationView) -> SimulationStatus:
        await self.get(view).stop()
        return self.status(view)

    def start_all(self, views: Optional[Iterable[SimulationView]] = None) -> None:
        for view in views or self.schedulers:
            self.start(view)

    async def stop_all(self) -> None:
        for scheduler in self.schedulers.values():
            await scheduler.stop()

    def watch(self, order_id: str) -> None:
        """Put an order in the tracking feed's scope and make sure that feed runs"""
        if order_id not in self._watched:
            self._watched.add(order_id)
            logger.info("tracking_watch_added", order_id=order_id)
        self.start(SimulationView.TRACKING)

    async def unwatch(self, order_id: str) -> None:
        """Drop an order from the tracking feed's scope; the feed stops once nothing is watched"""
        if order_id in self._watched:
            self._watched.discard(order_id)
            logger.info("tracking_watch_removed", order_id=order_id)
        if not self._watched:
            await self.stop(SimulationView.TRACKING)

    def push(self, event: SimulatedEvent) -> None:
        self.feed.push(event)

    def status(self, view: SimulationView) -> SimulationStatus:
        scheduler = self.get(view)
        view = SimulationView(view)
        return SimulationStatus(
            view=view,
            running=scheduler.running,
            period_seconds=scheduler.period,
            ticks=scheduler.ticks,
            scoped_order_ids=sorted(self._watched) if view == SimulationView.TRACKING else None,
        )

    def statuses(self) -> List[SimulationStatus]:
        return [self.status(view) for view in self.schedulers]
