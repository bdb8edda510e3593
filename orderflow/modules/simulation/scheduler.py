"""
SimulationScheduler: periodic task that applies an event source to the store.

- start(): schedule the loop on the running event loop (idempotent)
- stop(): cancel the loop and wait for it, so no tick runs afterwards
- tick(): one synchronous round; the loop calls it once per period

A stopped scheduler that is started again waits a full period before its
first tick; ticks missed while stopped are not replayed.
"""
import asyncio
from datetime import datetime, timezone
from typing import Callable, Optional
import structlog
from orderflow.db.store import OrderStore
from orderflow.modules.orders.models import Order
from orderflow.modules.orders.transitions import can_advance
from orderflow.modules.simulation.sources import EventSource, StatusAdvance, TrackingAppend

logger = structlog.get_logger(__name__)

Scope = Callable[[Order], bool]


class SimulationScheduler:
    def __init__(
        self,
        name: str,
        store: OrderStore,
        source: EventSource,
        period: float,
        scope: Optional[Scope] = None,
    ) -> None:
        if period <= 0:
            raise ValueError("period must be positive")
        self.name = name
        self.store = store
        self.source = source
        self.period = period
        self._scope = scope
        self._task: Optional[asyncio.Task] = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def in_scope(self, order: Order) -> bool:
        return self._scope is None or self._scope(order)

    def tick(self, now: Optional[datetime] = None) -> int:
        """Run one round and return the number of actions applied"""
        now = now or datetime.now(timezone.utc)
        orders = [order for order in self.store.list() if self.in_scope(order)]

        applied = 0
        touched = set()
        for event in self.source.poll(orders, now):
            # one action per order per tick
            if event.order_id in touched:
                continue
            touched.add(event.order_id)

            order = self.store.get(event.order_id)
            if order is None:
                continue
            if isinstance(event, StatusAdvance):
                if not can_advance(order.status):
                    continue
                self.store.advance(order.id)
            elif isinstance(event, TrackingAppend):
                if self.store.append_event(order.id, event.event) is None:
                    continue
            else:
                raise TypeError(f"Unsupported simulated event: {event!r}")
            applied += 1

        self.ticks += 1
        logger.debug("simulation_tick", view=self.name, orders=len(orders), actions=applied)
        return applied

    def start(self) -> None:
        if self.running:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(), name=f"simulation-{self.name}")
        logger.info("simulation_started", view=self.name, period=self.period)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            # Propagate when the caller itself is being cancelled
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
        logger.info("simulation_stopped", view=self.name, ticks=self.ticks)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.period)
            try:
                self.tick()
            except Exception:
                logger.exception("simulation_tick_failed", view=self.name)
