"""Tests for event sources and the simulation scheduler."""

import asyncio
import random

import pytest

from conftest import NOW, make_event, make_fulfillment, make_order
from orderflow.core.config import Settings
from orderflow.db.store import OrderStore
from orderflow.modules.orders.enums import OrderStatus
from orderflow.modules.simulation.enums import SimulationAction, SimulationView
from orderflow.modules.simulation.scheduler import SimulationScheduler
from orderflow.modules.simulation.service import SimulationService
from orderflow.modules.simulation.sources import (
    LOCATION_UPDATE_DESCRIPTION,
    LOCATION_UPDATE_LOCATION,
    LOCATION_UPDATE_STATUS,
    QueuedEventSource,
    RandomEventSource,
    StatusAdvance,
    TrackingAppend,
)


class FixedRandom(random.Random):
    """Returns the given samples in turn."""

    def __init__(self, samples):
        super().__init__(0)
        self._samples = list(samples)

    def random(self):
        return self._samples.pop(0)


def _snapshot(store):
    return [order.model_dump_json() for order in store.list()]


class TestRandomEventSource:
    def test_advances_orders_below_threshold(self):
        orders = [make_order("A"), make_order("B"), make_order("C")]
        source = RandomEventSource(
            SimulationAction.ADVANCE_STATUS, 0.1, rng=FixedRandom([0.05, 0.5, 0.09])
        )
        assert source.poll(orders, NOW) == [StatusAdvance("A"), StatusAdvance("C")]

    def test_terminal_orders_skipped_but_sample_still_drawn(self):
        orders = [make_order("A", status=OrderStatus.DELIVERED), make_order("B")]
        rng = FixedRandom([0.0, 0.0])
        source = RandomEventSource(SimulationAction.ADVANCE_STATUS, 0.1, rng=rng)

        assert source.poll(orders, NOW) == [StatusAdvance("B")]
        assert rng._samples == []

    def test_append_builds_location_update(self):
        source = RandomEventSource(SimulationAction.APPEND_EVENT, 0.3, rng=FixedRandom([0.2]))
        [event] = source.poll([make_order("A", status=OrderStatus.SHIPPED)], NOW)

        assert isinstance(event, TrackingAppend)
        assert event.event.status == LOCATION_UPDATE_STATUS
        assert event.event.description == LOCATION_UPDATE_DESCRIPTION
        assert event.event.location == LOCATION_UPDATE_LOCATION
        assert event.event.timestamp == NOW

    def test_same_seed_same_outcome(self):
        orders = [make_order(str(i)) for i in range(20)]
        first = RandomEventSource(SimulationAction.ADVANCE_STATUS, 0.5, seed=42).poll(orders, NOW)
        second = RandomEventSource(SimulationAction.ADVANCE_STATUS, 0.5, seed=42).poll(orders, NOW)
        assert first == second

    def test_probability_bounds(self):
        with pytest.raises(ValueError):
            RandomEventSource(SimulationAction.ADVANCE_STATUS, 1.5)


class TestQueuedEventSource:
    def test_releases_one_event_per_order_per_poll(self):
        source = QueuedEventSource()
        source.push(StatusAdvance("A"))
        source.push(StatusAdvance("A"))
        source.push(StatusAdvance("B"))
        orders = [make_order("A"), make_order("B")]

        assert source.poll(orders, NOW) == [StatusAdvance("A"), StatusAdvance("B")]
        assert source.poll(orders, NOW) == [StatusAdvance("A")]
        assert source.poll(orders, NOW) == []

    def test_out_of_scope_events_dropped(self):
        source = QueuedEventSource()
        source.push(StatusAdvance("ghost"))
        assert source.poll([make_order("A")], NOW) == []
        assert len(source) == 0


class TestSchedulerTick:
    def test_advances_status(self):
        store = OrderStore([make_order("A"), make_order("B", status=OrderStatus.SHIPPED)])
        source = RandomEventSource(SimulationAction.ADVANCE_STATUS, 0.1, rng=FixedRandom([0.0, 0.0]))
        scheduler = SimulationScheduler("dashboard", store, source, period=5)

        assert scheduler.tick(NOW) == 2
        assert store.get("A").status == OrderStatus.PROCESSING
        assert store.get("B").status == OrderStatus.DELIVERED
        assert scheduler.ticks == 1

    def test_terminal_feed_advance_not_counted(self):
        store = OrderStore([make_order("A", status=OrderStatus.CANCELLED)])
        source = QueuedEventSource()
        source.push(StatusAdvance("A"))
        scheduler = SimulationScheduler("feed", store, source, period=1)

        assert scheduler.tick(NOW) == 0
        assert store.get("A").status == OrderStatus.CANCELLED

    def test_scope_limits_orders(self):
        store = OrderStore([
            make_order("A"),
            make_order("B", fulfillment=make_fulfillment()),
        ])
        source = RandomEventSource(SimulationAction.ADVANCE_STATUS, 1.0, seed=1)
        scheduler = SimulationScheduler(
            "fulfillment", store, source, period=8,
            scope=lambda order: order.fulfillment is not None,
        )

        scheduler.tick(NOW)

        assert store.get("A").status == OrderStatus.PENDING
        assert store.get("B").status == OrderStatus.PROCESSING

    def test_append_keeps_history_and_adds_last(self):
        store = OrderStore([make_order("A", status=OrderStatus.SHIPPED, events=[make_event("1", -2), make_event("2", -1)])])
        source = RandomEventSource(SimulationAction.APPEND_EVENT, 0.3, rng=FixedRandom([0.1]))
        scheduler = SimulationScheduler("tracking", store, source, period=10)

        scheduler.tick(NOW)

        events = store.get("A").events
        assert [e.id for e in events[:2]] == ["1", "2"]
        assert len(events) == 3
        assert events[-1].status == LOCATION_UPDATE_STATUS

    def test_period_must_be_positive(self):
        with pytest.raises(ValueError):
            SimulationScheduler("x", OrderStore(), QueuedEventSource(), period=0)


class TestSchedulerLifecycle:
    @pytest.mark.asyncio
    async def test_start_then_stop_leaves_store_unchanged(self, store):
        before = _snapshot(store)
        source = RandomEventSource(SimulationAction.ADVANCE_STATUS, 1.0, seed=3)
        scheduler = SimulationScheduler("dashboard", store, source, period=0.05)

        scheduler.start()
        assert scheduler.running
        await scheduler.stop()

        assert not scheduler.running
        assert scheduler.ticks == 0
        assert _snapshot(store) == before

    @pytest.mark.asyncio
    async def test_ticks_while_running_and_none_after_stop(self, store):
        source = RandomEventSource(SimulationAction.ADVANCE_STATUS, 1.0, seed=3)
        scheduler = SimulationScheduler("dashboard", store, source, period=0.01)

        scheduler.start()
        await asyncio.sleep(0.2)
        await scheduler.stop()
        ticks = scheduler.ticks
        after_stop = _snapshot(store)
        await asyncio.sleep(0.05)

        assert ticks > 0
        assert scheduler.ticks == ticks
        assert _snapshot(store) == after_stop
        assert all(o.status == OrderStatus.DELIVERED for o in store.list())

    @pytest.mark.asyncio
    async def test_start_is_idempotent_and_restart_does_not_replay(self, store):
        source = RandomEventSource(SimulationAction.ADVANCE_STATUS, 1.0, seed=3)
        scheduler = SimulationScheduler("dashboard", store, source, period=0.2)

        scheduler.start()
        task = scheduler._task
        scheduler.start()
        assert scheduler._task is task
        await scheduler.stop()

        await asyncio.sleep(0.3)
        scheduler.start()
        await asyncio.sleep(0.05)
        await scheduler.stop()

        assert scheduler.ticks == 0

    @pytest.mark.asyncio
    async def test_cancelling_the_stopper_propagates(self, store):
        scheduler = SimulationScheduler("dashboard", store, QueuedEventSource(), period=10)
        scheduler.start()
        await asyncio.sleep(0)

        stopper = asyncio.get_running_loop().create_task(scheduler.stop())
        await asyncio.sleep(0)
        stopper.cancel()

        with pytest.raises(asyncio.CancelledError):
            await stopper
        assert not scheduler.running

    @pytest.mark.asyncio
    async def test_stop_without_start(self, store):
        scheduler = SimulationScheduler("dashboard", store, QueuedEventSource(), period=1)
        await scheduler.stop()
        assert not scheduler.running


class TestSimulationService:
    def _service(self, store, **overrides):
        return SimulationService(store, Settings(SIMULATION_SEED=11, **overrides))

    def test_view_periods_from_settings(self, store):
        service = self._service(store)
        periods = {s.view: s.period_seconds for s in service.statuses()}
        assert periods == {
            SimulationView.DASHBOARD: 5.0,
            SimulationView.FULFILLMENT: 8.0,
            SimulationView.TRACKING: 10.0,
            SimulationView.FEED: 1.0,
        }

    def test_unknown_view_raises_key_error(self, store):
        with pytest.raises(KeyError):
            self._service(store).get("warehouse")

    def test_tracking_only_touches_watched_orders(self, store):
        service = self._service(store, TRACKING_EVENT_PROBABILITY=1.0)
        tracking = service.get(SimulationView.TRACKING)

        assert tracking.tick(NOW) == 0
        service._watched.add("ORD-003")
        assert tracking.tick(NOW) == 1
        assert store.get("ORD-003").events[-1].status == LOCATION_UPDATE_STATUS
        assert len(store.get("ORD-002").events) == 2

    @pytest.mark.asyncio
    async def test_watch_starts_tracking_feed(self, store):
        service = self._service(store)
        service.watch("ORD-003")
        try:
            status = service.status(SimulationView.TRACKING)
            assert status.running
            assert status.scoped_order_ids == ["ORD-003"]
        finally:
            await service.stop_all()
        assert not any(s.running for s in service.statuses())

    @pytest.mark.asyncio
    async def test_unwatching_last_order_stops_tracking_feed(self, store):
        service = self._service(store)
        service.watch("ORD-002")
        service.watch("ORD-003")

        await service.unwatch("ORD-002")
        status = service.status(SimulationView.TRACKING)
        assert status.running
        assert status.scoped_order_ids == ["ORD-003"]

        await service.unwatch("ORD-003")
        status = service.status(SimulationView.TRACKING)
        assert not status.running
        assert status.scoped_order_ids == []

    def test_pushed_events_applied_by_feed(self, store):
        service = self._service(store)
        service.push(TrackingAppend("ORD-001", make_event("external")))
        service.push(StatusAdvance("ORD-002"))

        assert service.get(SimulationView.FEED).tick(NOW) == 2
        assert store.get("ORD-001").events[-1].id == "external"
        assert store.get("ORD-002").status == OrderStatus.SHIPPED
