from fastapi import APIRouter, Depends, Query, status
from orderflow.db.deps import get_simulations, get_store
from orderflow.db.store import OrderStore
from orderflow.modules.orders.models import TrackingEvent
from orderflow.modules.simulation.service import SimulationService
from orderflow.modules.tracking.schemas import OrderTracking, TrackingEventCreate
from orderflow.modules.tracking.service import TrackingService

router = APIRouter(prefix="/tracking", tags=["tracking"])

@router.get("/", response_model=OrderTracking)
async def track_order(
    number: str = Query(""),
    store: OrderStore = Depends(get_store),
    simulations: SimulationService = Depends(get_simulations)
):
    """Find an order by tracking number and start live updates for it"""
    service = TrackingService(store, simulations)
    return await service.track(number)

@router.get("/{order_id}", response_model=OrderTracking)
async def get_tracking_timeline(
    order_id: str,
    store: OrderStore = Depends(get_store),
    simulations: SimulationService = Depends(get_simulations)
):
    """Get complete tracking timeline"""
    service = TrackingService(store, simulations)
    return await service.get_timeline(order_id)

@router.post(
    "/{order_id}/events",
    response_model=TrackingEvent,
    status_code=status.HTTP_202_ACCEPTED
)
async def push_tracking_event(
    order_id: str,
    event_in: TrackingEventCreate,
    store: OrderStore = Depends(get_store),
    simulations: SimulationService = Depends(get_simulations)
):
    """Report a tracking event; it is appended on the next feed tick"""
    service = TrackingService(store, simulations)
    return await service.push_event(order_id, event_in)
