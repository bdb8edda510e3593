from typing import List, Optional
from fastapi import APIRouter, Depends
from orderflow.db.deps import get_store
from orderflow.db.store import OrderStore
from orderflow.modules.fulfillment.schemas import FulfillmentOrder, FulfillmentStats
from orderflow.modules.fulfillment.service import FulfillmentService

router = APIRouter(prefix="/fulfillment", tags=["fulfillment"])

@router.get("/", response_model=List[FulfillmentOrder])
async def list_fulfillment_orders(
    search: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    store: OrderStore = Depends(get_store)
):
    """List orders on the fulfillment board"""
    service = FulfillmentService(store)
    return await service.list(search=search, status=status, priority=priority)

@router.get("/stats", response_model=FulfillmentStats)
async def get_fulfillment_stats(store: OrderStore = Depends(get_store)):
    """Active, overdue, urgent and completed counts"""
    service = FulfillmentService(store)
    return await service.stats()

@router.get("/{order_id}", response_model=FulfillmentOrder)
async def get_fulfillment_order(
    order_id: str,
    store: OrderStore = Depends(get_store)
):
    service = FulfillmentService(store)
    return await service.get(order_id)
