from typing import List, Optional
from fastapi import APIRouter, Depends
from orderflow.db.deps import get_store
from orderflow.db.store import OrderStore
from orderflow.modules.orders.service import OrderService
from orderflow.modules.orders.schemas import (
    OrderResponse,
    OrderStats,
    TransitionRequest
)

router = APIRouter(prefix="/orders", tags=["orders"])

@router.get("/", response_model=List[OrderResponse])
async def list_orders(
    search: Optional[str] = None,
    status: Optional[str] = None,
    store: OrderStore = Depends(get_store)
):
    """List orders matching a search term and status ("all" or unknown values don't filter)"""
    service = OrderService(store)
    return await service.list(search=search, status=status)

@router.get("/stats", response_model=OrderStats)
async def get_order_stats(store: OrderStore = Depends(get_store)):
    """Counts per status and total revenue"""
    service = OrderService(store)
    return await service.stats()

@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    store: OrderStore = Depends(get_store)
):
    """Get order details"""
    service = OrderService(store)
    return await service.get_or_404(order_id)

@router.post("/{order_id}/transition", response_model=OrderResponse)
async def transition_order(
    order_id: str,
    transition: TransitionRequest,
    store: OrderStore = Depends(get_store)
):
    """Move an order to the next status or cancel it"""
    service = OrderService(store)
    return await service.request_transition(order_id, transition.status)

@router.post("/{order_id}/advance", response_model=OrderResponse)
async def advance_order(
    order_id: str,
    store: OrderStore = Depends(get_store)
):
    """Move an order one step along pending, processing, shipped, delivered"""
    service = OrderService(store)
    return await service.advance(order_id)
