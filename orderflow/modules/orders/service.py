from typing import List, Optional
from fastapi import HTTPException, status
from orderflow.db.store import OrderStore
from orderflow.modules.orders.enums import OrderStatus
from orderflow.modules.orders.models import Order
from orderflow.modules.orders.query import compute_stats, filter_orders
from orderflow.modules.orders.schemas import OrderStats
from orderflow.modules.orders.transitions import InvalidTransitionError, can_advance, next_status

class OrderService:
    def __init__(self, store: OrderStore):
        self.store = store

    async def get_or_404(self, order_id: str) -> Order:
        order = self.store.get(order_id)
        if not order:
            raise HTTPException(status_code=404, detail="Order not found")
        return order

    async def list(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None
    ) -> List[Order]:
        """List orders with filters"""
        return filter_orders(self.store.list(), search=search, status=status)

    async def stats(self) -> OrderStats:
        """Dashboard statistics over every order"""
        return compute_stats(self.store.list())

    async def request_transition(
        self,
        order_id: str,
        target: OrderStatus
    ) -> Order:
        """Move an order to another status"""
        try:
            order = self.store.request_transition(order_id, target)
        except InvalidTransitionError as exc:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
        if not order:
            raise HTTPException(status_code=404, detail="Order not found")
        return order

    async def advance(self, order_id: str) -> Order:
        """Move an order one step forward"""
        order = await self.get_or_404(order_id)
        if not can_advance(order.status):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Order is already {order.status.value}"
            )
        return await self.request_transition(order_id, next_status(order.status))
