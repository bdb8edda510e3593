from datetime import datetime
from typing import List, Optional
from fastapi import HTTPException
from orderflow.db.store import OrderStore
from orderflow.modules.fulfillment.schemas import FulfillmentOrder, FulfillmentStats
from orderflow.modules.orders.query import compute_fulfillment_stats, filter_fulfillment_orders

class FulfillmentService:
    def __init__(self, store: OrderStore):
        self.store = store

    def _board(self) -> List[FulfillmentOrder]:
        """Projection of every order that carries fulfillment details"""
        return [
            FulfillmentOrder.from_order(order)
            for order in self.store.list()
            if order.fulfillment is not None
        ]

    async def get(self, order_id: str) -> FulfillmentOrder:
        order = self.store.get(order_id)
        if not order or order.fulfillment is None:
            raise HTTPException(status_code=404, detail="Order not found")
        return FulfillmentOrder.from_order(order)

    async def list(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None
    ) -> List[FulfillmentOrder]:
        """List board orders with search, status and priority filters"""
        return filter_fulfillment_orders(
            self._board(), search=search, status=status, priority=priority
        )

    async def stats(self, now: Optional[datetime] = None) -> FulfillmentStats:
        """Board statistics; overdue is evaluated against the current time"""
        return compute_fulfillment_stats(self._board(), now=now)
