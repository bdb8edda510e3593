from fastapi import APIRouter
from orderflow.modules.orders.router import router as orders_router
from orderflow.modules.fulfillment.router import router as fulfillment_router
from orderflow.modules.tracking.router import router as tracking_router
from orderflow.modules.simulation.router import router as simulation_router

api_router = APIRouter()

# Include module routers
api_router.include_router(orders_router)
api_router.include_router(fulfillment_router)
api_router.include_router(tracking_router)
api_router.include_router(simulation_router)
