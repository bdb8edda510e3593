from contextlib import asynccontextmanager
from typing import Optional
import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orderflow.api import api_router
from orderflow.core.config import Settings, settings as default_settings
from orderflow.core.logging import configure_logging
from orderflow.core.websocket import ConnectionManager
from orderflow.db.seed import demo_orders
from orderflow.db.store import OrderStore
from orderflow.modules.notifications.router import router as notifications_router
from orderflow.modules.notifications.service import NotificationService
from orderflow.modules.simulation.enums import SimulationView
from orderflow.modules.simulation.service import SimulationService

logger = structlog.get_logger(__name__)

# Feeds that run from startup; tracking starts once an order is looked up
AUTOSTART_VIEWS = (SimulationView.DASHBOARD, SimulationView.FULFILLMENT, SimulationView.FEED)


@asynccontextmanager
async def lifespan(app: FastAPI):
    notifications: NotificationService = app.state.notifications
    simulations: SimulationService = app.state.simulations

    notifications.start()
    if app.state.settings.SIMULATION_AUTOSTART:
        simulations.start_all(AUTOSTART_VIEWS)
    logger.info("app_started", orders=len(app.state.store))
    try:
        yield
    finally:
        await simulations.stop_all()
        notifications.stop()
        logger.info("app_stopped")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)

    store = OrderStore(demo_orders() if settings.SEED_DEMO_DATA else [])
    connections = ConnectionManager()

    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.connections = connections
    app.state.simulations = SimulationService(store, settings)
    app.state.notifications = NotificationService(store, connections)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=settings.API_V1_STR)
    app.include_router(notifications_router)
    return app


app = create_app()


def run() -> None:
    """Serve the API with uvicorn"""
    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)
