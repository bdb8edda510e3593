from fastapi import Request
from orderflow.db.store import OrderStore
from orderflow.modules.simulation.service import SimulationService

def get_store(request: Request) -> OrderStore:
    """The application's order store"""
    return request.app.state.store

def get_simulations(request: Request) -> SimulationService:
    return request.app.state.simulations
