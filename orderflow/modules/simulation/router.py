from typing import List
from fastapi import APIRouter, Depends
from orderflow.db.deps import get_simulations
from orderflow.modules.simulation.enums import SimulationView
from orderflow.modules.simulation.schemas import SimulationStatus
from orderflow.modules.simulation.service import SimulationService

router = APIRouter(prefix="/simulation", tags=["simulation"])

@router.get("/", response_model=List[SimulationStatus])
async def list_simulations(simulations: SimulationService = Depends(get_simulations)):
    """State of every view's simulated feed"""
    return simulations.statuses()

@router.post("/{view}/start", response_model=SimulationStatus)
async def start_simulation(
    view: SimulationView,
    simulations: SimulationService = Depends(get_simulations)
):
    """Start a view's feed; a running feed is left as is"""
    return simulations.start(view)

@router.post("/{view}/stop", response_model=SimulationStatus)
async def stop_simulation(
    view: SimulationView,
    simulations: SimulationService = Depends(get_simulations)
):
    """Stop a view's feed; no further ticks run once this returns"""
    return await simulations.stop(view)
