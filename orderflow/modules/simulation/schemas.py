from typing import List
from pydantic import BaseModel
from orderflow.modules.simulation.enums import SimulationView

class SimulationStatus(BaseModel):
    """State of one view's simulated feed"""
    view: SimulationView
    running: bool
    period_seconds: float
    ticks: int
    scoped_order_ids: List[str] | None = None
