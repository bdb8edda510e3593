from enum import Enum

class SimulationView(str, Enum):
    DASHBOARD = "dashboard"
    FULFILLMENT = "fulfillment"
    TRACKING = "tracking"
    FEED = "feed"

class SimulationAction(str, Enum):
    ADVANCE_STATUS = "advance_status"
    APPEND_EVENT = "append_event"
