from pydantic import Field
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # API settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Orderflow API"
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # CORS settings
    ORIGINS: List[str] = ["*"]  # Update this with your frontend URLs in production

    # Logging settings
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Demo data
    SEED_DEMO_DATA: bool = True

    # Simulation settings
    SIMULATION_AUTOSTART: bool = True
    SIMULATION_SEED: int | None = None  # Fix to make the simulated feed reproducible
    DASHBOARD_TICK_SECONDS: float = Field(5.0, gt=0)
    FULFILLMENT_TICK_SECONDS: float = Field(8.0, gt=0)
    TRACKING_TICK_SECONDS: float = Field(10.0, gt=0)
    FEED_TICK_SECONDS: float = Field(1.0, gt=0)
    STATUS_ADVANCE_PROBABILITY: float = Field(0.1, ge=0, le=1)
    TRACKING_EVENT_PROBABILITY: float = Field(0.3, ge=0, le=1)

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
